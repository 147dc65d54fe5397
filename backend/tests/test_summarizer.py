"""
Unit tests for headings, action items, extractive summaries and narratives.
"""
from services.inference.narrative import content_type_label, generate_narrative
from services.inference.summarizer import (
    extract_action_items,
    extract_headings,
    extractive_summarize,
    split_summary_sentences,
)
from services.inference.text_inference import infer_from_text


LONG_TEXT = " ".join([
    "The quarterly review covers revenue across every region.",
    "Sales in the north region grew faster than expected this year.",
    "The team added two new partners during the spring.",
    "Marketing spend stayed flat compared with the last period.",
    "Customer churn dropped after the support changes went live.",
    "Hiring will continue at the current pace through the autumn.",
    "The key finding is that margins improved by 4 points overall.",
])


class TestExtractHeadings:
    """Test heading detection."""

    def test_heading_styles(self):
        text = "# Overview\nQUARTERLY RESULTS\n1. Introduction\n**Summary**\nplain text here"
        assert extract_headings(text) == ["Overview", "QUARTERLY RESULTS", "1. Introduction", "Summary"]

    def test_duplicates_removed(self):
        assert extract_headings("# Agenda\n# Agenda") == ["Agenda"]

    def test_no_headings(self):
        assert extract_headings("") == []


class TestExtractActionItems:
    """Test action item detection."""

    def test_todo_and_obligation(self):
        text = "TODO: update the release notes\nWe need to finalize the budget numbers"
        actions = extract_action_items(text)

        assert "update the release notes" in actions
        assert "finalize the budget numbers" in actions

    def test_deadline(self):
        actions = extract_action_items("Report due by Friday afternoon")
        assert "due by Friday afternoon" in actions

    def test_short_items_ignored(self):
        assert extract_action_items("TODO: x") == []


class TestExtractiveSummarize:
    """Test key sentence selection."""

    def test_sentence_limits(self):
        sentences = split_summary_sentences("Too short. This sentence has enough words in it.")
        assert sentences == ["This sentence has enough words in it."]

    def test_limit_and_document_order(self):
        all_sentences = split_summary_sentences(LONG_TEXT)
        summary = extractive_summarize(LONG_TEXT, max_sentences=5)

        assert len(all_sentences) == 7
        assert len(summary) == 5
        positions = [all_sentences.index(s) for s in summary]
        assert positions == sorted(positions)

    def test_first_and_signal_sentences_kept(self):
        summary = extractive_summarize(LONG_TEXT, max_sentences=3)

        assert summary[0].startswith("The quarterly review")
        assert summary[-1].startswith("The key finding")

    def test_short_text_returned_whole(self):
        text = "Only one sentence with several words here."
        assert extractive_summarize(text) == ["Only one sentence with several words here."]

    def test_empty(self):
        assert extractive_summarize("") == []


class TestNarrative:
    """Test narrative rendering."""

    def test_full_template(self):
        narrative = generate_narrative(
            "presentation", 3, 120, "2m 5s", ["Revenue grew fast."], ["Intro"], ["revenue"]
        )

        assert narrative.startswith(
            "This session captured presentation / slides content across 3 distinct "
            "screens/slides over 2m 5s, containing approximately 120 words."
        )
        assert "The content covers: Intro." in narrative
        assert "Key takeaways:\n1. Revenue grew fast." in narrative

    def test_keywords_without_headings(self):
        narrative = generate_narrative("general", 1, 10, "5s", [], [], ["alpha", "beta"])

        assert "across" not in narrative
        assert "Key topics include alpha, beta." in narrative
        assert "Key takeaways" not in narrative

    def test_unknown_type_label(self):
        assert content_type_label("video") == "General Content"


class TestInferFromText:
    """Test the combined text inference."""

    def test_inference_fields(self):
        inference = infer_from_text(LONG_TEXT, ["revenue", "region"], 2, 70, "1m 0s")

        assert inference.content_type == "article" or inference.content_type == "general"
        assert inference.content_type_label == content_type_label(inference.content_type)
        assert len(inference.key_sentences) == 5
        assert inference.narrative.startswith("This session captured")

    def test_empty_text(self):
        inference = infer_from_text("", [], 0, 0, "0s")

        assert inference.content_type == "general"
        assert inference.key_sentences == []
        assert inference.topic_clusters == []
