"""
Text inference over the aggregated session text.

Runs content classification, heading and action item extraction,
extractive summarization and topic clustering without any external
model, then renders the narrative from their outputs.
"""
from typing import List

from core.config import KEY_SENTENCE_COUNT, MAX_CLUSTER_KEYWORDS
from models.capture_models import TextInference
from services.inference.content_classifier import classify_content
from services.inference.narrative import content_type_label, generate_narrative
from services.inference.summarizer import (
    extract_action_items,
    extract_headings,
    extractive_summarize,
)
from services.inference.topic_clusterer import cluster_topics


def infer_from_text(
    full_text: str,
    keywords: List[str],
    slide_count: int,
    word_count: int,
    duration: str,
) -> TextInference:
    """Run all text inference on the captured content."""
    signals = classify_content(full_text)
    headings = extract_headings(full_text)
    action_items = extract_action_items(full_text)
    key_sentences = extractive_summarize(full_text, KEY_SENTENCE_COUNT)
    topic_clusters = cluster_topics(full_text, keywords[:MAX_CLUSTER_KEYWORDS])
    narrative = generate_narrative(
        signals.type,
        slide_count,
        word_count,
        duration,
        key_sentences,
        headings,
        keywords,
    )

    return TextInference(
        content_type=signals.type,
        content_type_label=content_type_label(signals.type),
        content_confidence=signals.confidence,
        headings=headings,
        action_items=action_items,
        key_sentences=key_sentences,
        topic_clusters=topic_clusters,
        narrative=narrative,
    )
