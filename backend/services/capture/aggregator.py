"""
Slide aggregation of session captures.
"""
from typing import Dict, List

from core.config import SLIDE_KEYWORD_COUNT
from models.capture_models import Capture, SlideGroup, SlideSummary
from services.extraction.entity_extractor import merge_entities
from services.processing.text_cleaner import extract_keywords


def build_slide_groups(captures: List[Capture]) -> List[SlideGroup]:
    """Group captures by slide number, ordered by slide number."""
    by_slide: Dict[int, List[Capture]] = {}
    for capture in captures:
        by_slide.setdefault(capture.slide_number, []).append(capture)

    return [
        SlideGroup(
            slide_number=number,
            captures=tuple(members),
            entities=merge_entities(c.entities for c in members),
        )
        for number, members in sorted(by_slide.items())
    ]


def summarize_slide(group: SlideGroup, keyword_count: int = SLIDE_KEYWORD_COUNT) -> SlideSummary:
    """Use the longest capture of a slide as its representative text."""
    best = max(group.captures, key=lambda c: len(c.text))
    urls = list(dict.fromkeys(url for c in group.captures for url in c.urls))

    return SlideSummary(
        slide_number=group.slide_number,
        capture_count=len(group.captures),
        text=best.text,
        keywords=extract_keywords(best.text, keyword_count),
        urls=urls,
        start_time=group.start_time,
        end_time=group.end_time,
        average_confidence=group.average_confidence,
        entities=group.entities,
    )


def build_slide_summaries(captures: List[Capture]) -> List[SlideSummary]:
    return [summarize_slide(group) for group in build_slide_groups(captures)]
