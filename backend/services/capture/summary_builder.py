"""
Session summary generation from the session buffer.
"""
import logging
from datetime import datetime
from typing import List, Optional

from core.config import SUMMARY_KEYWORD_COUNT
from models.capture_models import AudioSegment, Capture, SessionSummary, TextInference
from services.capture.aggregator import build_slide_summaries
from services.extraction.entity_extractor import merge_entities
from services.inference.narrative import content_type_label
from services.inference.text_inference import infer_from_text
from services.processing.text_cleaner import extract_keywords
from services.processing.utils import UNDETERMINED_LANGUAGE, count_words, format_duration

logger = logging.getLogger(__name__)

EMPTY_SESSION_TEXT = "No text was captured during this session."
AUDIO_TRANSCRIPT_SEPARATOR = "--- Audio Transcript ---"


def _empty_summary() -> SessionSummary:
    return SessionSummary(
        full_text=EMPTY_SESSION_TEXT,
        inference=TextInference(
            content_type='general',
            content_type_label=content_type_label('general'),
            content_confidence=0.0,
            narrative=EMPTY_SESSION_TEXT,
        ),
    )


def _session_start(
    captures: List[Capture],
    audio_segments: List[AudioSegment],
    started_at: Optional[datetime],
) -> Optional[datetime]:
    if started_at is not None:
        return started_at
    timestamps = [c.timestamp for c in captures] + [s.timestamp for s in audio_segments]
    return min(timestamps) if timestamps else None


def build_session_summary(
    captures: List[Capture],
    audio_segments: Optional[List[AudioSegment]] = None,
    started_at: Optional[datetime] = None,
    ended_at: Optional[datetime] = None,
) -> SessionSummary:
    """
    Build the end-of-session summary.

    The OCR text is the longest capture of each slide, so repeated
    captures of one screen count once. Finalized audio is appended
    to the text used for inference.
    """
    final_segments = [s for s in (audio_segments or []) if s.is_final]
    audio_transcript = ' '.join(s.text for s in final_segments)
    audio_word_count = count_words(audio_transcript)

    if not captures and not final_segments:
        logger.info("Session ended without captured text")
        return _empty_summary()

    slides = build_slide_summaries(captures)
    slide_count = len(slides)

    ocr_text = '\n\n'.join(s.text for s in slides)
    urls = list(dict.fromkeys(url for c in captures for url in c.urls))
    average_confidence = sum(c.confidence for c in captures) / len(captures) if captures else 0.0
    languages = list(dict.fromkeys(
        c.language for c in captures if c.language != UNDETERMINED_LANGUAGE
    ))

    parts = [ocr_text] if ocr_text else []
    if audio_transcript:
        parts.append(f"{AUDIO_TRANSCRIPT_SEPARATOR}\n{audio_transcript}")
    full_text = '\n\n'.join(parts)

    word_count = count_words(ocr_text)
    char_count = len(ocr_text)

    start = _session_start(captures, final_segments, started_at)
    end = ended_at or datetime.now(start.tzinfo if start else None)
    duration_ms = int((end - start).total_seconds() * 1000) if start else 0
    duration = format_duration(duration_ms)

    keywords = extract_keywords(full_text, SUMMARY_KEYWORD_COUNT)
    inference = infer_from_text(
        full_text,
        keywords,
        slide_count,
        word_count + audio_word_count,
        duration,
    )

    logger.info(
        f"Summary built: {len(captures)} captures, {slide_count} slides, "
        f"{len(final_segments)} audio segments, content type {inference.content_type}"
    )

    return SessionSummary(
        total_captures=len(captures),
        slide_count=slide_count,
        duration=duration,
        word_count=word_count,
        char_count=char_count,
        average_confidence=average_confidence,
        languages=languages,
        urls=urls,
        entities=merge_entities(c.entities for c in captures),
        keywords=keywords,
        slides=slides,
        audio_segment_count=len(final_segments),
        audio_word_count=audio_word_count,
        audio_transcript=audio_transcript,
        full_text=full_text,
        inference=inference,
    )
