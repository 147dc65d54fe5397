"""
Turns raw OCR output into session captures.
"""
import logging
import uuid
from datetime import datetime
from typing import Optional

from core.config import MIN_CAPTURE_CONFIDENCE, SLIDE_CHANGE_THRESHOLD
from models.capture_models import Capture
from services.capture.session_buffer import SessionBuffer
from services.extraction.entity_extractor import extract_entities
from services.extraction.url_parser import extract_urls
from services.processing.text_cleaner import clean_ocr_text, text_similarity
from services.processing.utils import detect_language

logger = logging.getLogger(__name__)


class CaptureProcessor:
    """Cleans, gates and slide-numbers OCR passes in arrival order."""

    def __init__(
        self,
        buffer: SessionBuffer,
        min_confidence: float = MIN_CAPTURE_CONFIDENCE,
        slide_change_threshold: float = SLIDE_CHANGE_THRESHOLD,
    ):
        self.buffer = buffer
        self.min_confidence = min_confidence
        self.slide_change_threshold = slide_change_threshold
        self.current_slide = 0
        self.last_text = ''
        self.started_at: Optional[datetime] = None

    def process_text(
        self,
        raw_text: str,
        confidence: float,
        timestamp: Optional[datetime] = None,
    ) -> Optional[Capture]:
        """
        Process one OCR pass.

        Processing:
            1. Clean the raw text
            2. Drop empty results and confidence at or below the gate
            3. Start a new slide when the text differs from the previous capture
            4. Extract URLs from the raw text, language and entities from the clean text
            5. Append the capture to the session buffer

        Returns:
            The stored Capture, or None if the pass was dropped
        """
        text = clean_ocr_text(raw_text or '')

        if not text:
            logger.debug("Dropped capture: no text after noise filtering")
            return None
        if confidence <= self.min_confidence:
            logger.debug(f"Dropped capture: confidence {confidence:.1f} <= {self.min_confidence}")
            return None

        if timestamp is None:
            # Follow the session clock when callers pass aware timestamps
            timestamp = datetime.now(self.started_at.tzinfo if self.started_at else None)
        if self.started_at is None:
            self.started_at = timestamp

        similarity = text_similarity(self.last_text, text)
        if self.current_slide == 0 or similarity < self.slide_change_threshold:
            self.current_slide += 1
            logger.debug(f"Slide {self.current_slide} started (similarity {similarity:.2f})")
        self.last_text = text

        capture = Capture(
            capture_id=f"cap_{uuid.uuid4().hex[:12]}",
            timestamp=timestamp,
            text=text,
            raw_text=raw_text,
            confidence=confidence,
            language=detect_language(text),
            # Raw text keeps URL fragments the cleaner strips
            urls=tuple(extract_urls(raw_text)),
            slide_number=self.current_slide,
            entities=extract_entities(text),
        )
        self.buffer.add_capture(capture)
        return capture

    def reset(self) -> None:
        self.current_slide = 0
        self.last_text = ''
        self.started_at = None
