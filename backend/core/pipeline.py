"""
Main pipeline orchestration for a screen capture session.
"""
import logging
from datetime import datetime
from typing import Any, List, Optional

from core.config_validator import config_validator
from core.logging_config import configure_logging
from models.capture_models import AudioSegment, Capture, SessionSummary, SlideGroup
from services.capture.aggregator import build_slide_groups
from services.capture.capture_processor import CaptureProcessor
from services.capture.ocr_engine import OcrEngine
from services.capture.session_buffer import SessionBuffer
from services.capture.summary_builder import build_session_summary

logger = logging.getLogger(__name__)


class SessionPipeline:
    """Orchestrates capture, aggregation and summary for one session."""

    def __init__(
        self,
        ocr_engine: Optional[OcrEngine] = None,
        buffer: Optional[SessionBuffer] = None,
        validate_config: bool = True,
    ):
        configure_logging()
        if validate_config:
            # Invalid thresholds abort before any capture is processed
            config_validator.validate_or_raise()

        self.ocr_engine = ocr_engine
        self.buffer = buffer if buffer is not None else SessionBuffer()
        self.processor = CaptureProcessor(self.buffer)
        self._segment_counter = 0

    def process_text(
        self,
        raw_text: str,
        confidence: float,
        timestamp: Optional[datetime] = None,
    ) -> Optional[Capture]:
        """Feed one OCR pass that was recognized elsewhere."""
        return self.processor.process_text(raw_text, confidence, timestamp)

    def process_frame(self, image: Any, timestamp: Optional[datetime] = None) -> Optional[Capture]:
        """
        Recognize a frame with the OCR engine and process the result.

        Engine failures skip the frame.
        """
        if self.ocr_engine is None:
            raise ValueError("No OCR engine configured for this pipeline")

        try:
            result = self.ocr_engine.recognize(image)
        except Exception as e:
            logger.error(f"OCR failed, skipping frame: {e}")
            return None

        return self.processor.process_text(result.text, result.confidence, timestamp)

    def add_audio_segment(
        self,
        text: str,
        confidence: float = 0.0,
        is_final: bool = True,
        timestamp: Optional[datetime] = None,
    ) -> bool:
        """Store a speech transcription segment. Interim segments are ignored."""
        text = (text or '').strip()
        if not text:
            return False

        self._segment_counter += 1
        started_at = self.processor.started_at
        session_tz = started_at.tzinfo if started_at else None
        segment = AudioSegment(
            segment_id=f"seg_{self._segment_counter}",
            timestamp=timestamp or datetime.now(session_tz),
            text=text,
            is_final=is_final,
            confidence=confidence,
        )
        return self.buffer.add_audio_segment(segment)

    @property
    def captures(self) -> List[Capture]:
        return self.buffer.captures

    @property
    def slide_groups(self) -> List[SlideGroup]:
        return build_slide_groups(self.buffer.captures)

    def generate_summary(self, ended_at: Optional[datetime] = None) -> SessionSummary:
        """Build the session summary from everything buffered so far."""
        return build_session_summary(
            self.buffer.captures,
            self.buffer.audio_segments,
            started_at=self.processor.started_at,
            ended_at=ended_at,
        )

    def clear(self) -> None:
        self.buffer.clear()
        self.processor.reset()
        self._segment_counter = 0
        logger.info("Session cleared")
