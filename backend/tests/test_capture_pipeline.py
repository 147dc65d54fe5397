"""
Unit tests for the capture processor, session buffer and session pipeline.
"""
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

from core.config_validator import ConfigurationError
from core.pipeline import SessionPipeline
from models.capture_models import AudioSegment
from services.capture.capture_processor import CaptureProcessor
from services.capture.ocr_engine import OcrResult, TesseractOcrEngine
from services.capture.session_buffer import SessionBuffer
from services.capture.summary_builder import (
    AUDIO_TRANSCRIPT_SEPARATOR,
    EMPTY_SESSION_TEXT,
    build_session_summary,
)


T0 = datetime(2024, 1, 1, 9, 0, 0)


@pytest.fixture
def pipeline():
    return SessionPipeline()


@pytest.fixture
def review_session(pipeline):
    """Two captures of a title slide followed by a new slide."""
    pipeline.process_text("Welcome to Q3 Review", 90, T0)
    pipeline.process_text("Welcome to Q3 Review Agenda", 85, T0 + timedelta(seconds=10))
    pipeline.process_text("Revenue breakdown by region", 80, T0 + timedelta(seconds=30))
    return pipeline


class TestCaptureProcessor:
    """Test cleaning, gating and slide numbering."""

    def test_slide_boundaries(self, review_session):
        slides = [c.slide_number for c in review_session.captures]
        assert slides == [1, 1, 2]

    def test_confidence_gate(self, pipeline):
        assert pipeline.process_text("Welcome to Q3 Review", 20) is None
        assert pipeline.process_text("Welcome to Q3 Review", 20.5) is not None

    def test_noise_only_dropped(self, pipeline):
        assert pipeline.process_text("|||| ~~~ @@@", 95) is None
        assert pipeline.process_text("", 95) is None
        assert len(pipeline.buffer) == 0

    def test_capture_fields(self, pipeline):
        capture = pipeline.process_text(
            "Docs at https://example.com/docs\nContact sales@acme.io", 75, T0
        )

        assert capture.capture_id.startswith("cap_")
        assert capture.timestamp == T0
        assert capture.urls == ("https://example.com/docs",)
        assert capture.entities.emails == ["sales@acme.io"]
        assert capture.word_count == 5

    def test_urls_taken_from_raw_text(self, pipeline):
        capture = pipeline.process_text(
            "Visit h t t p s : / / exa mple . com/docs today for the full guide", 80
        )
        assert capture.urls == ("https://example.com/docs",)

    def test_reset(self):
        buffer = SessionBuffer()
        processor = CaptureProcessor(buffer)
        processor.process_text("Welcome to Q3 Review", 90, T0)
        processor.reset()

        capture = processor.process_text("Revenue breakdown by region", 90, T0)
        assert capture.slide_number == 1
        assert processor.started_at == T0


class TestSessionBuffer:
    """Test bounded storage."""

    def test_oldest_capture_evicted(self):
        pipeline = SessionPipeline(buffer=SessionBuffer(max_captures=2))
        pipeline.process_text("Welcome to Q3 Review", 90)
        pipeline.process_text("Revenue breakdown by region", 90)
        pipeline.process_text("Hiring plan for next year", 90)

        texts = [c.text for c in pipeline.captures]
        assert texts == ["Revenue breakdown by region", "Hiring plan for next year"]

    def test_only_final_audio_kept(self):
        buffer = SessionBuffer(max_audio_segments=1)

        interim = AudioSegment("seg_1", T0, "we will", is_final=False)
        first = AudioSegment("seg_2", T0, "we will review revenue")
        second = AudioSegment("seg_3", T0, "next is hiring")

        assert buffer.add_audio_segment(interim) is False
        assert buffer.add_audio_segment(first) is True
        assert buffer.add_audio_segment(second) is True
        assert [s.segment_id for s in buffer.audio_segments] == ["seg_3"]

    def test_clear(self):
        buffer = SessionBuffer()
        buffer.add_audio_segment(AudioSegment("seg_1", T0, "hello there"))
        buffer.clear()

        assert len(buffer) == 0
        assert buffer.audio_segments == []


class TestSessionSummary:
    """Test end-of-session summary generation."""

    def test_empty_session(self, pipeline):
        summary = pipeline.generate_summary()

        assert summary.total_captures == 0
        assert summary.full_text == EMPTY_SESSION_TEXT
        assert summary.inference.narrative == EMPTY_SESSION_TEXT
        assert summary.inference.content_type == "general"

    def test_slide_aggregation(self, review_session):
        summary = review_session.generate_summary(ended_at=T0 + timedelta(minutes=2, seconds=5))

        assert summary.total_captures == 3
        assert summary.slide_count == 2
        assert summary.duration == "2m 5s"
        assert summary.average_confidence == pytest.approx(85.0)

        first_slide = summary.slides[0]
        assert first_slide.capture_count == 2
        assert first_slide.text == "Welcome to Q3 Review Agenda"
        assert first_slide.start_time == T0
        assert first_slide.end_time == T0 + timedelta(seconds=10)

        assert summary.full_text == "Welcome to Q3 Review Agenda\n\nRevenue breakdown by region"
        assert summary.word_count == 9
        assert summary.char_count == len(summary.full_text)
        assert summary.languages == []

    def test_keywords_and_narrative(self, review_session):
        summary = review_session.generate_summary(ended_at=T0 + timedelta(minutes=1))

        assert "revenue" in summary.keywords
        assert len(summary.keywords) <= 15
        assert "across 2 distinct screens/slides" in summary.inference.narrative
        assert "over 1m 0s" in summary.inference.narrative

    def test_audio_appended(self, review_session):
        assert review_session.add_audio_segment("we will review", is_final=False) is False
        assert review_session.add_audio_segment("we will review revenue by region", 0.9, timestamp=T0) is True
        assert review_session.add_audio_segment("   ") is False

        summary = review_session.generate_summary(ended_at=T0 + timedelta(minutes=1))

        assert summary.audio_segment_count == 1
        assert summary.audio_word_count == 6
        assert summary.audio_transcript == "we will review revenue by region"
        assert f"{AUDIO_TRANSCRIPT_SEPARATOR}\nwe will review revenue by region" in summary.full_text
        # Counts cover OCR text only
        assert summary.word_count == 9

    def test_audio_only_session(self):
        segment = AudioSegment("seg_1", T0, "budget review starts now")
        summary = build_session_summary([], [segment], ended_at=T0 + timedelta(seconds=3))

        assert summary.total_captures == 0
        assert summary.slide_count == 0
        assert summary.duration == "3s"
        assert summary.audio_transcript == "budget review starts now"

    def test_entities_and_urls_merged(self, pipeline):
        pipeline.process_text("Call (123) 456-7890 or see https://example.com/docs", 90, T0)
        pipeline.process_text("Call 123.456.7890 or see https://example.com/docs/", 90, T0)

        summary = pipeline.generate_summary(ended_at=T0)

        assert summary.phones == ["(123) 456-7890"]
        assert summary.urls == ["https://example.com/docs"]

    def test_languages(self, pipeline):
        pipeline.process_text("The team is on the call and the plan is set", 90, T0)
        summary = pipeline.generate_summary(ended_at=T0)

        assert summary.languages == ["en"]

    def test_clear(self, review_session):
        review_session.add_audio_segment("hello everyone")
        review_session.clear()

        assert review_session.captures == []
        assert review_session.slide_groups == []
        assert review_session.generate_summary().full_text == EMPTY_SESSION_TEXT


class TestAwareTimestamps:
    """Test sessions recorded with timezone-aware timestamps."""

    START = datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)

    def test_summary_without_end_time(self, pipeline):
        pipeline.process_text("Welcome to Q3 Review", 90, self.START)
        later = pipeline.process_text("Revenue breakdown by region", 90)
        pipeline.add_audio_segment("we will review revenue")

        summary = pipeline.generate_summary()

        assert later.timestamp.tzinfo is not None
        assert summary.total_captures == 2
        assert summary.duration.endswith("s")

    def test_summary_with_end_time(self, pipeline):
        pipeline.process_text("Welcome to Q3 Review", 90, self.START)
        summary = pipeline.generate_summary(ended_at=self.START + timedelta(seconds=90))

        assert summary.duration == "1m 30s"


class TestStartupValidation:
    """Test configuration checks when a pipeline is created."""

    @patch('core.config.MAX_SESSION_CAPTURES', 0)
    def test_invalid_config_rejected(self):
        with pytest.raises(ConfigurationError):
            SessionPipeline()

    @patch('core.config.MAX_SESSION_CAPTURES', 0)
    def test_validation_can_be_skipped(self):
        pipeline = SessionPipeline(validate_config=False)
        assert pipeline.captures == []


class TestSlideGroups:
    """Test grouping of buffered captures."""

    def test_groups(self, review_session):
        groups = review_session.slide_groups

        assert [g.slide_number for g in groups] == [1, 2]
        assert len(groups[0].captures) == 2
        assert groups[0].average_confidence == pytest.approx(87.5)


class TestOcrFrames:
    """Test frame OCR through the engine adapter."""

    TESSERACT_DATA = {
        'text': ['', 'Welcome', 'to', 'Q3', 'Review', 'Agenda'],
        'conf': ['-1', '95', '90', '88', '91', '86'],
        'block_num': [1, 1, 1, 1, 1, 1],
        'par_num': [0, 1, 1, 1, 1, 1],
        'line_num': [0, 1, 1, 1, 1, 2],
    }

    @patch('services.capture.ocr_engine.pytesseract.image_to_data')
    def test_tesseract_lines_and_confidence(self, mock_image_to_data):
        mock_image_to_data.return_value = self.TESSERACT_DATA

        result = TesseractOcrEngine(lang="eng", tesseract_cmd=None).recognize(Mock())

        assert result.text == "Welcome to Q3 Review\nAgenda"
        assert result.confidence == pytest.approx(90.0)
        assert mock_image_to_data.call_args.kwargs["lang"] == "eng"

    @patch('services.capture.ocr_engine.pytesseract.image_to_data')
    def test_no_words(self, mock_image_to_data):
        mock_image_to_data.return_value = {
            'text': [''], 'conf': ['-1'], 'block_num': [1], 'par_num': [0], 'line_num': [0],
        }

        result = TesseractOcrEngine(tesseract_cmd=None).recognize(Mock())
        assert result == OcrResult(text='', confidence=0.0)

    def test_process_frame(self):
        engine = Mock()
        engine.recognize.return_value = OcrResult(text="Welcome to Q3 Review", confidence=92.0)
        pipeline = SessionPipeline(ocr_engine=engine)

        capture = pipeline.process_frame(object(), timestamp=T0)

        assert capture.text == "Welcome to Q3 Review"
        assert capture.confidence == 92.0

    def test_engine_failure_skips_frame(self):
        engine = Mock()
        engine.recognize.side_effect = RuntimeError("tesseract crashed")
        pipeline = SessionPipeline(ocr_engine=engine)

        assert pipeline.process_frame(object()) is None
        assert pipeline.captures == []

    def test_missing_engine(self, pipeline):
        with pytest.raises(ValueError):
            pipeline.process_frame(object())
