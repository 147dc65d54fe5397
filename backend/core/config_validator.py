"""
Configuration validation for the screen capture analytics backend.
Validates thresholds and limits before a session starts.
"""
import logging
import shutil
from typing import List, Dict, Any

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""
    pass


class ConfigValidator:
    """Validates system configuration before pipeline execution."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_all(self) -> Dict[str, Any]:
        """
        Run all validation checks.

        Returns:
            {
                "valid": bool,
                "errors": List[str],
                "warnings": List[str]
            }
        """
        self.errors = []
        self.warnings = []

        self._validate_capture_gate()
        self._validate_buffer_limits()
        self._validate_classifier_thresholds()
        self._validate_summary_counts()
        self._validate_tesseract()

        return {
            "valid": len(self.errors) == 0,
            "errors": self.errors,
            "warnings": self.warnings
        }

    def validate_or_raise(self) -> None:
        """Run all checks, log warnings and raise on errors."""
        result = self.validate_all()

        for warning in result["warnings"]:
            logger.warning(warning)

        if not result["valid"]:
            for error in result["errors"]:
                logger.error(error)
            raise ConfigurationError("; ".join(result["errors"]))

    def _validate_capture_gate(self):
        """Check OCR confidence gate and slide threshold."""
        from core.config import MIN_CAPTURE_CONFIDENCE, SLIDE_CHANGE_THRESHOLD

        if not (0.0 <= MIN_CAPTURE_CONFIDENCE < 100.0):
            self.errors.append(
                f"MIN_CAPTURE_CONFIDENCE ({MIN_CAPTURE_CONFIDENCE}) must be in [0, 100)"
            )

        if not (0.0 <= SLIDE_CHANGE_THRESHOLD <= 1.0):
            self.errors.append(
                f"SLIDE_CHANGE_THRESHOLD ({SLIDE_CHANGE_THRESHOLD}) must be between 0.0 and 1.0"
            )
        elif SLIDE_CHANGE_THRESHOLD in (0.0, 1.0):
            self.warnings.append(
                f"SLIDE_CHANGE_THRESHOLD ({SLIDE_CHANGE_THRESHOLD}) disables slide grouping"
            )

    def _validate_buffer_limits(self):
        """Check session buffer sizes."""
        from core.config import MAX_SESSION_CAPTURES, MAX_AUDIO_SEGMENTS

        if MAX_SESSION_CAPTURES < 1:
            self.errors.append(
                f"MAX_SESSION_CAPTURES ({MAX_SESSION_CAPTURES}) must be >= 1"
            )

        if MAX_AUDIO_SEGMENTS < 1:
            self.errors.append(
                f"MAX_AUDIO_SEGMENTS ({MAX_AUDIO_SEGMENTS}) must be >= 1"
            )

    def _validate_classifier_thresholds(self):
        """Validate line-ratio thresholds of the content classifier."""
        from core.config import (
            CODE_SCORE_THRESHOLD,
            TERMINAL_LINE_RATIO,
            CHAT_LINE_RATIO,
        )

        for name, value in (
            ("TERMINAL_LINE_RATIO", TERMINAL_LINE_RATIO),
            ("CHAT_LINE_RATIO", CHAT_LINE_RATIO),
        ):
            if not (0.0 <= value < 1.0):
                self.errors.append(f"{name} ({value}) must be in [0.0, 1.0)")

        if CODE_SCORE_THRESHOLD <= 0:
            self.errors.append(
                f"CODE_SCORE_THRESHOLD ({CODE_SCORE_THRESHOLD}) must be > 0"
            )

    def _validate_summary_counts(self):
        """Validate summary and clustering sizes."""
        from core.config import (
            KEY_SENTENCE_COUNT,
            SUMMARY_KEYWORD_COUNT,
            SLIDE_KEYWORD_COUNT,
            MAX_CLUSTER_KEYWORDS,
            MAX_CLUSTER_SIZE,
        )

        for name, value in (
            ("KEY_SENTENCE_COUNT", KEY_SENTENCE_COUNT),
            ("SUMMARY_KEYWORD_COUNT", SUMMARY_KEYWORD_COUNT),
            ("SLIDE_KEYWORD_COUNT", SLIDE_KEYWORD_COUNT),
            ("MAX_CLUSTER_KEYWORDS", MAX_CLUSTER_KEYWORDS),
        ):
            if value < 1:
                self.errors.append(f"{name} ({value}) must be >= 1")

        if MAX_CLUSTER_SIZE < 2:
            self.errors.append(
                f"MAX_CLUSTER_SIZE ({MAX_CLUSTER_SIZE}) must be >= 2"
            )

        if MAX_CLUSTER_KEYWORDS > SUMMARY_KEYWORD_COUNT:
            self.warnings.append(
                f"MAX_CLUSTER_KEYWORDS ({MAX_CLUSTER_KEYWORDS}) exceeds "
                f"SUMMARY_KEYWORD_COUNT ({SUMMARY_KEYWORD_COUNT}); extra slots stay empty"
            )

    def _validate_tesseract(self):
        """Check that the tesseract binary can be found."""
        from core.config import TESSERACT_CMD

        cmd = TESSERACT_CMD or "tesseract"
        if shutil.which(cmd) is None:
            self.warnings.append(
                f"Tesseract binary not found ({cmd}). "
                "Frame OCR is unavailable; text input still works."
            )


# Global validator instance
config_validator = ConfigValidator()
