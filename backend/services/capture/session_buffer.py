"""
Bounded in-memory store for a capture session.
"""
from collections import deque
from typing import Deque, List

from core.config import MAX_AUDIO_SEGMENTS, MAX_SESSION_CAPTURES
from models.capture_models import AudioSegment, Capture


class SessionBuffer:
    """
    Most recent captures and finalized audio segments of a session.

    One producer appends, one consumer reads at session end. When a limit
    is reached the oldest entry is evicted.
    """

    def __init__(
        self,
        max_captures: int = MAX_SESSION_CAPTURES,
        max_audio_segments: int = MAX_AUDIO_SEGMENTS,
    ):
        self._captures: Deque[Capture] = deque(maxlen=max_captures)
        self._audio_segments: Deque[AudioSegment] = deque(maxlen=max_audio_segments)

    def add_capture(self, capture: Capture) -> None:
        self._captures.append(capture)

    def add_audio_segment(self, segment: AudioSegment) -> bool:
        """Store a segment if it is final. Returns whether it was kept."""
        if not segment.is_final:
            return False
        self._audio_segments.append(segment)
        return True

    @property
    def captures(self) -> List[Capture]:
        return list(self._captures)

    @property
    def audio_segments(self) -> List[AudioSegment]:
        return list(self._audio_segments)

    def clear(self) -> None:
        self._captures.clear()
        self._audio_segments.clear()

    def __len__(self) -> int:
        return len(self._captures)
