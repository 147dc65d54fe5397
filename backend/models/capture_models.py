"""
Data models for OCR captures, audio segments and extracted entities.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple


@dataclass
class DateEntity:
    """Date literal as it appeared in the text"""
    value: str


@dataclass
class NumberEntity:
    """Number with a context tag"""
    value: str
    context: str  # 'currency' | 'percentage' | 'dimension' | 'time' | 'duration' | 'version'


@dataclass
class ExtractedEntities:
    """Typed findings scoped to one text block.

    Every list has set semantics: no duplicates by the category's
    normalized key, first-seen literal kept.
    """
    emails: List[str] = field(default_factory=list)
    dates: List[DateEntity] = field(default_factory=list)
    phones: List[str] = field(default_factory=list)
    numbers: List[NumberEntity] = field(default_factory=list)
    proper_nouns: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Capture:
    """One OCR pass over a sampled frame"""
    capture_id: str
    timestamp: datetime
    text: str  # cleaned
    raw_text: str
    confidence: float  # 0-100
    language: str = "und"  # ISO 639-1 code
    urls: Tuple[str, ...] = ()
    slide_number: int = 0
    entities: ExtractedEntities = field(default_factory=ExtractedEntities)

    @property
    def word_count(self) -> int:
        return len(self.text.split())


@dataclass(frozen=True)
class AudioSegment:
    """One speech transcript chunk"""
    segment_id: str
    timestamp: datetime
    text: str
    is_final: bool = True
    confidence: float = 0.0  # 0.0-1.0


@dataclass(frozen=True)
class SlideGroup:
    """All captures sharing one slide number"""
    slide_number: int
    captures: Tuple[Capture, ...] = ()
    entities: ExtractedEntities = field(default_factory=ExtractedEntities)  # merged

    @property
    def start_time(self) -> Optional[datetime]:
        if not self.captures:
            return None
        return min(c.timestamp for c in self.captures)

    @property
    def end_time(self) -> Optional[datetime]:
        if not self.captures:
            return None
        return max(c.timestamp for c in self.captures)

    @property
    def average_confidence(self) -> float:
        if not self.captures:
            return 0.0
        return sum(c.confidence for c in self.captures) / len(self.captures)


@dataclass
class SlideSummary:
    """Per-slide view in the session summary"""
    slide_number: int
    capture_count: int
    text: str  # longest capture of the slide
    keywords: List[str] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    average_confidence: float = 0.0
    entities: ExtractedEntities = field(default_factory=ExtractedEntities)


@dataclass
class TextInference:
    """Heuristic analysis of the aggregated session text"""
    content_type: str = "general"
    content_type_label: str = "General Content"
    content_confidence: float = 0.0
    headings: List[str] = field(default_factory=list)
    action_items: List[str] = field(default_factory=list)
    key_sentences: List[str] = field(default_factory=list)
    topic_clusters: List[List[str]] = field(default_factory=list)
    narrative: str = ""


@dataclass
class SessionSummary:
    """Terminal artifact of a capture session"""
    total_captures: int = 0
    slide_count: int = 0
    duration: str = "0s"
    word_count: int = 0
    char_count: int = 0
    average_confidence: float = 0.0
    languages: List[str] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)
    entities: ExtractedEntities = field(default_factory=ExtractedEntities)
    keywords: List[str] = field(default_factory=list)
    slides: List[SlideSummary] = field(default_factory=list)

    # Audio
    audio_segment_count: int = 0
    audio_word_count: int = 0
    audio_transcript: str = ""

    full_text: str = ""
    inference: TextInference = field(default_factory=TextInference)

    @property
    def emails(self) -> List[str]:
        return self.entities.emails

    @property
    def phones(self) -> List[str]:
        return self.entities.phones

    @property
    def dates(self) -> List[DateEntity]:
        return self.entities.dates

    @property
    def proper_nouns(self) -> List[str]:
        return self.entities.proper_nouns
