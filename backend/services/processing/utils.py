"""
Shared utilities for processing pipeline.
"""
import re
from typing import Dict, FrozenSet, List

MIN_LANGUAGE_TEXT_LENGTH = 10
UNDETERMINED_LANGUAGE = "und"

# Common function words per language (ISO 639-1)
LANGUAGE_STOP_WORDS: Dict[str, FrozenSet[str]] = {
    'en': frozenset({'the', 'be', 'to', 'of', 'and', 'a', 'in', 'that', 'have', 'it',
                     'is', 'for', 'on', 'with', 'as', 'you', 'this', 'are', 'was', 'by'}),
    'es': frozenset({'el', 'la', 'de', 'que', 'y', 'en', 'los', 'se', 'del', 'las',
                     'un', 'por', 'con', 'una', 'para', 'es', 'al', 'lo', 'como', 'pero'}),
    'fr': frozenset({'le', 'la', 'les', 'de', 'des', 'et', 'un', 'une', 'du', 'est',
                     'que', 'pour', 'dans', 'qui', 'pas', 'sur', 'au', 'avec', 'il', 'nous'}),
    'de': frozenset({'der', 'die', 'und', 'das', 'ist', 'nicht', 'mit', 'den', 'ein', 'zu',
                     'sich', 'auf', 'eine', 'dem', 'des', 'von', 'auch', 'ich', 'wir', 'für'}),
    'it': frozenset({'il', 'di', 'che', 'la', 'per', 'non', 'una', 'sono', 'gli', 'della',
                     'del', 'le', 'con', 'si', 'anche', 'questo', 'come', 'nel', 'alla', 'ma'}),
    'pt': frozenset({'o', 'de', 'que', 'e', 'do', 'da', 'em', 'um', 'para', 'com',
                     'não', 'uma', 'os', 'no', 'se', 'na', 'por', 'mais', 'as', 'dos'}),
    'nl': frozenset({'de', 'het', 'een', 'en', 'van', 'ik', 'te', 'dat', 'die', 'in',
                     'is', 'niet', 'zijn', 'op', 'aan', 'met', 'voor', 'er', 'maar', 'ook'}),
}

# Scripts that identify a language without word statistics
SCRIPT_RANGES = [
    ('ja', re.compile(r'[\u3040-\u30ff]')),  # hiragana / katakana before CJK
    ('ko', re.compile(r'[\uac00-\ud7af]')),
    ('zh', re.compile(r'[\u4e00-\u9fff]')),
    ('ru', re.compile(r'[\u0400-\u04ff]')),
    ('ar', re.compile(r'[\u0600-\u06ff]')),
    ('hi', re.compile(r'[\u0900-\u097f]')),
]

SENTENCE_SPLIT_PATTERN = re.compile(r'[.!?\n]+')


def detect_language(text: str) -> str:
    """
    Coarse language tagging.

    Returns:
        ISO 639-1 code, or "und" when the text is too short or no
        language stands out.
    """
    if not text or len(text) < MIN_LANGUAGE_TEXT_LENGTH:
        return UNDETERMINED_LANGUAGE

    letters = [ch for ch in text if ch.isalpha()]
    if not letters:
        return UNDETERMINED_LANGUAGE

    for code, pattern in SCRIPT_RANGES:
        if len(pattern.findall(text)) / len(letters) > 0.3:
            return code

    words = re.findall(r'[^\W\d_]+', text.lower())
    if not words:
        return UNDETERMINED_LANGUAGE

    scores = {
        code: sum(1 for w in words if w in stop_words)
        for code, stop_words in LANGUAGE_STOP_WORDS.items()
    }
    best_code = max(scores, key=scores.get)
    best_score = scores[best_code]

    # Need at least two hits and a clear winner
    runner_up = max(score for code, score in scores.items() if code != best_code)
    if best_score < 2 or best_score == runner_up:
        return UNDETERMINED_LANGUAGE

    return best_code


def split_sentences(text: str, min_length: int = 0) -> List[str]:
    """Split on sentence punctuation and newlines."""
    sentences = [s.strip() for s in SENTENCE_SPLIT_PATTERN.split(text)]
    return [s for s in sentences if s and len(s) > min_length]


def count_words(text: str) -> int:
    return len(text.split())


def format_duration(total_ms: int) -> str:
    """Convert milliseconds to "1h 2m 3s", "2m 3s" or "3s"."""
    total_seconds = max(0, int(total_ms)) // 1000
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"
