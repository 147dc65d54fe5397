"""
Entity extraction from cleaned OCR text.

Handles emails, dates, phone numbers, numbers with context and proper
nouns. Each entity family is a registry of independent matchers; the
extractor iterates a registry and merges the matches with the family's
dedup key.
"""
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from models.capture_models import DateEntity, ExtractedEntities, NumberEntity


@dataclass(frozen=True)
class PatternMatcher:
    """One regex and the tag attached to its matches."""
    pattern: re.Pattern
    tag: str
    group: int = 0

    def find(self, text: str) -> Iterator[Tuple[str, Tuple[int, int]]]:
        for match in self.pattern.finditer(text):
            value = match.group(self.group) or match.group(0)
            yield value.strip(), match.span()


_MONTHS = (
    r'(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?|'
    r'Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)'
)

# Left anchor keeps the scan linear on long runs without an "@"
EMAIL_PATTERN = re.compile(r'(?<![a-zA-Z0-9._%+-])[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}')

DATE_MATCHERS = (
    # ISO: 2024-01-15
    PatternMatcher(re.compile(r'\b(\d{4}[-/]\d{1,2}[-/]\d{1,2})\b'), 'iso', 1),
    # US: 01/15/2024, 1/15/24
    PatternMatcher(re.compile(r'\b(\d{1,2}/\d{1,2}/\d{2,4})\b'), 'us', 1),
    # EU: 15-01-2024, 15.01.2024
    PatternMatcher(re.compile(r'\b(\d{1,2}[-.]\d{1,2}[-.]\d{2,4})\b'), 'eu', 1),
    # January 15, 2024 / Jan 15th 2024
    PatternMatcher(
        re.compile(r'\b(' + _MONTHS + r'\s+\d{1,2}(?:st|nd|rd|th)?\b,?\s*\d{2,4})\b', re.IGNORECASE),
        'month_day_year', 1,
    ),
    # 15 January 2024
    PatternMatcher(
        re.compile(r'\b(\d{1,2}(?:st|nd|rd|th)?\s+' + _MONTHS + r',?\s*\d{2,4})\b', re.IGNORECASE),
        'day_month_year', 1,
    ),
)

PHONE_MATCHERS = (
    # International: +1-234-567-8900, +44 20 7946 0958
    PatternMatcher(re.compile(r'\+\d{1,3}[-.\s]?\(?\d{1,4}\)?[-.\s]?\d{1,4}[-.\s]?\d{1,9}'), 'international'),
    # North American: (123) 456-7890, 123-456-7890, 123.456.7890
    PatternMatcher(re.compile(r'\(?\b\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b'), 'north_american'),
)

NUMBER_MATCHERS = (
    # $1,234.56, $100, €50, £30
    PatternMatcher(re.compile(r'[$€£¥]\s?\d{1,3}(?:,\d{3})*(?:\.\d{1,2})?'), 'currency'),
    # 50%, 12.5%
    PatternMatcher(re.compile(r'\d+(?:\.\d+)?%'), 'percentage'),
    # 1920x1080, 100px, 12pt, 27in
    PatternMatcher(
        re.compile(r'\b\d+(?:\.\d+)?(?:\s*(?:px|pt|em|rem|vh|vw|cm|mm)|in|x\d+)\b', re.IGNORECASE),
        'dimension',
    ),
    # 3:30 PM, 15:45
    PatternMatcher(re.compile(r'\b\d{1,2}:\d{2}(?::\d{2})?(?:\s*(?:AM|PM|am|pm)\b)?'), 'time'),
    # 2h 30m, 45m
    PatternMatcher(re.compile(r'\b\d+h(?:\s*\d+m)?\b|\b\d+m\b', re.IGNORECASE), 'duration'),
    # v2.1.0, 3.14.159
    PatternMatcher(re.compile(r'(?<![\d.,$€£¥])\b(?:v\d+(?:\.\d+)+|\d+\.\d+\.\d+(?:\.\d+)*)\b', re.IGNORECASE), 'version'),
)

PROPER_NOUN_MIN_LENGTH = 2
PROPER_NOUN_WORD = re.compile(r'^[A-Z][a-z]+$')
MULTI_WORD_PROPER_NOUN = re.compile(r'\b(?:[A-Z][a-z]+\s+){1,3}[A-Z][a-z]+\b')
SENTENCE_SPLIT = re.compile(r'[.!?\n]+')
WORD_PUNCTUATION = ',;:"\'()[]{}<>'

# Capitalized words that are not names
COMMON_WORDS = frozenset({
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for',
    'of', 'with', 'by', 'from', 'as', 'is', 'was', 'are', 'were', 'been',
    'be', 'have', 'has', 'had', 'do', 'does', 'did', 'will', 'would',
    'could', 'should', 'may', 'might', 'must', 'shall', 'can', 'need',
    'this', 'that', 'these', 'those', 'it', 'its', 'i', 'we', 'you',
    'he', 'she', 'they', 'them', 'their', 'our', 'your', 'my', 'his', 'her',
    'if', 'then', 'else', 'when', 'where', 'why', 'how', 'what', 'which',
    'who', 'whom', 'whose', 'all', 'each', 'every', 'both', 'few', 'more',
    'most', 'other', 'some', 'such', 'no', 'nor', 'not', 'only', 'own',
    'same', 'so', 'than', 'too', 'very', 'just', 'also', 'now', 'here',
    'there', 'today', 'tomorrow', 'yesterday', 'new', 'first', 'last',
    'long', 'great', 'little', 'old', 'right', 'big', 'high', 'different',
    'small', 'large', 'next', 'early', 'young', 'important', 'public',
    'bad', 'good', 'able', 'note', 'click', 'please', 'thank', 'thanks',
    'hello', 'hi', 'hey', 'okay', 'ok', 'yes', 'about', 'after', 'before',
    'into', 'over', 'under', 'again', 'any', 'because', 'while', 'until',
    'out', 'up', 'down', 'off', 'once', 'via', 'per', 'see', 'use', 'get',
})


def _digits_only(value: str) -> str:
    return re.sub(r'\D', '', value)


def _overlaps(span: Tuple[int, int], taken: List[Tuple[int, int]]) -> bool:
    return any(span[0] < end and start < span[1] for start, end in taken)


class _KeyedCollector:
    """Ordered collection deduplicated by a normalized key."""

    def __init__(self, key: Callable[[str], str]):
        self.key = key
        self._items: Dict[str, object] = {}

    def add(self, literal: str, item: Optional[object] = None) -> bool:
        normalized = self.key(literal)
        if normalized in self._items:
            return False
        self._items[normalized] = literal if item is None else item
        return True

    def values(self) -> List:
        return list(self._items.values())


class EntityExtractor:
    """Extracts structured entities from text with pattern registries."""

    def __init__(
        self,
        date_matchers: Iterable[PatternMatcher] = DATE_MATCHERS,
        phone_matchers: Iterable[PatternMatcher] = PHONE_MATCHERS,
        number_matchers: Iterable[PatternMatcher] = NUMBER_MATCHERS,
        common_words: frozenset = COMMON_WORDS,
        min_phone_digits: int = 10,
    ):
        self.date_matchers = tuple(date_matchers)
        self.phone_matchers = tuple(phone_matchers)
        self.number_matchers = tuple(number_matchers)
        self.common_words = common_words
        self.min_phone_digits = min_phone_digits

    def extract(self, text: str) -> ExtractedEntities:
        """Extract all entities from a block of text."""
        if not text:
            return ExtractedEntities()

        return ExtractedEntities(
            emails=self.extract_emails(text),
            dates=self.extract_dates(text),
            phones=self.extract_phones(text),
            numbers=self.extract_numbers(text),
            proper_nouns=self.extract_proper_nouns(text),
        )

    def extract_emails(self, text: str) -> List[str]:
        emails = _KeyedCollector(str.lower)
        if '@' not in text:
            return emails.values()
        for match in EMAIL_PATTERN.finditer(text):
            emails.add(match.group(0).lower())
        return emails.values()

    def extract_dates(self, text: str) -> List[DateEntity]:
        dates = _KeyedCollector(lambda v: v.lower().strip())
        taken: List[Tuple[int, int]] = []
        for matcher in self.date_matchers:
            for value, span in matcher.find(text):
                if _overlaps(span, taken):
                    continue
                if dates.add(value, DateEntity(value=value)):
                    taken.append(span)
        return dates.values()

    def extract_phones(self, text: str) -> List[str]:
        phones = _KeyedCollector(_digits_only)
        taken: List[Tuple[int, int]] = []
        for matcher in self.phone_matchers:
            for value, span in matcher.find(text):
                # Short digit runs are years, counts or ids
                if len(_digits_only(value)) < self.min_phone_digits:
                    continue
                if _overlaps(span, taken):
                    continue
                if phones.add(value):
                    taken.append(span)
        return phones.values()

    def extract_numbers(self, text: str) -> List[NumberEntity]:
        numbers = _KeyedCollector(lambda v: v)
        for matcher in self.number_matchers:
            for value, _ in matcher.find(text):
                numbers.add(value, NumberEntity(value=value, context=matcher.tag))
        return numbers.values()

    def extract_proper_nouns(self, text: str) -> List[str]:
        """
        Capitalized words that do not start a sentence, plus runs of
        2-4 capitalized words (names of people or organizations).
        """
        nouns = _KeyedCollector(str.lower)

        for sentence in SENTENCE_SPLIT.split(text):
            sentence = sentence.strip()
            if not sentence:
                continue

            # Skip first word of sentence (always capitalized)
            for word in sentence.split()[1:]:
                word = word.strip(WORD_PUNCTUATION)
                if len(word) < PROPER_NOUN_MIN_LENGTH or not PROPER_NOUN_WORD.match(word):
                    continue
                if word.lower() in self.common_words:
                    continue
                nouns.add(word)

            for match in MULTI_WORD_PROPER_NOUN.finditer(sentence):
                if match.start() == 0:
                    continue
                phrase = ' '.join(match.group(0).split())
                if any(w.lower() in self.common_words for w in phrase.split()):
                    continue
                nouns.add(phrase)

        return nouns.values()

    def merge(self, entities_list: Iterable[ExtractedEntities]) -> ExtractedEntities:
        """Union several extractions using the same dedup keys."""
        emails = _KeyedCollector(str.lower)
        dates = _KeyedCollector(lambda v: v.lower().strip())
        phones = _KeyedCollector(_digits_only)
        numbers = _KeyedCollector(lambda v: v)
        nouns = _KeyedCollector(str.lower)

        for entities in entities_list:
            for email in entities.emails:
                emails.add(email)
            for date in entities.dates:
                dates.add(date.value, date)
            for phone in entities.phones:
                phones.add(phone)
            for number in entities.numbers:
                numbers.add(number.value, number)
            for noun in entities.proper_nouns:
                nouns.add(noun)

        return ExtractedEntities(
            emails=emails.values(),
            dates=dates.values(),
            phones=phones.values(),
            numbers=numbers.values(),
            proper_nouns=nouns.values(),
        )

    @staticmethod
    def has_any(entities: ExtractedEntities) -> bool:
        return bool(
            entities.emails
            or entities.dates
            or entities.phones
            or entities.numbers
            or entities.proper_nouns
        )


# Global entity extractor instance
entity_extractor = EntityExtractor()


def extract_entities(text: str) -> ExtractedEntities:
    return entity_extractor.extract(text)


def merge_entities(entities_list: Iterable[ExtractedEntities]) -> ExtractedEntities:
    return entity_extractor.merge(entities_list)


def has_entities(entities: ExtractedEntities) -> bool:
    return EntityExtractor.has_any(entities)
