"""
OCR noise filtering, text similarity and keyword extraction.
"""
import re
from collections import Counter
from typing import List

# Minimum word length to consider a word valid
MIN_WORD_LENGTH = 2

# Maximum ratio of special characters to total characters
MAX_SPECIAL_CHAR_RATIO = 0.6

# Minimum ratio of alphabetic characters in a word
MIN_ALPHA_RATIO = 0.3

# Lines with more tokens than this are dropped when most tokens are noise
MIN_TOKENS_FOR_LINE_DROP = 2
MIN_LINE_SURVIVAL_RATIO = 0.3

MIN_RESULT_LENGTH = 3

# Short words that are real text, not OCR fragments
VALID_SHORT_WORDS = frozenset({
    'a', 'i', 'am', 'an', 'as', 'at', 'be', 'by', 'do', 'go', 'he',
    'if', 'in', 'is', 'it', 'me', 'my', 'no', 'of', 'ok', 'on', 'or',
    'so', 'to', 'up', 'us', 'we', 'vs',
})

KEYWORD_STOP_WORDS = frozenset({
    'the', 'and', 'for', 'are', 'but', 'not', 'you', 'all', 'can',
    'had', 'her', 'was', 'one', 'our', 'out', 'has', 'have', 'been',
    'will', 'with', 'this', 'that', 'from', 'they', 'were', 'which',
    'their', 'what', 'there', 'when', 'make', 'like', 'than', 'each',
    'more', 'some', 'them', 'then', 'very', 'just', 'about', 'into',
    'also', 'could', 'would', 'should', 'other', 'these', 'your',
})

NO_ALNUM_PATTERN = re.compile(r'[^a-zA-Z0-9]*')
SPECIAL_CHAR_PATTERN = re.compile(r'''[^a-zA-Z0-9\s.,!?;:'"()\-]''')
NON_ALNUM_PATTERN = re.compile(r'[^a-z0-9]')
REPEATED_CHAR_PATTERN = re.compile(r'(.)\1{3,}')

# Currency, percentages, clock times, grouped digits, units, versions
NUMERIC_TOKEN_PATTERN = re.compile(
    r'^[(\[]?[$€£¥+]?v?\d[\dx,.:/()%\-]*[a-z]{0,3}[)\].,;:!?]*$',
    re.IGNORECASE,
)
NUMERIC_SYMBOLS = frozenset('$€£¥%')


def _is_numeric_token(word: str, normalized: str) -> bool:
    if not NUMERIC_TOKEN_PATTERN.match(word):
        return False
    # Single stray digits are noise unless they carry a unit symbol
    return len(normalized) >= MIN_WORD_LENGTH or any(ch in NUMERIC_SYMBOLS for ch in word)


def is_valid_word(word: str) -> bool:
    """Check if a single token looks like valid text vs OCR noise."""
    normalized = NON_ALNUM_PATTERN.sub('', word.lower())

    if normalized in VALID_SHORT_WORDS:
        return True

    if _is_numeric_token(word, normalized):
        return True

    if len(normalized) < MIN_WORD_LENGTH:
        return False

    # Real words have letters
    alpha_count = sum(1 for ch in normalized if 'a' <= ch <= 'z')
    if alpha_count / len(normalized) < MIN_ALPHA_RATIO:
        return False

    # e.g. "aaaaaa", "xxxxxs"
    if REPEATED_CHAR_PATTERN.search(normalized):
        return False

    return True


def clean_line(line: str) -> str:
    """Remove noise tokens from one line; drop the line if it is mostly noise."""
    words = line.split()
    if not words:
        return ''

    cleaned_words = [w for w in words if is_valid_word(w)]

    if (
        len(words) > MIN_TOKENS_FOR_LINE_DROP
        and len(cleaned_words) / len(words) < MIN_LINE_SURVIVAL_RATIO
    ):
        return ''

    return ' '.join(cleaned_words)


def is_garbage_block(text: str) -> bool:
    """Check if a full block of OCR text is mostly garbage."""
    if NO_ALNUM_PATTERN.fullmatch(text):
        return True

    special_count = len(SPECIAL_CHAR_PATTERN.findall(text))
    if text and special_count / len(text) > MAX_SPECIAL_CHAR_RATIO:
        return True

    words = [w for w in text.split() if len(w) >= MIN_WORD_LENGTH]
    if len(text) < 5 and not words:
        return True

    return False


def clean_ocr_text(raw_text: str) -> str:
    """
    Clean OCR text output.

    Operations:
        - Reject blocks that are garbage as a whole
        - Remove noise tokens per line
        - Drop lines that are mostly gibberish
        - Discard results that are too short to mean anything

    The result is a fixed point: cleaning it again returns it unchanged.
    """
    if not raw_text or not raw_text.strip():
        return ''

    if is_garbage_block(raw_text):
        return ''

    cleaned_lines = [clean_line(line) for line in raw_text.split('\n')]
    result = '\n'.join(line for line in cleaned_lines if line).strip()

    if len(result) < MIN_RESULT_LENGTH:
        return ''

    # Removing clean tokens can leave a symbol-heavy remainder
    if is_garbage_block(result):
        return ''

    return result


def _similarity_tokens(text: str) -> set:
    return {w for w in text.lower().split() if len(w) >= 3}


def text_similarity(text_a: str, text_b: str) -> float:
    """
    Jaccard similarity (0-1) between the word sets of two texts.

    Only words of 3+ characters count. Used to detect slide/screen
    transitions between consecutive captures.
    """
    if not text_a and not text_b:
        return 1.0
    if not text_a or not text_b:
        return 0.0

    words_a = _similarity_tokens(text_a)
    words_b = _similarity_tokens(text_b)

    if not words_a and not words_b:
        return 1.0
    if not words_a or not words_b:
        return 0.0

    intersection = len(words_a & words_b)
    union = len(words_a | words_b)
    return intersection / union if union else 1.0


def extract_keywords(text: str, top_n: int = 10) -> List[str]:
    """Most frequent meaningful words, ties kept in order of first appearance."""
    words = re.sub(r'[^a-z0-9\s]', ' ', text.lower()).split()
    words = [w for w in words if len(w) >= 3 and w not in KEYWORD_STOP_WORDS]

    freq = Counter(words)
    return [word for word, _ in freq.most_common(top_n)]
