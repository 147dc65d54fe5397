"""
Extractive summarization: headings, action items and key sentences.
"""
import re
from typing import List

from core.config import KEY_SENTENCE_COUNT

MARKDOWN_HEADING = re.compile(r'^#{1,6}\s+')
ALL_CAPS_HEADING = re.compile(r'^[A-Z][A-Z\s\d:./\-]{4,60}$')
ALL_CAPS_FILLER = re.compile(r'\b(THE|AND|FOR|ARE|BUT|NOT)\b')
NUMBERED_HEADING = re.compile(r'^\d+[.)]\s+[A-Z]')
BOLD_HEADING = re.compile(r'^\*\*[^*]+\*\*$')

ACTION_PATTERNS = (
    # Explicit markers
    re.compile(r'\b(?:TODO|FIXME|HACK|XXX|BUG|NOTE|IMPORTANT)[\s:]+(.+)', re.IGNORECASE),
    # Task vocabulary
    re.compile(r'\b(?:action\s*item|follow\s*up|next\s*step|to\s*do|task)[\s:]+(.+)', re.IGNORECASE),
    # Bulleted lines with obligation verbs
    re.compile(
        r'^\s*[-•●▸✓✗☐☑]\s*(.+(?:need|must|should|will|todo|fix|update|review|check|ensure|'
        r'implement|create|add|remove|delete|refactor).+)',
        re.IGNORECASE | re.MULTILINE,
    ),
    # Modal obligation phrases
    re.compile(r'\b(?:need\s+to|must|should|have\s+to|required\s+to)\s+(.{10,80})', re.IGNORECASE),
    # Deadlines
    re.compile(
        r'\b(?:deadline|due\s+(?:date|by)|by\s+(?:end\s+of|EOD|COB|tomorrow|monday|tuesday|'
        r'wednesday|thursday|friday))\b.{0,60}',
        re.IGNORECASE,
    ),
)
MIN_ACTION_LENGTH = 5
MAX_ACTION_LENGTH = 200

SENTENCE_BOUNDARY = re.compile(r'(?<=[.!?])\s+')
SIGNAL_WORDS = re.compile(
    r'\b(important|key|main|significant|critical|essential|primary|conclusion|result|'
    r'summary|finding|shows?|demonstrates?|indicates?|reveals?)\b',
    re.IGNORECASE,
)
MID_SENTENCE_CAPITAL = re.compile(r'\s[A-Z][a-z]+')


def _dedupe(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def extract_headings(text: str) -> List[str]:
    """Extract lines that look like headings, titles or key points."""
    headings = []

    for line in (l.strip() for l in text.split('\n')):
        if not line:
            continue
        if MARKDOWN_HEADING.match(line):
            headings.append(MARKDOWN_HEADING.sub('', line))
        elif ALL_CAPS_HEADING.match(line) and not ALL_CAPS_FILLER.search(line[1:]):
            headings.append(line)
        elif NUMBERED_HEADING.match(line) and len(line) < 80:
            headings.append(line)
        elif BOLD_HEADING.match(line):
            headings.append(line.replace('**', ''))

    return _dedupe(headings)


def extract_action_items(text: str) -> List[str]:
    """Detect TODOs, tasks, obligations and deadlines."""
    actions = []

    for pattern in ACTION_PATTERNS:
        for match in pattern.finditer(text):
            item = (match.group(1) if match.groups() else match.group(0)).strip()
            if MIN_ACTION_LENGTH < len(item) < MAX_ACTION_LENGTH:
                actions.append(item)

    return _dedupe(actions)


def split_summary_sentences(text: str) -> List[str]:
    """Sentences of 4-50 words and more than 15 characters."""
    merged = re.sub(r'\n+', '. ', text)
    sentences = []
    for sentence in SENTENCE_BOUNDARY.split(merged):
        sentence = sentence.strip()
        word_count = len(sentence.split())
        if 4 <= word_count <= 50 and len(sentence) > 15:
            sentences.append(sentence)
    return sentences


def score_sentence(sentence: str, index: int, total: int) -> float:
    """Importance score from position, length and content signals."""
    score = 0.0

    # First and last sentences tend to be important
    if index == 0:
        score += 2
    if index == total - 1:
        score += 1
    if index < total * 0.2:
        score += 1

    word_count = len(sentence.split())
    if 8 <= word_count <= 25:
        score += 1

    if re.search(r'\d', sentence):
        score += 0.5

    if SIGNAL_WORDS.search(sentence):
        score += 2

    if MID_SENTENCE_CAPITAL.search(sentence):
        score += 0.5

    if sentence.endswith('?'):
        score -= 0.5

    return score


def extractive_summarize(text: str, max_sentences: int = KEY_SENTENCE_COUNT) -> List[str]:
    """
    Pick the most important sentences of a text.

    Returns:
        Up to max_sentences sentences in original document order
    """
    sentences = split_summary_sentences(text)
    if len(sentences) <= max_sentences:
        return sentences

    total = len(sentences)
    ranked = sorted(
        range(total),
        key=lambda i: (-score_sentence(sentences[i], i, total), i),
    )
    return [sentences[i] for i in sorted(ranked[:max_sentences])]
