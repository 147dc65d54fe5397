"""
Heuristic content type detection for captured screen text.
"""
import re
from dataclasses import dataclass
from typing import List

from core.config import CHAT_LINE_RATIO, CODE_SCORE_THRESHOLD, TERMINAL_LINE_RATIO

CONTENT_TYPES = (
    'presentation',
    'code',
    'terminal',
    'article',
    'chat',
    'spreadsheet',
    'email',
    'documentation',
    'general',
)

CODE_KEYWORDS = re.compile(
    r'\b(function|const|let|var|class|import|export|return|if|else|for|while|def|print|'
    r'async|await|interface|type|enum|struct|void|int|string|boolean|null|undefined|'
    r'true|false|try|catch|throw|new)\b'
)
BRACKETS = re.compile(r'[{}()\[\]]')
TERMINAL_PATTERN = re.compile(
    r'^[$#>»]\s|^\w+@[\w.-]+[:%~]|^root@|^\([\w-]+\)\s*\$|^C:\\|^~/|'
    r'npm\s+(run|install|start)|yarn\s|pip\s|brew\s|apt\s|'
    r'git\s+(commit|push|pull|clone|checkout|merge|status|log|diff)',
    re.MULTILINE,
)
CHAT_PATTERN = re.compile(r'^[\w\s]{2,20}:\s.{5,}$')
EMAIL_HEADER_PATTERN = re.compile(r'^(From|To|Subject|Date|Cc|Bcc):\s', re.MULTILINE)
HEADING_LIKE = re.compile(r'^(#{1,6}\s|[A-Z][A-Z\s]{4,}$|\d+\.\s+[A-Z]|\*\*[^*]+\*\*$|[-•●▸▹►]\s)')
BULLET_PATTERN = re.compile(r'^\s*[-•●▸▹►✓✗→]\s')

MIN_SPREADSHEET_DELIMITERS = 3


@dataclass
class ContentSignals:
    """Detected content type and how sure the rule that fired is"""
    type: str
    confidence: float


class ContentClassifier:
    """
    Labels text with a coarse content type.

    Rules are evaluated in a fixed order and the first one that fires
    wins: code, terminal, email, chat, spreadsheet, presentation,
    documentation, article, general.
    """

    def __init__(
        self,
        code_score_threshold: float = CODE_SCORE_THRESHOLD,
        terminal_line_ratio: float = TERMINAL_LINE_RATIO,
        chat_line_ratio: float = CHAT_LINE_RATIO,
    ):
        self.code_score_threshold = code_score_threshold
        self.terminal_line_ratio = terminal_line_ratio
        self.chat_line_ratio = chat_line_ratio

    def classify(self, text: str) -> ContentSignals:
        lines = [line for line in text.split('\n') if line.strip()]
        line_count = max(len(lines), 1)

        code_score = self.code_score(text, line_count)
        if code_score > self.code_score_threshold:
            return ContentSignals('code', min(code_score / 3, 1.0))

        if TERMINAL_PATTERN.search(text):
            terminal_ratio = self._line_ratio(lines, TERMINAL_PATTERN)
            if terminal_ratio > self.terminal_line_ratio:
                return ContentSignals('terminal', terminal_ratio)

        if EMAIL_HEADER_PATTERN.search(text):
            return ContentSignals('email', 0.8)

        chat_ratio = self._line_ratio(lines, CHAT_PATTERN)
        if chat_ratio > self.chat_line_ratio:
            return ContentSignals('chat', chat_ratio)

        if self._is_tabular(lines):
            return ContentSignals('spreadsheet', 0.7)

        bullet_lines = sum(1 for line in lines if BULLET_PATTERN.search(line))
        heading_lines = sum(1 for line in lines if HEADING_LIKE.search(line))
        avg_line_length = sum(len(line) for line in lines) / line_count

        # Short bullet-heavy slides
        if (bullet_lines + heading_lines) / line_count > 0.3 and avg_line_length < 80:
            return ContentSignals('presentation', 0.75)

        # Headings between paragraphs
        if heading_lines >= 2 and avg_line_length > 40:
            return ContentSignals('documentation', 0.6)

        if avg_line_length > 60 and len(lines) > 3:
            return ContentSignals('article', 0.5)

        return ContentSignals('general', 0.3)

    @staticmethod
    def code_score(text: str, line_count: int) -> float:
        """Keyword hits per line weighted with bracket density per char."""
        keyword_hits = len(CODE_KEYWORDS.findall(text))
        bracket_count = len(BRACKETS.findall(text))
        return (keyword_hits / max(line_count, 1)) * 0.6 + (bracket_count / max(len(text), 1)) * 200

    @staticmethod
    def _line_ratio(lines: List[str], pattern: re.Pattern) -> float:
        if not lines:
            return 0.0
        return sum(1 for line in lines if pattern.search(line)) / len(lines)

    @staticmethod
    def _is_tabular(lines: List[str]) -> bool:
        return any(
            line.count('\t') >= MIN_SPREADSHEET_DELIMITERS or line.count('|') >= MIN_SPREADSHEET_DELIMITERS
            for line in lines
        )


content_classifier = ContentClassifier()


def classify_content(text: str) -> ContentSignals:
    return content_classifier.classify(text)
