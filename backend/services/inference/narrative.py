"""
Narrative paragraph for a finished capture session.
"""
from typing import List

CONTENT_TYPE_LABELS = {
    'presentation': 'Presentation / Slides',
    'code': 'Source Code',
    'terminal': 'Terminal / Command Line',
    'article': 'Article / Document',
    'chat': 'Chat / Conversation',
    'spreadsheet': 'Spreadsheet / Tabular Data',
    'email': 'Email',
    'documentation': 'Documentation',
    'general': 'General Content',
}

MAX_LISTED_TOPICS = 5


def content_type_label(content_type: str) -> str:
    return CONTENT_TYPE_LABELS.get(content_type, CONTENT_TYPE_LABELS['general'])


def generate_narrative(
    content_type: str,
    slide_count: int,
    word_count: int,
    duration: str,
    key_sentences: List[str],
    headings: List[str],
    keywords: List[str],
) -> str:
    """Fill the session narrative template."""
    narrative = f"This session captured {content_type_label(content_type).lower()} content"

    if slide_count > 1:
        narrative += f" across {slide_count} distinct screens/slides"

    narrative += f" over {duration}, containing approximately {word_count} words."

    if headings:
        narrative += f" The content covers: {', '.join(headings[:MAX_LISTED_TOPICS])}."
    elif keywords:
        narrative += f" Key topics include {', '.join(keywords[:MAX_LISTED_TOPICS])}."

    if key_sentences:
        narrative += "\n\nKey takeaways:\n"
        for i, sentence in enumerate(key_sentences, start=1):
            narrative += f"{i}. {sentence}\n"

    return narrative
