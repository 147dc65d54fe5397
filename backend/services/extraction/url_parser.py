"""
URL extraction and repair for raw OCR text.

Runs on raw text because cleaning strips the punctuation and fragments
URLs are made of. Extraction is best effort: candidates that cannot be
repaired into a valid URL are dropped, nothing is raised.
"""
import re
from typing import List, Optional, Tuple
from urllib.parse import urlsplit

VALID_TLDS = frozenset({
    'com', 'org', 'net', 'io', 'dev', 'ai', 'co', 'app', 'edu', 'gov',
    'me', 'info', 'biz', 'us', 'uk', 'de', 'fr', 'jp', 'au', 'ca',
    'nl', 'ru', 'ch', 'se', 'no', 'fi', 'be', 'at', 'it', 'es', 'pt',
    'br', 'in', 'za', 'nz', 'kr', 'cn', 'tw', 'xyz', 'tech', 'cloud',
    'page', 'site', 'online', 'store', 'design', 'blog', 'wiki',
})

_TLD_ALTERNATION = '|'.join(sorted(VALID_TLDS, key=len, reverse=True))

# Full URLs with protocol
FULL_URL_PATTERN = re.compile(
    r'https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b'
    r'(?:[-a-zA-Z0-9()@:%_+.~#?&/=]*)',
    re.IGNORECASE,
)

# Bare domains without protocol (github.com/user/repo, docs.google.com/...)
BARE_DOMAIN_PATTERN = re.compile(
    r'(?:^|(?<=[\s(\[<]))'
    r'(?:www\.)?(?:[a-zA-Z0-9][-a-zA-Z0-9]*\.)+'
    r'(?:' + _TLD_ALTERNATION + r')(?:\.[a-z]{2})?'
    r'(?![a-zA-Z0-9-])'
    r'(?:/[-a-zA-Z0-9@:%_+.~#?&/=]*)?',
    re.IGNORECASE,
)

# Spaced-out or otherwise mangled protocol, e.g. "h t t p s : / /"
MANGLED_SCHEME_PATTERN = re.compile(r'\bh\s*t\s*t\s*p\s*(s?)\s*:\s*[/\\|]\s*[/\\|]\s*', re.IGNORECASE)
LEADING_SCHEME_PATTERN = re.compile(r'^h\s*t\s*t\s*p\s*(s?)\s*:\s*[/\\|]*', re.IGNORECASE)

LINE_END_URL_PATTERN = re.compile(r'https?://\S*$', re.IGNORECASE)
LINE_CONTINUATION_PATTERN = re.compile(r'^\S*\.[a-z]', re.IGNORECASE)

# Characters that glue URL fragments back together
URL_JOINERS = './-_:?=&#'
TRAILING_PUNCTUATION = '.,;:!?)]}>\'"'

MAX_MANGLED_FRAGMENTS = 12


def repair_url(url: str) -> str:
    """
    Attempt to repair an OCR-damaged URL.

    Operations:
        - Remove whitespace OCR inserted inside the URL
        - Map look-alike separators ("\\", "|") to "/"
        - Normalize a mangled protocol to http:// or https://
        - Collapse repeated path separators
        - Drop trailing sentence punctuation
    """
    repaired = re.sub(r'\s+', '', url)
    repaired = re.sub(r'[\\|]', '/', repaired)

    scheme_match = LEADING_SCHEME_PATTERN.match(repaired)
    rest = repaired
    scheme = ''
    if scheme_match:
        scheme = 'https://' if scheme_match.group(1) else 'http://'
        rest = repaired[scheme_match.end():]

    rest = re.sub(r'/{2,}', '/', rest)
    while rest and rest[-1] in TRAILING_PUNCTUATION:
        # Keep a closing paren that belongs to the path, e.g. /wiki/Foo_(bar)
        if rest[-1] == ')' and rest.count('(') >= rest.count(')'):
            break
        rest = rest[:-1]

    return scheme + rest


def is_valid_url(url: str) -> bool:
    """Validate scheme, hostname shape and TLD of a URL string."""
    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname
        parsed.port  # raises ValueError on malformed ports
    except ValueError:
        return False

    if parsed.scheme.lower() not in ('http', 'https') or not hostname:
        return False

    if not re.fullmatch(r'[a-z0-9-]+(?:\.[a-z0-9-]+)+', hostname):
        return False

    parts = hostname.split('.')
    if len(parts) < 2:
        return False

    tld = parts[-1]
    # Any 2-3 char TLD, longer ones only when known
    return len(tld) >= 2 and (len(tld) <= 3 or tld in VALID_TLDS)


def normalize_url(url: str) -> str:
    """Normalize URL for deduplication."""
    try:
        parsed = urlsplit(url)
        port = parsed.port
    except ValueError:
        return url

    host = parsed.hostname or ''
    if port is not None:
        host = f"{host}:{port}"

    normalized = f"{parsed.scheme.lower()}://{host}{parsed.path.rstrip('/')}"
    if parsed.query:
        normalized += f"?{parsed.query}"
    if parsed.fragment:
        normalized += f"#{parsed.fragment}"
    return normalized


def _collect_mangled_tail(fragments: List[str]) -> Tuple[str, int]:
    """Re-join whitespace-split fragments. Returns the tail and how many fragments it used."""
    tail = ''
    used = 0
    for fragment in fragments[:MAX_MANGLED_FRAGMENTS]:
        if tail and '.' in tail:
            # A capitalized fragment after a complete host starts a new sentence
            if tail.endswith('.') and fragment[0].isupper():
                break
            if not tail.endswith(tuple(URL_JOINERS)) and not fragment.startswith(tuple(URL_JOINERS)):
                break
        tail += fragment
        used += 1
    return tail, used


def _mangled_candidates(text: str) -> List[Tuple[str, Tuple[int, int]]]:
    """
    URLs whose protocol or host OCR split with whitespace.

    Returns (candidate, span) pairs; the span covers every fragment
    that was joined, in text offsets.
    """
    candidates = []
    offset = 0
    for line in text.split('\n'):
        for match in MANGLED_SCHEME_PATTERN.finditer(line):
            fragments = list(re.finditer(r'\S+', line[match.end():]))
            if not fragments:
                continue
            # A clean protocol only needs joining when the host is split, e.g. "https://exa mple.com"
            if not re.search(r'\s', match.group(0)):
                if len(fragments) < 2 or '.' in fragments[0].group(0):
                    continue
            tail, used = _collect_mangled_tail([f.group(0) for f in fragments])
            if tail:
                scheme = 'https://' if match.group(1) else 'http://'
                end = match.end() + fragments[used - 1].end()
                candidates.append((scheme + tail, (offset + match.start(), offset + end)))
        offset += len(line) + 1
    return candidates


def _accept(candidate: str) -> Optional[str]:
    repaired = repair_url(candidate)
    if not re.match(r'^https?://', repaired, re.IGNORECASE):
        repaired = 'https://' + repaired
    if is_valid_url(repaired):
        return normalize_url(repaired)
    return None


def extract_urls(text: str) -> List[str]:
    """
    Extract URLs from raw OCR text.

    Finds:
        - Full http/https URLs
        - Bare domain URLs (https:// assumed)
        - URLs with a spaced-out protocol and OCR-inserted spaces
        - URLs split across two lines

    Returns:
        Normalized URLs, duplicates removed, in order of discovery
    """
    if not text:
        return []

    mangled = _mangled_candidates(text)
    joined_spans = [span for _, span in mangled]

    candidates: List[str] = []
    candidates.extend(m.group(0) for m in FULL_URL_PATTERN.finditer(text))
    # Fragments of a re-joined URL are not URLs of their own
    candidates.extend(
        m.group(0) for m in BARE_DOMAIN_PATTERN.finditer(text)
        if not any(start <= m.start() < end for start, end in joined_spans)
    )
    candidates.extend(candidate for candidate, _ in mangled)

    lines = text.split('\n')
    for current, following in zip(lines, lines[1:]):
        current_line = current.rstrip()
        next_line = following.lstrip()
        head = LINE_END_URL_PATTERN.search(current_line)
        if head and LINE_CONTINUATION_PATTERN.match(next_line):
            candidates.append(head.group(0) + next_line.split()[0])

    urls: List[str] = []
    for candidate in candidates:
        normalized = _accept(candidate)
        if normalized and normalized not in urls:
            urls.append(normalized)
    return urls
