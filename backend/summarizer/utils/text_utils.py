"""
Text Processing Utilities

Reusable text manipulation functions for:
- Truncation
- Whitespace collapsing
- HTML to plain text extraction
"""

import re

SCRIPT_BLOCK_PATTERN = re.compile(r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>', re.IGNORECASE)
STYLE_BLOCK_PATTERN = re.compile(r'<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>', re.IGNORECASE)
TAG_PATTERN = re.compile(r'<[^>]+>')
WHITESPACE_PATTERN = re.compile(r'\s+')

# Applied in order, so '&amp;lt;' ends up as '<'
BASIC_ENTITIES = (
    ('&nbsp;', ' '),
    ('&amp;', '&'),
    ('&lt;', '<'),
    ('&gt;', '>'),
    ('&quot;', '"'),
    ('&#39;', "'"),
    ('&#x27;', "'"),
)
_ENTITY_PATTERNS = [(re.compile(re.escape(entity), re.IGNORECASE), char) for entity, char in BASIC_ENTITIES]


def truncate_text(text: str, max_chars: int) -> str:
    """
    Cut text to at most max_chars characters, no marker appended.

    """
    if not text or len(text) <= max_chars:
        return text
    return text[:max_chars]


def collapse_whitespace(text: str) -> str:
    """
    Collapse every run of whitespace into a single space and trim.

    """
    if not text:
        return ''
    return WHITESPACE_PATTERN.sub(' ', text).strip()


def decode_basic_entities(text: str) -> str:
    # Only the fixed entity set, anything else is left as written
    for pattern, char in _ENTITY_PATTERNS:
        text = pattern.sub(lambda _match, char=char: char, text)
    return text


def extract_text_from_html(html: str) -> str:
    """
    Extract readable text from an HTML document.

    Script and style blocks are dropped with their content, every other tag
    is replaced by a space, a small set of entities is decoded and the
    whitespace is collapsed.

    """
    if not html:
        return ''

    text = SCRIPT_BLOCK_PATTERN.sub(' ', html)
    text = STYLE_BLOCK_PATTERN.sub(' ', text)
    text = TAG_PATTERN.sub(' ', text)
    return collapse_whitespace(decode_basic_entities(text))
