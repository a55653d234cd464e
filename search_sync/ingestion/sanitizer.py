"""Markup sanitization and size bounding for indexed content."""

import re

# Remote index record size limit for the content field, in UTF-8 bytes
MAX_CONTENT_BYTES = 19000
TRUNCATE_STEP = 1000

TAG_PATTERN = re.compile(r"<[\s\S]*?>")
# Inline emphasis wraps words, so it is removed without inserting a space
INLINE_TAG_PATTERN = re.compile(r"</?(?:em|strong)>", re.IGNORECASE)

NBSP_PATTERN = re.compile(r"&nbsp;")

# Applied in order to single-spaced text; later rules rely on the space inserted after ";"
ENTITY_AND_PUNCTUATION_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r";"), "; "),
    (re.compile(r" \."), "."),
    (re.compile(r" ,"), ","),
    (re.compile(r" ;"), ";"),
    (re.compile(r"\) +;"), ");"),
    (re.compile(r" :"), ":"),
    (re.compile(r"&laquo; +"), "«"),
    (re.compile(r"&ldquo; +"), "“"),
    (re.compile(r"&raquo; +\."), "». "),
    (re.compile(r"&raquo; +,"), "», "),
    (re.compile(r"&raquo; +\?"), "»? "),
    (re.compile(r"&raquo; +\)"), "») "),
    (re.compile(r" &raquo;"), "»"),
    (re.compile(r"&rdquo; +\."), "”. "),
    (re.compile(r"&rdquo; +,"), "”, "),
    (re.compile(r"&rdquo; +\?"), "”? "),
    (re.compile(r"&rdquo; +\)"), "”) "),
    (re.compile(r" &rdquo;"), "”"),
    # Quote entities not caught by a spacing rule above
    (re.compile(r"&laquo;"), "«"),
    (re.compile(r"&raquo;"), "»"),
    (re.compile(r"&ldquo;"), "“"),
    (re.compile(r"&rdquo;"), "”"),
]

NEWLINE_PATTERN = re.compile(r"\r?\n|\r")
SPACES_PATTERN = re.compile(r" +")


def _collapse_whitespace(text: str) -> str:
    text = NEWLINE_PATTERN.sub(" ", text)
    return SPACES_PATTERN.sub(" ", text)


def _replace_tag(match: re.Match[str]) -> str:
    return "" if INLINE_TAG_PATTERN.fullmatch(match.group(0)) else " "


def strip_tags(markup: str) -> str:
    """Remove markup tags.

    Emphasis and strong tags are dropped; every other tag becomes a single
    space so that text from adjacent block elements does not run together.
    """
    return TAG_PATTERN.sub(_replace_tag, markup)


def sanitize_content(markup: str) -> str:
    """Turn rendered HTML into plain, single-spaced text for indexing.

    Args:
        markup: Rendered HTML

    Returns:
        Text without tags, with selected entities decoded, whitespace
        collapsed to single spaces and trimmed
    """
    text = NBSP_PATTERN.sub(" ", strip_tags(markup))
    # Punctuation rules remove a single space, so runs must be collapsed first
    text = _collapse_whitespace(text)
    for pattern, replacement in ENTITY_AND_PUNCTUATION_RULES:
        text = pattern.sub(replacement, text)
    return _collapse_whitespace(text).strip()


def truncate_utf8(
    text: str,
    max_bytes: int = MAX_CONTENT_BYTES,
    shrink_step: int = TRUNCATE_STEP,
) -> str:
    """Shorten text until its UTF-8 encoding fits in max_bytes.

    Each pass drops at least ``shrink_step`` characters from the tail and
    never keeps more than ``max_bytes`` characters, so the loop ends.

    Args:
        text: Text to bound
        max_bytes: Maximum UTF-8 byte length
        shrink_step: Minimum number of characters removed per pass

    Returns:
        Text whose UTF-8 byte length is at most max_bytes
    """
    while len(text.encode("utf-8")) > max_bytes:
        new_length = max(0, min(len(text) - shrink_step, max_bytes))
        text = text[:new_length]
    return text
