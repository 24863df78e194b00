"""
Slack Message Escaping

Converts rich text into Slack's message format. HTML anchors become
Slack links (<url|label>) and the control characters '{' and '%' are
kept as-is, while '&', '<' and '>' in ordinary text are HTML-escaped.

Escaping runs in three passes:
1. extract links and control characters into a side list, leaving
   indexed placeholders ({0}, {1}, ...) in the text
2. HTML-escape the remaining text
3. put the extracted fragments back verbatim
"""

import re
from typing import List, Tuple

ANCHOR_OR_CONTROL = re.compile(r"<a([^>]+)>(.+?)</a>|([{%])", re.IGNORECASE)
CONTROL = re.compile(r"[{%]")
HREF = re.compile(
    r"""\s*href\s*=\s*("[^"]*"|'[^']*'|[^'">\s]+)""",
    re.IGNORECASE,
)
PLACEHOLDER = re.compile(r"\{(\d+)\}")

_CHARACTER_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)


def escape_characters(text: str) -> str:
    """HTML-escape '&', '<' and '>'."""
    for char, replacement in _CHARACTER_ESCAPES:
        text = text.replace(char, replacement)
    return text


def _parse_href(attributes: str):
    match = HREF.search(attributes)
    if match is None:
        return None
    value = match.group(1)
    if len(value) >= 2 and value[0] in "\"'" and value[-1] == value[0]:
        value = value[1:-1]
    return value


def extract_links(text: str) -> Tuple[str, List[str]]:
    """
    Replace anchors and control characters with indexed placeholders.

    An anchor without a parsable href stays in the text as written;
    control characters inside it are still extracted.

    Args:
        text: Raw message text

    Returns:
        Tuple of (text with placeholders, extracted fragments by index)
    """
    fragments: List[str] = []
    parts: List[str] = []

    def placeholder(fragment: str) -> str:
        fragments.append(fragment)
        return "{%d}" % (len(fragments) - 1)

    position = 0
    for match in ANCHOR_OR_CONTROL.finditer(text):
        parts.append(text[position:match.start()])
        position = match.end()

        control = match.group(3)
        if control is not None:
            parts.append(placeholder(control))
            continue

        href = _parse_href(match.group(1))
        if href is None:
            parts.append(CONTROL.sub(lambda m: placeholder(m.group(0)), match.group(0)))
        else:
            parts.append(placeholder(f"<{href}|{match.group(2)}>"))

    parts.append(text[position:])
    return "".join(parts), fragments


def escape(text: str) -> str:
    """
    Escape text for a Slack message, preserving embedded links.

    Examples:
        escape('a & b')                          -> 'a &amp; b'
        escape('<a href="http://x">y</a>')       -> '<http://x|y>'
        escape('100% {done} <b>')                -> '100% {done} &lt;b&gt;'

    Args:
        text: Raw text, possibly containing <a href="...">label</a> markup

    Returns:
        Escaped text
    """
    working, fragments = extract_links(text)
    escaped = escape_characters(working)
    # every '{' left in the text opens a placeholder
    return PLACEHOLDER.sub(lambda m: fragments[int(m.group(1))], escaped)
