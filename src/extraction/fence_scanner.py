# src/extraction/fence_scanner.py — v1
"""Fenced block scanner for Markdown documents.

Yields every fenced block (``` or ~~~) in document order, including fences
nested in ``>`` blockquotes and list items. Indented code blocks are
deliberately not recognized: four-space indentation is too easily confused
with ordinary prose formatting, so such lines stay plain text.

Only ``\\r\\n``, ``\\r`` and ``\\n`` end a line. Other characters that
``str.splitlines`` treats as breaks (form feed, ``\\u2028``...) are kept in
block bodies untouched.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from pagequeries.core.models import CodeBlock

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

# Up to three spaces, then three or more backticks or tildes, then the info string
_OPENING_FENCE = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")

_BLOCKQUOTE_MARKER = re.compile(r"^ {0,3}> ?")
_LIST_MARKER = re.compile(r"^(?P<indent> {0,3})(?P<marker>[-+*]|\d{1,9}[.)])(?P<gap> +|$)")


class FenceScanner:
    """Restartable iterable over the fenced blocks of a document.

    Each iteration rescans the text, so the same scanner can be consumed
    any number of times and always yields the same blocks.
    """

    def __init__(self, text: str) -> None:
        self._text = text

    def __iter__(self) -> Iterator[CodeBlock]:
        return iter_code_blocks(self._text)


def split_lines(text: str) -> list[str]:
    """Split on Markdown line endings only; a final line ending adds no line."""
    lines = _LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def iter_code_blocks(text: str) -> Iterator[CodeBlock]:
    """Lazily yield fenced blocks from ``text`` in document order.

    An unclosed fence extends to the end of its container: the end of the
    document at top level, the end of the blockquote or list item otherwise.
    """
    lines = split_lines(text)
    quote_depth = 0
    list_columns: list[int] = []
    i = 0
    while i < len(lines):
        content, depth = _strip_quote_markers(lines[i])
        if depth != quote_depth:
            quote_depth = depth
            list_columns = []

        if content.strip():
            leading = _leading_spaces(content)
            while list_columns and leading < list_columns[-1]:
                list_columns.pop()
            column = list_columns[-1] if list_columns else 0
            content = content[column:]
            width = _list_item_width(content)
            while width is not None:
                column += width
                list_columns.append(column)
                content = content[width:]
                width = _list_item_width(content)
        else:
            column = list_columns[-1] if list_columns else 0

        match = _OPENING_FENCE.match(content)
        if match is None:
            i += 1
            continue

        fence = match.group("fence")
        info = match.group("info")
        if fence[0] == "`" and "`" in info:
            # Backtick info strings cannot contain backticks (inline code)
            i += 1
            continue

        indent = len(match.group("indent"))
        closing = _closing_fence(fence)

        body_lines: list[str] = []
        j = i + 1
        closed = False
        while j < len(lines):
            inner = _container_content(lines[j], quote_depth, column)
            if inner is None:
                break
            if closing.match(inner):
                closed = True
                break
            body_lines.append(_strip_indent(inner, indent))
            j += 1

        lang, meta = parse_info_string(info)
        yield CodeBlock(lang=lang, meta=meta, body="\n".join(body_lines), line=i + 1)
        i = j + 1 if closed else j


def parse_info_string(info: str) -> tuple[str | None, str | None]:
    """Split a fence info string into (lang, meta).

    ``lang`` is the first word, ``meta`` the remainder; both are None when
    absent.
    """
    parts = info.strip().split(maxsplit=1)
    if not parts:
        return None, None
    meta = parts[1] if len(parts) > 1 else None
    return parts[0], meta


def _closing_fence(fence: str) -> re.Pattern[str]:
    char = re.escape(fence[0])
    return re.compile(rf"^ {{0,3}}{char}{{{len(fence)},}}[ \t]*$")


def _strip_quote_markers(line: str, limit: int | None = None) -> tuple[str, int]:
    """Remove leading ``>`` markers, at most ``limit`` of them."""
    depth = 0
    while limit is None or depth < limit:
        match = _BLOCKQUOTE_MARKER.match(line)
        if match is None:
            break
        line = line[match.end():]
        depth += 1
    return line, depth


def _list_item_width(line: str) -> int | None:
    """Columns taken by a list marker and its gap, None if ``line`` has none."""
    match = _LIST_MARKER.match(line)
    if match is None:
        return None
    gap = len(match.group("gap"))
    # No content, or content indented as code: the item content starts one column in
    if gap == 0 or gap > 4:
        gap = 1
    return len(match.group("indent")) + len(match.group("marker")) + gap


def _container_content(line: str, quote_depth: int, column: int) -> str | None:
    """Text of ``line`` inside the enclosing containers, None once they end."""
    content, depth = _strip_quote_markers(line, quote_depth)
    if depth < quote_depth:
        return None
    if column and content.strip() and _leading_spaces(content) < column:
        return None
    return content[column:]


def _leading_spaces(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _strip_indent(line: str, indent: int) -> str:
    """Remove up to ``indent`` leading spaces from a content line."""
    return line[min(_leading_spaces(line), indent):]
