"""
Structural parser for templated LaTeX resumes.

Splits the document body into sections (\\section, \\section*, \\cvsection)
and each section body into selectable items:

    1. Entry markers (\\resumeSubheading, \\resumeProject), bounded by the next
       entry or by \\resumeSubHeadingListEnd.
    2. Otherwise \\item bullets, bounded by the next bullet or a list terminator.
    3. Otherwise one block covering the whole body, when it has real content.

Parsing is a pure function of the text: the same input always yields the same
titles, offsets and item kinds. Malformed constructs are skipped, never raised.
"""

import re
from typing import List, Optional

import structlog

from retex.models import Item, ItemKind, Section
from retex.utils.latex import (
    NOT_FOUND,
    CommandMatch,
    find_group_end,
    find_token,
    is_commented,
    iter_commands,
    read_arguments,
    strip_formatting,
)

logger = structlog.get_logger(__name__)

SECTION_RE = re.compile(r"\\(section\*?|cvsection\*?)\s*\{")
ENTRY_RE = re.compile(r"\\(resumeSubheading|resumeProject)\s*\{")
BULLET_RE = re.compile(r"\\item(?![a-zA-Z])")
BOLD_RE = re.compile(r"\\textbf\s*\{")

DOCUMENT_BEGIN = "\\begin{document}"
DOCUMENT_END = "\\end{document}"
ENTRY_LIST_END = "\\resumeSubHeadingListEnd"
BULLET_LIST_ENDS = ("\\end{itemize}", "\\end{enumerate}", "\\resumeItemListEnd")

UNTITLED_SECTION = "Untitled Section"
UNTITLED_ITEM = "Untitled Item"
FULL_BLOCK_TITLE = "Full Section Content"
MIN_BLOCK_CONTENT = 5
TITLE_SEPARATOR = " | "

_ENTRY_KINDS = {
    "resumeSubheading": ItemKind.SUBHEADING,
    "resumeProject": ItemKind.PROJECT,
}


def find_headers(text: str) -> List[CommandMatch]:
    """
    Section headers in document order.

    Headers are only looked for after \\begin{document} when the document has
    one, so command definitions in the preamble never become sections.
    """
    scan_from = 0
    begin = find_token(text, DOCUMENT_BEGIN)
    if begin != NOT_FOUND:
        scan_from = begin + len(DOCUMENT_BEGIN)
    return list(iter_commands(text, SECTION_RE, scan_from))


def header_title(text: str, header: CommandMatch) -> str:
    return strip_formatting(text[header.arg_start + 1 : header.end - 1])


def section_end(text: str, headers: List[CommandMatch], index: int) -> int:
    """Next header, else \\end{document}, else end of text."""
    if index + 1 < len(headers):
        return headers[index + 1].start
    end = find_token(text, DOCUMENT_END, headers[index].end)
    return len(text) if end == NOT_FOUND else end


def parse_sections(text: str) -> List[Section]:
    """Parses the document into sections and items with absolute offsets."""
    headers = find_headers(text)
    sections: List[Section] = []

    for i, header in enumerate(headers):
        body_start = header.end
        end = section_end(text, headers, i)
        section_id = f"sec-{i}"

        sections.append(
            Section(
                id=section_id,
                title=header_title(text, header) or UNTITLED_SECTION,
                start=header.start,
                body_start=body_start,
                end=end,
                raw_content=text[header.start : end],
                items=_parse_items(text, body_start, end, section_id),
            )
        )

    logger.debug("Parsed sections", count=len(sections))
    return sections


def _parse_items(text: str, body_start: int, body_end: int, section_id: str) -> List[Item]:
    items = _parse_entries(text, body_start, body_end, section_id)
    if items:
        return items

    items = _parse_bullets(text, body_start, body_end, section_id)
    if items:
        return items

    body = text[body_start:body_end]
    if len(body.strip()) > MIN_BLOCK_CONTENT:
        return [
            Item(
                id=f"{section_id}-full-block",
                kind=ItemKind.BLOCK,
                title=FULL_BLOCK_TITLE,
                content=body,
                start=body_start,
                end=body_end,
            )
        ]
    return []


def _entry_title(text: str, arg_start: int, kind: ItemKind) -> str:
    args = read_arguments(text, arg_start)
    if not args:
        return UNTITLED_ITEM

    parts = [strip_formatting(args[0])]
    # \resumeSubheading{role}{location}{organization}{dates}
    if kind == ItemKind.SUBHEADING and len(args) >= 3:
        parts.append(strip_formatting(args[2]))
    return TITLE_SEPARATOR.join(p for p in parts if p) or UNTITLED_ITEM


def _parse_entries(text: str, body_start: int, body_end: int, section_id: str) -> List[Item]:
    entries = list(iter_commands(text, ENTRY_RE, body_start, body_end))
    items: List[Item] = []

    for j, entry in enumerate(entries):
        start = entry.start
        if j + 1 < len(entries):
            stop = entries[j + 1].start
        else:
            stop = find_token(text, ENTRY_LIST_END, start, body_end)
            if stop == NOT_FOUND:
                stop = body_end

        kind = _ENTRY_KINDS[entry.name]
        items.append(
            Item(
                id=f"{section_id}-item-{j}",
                kind=kind,
                title=_entry_title(text, entry.arg_start, kind),
                content=text[start:stop],
                start=start,
                end=stop,
            )
        )
    return items


def _bold_lead(content: str) -> Optional[str]:
    for match in BOLD_RE.finditer(content):
        if is_commented(content, match.start()):
            continue
        group_end = find_group_end(content, match.end() - 1)
        if group_end == NOT_FOUND:
            continue
        phrase = strip_formatting(content[match.end() : group_end - 1])
        if phrase:
            return phrase
    return None


def _parse_bullets(text: str, body_start: int, body_end: int, section_id: str) -> List[Item]:
    starts = [
        m.start() for m in BULLET_RE.finditer(text, body_start, body_end) if not is_commented(text, m.start())
    ]
    items: List[Item] = []

    for j, start in enumerate(starts):
        stop = starts[j + 1] if j + 1 < len(starts) else body_end
        # A list terminator before the next bullet closes this one
        list_ends = [i for i in (find_token(text, t, start, stop) for t in BULLET_LIST_ENDS) if i != NOT_FOUND]
        if list_ends:
            stop = min(list_ends)

        content = text[start:stop]
        items.append(
            Item(
                id=f"{section_id}-bullet-{j}",
                kind=ItemKind.BULLET,
                title=_bold_lead(content) or f"Bullet Point {j + 1}",
                content=content,
                start=start,
                end=stop,
            )
        )
    return items
