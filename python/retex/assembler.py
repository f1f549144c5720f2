"""
Rebuilds the document from a reconciled tree by cutting out excluded items.
Nothing outside an excluded item's range is touched, whitespace included.
"""

from typing import List, Optional, Tuple

import structlog

from retex.models import AssemblyResult, Item, Section

logger = structlog.get_logger(__name__)


def assemble_document(text: str, sections: List[Section]) -> AssemblyResult:
    """
    Deletes the range of every item with included=False.

    Cuts are applied from the highest start offset to the lowest so the
    offsets still to be applied stay valid. A range that does not fit the
    current text, or that reaches into an already deleted region, is skipped
    and reported in `warnings`.
    """
    excluded: List[Tuple[Item, str]] = []
    for section in sections:
        for item in section.items:
            if not item.included:
                excluded.append((item, section.title))

    # Step 1: Sort by position descending (cut from end to start)
    excluded.sort(key=lambda pair: pair[0].start, reverse=True)

    result = text
    removed: List[str] = []
    warnings: List[str] = []
    lowest_cut: Optional[int] = None

    # Step 2: Apply cuts
    for item, section_title in excluded:
        if lowest_cut is not None and item.end > lowest_cut:
            msg = f"Skipping overlapping cut [{item.start}, {item.end}) for '{item.title}' in '{section_title}'"
            logger.warning(msg)
            warnings.append(msg)
            continue

        if not (0 <= item.start <= item.end <= len(result)):
            msg = f"Skipping invalid cut [{item.start}, {item.end}) for '{item.title}' in '{section_title}'"
            logger.warning(msg, length=len(result))
            warnings.append(msg)
            continue

        result = result[: item.start] + result[item.end :]
        lowest_cut = item.start
        removed.append(item.id)

    return AssemblyResult(text=result, removed=removed, warnings=warnings)


def assemble(text: str, sections: List[Section]) -> str:
    return assemble_document(text, sections).text
