"""
Carries inclusion flags across re-parses.

Offsets and generated ids change whenever the text is edited, so flags are
keyed by (section title, item content). The table is an explicit value:
every function here returns new objects and never mutates its inputs.
"""

from typing import Any, Dict, Iterable, List, Optional

import structlog

from retex.models import Item, Section, SelectionKey, SelectionTable

logger = structlog.get_logger(__name__)


def selection_key(section: Section, item: Item) -> SelectionKey:
    return SelectionKey(section=section.title, content=item.content)


def reconcile(sections: List[Section], table: Optional[SelectionTable] = None) -> List[Section]:
    """
    Copies remembered flags onto a freshly parsed tree.
    Items whose key is unknown default to included.
    """
    table = table or {}
    reconciled: List[Section] = []

    for section in sections:
        items = [
            item.model_copy(update={"included": table.get(selection_key(section, item), True)})
            for item in section.items
        ]
        reconciled.append(section.model_copy(update={"items": items}))

    return reconciled


def remember(sections: List[Section], table: Optional[SelectionTable] = None) -> SelectionTable:
    """
    Returns a new table holding every flag observed in `sections`.
    Keys that are not in the tree are kept, so content that comes back later
    is restored with its last known flag.
    """
    updated: SelectionTable = dict(table or {})
    for section in sections:
        for item in section.items:
            updated[selection_key(section, item)] = item.included
    return updated


def set_included(sections: List[Section], item_ids: Iterable[str], included: bool) -> List[Section]:
    """Returns a copy of the tree with the given items switched on or off. Unknown ids are ignored."""
    wanted = set(item_ids)
    seen = set()
    result: List[Section] = []

    for section in sections:
        items = []
        for item in section.items:
            if item.id in wanted:
                seen.add(item.id)
                item = item.model_copy(update={"included": included})
            items.append(item)
        result.append(section.model_copy(update={"items": items}))

    missing = wanted - seen
    if missing:
        logger.warning("Unknown item ids ignored", ids=sorted(missing))
    return result


def selection_to_records(table: SelectionTable) -> List[Dict[str, Any]]:
    """JSON friendly form of the table, sorted for stable files."""
    return [
        {"section": key.section, "content": key.content, "included": included}
        for key, included in sorted(table.items(), key=lambda kv: (kv[0].section, kv[0].content))
    ]


def selection_from_records(records: Iterable[Dict[str, Any]]) -> SelectionTable:
    table: SelectionTable = {}
    for record in records:
        try:
            key = SelectionKey(section=str(record["section"]), content=str(record["content"]))
        except (KeyError, TypeError):
            logger.warning("Ignoring malformed selection record", record=record)
            continue
        table[key] = bool(record.get("included", True))
    return table
