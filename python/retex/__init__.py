from importlib.metadata import PackageNotFoundError, version

from retex.assembler import assemble, assemble_document
from retex.merge import safe_merge
from retex.models import Item, ItemKind, MergeResult, Section, SelectionKey
from retex.parser import parse_sections
from retex.selection import reconcile, remember

try:
    __version__ = version("retex")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "parse_sections",
    "reconcile",
    "remember",
    "assemble",
    "assemble_document",
    "safe_merge",
    "Item",
    "ItemKind",
    "Section",
    "SelectionKey",
    "MergeResult",
    "__version__",
]
