from enum import Enum
from typing import Dict, List, NamedTuple, Optional

from pydantic import BaseModel, Field


class ItemKind(str, Enum):
    SUBHEADING = "subheading"
    PROJECT = "project"
    BULLET = "bullet"
    BLOCK = "block"


class Item(BaseModel):
    """
    A selectable unit inside a section (an entry, a bullet or the whole body).
    Offsets are absolute indices into the text snapshot the item was parsed from.
    """

    id: str = Field(..., description="Generated id, only valid for the snapshot it was parsed from.")
    kind: ItemKind
    title: str = Field(..., description="Human readable label for pickers.")
    content: str = Field(..., description="Exact source text covered by [start, end).")
    start: int
    end: int
    included: bool = Field(True, description="False means the range is cut out on assembly.")


class Section(BaseModel):
    """A titled division of the document. The body runs from body_start to end."""

    id: str
    title: str
    start: int = Field(..., description="Offset of the header command.")
    body_start: int = Field(..., description="Offset just past the header's closing brace.")
    end: int
    raw_content: str = Field(..., description="Header plus body, as in the source.")
    items: List[Item] = Field(default_factory=list)


class SelectionKey(NamedTuple):
    """The only identity of an item that survives a re-parse."""

    section: str
    content: str


SelectionTable = Dict[SelectionKey, bool]


class AssemblyResult(BaseModel):
    text: str
    removed: List[str] = Field(default_factory=list, description="Ids of items cut from the text.")
    warnings: List[str] = Field(default_factory=list)


class MergeResult(BaseModel):
    """
    Outcome of merging externally generated section bodies.
    On rejection new_text is the untouched original.
    """

    accepted: bool
    new_text: str
    reason: Optional[str] = None
    matched_rule: Optional[str] = Field(None, description="Label of the denylist rule that fired.")
    applied: List[str] = Field(default_factory=list, description="Block names spliced into the document.")
    skipped: List[str] = Field(default_factory=list, description="Block names whose section was not found.")


class ChangeSummary(BaseModel):
    inserted: int = 0
    deleted: int = 0

    @property
    def has_changes(self) -> bool:
        return self.inserted > 0 or self.deleted > 0


class CompileResult(BaseModel):
    success: bool
    stdout: str = ""
    stderr: str = ""
    engine: str = "none"
    pdf_path: Optional[str] = None
