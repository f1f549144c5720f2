"""
Workspace-level orchestration shared by the CLI and the MCP server.

Each call re-reads master.tex, parses a fresh tree and reconciles it with the
remembered flags before anything else looks at it. Storage access lives here
and in Workspace; parse/reconcile/assemble/merge stay pure.
"""

from typing import Iterable, List, Tuple

import structlog

from retex.assembler import assemble_document
from retex.merge import safe_merge
from retex.models import AssemblyResult, MergeResult, Section
from retex.parser import parse_sections
from retex.selection import reconcile, remember, set_included
from retex.workspace import Workspace

logger = structlog.get_logger(__name__)


def load_tree(workspace: Workspace) -> Tuple[str, List[Section]]:
    """Current master text and its reconciled tree."""
    text = workspace.read_master()
    table = workspace.load_selection()
    sections = reconcile(parse_sections(text), table)
    workspace.save_selection(remember(sections, table))
    return text, sections


def update_selection(workspace: Workspace, item_ids: Iterable[str], included: bool) -> List[Section]:
    """Switches items on or off by id (ids from the current parse) and persists the flags."""
    _, sections = load_tree(workspace)
    sections = set_included(sections, item_ids, included)
    workspace.save_selection(remember(sections, workspace.load_selection()))
    return sections


def build_compiled(workspace: Workspace) -> AssemblyResult:
    """Assembles the selection and writes compiled.tex. master.tex is never modified."""
    text, sections = load_tree(workspace)
    result = assemble_document(text, sections)
    workspace.write_compiled(result.text)
    logger.info("Wrote compiled document", removed=len(result.removed), warnings=len(result.warnings))
    return result


def merge_patch(workspace: Workspace, patch: str, dry_run: bool = False) -> MergeResult:
    """
    Merges generator output into master.tex.
    Unless `dry_run`, the current master and the patch are archived first and
    an accepted merge is written back to master.tex.
    """
    master = workspace.read_master()
    if not dry_run:
        workspace.snapshot(master, patch)

    result = safe_merge(master, patch)
    if result.accepted and not dry_run:
        workspace.write_master(result.new_text)
    return result
