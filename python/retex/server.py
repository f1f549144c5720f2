import logging
import sys
from typing import List

import structlog
from mcp.server.fastmcp import FastMCP

from retex.compiler import run_compile
from retex.diff import render_change_preview
from retex.prompt import build_tailoring_prompt
from retex.session import build_compiled, load_tree, merge_patch, update_selection
from retex.workspace import Workspace

# --- LOGGING CONFIGURATION ---
# MCP communicates over stdio.
# CRITICAL: All logs must go to stderr. Any print to stdout will break the JSON-RPC protocol.
logging.basicConfig(stream=sys.stderr, level=logging.INFO, force=True)

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

mcp = FastMCP("Retex Resume Assembler")


def _workspace(path: str) -> Workspace:
    ws = Workspace(path)
    if not ws.exists():
        raise FileNotFoundError(f"No master.tex in workspace: {path}")
    return ws


@mcp.tool()
def list_sections(workspace_path: str) -> str:
    """
    Lists the sections of master.tex and their selectable items.

    Each line shows [x] (included) or [ ] (excluded), the item id and its title.
    Ids are only valid until master.tex changes; list again after any edit or merge.

    Args:
        workspace_path: Absolute path to the workspace directory containing master.tex.
    """
    try:
        _, sections = load_tree(_workspace(workspace_path))
        if not sections:
            return "No sections parsed. Check master.tex syntax."

        lines = []
        for sec in sections:
            lines.append(sec.title)
            for item in sec.items:
                mark = "x" if item.included else " "
                lines.append(f"  [{mark}] {item.id}: {item.title}")
        return "\n".join(lines)
    except Exception as e:
        return f"Error reading sections: {str(e)}"


@mcp.tool()
def set_item_selection(workspace_path: str, item_ids: List[str], included: bool) -> str:
    """
    Includes or excludes items (by id from list_sections) in the assembled resume.
    The choice is remembered by section title and item content, so it survives edits elsewhere.

    Args:
        workspace_path: Absolute path to the workspace directory.
        item_ids: Ids such as 'sec-1-item-0' or 'sec-0-bullet-2'.
        included: True to keep the items, False to cut them on assembly.
    """
    try:
        sections = update_selection(_workspace(workspace_path), item_ids, included)
        known = {item.id for sec in sections for item in sec.items}
        unknown = [i for i in item_ids if i not in known]
        msg = f"Updated {len(item_ids) - len(unknown)} items."
        if unknown:
            msg += f" Unknown ids ignored: {', '.join(unknown)}"
        return msg
    except Exception as e:
        return f"Error updating selection: {str(e)}"


@mcp.tool()
def assemble_resume(workspace_path: str) -> str:
    """
    Writes compiled.tex: master.tex with every excluded item cut out.
    master.tex itself is never modified.
    """
    try:
        ws = _workspace(workspace_path)
        result = build_compiled(ws)
        msg = f"Removed {len(result.removed)} items. Saved to: {ws.compiled_path}"
        if result.warnings:
            msg += "\nWarnings:\n" + "\n".join(result.warnings)
        return msg
    except Exception as e:
        return f"Error assembling resume: {str(e)}"


@mcp.tool()
def compile_resume(workspace_path: str) -> str:
    """Assembles compiled.tex and runs the LaTeX compiler. Returns the PDF path or the compiler log."""
    try:
        ws = _workspace(workspace_path)
        build_compiled(ws)
        result = run_compile(ws.root)
        if result.success:
            return f"Compilation Success ({result.engine}). PDF: {result.pdf_path or ws.build_dir}"
        return f"Compilation Failed ({result.engine}).\n{result.stdout}\n{result.stderr}"
    except Exception as e:
        return f"Error compiling resume: {str(e)}"


@mcp.tool()
def get_tailoring_prompt(workspace_path: str, job_description: str) -> str:
    """
    Returns instructions plus the current Skills, Experience and Projects LaTeX
    for tailoring the resume to `job_description`. The answer must use the
    %%%BEGIN_<NAME>%%% / %%%END_<NAME>%%% blocks described in the prompt.
    """
    try:
        _, sections = load_tree(_workspace(workspace_path))
        return build_tailoring_prompt(job_description, sections)
    except Exception as e:
        return f"Error building prompt: {str(e)}"


@mcp.tool()
def merge_tailored_sections(workspace_path: str, patch: str, dry_run: bool = False) -> str:
    """
    Merges %%%BEGIN_<NAME>%%% ... %%%END_<NAME>%%% blocks into the matching sections of master.tex.

    The patch is rejected outright if it contains preamble or structural commands
    (\\documentclass, \\usepackage, \\newcommand, \\input, \\end{document}, ...).
    Blocks whose section cannot be found are skipped.

    Args:
        workspace_path: Absolute path to the workspace directory.
        patch: Generator output containing the blocks.
        dry_run: If True, returns a CriticMarkup preview ({--old--}{++new++}) and writes nothing.
    """
    try:
        ws = _workspace(workspace_path)
        original = ws.read_master()
        result = merge_patch(ws, patch, dry_run=dry_run)

        if not result.accepted:
            return f"Security Alert: {result.reason}. master.tex was not modified."

        msg = f"Applied: {', '.join(result.applied) or 'none'}."
        if result.skipped:
            msg += f" Sections not found for: {', '.join(result.skipped)}."
        if dry_run:
            return msg + "\n\n" + render_change_preview(original, result.new_text)
        return msg + f" Saved to: {ws.master_path}"
    except Exception as e:
        return f"Error merging patch: {str(e)}"


def main():
    mcp.run()


if __name__ == "__main__":
    main()
