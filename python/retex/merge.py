"""
Guarded merge of externally generated section bodies.

The patch text comes from an untrusted generator. It is first scanned
against a denylist of commands that could alter global document structure;
any hit rejects the whole patch and leaves the original untouched. Otherwise
each named block is spliced into its section on a best-effort basis.
"""

import re
from typing import Dict, List, NamedTuple, Optional, Pattern

import structlog

from retex.models import MergeResult
from retex.parser import find_headers, header_title, section_end

logger = structlog.get_logger(__name__)


class DenyRule(NamedTuple):
    label: str
    pattern: Pattern[str]


# Order matters: the first rule that matches is reported.
DENYLIST: List[DenyRule] = [
    DenyRule("\\documentclass", re.compile(r"\\documentclass")),
    DenyRule("\\usepackage", re.compile(r"\\usepackage")),
    DenyRule("\\RequirePackage", re.compile(r"\\RequirePackage")),
    DenyRule("\\begin{document}", re.compile(r"\\begin\s*\{\s*document\s*\}")),
    DenyRule("\\end{document}", re.compile(r"\\end\s*\{\s*document\s*\}")),
    DenyRule("\\newcommand", re.compile(r"\\newcommand")),
    DenyRule("\\renewcommand", re.compile(r"\\renewcommand")),
    DenyRule("\\providecommand", re.compile(r"\\providecommand")),
    DenyRule("\\DeclareRobustCommand", re.compile(r"\\DeclareRobustCommand")),
    DenyRule("\\newenvironment", re.compile(r"\\newenvironment")),
    DenyRule("\\renewenvironment", re.compile(r"\\renewenvironment")),
    DenyRule("\\def", re.compile(r"\\[egx]?def(?![a-zA-Z])")),
    DenyRule("\\let", re.compile(r"\\let(?![a-zA-Z])")),
    DenyRule("\\input", re.compile(r"\\input")),
    DenyRule("\\include", re.compile(r"\\include")),
    DenyRule("\\openin", re.compile(r"\\openin")),
    DenyRule("\\openout", re.compile(r"\\openout")),
    DenyRule("\\write18", re.compile(r"\\write18")),
]

# Delimiter name -> section title it replaces
DEFAULT_BLOCKS: Dict[str, str] = {
    "SKILLS": "Technical Skills",
    "EXPERIENCE": "Experience",
    "PROJECTS": "Projects",
}


def block_markers(name: str) -> tuple[str, str]:
    return f"%%%BEGIN_{name}%%%", f"%%%END_{name}%%%"


def find_forbidden(patch: str) -> Optional[DenyRule]:
    """Returns the first denylist rule found anywhere in `patch`, comments included."""
    for rule in DENYLIST:
        if rule.pattern.search(patch):
            return rule
    return None


def extract_blocks(patch: str, blocks: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Returns {block name: trimmed body} for every delimiter pair present in the patch."""
    blocks = blocks or DEFAULT_BLOCKS
    found: Dict[str, str] = {}
    for name in blocks:
        begin, end = block_markers(name)
        match = re.search(re.escape(begin) + r"(.*?)" + re.escape(end), patch, re.DOTALL)
        if match:
            found[name] = match.group(1).strip()
    return found


def replace_section_body(text: str, title: str, body: str) -> Optional[str]:
    """
    Replaces everything between the header titled `title` and the next header
    (or \\end{document}, or end of text). Returns None when no header matches.
    """
    headers = find_headers(text)
    for i, header in enumerate(headers):
        if header_title(text, header) != title:
            continue
        boundary = section_end(text, headers, i)
        return text[: header.end] + "\n" + body + "\n" + text[boundary:]
    return None


def safe_merge(original: str, patch: str, blocks: Optional[Dict[str, str]] = None) -> MergeResult:
    """
    Validates `patch` against the denylist, then splices each named block
    into the matching section of `original`.

    The merge is accepted whenever the denylist check passes, even if no
    block could be applied. Missing sections are reported in `skipped`.
    """
    blocks = blocks or DEFAULT_BLOCKS

    # 1. Safety check
    rule = find_forbidden(patch)
    if rule is not None:
        reason = f"Patch contains forbidden command matching {rule.label}"
        logger.warning("Merge rejected", rule=rule.label)
        return MergeResult(accepted=False, new_text=original, reason=reason, matched_rule=rule.label)

    # 2. Extract and apply blocks one after another
    merged = original
    applied: List[str] = []
    skipped: List[str] = []

    for name, body in extract_blocks(patch, blocks).items():
        title = blocks[name]
        replaced = replace_section_body(merged, title, body)
        if replaced is None:
            logger.info("Section not found for block, skipping", block=name, title=title)
            skipped.append(name)
            continue
        merged = replaced
        applied.append(name)

    logger.info("Merge accepted", applied=applied, skipped=skipped)
    return MergeResult(accepted=True, new_text=merged, applied=applied, skipped=skipped)
