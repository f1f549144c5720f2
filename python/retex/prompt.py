"""
Builds the instruction text handed to an external generator so that its
answer comes back in the block format `safe_merge` understands.
"""

from typing import Dict, List, Optional

from retex.merge import DEFAULT_BLOCKS, block_markers
from retex.models import Section

# Block name -> keyword used to find the section to quote
_SECTION_KEYWORDS: Dict[str, str] = {
    "SKILLS": "skills",
    "EXPERIENCE": "experience",
    "PROJECTS": "projects",
}

_BLOCK_HINTS: Dict[str, str] = {
    "SKILLS": "just the \\begin{itemize}...",
    "EXPERIENCE": "just the \\resumeSubHeadingListStart...",
    "PROJECTS": "just the \\resumeSubHeadingListStart...",
}


def find_section(sections: List[Section], keyword: str) -> Optional[Section]:
    """First section whose title contains `keyword`, case-insensitively."""
    keyword = keyword.lower()
    for section in sections:
        if keyword in section.title.lower():
            return section
    return None


def build_tailoring_prompt(job_description: str, sections: List[Section]) -> str:
    """
    Quotes the current LaTeX of the skills, experience and projects sections
    together with the job description, and asks for exactly one delimited
    block per section.
    """
    quoted = []
    answer_format = []

    for name, title in DEFAULT_BLOCKS.items():
        section = find_section(sections, _SECTION_KEYWORDS[name])
        latex = section.raw_content if section else f"(No {title} Section Found)"
        quoted.append(f"--- BEGIN {name} ---\n{latex}\n--- END {name} ---")

        begin, end = block_markers(name)
        answer_format.append(
            f"{begin}\n"
            f"(Put the full modified {title} section content here. "
            f"Do NOT include the \\section{{...}} header, {_BLOCK_HINTS[name]})\n"
            f"{end}"
        )

    return (
        "I need you to tailor my resume LaTeX code for the following Job Description (JD).\n\n"
        f"JOB DESCRIPTION:\n{job_description.strip()}\n\n"
        "CURRENT RESUME SECTIONS (LaTeX):\n\n"
        + "\n\n".join(quoted)
        + "\n\nINSTRUCTIONS:\n"
        "1. Analyze the JD keywords.\n"
        "2. Rewrite the bullet points in Experience and Projects to highlight relevance to the JD.\n"
        "3. Reorder skills or add relevant keywords from the JD *only if* they are synonymous with my existing skills.\n"
        "4. **DO NOT** invent numbers, companies, or projects. Only rephrase.\n"
        "5. **DO NOT** use \\usepackage, \\newcommand, \\input or any preamble command. "
        "Answers containing them are rejected.\n"
        "6. **STRICT OUTPUT FORMAT**: Return exactly the blocks below, in this order. Do not add explanations.\n\n"
        + "\n\n".join(answer_format)
        + "\n"
    )
