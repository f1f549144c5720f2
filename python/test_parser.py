"""
Tests for the structural parser and the LaTeX scanning helpers.

Run: python3 test_parser.py
From: python/
"""

import sys

sys.path.insert(0, '.')

from resume_samples import RESUME, section_by_title
from retex.models import ItemKind
from retex.parser import parse_sections
from retex.template import SAMPLE_MASTER_TEX
from retex.utils.latex import NOT_FOUND, find_group_end, is_commented, read_arguments, strip_formatting


# ---------------------------------------------------------------------------
# Scanner helpers
# ---------------------------------------------------------------------------

def test_find_group_end_nested_and_escaped():
    assert find_group_end("{a{b}c}tail", 0) == 7
    # Escaped braces never change depth
    assert find_group_end("{a \\} b}", 0) == 8
    assert find_group_end("{line\\\\}", 0) == 8
    assert find_group_end("{never closed", 0) == NOT_FOUND
    assert find_group_end("x{}", 0) == NOT_FOUND
    print("PASS: balanced brace scan")


def test_braces_inside_comments_are_not_counted():
    assert find_group_end("{a % }\n}", 0) == 8
    # \% is a literal percent sign, not a comment
    assert find_group_end("{50\\% off}", 0) == 10
    assert strip_formatting("Skills % {old\n") == "Skills"

    text = (
        "\\begin{document}\n"
        "\\section{Skills % {old\n}\nPython and Go here\n"
        "\\section{Projects}\nA project body\n"
        "\\end{document}\n"
    )
    assert [s.title for s in parse_sections(text)] == ["Skills", "Projects"]
    print("PASS: braces in comments ignored")


def test_is_commented():
    text = "a % b {x}\nc \\% d\n\\\\% e"
    assert is_commented(text, 4)
    assert not is_commented(text, 2)  # the % itself
    assert not is_commented(text, 9)
    assert not is_commented(text, 10)
    assert not is_commented(text, 15)
    assert is_commented(text, 21)

    long_line = "\\item x " * 5000 + "% \\item y"
    assert not is_commented(long_line, 0)
    assert is_commented(long_line, len(long_line) - 1)
    print("PASS: comment detection")


def test_strip_formatting():
    assert strip_formatting("\\textbf{Hello} \\& \\textit{World}") == "Hello & World"
    assert strip_formatting("\\textbf{\\large Tech {Skills}}") == "Tech Skills"
    assert strip_formatting("  \\scshape   Projects ") == "Projects"
    assert strip_formatting("") == ""
    print("PASS: strip formatting wrappers")


def test_read_arguments():
    text = "\\cmd{a}\n {b{c}} {d}"
    assert read_arguments(text, 4) == ["a", "b{c}", "d"]
    assert read_arguments(text, 4, limit=2) == ["a", "b{c}"]
    assert read_arguments("\\cmd plain", 4) == []
    print("PASS: read consecutive arguments")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def test_sections_found_after_begin_document():
    sections = parse_sections(RESUME)
    assert [s.title for s in sections] == ["Technical Skills", "Experience", "Projects"]
    # \section{#1} inside the preamble \newcommand is not a section
    assert all(s.start > RESUME.index("\\begin{document}") for s in sections)
    print("PASS: sections found")


def test_section_ranges_are_contiguous():
    sections = parse_sections(RESUME)
    for current, nxt in zip(sections, sections[1:]):
        assert current.end == nxt.start
    assert sections[-1].end == RESUME.index("\\end{document}")
    for sec in sections:
        assert RESUME[sec.start : sec.body_start].startswith("\\section")
        assert sec.raw_content == RESUME[sec.start : sec.end]
    print("PASS: contiguous section ranges")


def test_section_without_document_terminator_runs_to_end():
    text = "\\section{Only}\nSome closing words here."
    sections = parse_sections(text)
    assert len(sections) == 1
    assert sections[0].end == len(text)
    print("PASS: section runs to end of text")


def test_header_variants_and_placeholder_title():
    text = (
        "\\section*{Awards}\nBest paper award, 2020.\n"
        "\\subsection{Not A Header}\n"
        "% \\section{Commented Out}\n"
        "\\cvsection{}\nPlaceholder titled body text.\n"
    )
    sections = parse_sections(text)
    assert [s.title for s in sections] == ["Awards", "Untitled Section"]
    print("PASS: header variants")


def test_unterminated_header_is_skipped():
    text = "\\begin{document}\n\\section{Broken\n\\section{Good}\nSome body text here\n\\end{document}\n"
    sections = parse_sections(text)
    assert [s.title for s in sections] == ["Good"]
    assert len(sections[0].items) == 1
    assert sections[0].items[0].kind == ItemKind.BLOCK
    print("PASS: unterminated header skipped")


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

def test_entries():
    sections = parse_sections(RESUME)
    exp = section_by_title(sections, "Experience")
    assert [i.kind for i in exp.items] == [ItemKind.SUBHEADING, ItemKind.SUBHEADING]
    assert [i.title for i in exp.items] == ["Software Engineer | Acme Corp", "Intern | Globex"]
    assert [i.id for i in exp.items] == ["sec-1-item-0", "sec-1-item-1"]

    first, second = exp.items
    assert first.end == second.start
    assert "Built the billing pipeline." in first.content
    # Last entry stops at the list terminator
    assert RESUME[second.end :].startswith("\\resumeSubHeadingListEnd")

    projects = section_by_title(sections, "Projects")
    assert len(projects.items) == 1
    assert projects.items[0].kind == ItemKind.PROJECT
    assert projects.items[0].title == "Resume Assembler"
    print("PASS: entry markers")


def test_bullets():
    skills = section_by_title(parse_sections(RESUME), "Technical Skills")
    assert [i.kind for i in skills.items] == [ItemKind.BULLET, ItemKind.BULLET]
    assert [i.title for i in skills.items] == ["Languages", "Tools"]
    assert skills.items[0].content == "\\item \\textbf{Languages}{: Python, Go}\n  "
    assert skills.items[1].content == "\\item \\textbf{Tools}{: Docker}\n"
    print("PASS: bullets")


def test_bullet_without_bold_gets_positional_title():
    text = "\\section{Awards}\n\\begin{itemize}\n\\item First prize\n\\item Second prize\n\\end{itemize}\n"
    items = parse_sections(text)[0].items
    assert [i.title for i in items] == ["Bullet Point 1", "Bullet Point 2"]
    print("PASS: positional bullet titles")


def test_itemsep_is_not_a_bullet():
    text = "\\section{Notes}\n\\setlength{\\itemsep}{0pt}\nA short paragraph about me.\n"
    items = parse_sections(text)[0].items
    assert len(items) == 1
    assert items[0].kind == ItemKind.BLOCK
    print("PASS: \\itemsep ignored")


def test_fallback_block_and_trivial_body():
    text = "\\section{Summary}\nEngineer who likes compilers.\n\\section{Empty}\n  \n\\section{Tiny}\nab\n"
    sections = parse_sections(text)
    summary, empty, tiny = sections
    assert len(summary.items) == 1
    block = summary.items[0]
    assert block.kind == ItemKind.BLOCK
    assert block.id == "sec-0-full-block"
    assert (block.start, block.end) == (summary.body_start, summary.end)
    assert empty.items == []
    assert tiny.items == []
    print("PASS: fallback block")


def test_unterminated_entry_is_skipped():
    text = (
        "\\section{Experience}\n"
        "\\resumeSubheading{Good}{X}{Org}{2020}\n"
        "\\resumeSubheading{Broken\n"
        "\\resumeSubHeadingListEnd\n"
        "\\end{document}\n"
    )
    items = parse_sections(text)[0].items
    assert len(items) == 1
    assert items[0].title == "Good | Org"
    assert "Broken" in items[0].content
    print("PASS: unterminated entry skipped")


def test_items_are_ordered_and_contained():
    for sec in parse_sections(RESUME) + parse_sections(SAMPLE_MASTER_TEX):
        previous_end = sec.body_start
        for item in sec.items:
            assert previous_end <= item.start < item.end <= sec.end
            previous_end = item.end
    print("PASS: item ranges ordered and contained")


def test_parse_is_deterministic():
    first = [s.model_dump() for s in parse_sections(RESUME)]
    second = [s.model_dump() for s in parse_sections(RESUME)]
    assert first == second
    print("PASS: deterministic parse")


def test_sample_template():
    sections = parse_sections(SAMPLE_MASTER_TEX)
    assert [s.title for s in sections] == ["Technical Skills", "Experience", "Projects"]
    skills, exp, projects = sections
    assert [i.title for i in skills.items] == ["Languages"]
    assert [i.title for i in exp.items] == ["Software Engineer | Company Name"]
    assert [i.title for i in projects.items] == ["Project Name"]
    print("PASS: bundled template")


if __name__ == '__main__':
    tests = [
        test_find_group_end_nested_and_escaped,
        test_braces_inside_comments_are_not_counted,
        test_is_commented,
        test_strip_formatting,
        test_read_arguments,
        test_sections_found_after_begin_document,
        test_section_ranges_are_contiguous,
        test_section_without_document_terminator_runs_to_end,
        test_header_variants_and_placeholder_title,
        test_unterminated_header_is_skipped,
        test_entries,
        test_bullets,
        test_bullet_without_bold_gets_positional_title,
        test_itemsep_is_not_a_bullet,
        test_fallback_block_and_trivial_body,
        test_unterminated_entry_is_skipped,
        test_items_are_ordered_and_contained,
        test_parse_is_deterministic,
        test_sample_template,
    ]

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {test.__name__}: {e}")
            import traceback
            traceback.print_exc()
            failed += 1

    print(f"\n{'='*60}")
    print(f"Results: {passed} passed, {failed} failed out of {len(tests)} tests")
    sys.exit(1 if failed else 0)
