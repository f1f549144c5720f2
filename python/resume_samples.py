"""Sample resumes shared by the test modules."""

RESUME = r"""\documentclass{article}
\newcommand{\cvsection}[1]{\section{#1}}
\begin{document}
\section{\textbf{Technical Skills}}
\begin{itemize}
  \item \textbf{Languages}{: Python, Go}
  \item \textbf{Tools}{: Docker}
\end{itemize}

\section{Experience}
  \resumeSubHeadingListStart
    \resumeSubheading
      {Software Engineer}{Berlin}
      {Acme Corp}{2022 - Present}
      \resumeItemListStart
        \item Built the billing pipeline.
      \resumeItemListEnd
    \resumeSubheading
      {Intern}{Remote}
      {Globex}{2021}
      \resumeItemListStart
        \item Wrote internal tools.
      \resumeItemListEnd
  \resumeSubHeadingListEnd

\section{Projects}
\resumeSubHeadingListStart
\resumeProject
  {\textbf{Resume Assembler}}
  {Selectable LaTeX builder.}
  {2023}
  {}
\resumeSubHeadingListEnd
\end{document}
"""


def section_by_title(sections, title):
    for sec in sections:
        if sec.title == title:
            return sec
    raise AssertionError(f"Section not found: {title}")


def remove_ranges(text, ranges):
    """Reference result: text with the given [start, end) ranges removed."""
    kept = []
    cursor = 0
    for start, end in sorted(ranges):
        kept.append(text[cursor:start])
        cursor = end
    kept.append(text[cursor:])
    return "".join(kept)
