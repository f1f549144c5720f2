import argparse
import json
import sys
from pathlib import Path

import structlog

from retex import __version__
from retex.compiler import detect_engine, run_compile
from retex.diff import render_change_preview, summarize_changes
from retex.prompt import build_tailoring_prompt
from retex.session import build_compiled, load_tree, merge_patch, update_selection
from retex.workspace import Workspace, default_workspace


def _open_workspace(args: argparse.Namespace) -> Workspace:
    ws = Workspace(args.workspace)
    if not ws.exists():
        print(f"Error: No master.tex in {ws.root}. Run 'retex init' first.", file=sys.stderr)
        sys.exit(1)
    return ws


def _read_text(path: Path) -> str:
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def handle_init(args):
    ws = Workspace(args.workspace)
    if ws.initialize():
        print(f"✅ Created {ws.master_path} from the sample template.", file=sys.stderr)
    else:
        print(f"📍 Using existing {ws.master_path}.", file=sys.stderr)


def handle_sections(args):
    ws = _open_workspace(args)
    _, sections = load_tree(ws)

    if args.json:
        print(json.dumps([s.model_dump(mode="json", exclude={"raw_content"}) for s in sections], indent=2))
        return

    if not sections:
        print("No sections parsed. Check master.tex syntax.", file=sys.stderr)
    for sec in sections:
        print(f"{sec.title}")
        if not sec.items:
            print("    (no toggleable items)")
        for item in sec.items:
            mark = "x" if item.included else " "
            print(f"  [{mark}] {item.id:<22} {item.title}")


def handle_select(args):
    ws = _open_workspace(args)
    included = not args.exclude
    sections = update_selection(ws, args.ids, included)

    known = {item.id for sec in sections for item in sec.items}
    unknown = [i for i in args.ids if i not in known]
    state = "included" if included else "excluded"
    print(f"Marked {len(args.ids) - len(unknown)} item(s) as {state}.", file=sys.stderr)
    if unknown:
        print(f"⚠️  Unknown ids: {', '.join(unknown)}", file=sys.stderr)
        sys.exit(1)


def handle_assemble(args):
    ws = _open_workspace(args)
    result = build_compiled(ws)

    for warning in result.warnings:
        print(f"⚠️  {warning}", file=sys.stderr)

    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as f:
            f.write(result.text)
        print(f"✅ Saved to {args.output}", file=sys.stderr)
    else:
        print(f"✅ Saved to {ws.compiled_path}", file=sys.stderr)
    print(f"Stats: {len(result.removed)} items removed, {len(result.warnings)} skipped.", file=sys.stderr)


def handle_compile(args):
    ws = _open_workspace(args)
    build_compiled(ws)

    engine = args.engine or detect_engine()
    print(f"Running LaTeX compiler ({engine})...", file=sys.stderr)
    result = run_compile(ws.root, engine=engine)

    if result.success:
        print(f"✅ Compilation Success: {result.pdf_path or ws.build_dir}", file=sys.stderr)
    else:
        print(result.stdout, file=sys.stderr)
        print(result.stderr, file=sys.stderr)
        print("❌ Compilation Failed", file=sys.stderr)
        sys.exit(1)


def handle_prompt(args):
    ws = _open_workspace(args)
    _, sections = load_tree(ws)
    prompt = build_tailoring_prompt(_read_text(args.job_description), sections)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(prompt)
        print(f"✅ Prompt saved to {args.output}", file=sys.stderr)
    else:
        print(prompt)


def handle_merge(args):
    ws = _open_workspace(args)
    patch = _read_text(args.patch)
    original = ws.read_master()

    result = merge_patch(ws, patch, dry_run=args.dry_run)
    if not result.accepted:
        print(f"❌ Security Alert: {result.reason}", file=sys.stderr)
        print("Merge blocked. master.tex was not modified.", file=sys.stderr)
        sys.exit(1)

    summary = summarize_changes(original, result.new_text)
    print(f"Applied: {', '.join(result.applied) or 'none'}", file=sys.stderr)
    if result.skipped:
        print(f"⚠️  Sections not found for: {', '.join(result.skipped)}", file=sys.stderr)
    print(f"Stats: +{summary.inserted} / -{summary.deleted} characters.", file=sys.stderr)

    if args.dry_run:
        print(render_change_preview(original, result.new_text))
    else:
        print(f"✅ Merged into {ws.master_path}", file=sys.stderr)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="retex", description="Retex: selectable LaTeX resume assembler")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-w",
        "--workspace",
        type=Path,
        default=default_workspace(),
        help="Workspace directory holding master.tex (default: $RETEX_WORKSPACE or current directory)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Subcommands")

    p_init = subparsers.add_parser("init", help="Create the workspace and a sample master.tex if missing")
    p_init.set_defaults(func=handle_init)

    p_sections = subparsers.add_parser("sections", help="List sections and selectable items")
    p_sections.add_argument("--json", action="store_true", help="Output the parsed tree as JSON")
    p_sections.set_defaults(func=handle_sections)

    p_select = subparsers.add_parser("select", help="Include or exclude items by id")
    p_select.add_argument("ids", nargs="+", help="Item ids as shown by 'sections'")
    group = p_select.add_mutually_exclusive_group()
    group.add_argument("--exclude", action="store_true", help="Exclude the items")
    group.add_argument("--include", action="store_true", help="Include the items (default)")
    p_select.set_defaults(func=handle_select)

    p_assemble = subparsers.add_parser("assemble", help="Write compiled.tex without the excluded items")
    p_assemble.add_argument("-o", "--output", type=Path, help="Also write the result to this path")
    p_assemble.set_defaults(func=handle_assemble)

    p_compile = subparsers.add_parser("compile", help="Assemble and run the LaTeX compiler")
    p_compile.add_argument("--engine", choices=["latexmk", "tectonic", "pdflatex"], help="Compiler to use")
    p_compile.set_defaults(func=handle_compile)

    p_prompt = subparsers.add_parser("prompt", help="Build a tailoring prompt for a job description")
    p_prompt.add_argument("job_description", type=Path, help="Text file with the job description")
    p_prompt.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    p_prompt.set_defaults(func=handle_prompt)

    p_merge = subparsers.add_parser("merge", help="Merge generated section blocks into master.tex")
    p_merge.add_argument("patch", type=Path, help="File with %%%%%%BEGIN_<NAME>%%%%%% blocks")
    p_merge.add_argument(
        "--dry-run",
        action="store_true",
        help="Print a CriticMarkup preview instead of writing master.tex",
    )
    p_merge.set_defaults(func=handle_merge)

    args = parser.parse_args(argv)
    # stdout carries payloads, so logs go to stderr
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(file=sys.stderr))

    try:
        args.func(args)
    except Exception as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
