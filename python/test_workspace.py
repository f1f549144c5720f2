"""
Tests for the workspace layer, the session orchestration, the CLI and the
compiler wrapper. Everything runs inside temporary directories.

Run: python3 test_workspace.py
From: python/
"""

import contextlib
import io
import json
import os
import sys
import tempfile
from pathlib import Path
from unittest import mock

sys.path.insert(0, '.')

from resume_samples import RESUME
from retex import cli
from retex.compiler import detect_engine, run_compile
from retex.models import SelectionKey
from retex.session import build_compiled, load_tree, merge_patch, update_selection
from retex.template import SAMPLE_MASTER_TEX
from retex.workspace import Workspace

PATCH = "%%%BEGIN_EXPERIENCE%%%\n\\resumeSubHeadingListStart\n\\resumeSubHeadingListEnd\n%%%END_EXPERIENCE%%%"
EVIL_PATCH = "%%%BEGIN_SKILLS%%%\n\\input{/etc/passwd}\n%%%END_SKILLS%%%"


def _workspace_with(tmp, text=RESUME):
    ws = Workspace(tmp)
    ws.initialize(template=text)
    return ws


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------

def test_initialize_writes_template_once():
    with tempfile.TemporaryDirectory() as tmp:
        ws = Workspace(Path(tmp) / "resume")
        assert not ws.exists()
        assert ws.initialize() is True
        assert ws.read_master() == SAMPLE_MASTER_TEX

        ws.write_master("custom")
        assert ws.initialize() is False
        assert ws.read_master() == "custom"
    print("PASS: initialize")


def test_read_master_missing_raises():
    with tempfile.TemporaryDirectory() as tmp:
        try:
            Workspace(tmp).read_master()
        except FileNotFoundError:
            pass
        else:
            raise AssertionError("Expected FileNotFoundError")
    print("PASS: missing master raises")


def test_selection_persistence():
    with tempfile.TemporaryDirectory() as tmp:
        ws = _workspace_with(tmp)
        assert ws.load_selection() == {}

        table = {SelectionKey("Experience", "\\resumeSubheading{A}"): False}
        ws.save_selection(table)
        assert ws.load_selection() == table
        assert json.loads(ws.state_path.read_text(encoding="utf-8"))["selection"][0]["included"] is False

        ws.state_path.write_text("{not json", encoding="utf-8")
        assert ws.load_selection() == {}
    print("PASS: selection persistence")


def test_snapshot_archives_master_and_patch():
    with tempfile.TemporaryDirectory() as tmp:
        ws = _workspace_with(tmp)
        backup, patch = ws.snapshot(RESUME, PATCH)
        assert backup.parent.name == "backups" and backup.read_text(encoding="utf-8") == RESUME
        assert patch.parent.name == "patches" and patch.read_text(encoding="utf-8") == PATCH

        _, no_patch = ws.snapshot(RESUME)
        assert no_patch is None
    print("PASS: snapshot")


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

def test_selection_survives_master_edits():
    with tempfile.TemporaryDirectory() as tmp:
        ws = _workspace_with(tmp)
        update_selection(ws, ["sec-1-item-1"], False)

        result = build_compiled(ws)
        compiled = ws.compiled_path.read_text(encoding="utf-8")
        assert result.removed == ["sec-1-item-1"]
        assert "Globex" not in compiled
        assert ws.read_master() == RESUME

        # Edit another section; the exclusion follows the content
        ws.write_master(RESUME.replace("Docker", "Docker, Terraform"))
        build_compiled(ws)
        compiled = ws.compiled_path.read_text(encoding="utf-8")
        assert "Globex" not in compiled
        assert "Terraform" in compiled

        _, sections = load_tree(ws)
        assert sections[1].items[1].included is False
    print("PASS: selection survives edits")


def test_merge_patch_writes_master_and_archives():
    with tempfile.TemporaryDirectory() as tmp:
        ws = _workspace_with(tmp)
        result = merge_patch(ws, PATCH)
        assert result.accepted and result.applied == ["EXPERIENCE"]
        assert "Globex" not in ws.read_master()
        assert len(list((ws.root / "backups").iterdir())) == 1
        assert len(list((ws.root / "patches").iterdir())) == 1
    print("PASS: merge writes master")


def test_rejected_and_dry_run_merges_leave_master_alone():
    with tempfile.TemporaryDirectory() as tmp:
        ws = _workspace_with(tmp)

        result = merge_patch(ws, EVIL_PATCH)
        assert not result.accepted
        assert ws.read_master() == RESUME
        # The rejected patch is still archived for inspection
        assert len(list((ws.root / "patches").iterdir())) == 1

        result = merge_patch(ws, PATCH, dry_run=True)
        assert result.accepted
        assert ws.read_master() == RESUME
        assert len(list((ws.root / "patches").iterdir())) == 1
    print("PASS: rejected / dry-run merge")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def test_cli_init_select_assemble():
    with tempfile.TemporaryDirectory() as tmp:
        cli.main(["-w", tmp, "init"])
        ws = Workspace(tmp)
        assert ws.read_master() == SAMPLE_MASTER_TEX

        cli.main(["-w", tmp, "select", "sec-1-item-0", "--exclude"])
        out = Path(tmp) / "out.tex"
        cli.main(["-w", tmp, "assemble", "-o", str(out)])

        assembled = out.read_text(encoding="utf-8")
        assert "Company Name" not in assembled
        assert "Project Name" in assembled
        assert ws.compiled_path.read_text(encoding="utf-8") == assembled
    print("PASS: cli init/select/assemble")


def test_cli_merge_rejection_exits_nonzero():
    with tempfile.TemporaryDirectory() as tmp:
        ws = _workspace_with(tmp)
        patch_file = Path(tmp) / "answer.txt"
        patch_file.write_text(EVIL_PATCH, encoding="utf-8")

        try:
            cli.main(["-w", tmp, "merge", str(patch_file)])
        except SystemExit as e:
            assert e.code == 1
        else:
            raise AssertionError("Expected SystemExit")
        assert ws.read_master() == RESUME
    print("PASS: cli merge rejection")


def test_cli_write_failure_exits_with_message():
    with tempfile.TemporaryDirectory() as tmp:
        _workspace_with(tmp)
        target = Path(tmp) / "missing-dir" / "out.tex"

        err = io.StringIO()
        try:
            with contextlib.redirect_stderr(err):
                cli.main(["-w", tmp, "assemble", "-o", str(target)])
        except SystemExit as e:
            assert e.code == 1
        else:
            raise AssertionError("Expected SystemExit")

        assert "❌ Error:" in err.getvalue()
        assert "Traceback" not in err.getvalue()
        assert not target.exists()
    print("PASS: cli write failure")


def test_cli_requires_workspace():
    with tempfile.TemporaryDirectory() as tmp:
        try:
            cli.main(["-w", tmp, "sections"])
        except SystemExit as e:
            assert e.code == 1
        else:
            raise AssertionError("Expected SystemExit")
    print("PASS: cli without master")


# ---------------------------------------------------------------------------
# Compiler
# ---------------------------------------------------------------------------

def test_detect_engine_without_latex():
    with mock.patch("retex.compiler.shutil.which", return_value=None), mock.patch.dict(
        os.environ, {"RETEX_COMPILER": ""}
    ):
        assert detect_engine() == "none"
    print("PASS: no engine detected")


def test_detect_engine_prefers_configured():
    def which(name):
        return f"/usr/bin/{name}"

    with mock.patch("retex.compiler.shutil.which", side_effect=which), mock.patch.dict(
        os.environ, {"RETEX_COMPILER": "tectonic"}
    ):
        assert detect_engine() == "tectonic"
    print("PASS: configured engine")


def test_run_compile_without_engine_fails_cleanly():
    with tempfile.TemporaryDirectory() as tmp:
        result = run_compile(tmp, engine="none")
        assert result.success is False
        assert "No LaTeX engine" in result.stderr
    print("PASS: compile without engine")


if __name__ == '__main__':
    tests = [
        test_initialize_writes_template_once,
        test_read_master_missing_raises,
        test_selection_persistence,
        test_snapshot_archives_master_and_patch,
        test_selection_survives_master_edits,
        test_merge_patch_writes_master_and_archives,
        test_rejected_and_dry_run_merges_leave_master_alone,
        test_cli_init_select_assemble,
        test_cli_merge_rejection_exits_nonzero,
        test_cli_requires_workspace,
        test_cli_write_failure_exits_with_message,
        test_detect_engine_without_latex,
        test_detect_engine_prefers_configured,
        test_run_compile_without_engine_fails_cleanly,
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
