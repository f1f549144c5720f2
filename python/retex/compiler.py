"""
Runs a LaTeX engine on compiled.tex. Output goes to build/.
The core never calls this; the CLI and server do.
"""

import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Union

import structlog

from retex.models import CompileResult
from retex.workspace import BUILD_DIR, COMPILED_FILE

logger = structlog.get_logger(__name__)

COMPILER_ENV = "RETEX_COMPILER"
COMPILE_TIMEOUT = 120

# Preference order when nothing is configured
ENGINES: Dict[str, List[str]] = {
    "latexmk": ["latexmk", "-pdf", "-interaction=nonstopmode", f"-output-directory={BUILD_DIR}", COMPILED_FILE],
    "tectonic": ["tectonic", "--outdir", BUILD_DIR, COMPILED_FILE],
    "pdflatex": ["pdflatex", "-interaction=nonstopmode", f"-output-directory={BUILD_DIR}", COMPILED_FILE],
}


def detect_engine() -> str:
    """
    RETEX_COMPILER when set to a known engine on PATH, else the first engine
    found on PATH, else 'none'.
    """
    configured = os.environ.get(COMPILER_ENV)
    if configured:
        if configured in ENGINES and shutil.which(configured):
            return configured
        logger.warning("Configured compiler unavailable, detecting", compiler=configured)

    for name in ENGINES:
        if shutil.which(name):
            return name
    return "none"


def run_compile(cwd: Union[str, Path], engine: Optional[str] = None) -> CompileResult:
    cwd = Path(cwd)
    engine = engine or detect_engine()

    if engine not in ENGINES:
        return CompileResult(success=False, stderr="No LaTeX engine found (install latexmk, tectonic or pdflatex).")

    (cwd / BUILD_DIR).mkdir(parents=True, exist_ok=True)
    command = ENGINES[engine]
    logger.info("Running LaTeX compiler", engine=engine, cwd=str(cwd))

    try:
        proc = subprocess.run(command, cwd=cwd, capture_output=True, text=True, timeout=COMPILE_TIMEOUT)
    except subprocess.TimeoutExpired as e:
        return CompileResult(success=False, stderr=f"Compiler timed out after {e.timeout}s", engine=engine)
    except OSError as e:
        return CompileResult(success=False, stderr=str(e), engine=engine)

    pdf = cwd / BUILD_DIR / (Path(COMPILED_FILE).stem + ".pdf")
    success = proc.returncode == 0
    if not success:
        logger.warning("Compilation failed", engine=engine, returncode=proc.returncode)

    return CompileResult(
        success=success,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
        engine=engine,
        pdf_path=str(pdf) if success and pdf.exists() else None,
    )
