from __future__ import annotations

"""Subprocess execution for external tools (the uxn assembler).

CONTRACT
- Inputs: Command (str or argv list), cwd, timeout
- Outputs (required):
  - CmdResult(returncode, stdout_path, stderr_path)
- Invariants:
  - Writes stdout/stderr to files (temp files when no path is given)
  - Respects timeout_s (returncode 124 if exceeded)
- Failure:
  - Returns CmdResult with exit code (does NOT raise on non-zero exit)
"""

import os
import subprocess
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path


def which(cmd: str) -> str | None:
    if os.sep in cmd:
        p = Path(cmd)
        return str(p) if p.exists() and os.access(p, os.X_OK) else None
    for p in os.environ.get("PATH", "").split(os.pathsep):
        candidate = Path(p) / cmd
        if candidate.exists() and os.access(candidate, os.X_OK):
            return str(candidate)
    return None


@dataclass(frozen=True)
class CmdResult:
    cmd: str
    returncode: int
    stdout_path: Path
    stderr_path: Path
    elapsed_s: float
    stdout_bytes: int
    stderr_bytes: int

    @property
    def stdout_text(self) -> str:
        return self.stdout_path.read_text(encoding="utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr_path.read_text(encoding="utf-8", errors="replace")


def _temp_log(prefix: str) -> Path:
    tf = tempfile.NamedTemporaryFile(delete=False, prefix=prefix)
    tf.close()
    return Path(tf.name)


def run_cmd(
    cmd: str | list[str],
    cwd: Path,
    stdout_path: Path | None = None,
    stderr_path: Path | None = None,
    env: dict[str, str] | None = None,
    timeout_s: float | None = None,
) -> CmdResult:
    """Run a command and store stdout/stderr to files.

    CONTRACT:
    - Accepts cmd as str (run with shell=True) or list[str] (run with shell=False).
    - Never raises for non-zero exit; caller inspects return code.
    - Records duration and output size.
    """
    if stdout_path is None:
        stdout_path = _temp_log("shrub_stdout_")
    if stderr_path is None:
        stderr_path = _temp_log("shrub_stderr_")

    stdout_path.parent.mkdir(parents=True, exist_ok=True)
    stderr_path.parent.mkdir(parents=True, exist_ok=True)

    use_shell = isinstance(cmd, str)

    start_t = time.time()
    with (
        stdout_path.open("w", encoding="utf-8") as out_f,
        stderr_path.open("w", encoding="utf-8") as err_f,
    ):
        try:
            p = subprocess.run(
                cmd,
                cwd=str(cwd),
                shell=use_shell,
                env=(os.environ | env) if env else None,
                stdout=out_f,
                stderr=err_f,
                timeout=timeout_s,
                text=True,
            )
            rc = p.returncode
        except subprocess.TimeoutExpired:
            rc = 124
            err_f.write("\nTimeout expired.\n")
        except OSError as e:
            rc = 127
            err_f.write(f"\nException: {e}\n")

    end_t = time.time()

    out_b = stdout_path.stat().st_size if stdout_path.exists() else 0
    err_b = stderr_path.stat().st_size if stderr_path.exists() else 0

    return CmdResult(
        cmd=cmd if isinstance(cmd, str) else " ".join(cmd),
        returncode=rc,
        stdout_path=stdout_path,
        stderr_path=stderr_path,
        elapsed_s=end_t - start_t,
        stdout_bytes=out_b,
        stderr_bytes=err_b,
    )
