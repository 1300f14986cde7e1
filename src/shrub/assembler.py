from __future__ import annotations

"""Uxntal assembler integration.

CONTRACT
- Inputs: Candidate source text, optional origin/name tag
- Outputs (required):
  - None on success (a .rom was produced)
- Invariants:
  - Source is written verbatim to a scratch .tal file; the caller's string is never changed
  - Scratch files live in a temporary directory removed after each call
- Failure:
  - Raises AssemblerError(detail) when the assembler is missing, times out, or rejects the source
"""

import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from loguru import logger

from .util.paths import safe_filename
from .util.shell import run_cmd, which


class AssemblerError(RuntimeError):
    """Assembler rejected the source (or could not run); str(err) is the detail."""


class Assembler(Protocol):
    def assemble(self, source: str, origin: str | None = None) -> None: ...


@dataclass
class UxnasmAssembler(Assembler):
    cmd: str = "uxnasm"
    timeout_s: float = 30.0

    def available(self) -> bool:
        return which(self.cmd) is not None

    def assemble(self, source: str, origin: str | None = None) -> None:
        exe = which(self.cmd)
        if exe is None:
            raise AssemblerError(f"assembler not found: {self.cmd}")

        name = safe_filename(origin or "candidate", default="candidate")
        with tempfile.TemporaryDirectory(prefix="shrub_asm_") as tmp:
            work = Path(tmp)
            src = work / f"{name}.tal"
            rom = work / f"{name}.rom"
            src.write_text(source, encoding="utf-8")

            res = run_cmd(
                [exe, src.name, rom.name],
                cwd=work,
                stdout_path=work / "assemble.stdout.log",
                stderr_path=work / "assemble.stderr.log",
                timeout_s=self.timeout_s,
            )
            logger.debug(f"{self.cmd} rc={res.returncode} in {res.elapsed_s:.2f}s")
            if res.returncode != 0:
                detail = "\n".join(
                    part.strip() for part in (res.stderr_text, res.stdout_text) if part.strip()
                )
                raise AssemblerError(detail or f"exit code {res.returncode}")
            if not rom.exists():
                raise AssemblerError("assembler reported success but produced no rom")
