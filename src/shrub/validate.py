from __future__ import annotations

"""Candidate validation.

CONTRACT
- Inputs: Candidate (origin + source)
- Outputs (required):
  - ValidationOutcome(candidate, ok, detail)
- Invariants:
  - Calls the assembler exactly once per candidate with no origin tag; no retries
  - Never modifies the candidate
  - `detail` is the assembler's message passed through unmodified
- Failure:
  - Never raises: every assembler fault becomes a Failed outcome
"""

from dataclasses import dataclass, field

from loguru import logger

from .assembler import Assembler, UxnasmAssembler
from .extract import Candidate


@dataclass(frozen=True)
class ValidationOutcome:
    candidate: Candidate
    ok: bool
    detail: str = ""

    @property
    def result(self) -> str:
        return "Assembled" if self.ok else "Failed"


@dataclass
class Validator:
    assembler: Assembler = field(default_factory=UxnasmAssembler)

    def validate(self, candidate: Candidate) -> ValidationOutcome:
        try:
            self.assembler.assemble(candidate.source, None)
        except Exception as e:  # noqa: BLE001
            logger.info(f"{candidate.origin} candidate failed to assemble: {e}")
            return ValidationOutcome(candidate=candidate, ok=False, detail=str(e))
        return ValidationOutcome(candidate=candidate, ok=True)
