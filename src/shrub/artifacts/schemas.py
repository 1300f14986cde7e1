from __future__ import annotations

"""Report artifact schemas.

CONTRACT
- Inputs: Pydantic models
- Outputs:
  - Validated JSON-serializable objects for REPORT.json
- Invariants:
  - All schemas have schema_version int field
  - Candidate order within a provider is emission order (inner first)
- Failure:
  - Raises ValidationError on schema mismatch
"""

from typing import Literal

from pydantic import BaseModel, Field


class CandidateReport(BaseModel):
    schema_version: int = 1
    origin: Literal["inner", "outer"]
    source: str
    result: Literal["Assembled", "Failed"]
    detail: str = ""


class ProviderReport(BaseModel):
    schema_version: int = 1
    model: str
    adapter: str = ""
    status: Literal["ANSWERED", "NO_ANSWER", "ERROR"]
    error: str | None = None
    stream_error: str | None = None
    answer_file: str | None = None
    candidates: list[CandidateReport] = Field(default_factory=list)
    assembled_origins: list[str] = Field(default_factory=list)


class SkipReport(BaseModel):
    model: str
    credential_var: str


class BatchReport(BaseModel):
    schema_version: int = 1
    run_id: str
    status: Literal["OK", "DEGRADED", "EMPTY"]
    skipped: list[SkipReport] = Field(default_factory=list)
    providers: list[ProviderReport] = Field(default_factory=list)
