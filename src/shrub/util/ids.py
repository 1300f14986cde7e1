from __future__ import annotations

"""Batch run ids.

CONTRACT
- Inputs: Number of providers that passed the credential gate; user-supplied ids
- Outputs (required):
  - new_run_id(n) -> "YYYYMMDD_HHMMSS_p<n>_<hex4>" (UTC, sorts by start time)
  - validate_run_id() returns the id unchanged or raises
- Invariants:
  - Run ids are single path components matching `[A-Za-z0-9][A-Za-z0-9_.-]{0,63}`
- Failure:
  - Raises ValueError on invalid ids
"""

import datetime
import re
import secrets

_RUN_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,63}$")


def new_run_id(providers: int) -> str:
    ts = datetime.datetime.now(datetime.UTC).strftime("%Y%m%d_%H%M%S")
    return f"{ts}_p{providers}_{secrets.token_hex(2)}"


def validate_run_id(run_id: str) -> str:
    if not _RUN_ID_RE.fullmatch(run_id):
        raise ValueError(
            "Invalid run id (used as a report directory name): 1-64 letters, digits or '._-', "
            "starting with a letter or digit."
        )
    return run_id
