from __future__ import annotations

"""Filename helpers for model ids.

CONTRACT
- Inputs: Model id (may hold '/', ':' or '::')
- Outputs:
  - safe_filename() returns a name usable as a single path component
- Invariants:
  - Chars outside `[A-Za-z0-9_.-]` become `_`; leading/trailing `._-` are trimmed
- Failure:
  - None; an empty result falls back to `default`
"""

import re

_SAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9_.-]+")


def safe_filename(name: str, *, default: str = "item") -> str:
    cleaned = _SAFE_FILENAME_RE.sub("_", name).strip("._-")
    return cleaned or default
