"""Response normalization: recover uxntal source from a free-form model reply.

CONTRACT
- Inputs: Raw reply text (or None)
- Outputs (required):
  - Ordered candidates: inner (if a nested ```uxntal block is found), then outer
- Invariants:
  - A string input always yields at least the outer candidate
  - None yields no candidates
  - Candidates are trimmed; fences are removed only at the edges (outer) or
    between the first ```uxntal opener and the next closer (inner)
- Failure:
  - None; an opener without a closer means "no inner candidate"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

FENCE = "```"
LONG_TAG = "uxntal"
SHORT_TAG = "tal"

# Longest tag first so "```uxntal" is never misread as "```" + "uxntal".
_OPENERS = (FENCE + LONG_TAG, FENCE + SHORT_TAG)
_INNER_OPENER = FENCE + LONG_TAG

Origin = Literal["inner", "outer"]


@dataclass(frozen=True)
class Candidate:
    origin: Origin
    source: str


def strip_code_fence(text: str) -> str:
    """Strip a leading tagged opener and a trailing bare closer, then trim."""
    s = text.strip()
    for opener in _OPENERS:
        if s.startswith(opener):
            s = s[len(opener):]
            break
    if s.endswith(FENCE):
        s = s[: -len(FENCE)]
    return s.strip()


def find_inner_block(text: str) -> str | None:
    """Return the body of the first ```uxntal block anywhere in `text`.

    None if there is no opener, or the opener is never closed.
    """
    s = text.strip()
    start = s.find(_INNER_OPENER)
    if start == -1:
        return None
    rest = s[start + len(_INNER_OPENER):]
    end = rest.find(FENCE)
    if end == -1:
        return None
    return rest[:end].strip()


def extract_candidates(text: str | None) -> list[Candidate]:
    if text is None:
        return []
    candidates: list[Candidate] = []
    inner = find_inner_block(text)
    if inner is not None:
        candidates.append(Candidate("inner", inner))
    candidates.append(Candidate("outer", strip_code_fence(text)))
    return candidates
