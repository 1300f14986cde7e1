from __future__ import annotations

"""Redaction of API keys from provider error text.

CONTRACT
- Inputs: text strings
- Outputs:
  - redacted text string
- Invariants:
  - Replaces known key shapes (OpenAI, Anthropic, Groq, xAI, Google) with [REDACTED]
  - Best-effort; does not guarantee all secrets are caught
- Failure:
  - None (returns original text when nothing matches)
"""

import re
from dataclasses import dataclass, field

DEFAULT_PATTERNS = [
    re.compile(r"sk-ant-[A-Za-z0-9_-]{20,}"),
    re.compile(r"sk-[A-Za-z0-9_-]{20,}"),
    re.compile(r"gsk_[A-Za-z0-9]{20,}"),
    re.compile(r"xai-[A-Za-z0-9]{20,}"),
    re.compile(r"AIza[A-Za-z0-9_-]{30,}"),
    re.compile(r"fw_[A-Za-z0-9]{20,}"),
]


@dataclass(frozen=True)
class Redactor:
    patterns: list[re.Pattern] = field(default_factory=lambda: list(DEFAULT_PATTERNS))

    def redact(self, text: str) -> str:
        out = text
        for pat in self.patterns:
            out = pat.sub("[REDACTED]", out)
        return out
