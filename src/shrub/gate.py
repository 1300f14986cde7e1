from __future__ import annotations

"""Credential gate.

CONTRACT
- Inputs: Ordered registry of ProviderEntry, env lookup (Mapping, default os.environ)
- Outputs (required):
  - GateReport(enabled, skipped) with registry order preserved in both lists
- Invariants:
  - Entries with an empty credential_var are always enabled
  - Entries with a credential_var are enabled iff the variable is present (value ignored)
  - Each excluded entry yields exactly one SkipNotice naming model and variable
- Failure:
  - None; an empty enabled list is a valid outcome
"""

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from loguru import logger

from .config import ProviderEntry


@dataclass(frozen=True)
class SkipNotice:
    model_id: str
    credential_var: str

    @property
    def message(self) -> str:
        return f"===== Skipping model: {self.model_id} (env var not set: {self.credential_var})"


@dataclass(frozen=True)
class GateReport:
    enabled: list[ProviderEntry] = field(default_factory=list)
    skipped: list[SkipNotice] = field(default_factory=list)


def is_enabled(entry: ProviderEntry, env: Mapping[str, str]) -> bool:
    return not entry.credential_var or entry.credential_var in env


def gate_providers(
    registry: Iterable[ProviderEntry], env: Mapping[str, str] | None = None
) -> GateReport:
    lookup = os.environ if env is None else env
    report = GateReport()
    for entry in registry:
        if is_enabled(entry, lookup):
            report.enabled.append(entry)
            continue
        notice = SkipNotice(entry.model_id, entry.credential_var)
        logger.info(f"Skipping {entry.model_id}: {entry.credential_var} not set")
        report.skipped.append(notice)
    return report


def gated_providers(
    registry: Iterable[ProviderEntry], env: Mapping[str, str] | None = None
) -> list[ProviderEntry]:
    return gate_providers(registry, env).enabled
