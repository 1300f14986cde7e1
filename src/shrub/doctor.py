from __future__ import annotations

"""Environment health checks.

CONTRACT
- Inputs: Provider registry, assembler command, env lookup
- Outputs (required):
  - DoctorReport (ok=bool, items=[(name, status, details)])
- Invariants:
  - Checks: assembler binary, adapter resolution, each credential variable, enabled count
  - Read-only (never calls a provider)
- Failure:
  - Returns DoctorReport with ok=False if no provider is enabled or a model id cannot be resolved
"""

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from .config import ProviderEntry
from .gate import is_enabled
from .providers.adapters import resolve_adapter
from .util.shell import which


@dataclass(frozen=True)
class DoctorItem:
    name: str
    status: str
    details: str


@dataclass(frozen=True)
class DoctorReport:
    ok: bool
    items: list[DoctorItem]


def doctor_report(
    registry: Sequence[ProviderEntry],
    assembler_cmd: str = "uxnasm",
    env: Mapping[str, str] | None = None,
) -> DoctorReport:
    lookup = os.environ if env is None else env
    items: list[DoctorItem] = []
    ok = True

    # Not critical: missing assembler makes every candidate fail, but the batch still runs.
    asm_bin = which(assembler_cmd)
    if asm_bin:
        items.append(DoctorItem("assembler", "OK", asm_bin))
    else:
        items.append(
            DoctorItem("assembler", "WARN", f"{assembler_cmd} not found; every candidate will fail")
        )

    enabled = 0
    for entry in registry:
        try:
            adapter = resolve_adapter(entry.model_id).kind
        except ValueError as e:
            ok = False
            items.append(DoctorItem(entry.model_id, "FAIL", str(e)))
            continue
        if not entry.needs_credential:
            enabled += 1
            items.append(DoctorItem(entry.model_id, "OK", f"{adapter}; no credential required"))
        elif is_enabled(entry, lookup):
            enabled += 1
            items.append(DoctorItem(entry.model_id, "OK", f"{adapter}; {entry.credential_var} set"))
        else:
            items.append(
                DoctorItem(entry.model_id, "SKIP", f"{adapter}; {entry.credential_var} not set")
            )

    if enabled == 0:
        ok = False
        items.append(DoctorItem("providers", "FAIL", "no provider enabled"))
    else:
        items.append(DoctorItem("providers", "OK", f"{enabled}/{len(registry)} enabled"))

    return DoctorReport(ok=ok, items=items)
