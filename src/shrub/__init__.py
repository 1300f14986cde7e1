"""shrub package.

Simple API:

    import shrub

    # Ask every enabled provider, extract and assemble the uxntal it returns
    result = shrub.run()

    # Offline: recover candidates from a saved reply
    candidates = shrub.extract_candidates(reply_text)
"""

import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .config import DEFAULT_REGISTRY, BatchConfig, ProviderEntry, load_registry_file
from .extract import Candidate, extract_candidates
from .gate import gate_providers, gated_providers
from .orchestrator import BatchResult, ProviderOutcome, run_batch
from .providers.openai_compat import OpenAICompatExecutor
from .validate import ValidationOutcome, Validator

__version__ = "0.1.0"


def run(
    *,
    registry_file: Optional[str | Path] = None,
    question: Optional[str] = None,
    stream: bool = False,
    report_dir: Optional[str | Path] = None,
) -> dict:
    """Run the batch with the live executor. Returns a structured summary.

    Args:
        registry_file: Optional providers YAML (default: built-in registry)
        question: Optional user prompt (default: the shrub prompt)
        stream: Also replay each prompt in streaming mode
        report_dir: Optional directory for REPORT.json

    Returns:
        dict with keys: run_id, status, skipped, providers, report_file
    """
    registry = load_registry_file(Path(registry_file)) if registry_file else DEFAULT_REGISTRY
    cfg = BatchConfig(registry=registry, stream=stream, report_dir=Path(report_dir) if report_dir else None)
    if question is not None:
        cfg = replace(cfg, question=question)
    executor = OpenAICompatExecutor(
        key_vars={e.model_id: e.credential_var for e in registry if e.credential_var}
    )
    result = asyncio.run(run_batch(cfg, executor=executor))

    return {
        "run_id": result.run_id,
        "status": result.status,
        "skipped": [s.model_id for s in result.skipped],
        "providers": {
            p.entry.model_id: {
                "status": p.status,
                "error": p.error,
                "assembled": [o.candidate.origin for o in p.assembled],
            }
            for p in result.providers
        },
        "report_file": str(result.report_file) if result.report_file else None,
    }


__all__ = [
    "run",
    "run_batch",
    "BatchConfig",
    "BatchResult",
    "Candidate",
    "ProviderEntry",
    "ProviderOutcome",
    "ValidationOutcome",
    "Validator",
    "extract_candidates",
    "gate_providers",
    "gated_providers",
]
