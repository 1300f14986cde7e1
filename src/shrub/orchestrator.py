from __future__ import annotations

"""Batch orchestrator: one prompt, every enabled provider, extract + assemble.

CONTRACT
- Inputs: BatchConfig, ChatExecutor, Validator, console, env lookup
- Outputs (required):
  - BatchResult (skipped notices, one ProviderOutcome per enabled provider)
  - Console transcript: raw answer, candidates, verdicts, streamed tokens
- Outputs (optional):
  - <report_dir>/<run_id>/REPORT.json, events.jsonl, answers/*.txt
- Invariants:
  - Providers run strictly sequentially in registry order
  - Exactly one RawAnswer attempt per enabled provider; validation only for text answers
  - Streaming is display-only and never feeds extraction or validation
  - A failing provider (executor fault, stream fault) never stops the batch
  - executor.aclose() is awaited once after the provider loop, even on error
- Failure:
  - Executor faults become ProviderOutcome.error; stream faults become stream_error
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger
from rich.console import Console

from .artifacts.schemas import BatchReport, CandidateReport, ProviderReport, SkipReport
from .artifacts.store import ArtifactStore
from .config import BatchConfig, ProviderEntry
from .extract import extract_candidates
from .gate import SkipNotice, gate_providers
from .providers.base import ChatExecutor, ChatRequest, RawAnswer
from .util.events import EventLog
from .util.ids import new_run_id, validate_run_id
from .util.redaction import Redactor
from .validate import ValidationOutcome, Validator


@dataclass
class ProviderOutcome:
    entry: ProviderEntry
    adapter: str = ""
    answer: RawAnswer | None = None
    outcomes: list[ValidationOutcome] = field(default_factory=list)
    error: str | None = None
    stream_error: str | None = None

    @property
    def status(self) -> str:
        if self.error is not None:
            return "ERROR"
        if self.answer is None or self.answer.text is None:
            return "NO_ANSWER"
        return "ANSWERED"

    @property
    def assembled(self) -> list[ValidationOutcome]:
        return [o for o in self.outcomes if o.ok]


@dataclass(frozen=True)
class BatchResult:
    run_id: str
    skipped: list[SkipNotice]
    providers: list[ProviderOutcome]
    report_file: Path | None = None

    @property
    def status(self) -> str:
        if not self.providers:
            return "EMPTY"
        if any(p.error is not None for p in self.providers):
            return "DEGRADED"
        return "OK"

    @property
    def failed(self) -> bool:
        """True if a provider errored or nothing assembled anywhere."""
        if any(p.error is not None for p in self.providers):
            return True
        return bool(self.providers) and not any(p.assembled for p in self.providers)


def _out(console: Console, text: str = "", **kwargs) -> None:
    # uxntal is full of [brackets] and :colons:; rich must not read them as markup or emoji codes.
    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True, **kwargs)


def _adapter_label(executor: ChatExecutor, model_id: str) -> str:
    try:
        return executor.adapter_name(model_id)
    except ValueError:
        return "unknown"


async def _stream_answer(
    executor: ChatExecutor, entry: ProviderEntry, request: ChatRequest, console: Console
) -> None:
    _out(console, "\n--- Answer: (streaming)")
    async for fragment in executor.exec_chat_stream(entry.model_id, request):
        _out(console, fragment, end="")
    _out(console)


async def _run_provider(
    entry: ProviderEntry,
    *,
    cfg: BatchConfig,
    request: ChatRequest,
    executor: ChatExecutor,
    validator: Validator,
    console: Console,
    ev: EventLog,
    redactor: Redactor,
) -> ProviderOutcome:
    outcome = ProviderOutcome(entry=entry, adapter=_adapter_label(executor, entry.model_id))
    _out(console, f"\n===== MODEL: {entry.model_id} ({outcome.adapter}) =====")
    if cfg.show_question:
        _out(console, f"\n--- Question:\n{cfg.question}")

    ev.emit(stage="provider", action="exec_chat", model=entry.model_id)
    try:
        outcome.answer = await executor.exec_chat(entry.model_id, request)
    except Exception as e:  # noqa: BLE001
        outcome.error = redactor.redact(str(e)) or type(e).__name__
        logger.warning(f"Provider {entry.model_id} errored: {outcome.error}")
        ev.emit(stage="provider", action="error", model=entry.model_id, error=outcome.error)
        _out(console, f"\n!!!!! Provider {entry.model_id} errored: {outcome.error}")
        return outcome

    text = outcome.answer.text
    _out(console, "\n--- Answer:")
    _out(console, text if text is not None else "NO ANSWER")

    if text is None:
        logger.info(f"{entry.model_id} returned no text")
        _out(console, "No text answer to extract TAL code from.")
    else:
        for candidate in extract_candidates(text):
            _out(console, f"\n--- Extracted TAL Code ({candidate.origin}):\n{candidate.source}")
            result = validator.validate(candidate)
            outcome.outcomes.append(result)
            if result.ok:
                _out(console, "TAL code assembled successfully.")
            else:
                _out(console, f"Error assembling TAL code: {result.detail}")
            ev.emit(
                stage="validate",
                action=result.result.lower(),
                model=entry.model_id,
                origin=candidate.origin,
            )

    if cfg.stream:
        try:
            await _stream_answer(executor, entry, request, console)
        except Exception as e:  # noqa: BLE001
            outcome.stream_error = redactor.redact(str(e)) or type(e).__name__
            logger.warning(f"Streaming failed for {entry.model_id}: {outcome.stream_error}")
            _out(console, f"\n!!!!! Streaming failed for {entry.model_id}: {outcome.stream_error}")

    return outcome


def _provider_report(p: ProviderOutcome, answer_file: Path | None) -> ProviderReport:
    return ProviderReport(
        model=p.entry.model_id,
        adapter=p.adapter,
        status=p.status,
        error=p.error,
        stream_error=p.stream_error,
        answer_file=str(answer_file) if answer_file else None,
        candidates=[
            CandidateReport(
                origin=o.candidate.origin,
                source=o.candidate.source,
                result=o.result,
                detail=o.detail,
            )
            for o in p.outcomes
        ],
        assembled_origins=[o.candidate.origin for o in p.assembled],
    )


def _write_report(store: ArtifactStore, result: BatchResult) -> Path:
    providers: list[ProviderReport] = []
    for p in result.providers:
        answer_file = None
        if p.answer is not None and p.answer.text is not None:
            answer_file = store.write_answer(p.entry.model_id, p.answer.text)
        providers.append(_provider_report(p, answer_file))
    report = BatchReport(
        run_id=result.run_id,
        status=result.status,
        skipped=[SkipReport(model=s.model_id, credential_var=s.credential_var) for s in result.skipped],
        providers=providers,
    )
    return store.write_report(report)


async def run_batch(
    cfg: BatchConfig,
    *,
    executor: ChatExecutor,
    validator: Validator | None = None,
    console: Console | None = None,
    env: Mapping[str, str] | None = None,
) -> BatchResult:
    gate = gate_providers(cfg.selected_registry(), env)
    run_id = validate_run_id(cfg.run_id or new_run_id(len(gate.enabled)))
    validator = validator or Validator()
    console = console or Console(emoji=False)
    redactor = Redactor()

    store = None
    if cfg.report_dir is not None:
        store = ArtifactStore(cfg.report_dir / run_id)
        store.ensure()
    ev = EventLog(store.path("events.jsonl") if store else None, run_id=run_id)

    request = ChatRequest.build(cfg.system_prompt, cfg.question)
    for notice in gate.skipped:
        _out(console, notice.message)
        ev.emit(stage="gate", action="skip", model=notice.model_id, env_var=notice.credential_var)

    if not gate.enabled:
        logger.info("No providers enabled; nothing to do")

    outcomes: list[ProviderOutcome] = []
    try:
        for entry in gate.enabled:
            outcomes.append(
                await _run_provider(
                    entry,
                    cfg=cfg,
                    request=request,
                    executor=executor,
                    validator=validator,
                    console=console,
                    ev=ev,
                    redactor=redactor,
                )
            )
            _out(console)
    finally:
        await executor.aclose()

    result = BatchResult(run_id=run_id, skipped=gate.skipped, providers=outcomes)
    ev.emit(stage="batch", action="done", status=result.status)
    if store is not None:
        report_file = _write_report(store, result)
        result = BatchResult(
            run_id=run_id, skipped=gate.skipped, providers=outcomes, report_file=report_file
        )
    return result
