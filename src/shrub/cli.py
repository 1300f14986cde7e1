"""CLI entrypoint.

Primary mode:
- shrub run

Utilities:
- shrub providers
- shrub extract
- shrub doctor

CONTRACT
- Inputs: Command line arguments (parsed by Typer)
- Outputs (required):
  - Exit code 0 on success, non-zero on failure
  - Console transcript (stdout); logs on stderr
- Invariants:
  - Registry/prompt/run id inputs are validated before any provider is called
  - Batch work is delegated to the orchestrator
- Failure:
  - Invalid arguments raise typer.BadParameter (exit 2)
  - `run --fail-on-error` exits 1 if a provider errored or nothing assembled
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .assembler import UxnasmAssembler
from .config import DEFAULT_REGISTRY, BatchConfig, ProviderEntry, load_registry_file
from .doctor import doctor_report
from .extract import extract_candidates
from .gate import gate_providers
from .orchestrator import BatchResult, run_batch
from .prompts import DEFAULT_QUESTION, DEFAULT_SYSTEM_PROMPT
from .providers.adapters import resolve_adapter
from .providers.base import ChatExecutor
from .providers.openai_compat import OpenAICompatExecutor
from .providers.replay import ReplayExecutor
from .util.ids import validate_run_id
from .validate import Validator

app = typer.Typer(add_completion=False, help="Ask every LLM provider for a uxntal shrub and assemble the answers.")
console = Console(emoji=False)


def _version_callback(value: bool):
    if value:
        from . import __version__

        console.print(f"shrub version: {__version__}")
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version."
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", envvar="SHRUB_LOG_LEVEL", help="Log level for stderr logs."
    ),
):
    _configure_logging(log_level)


_REGISTRY_FILE_OPTION = typer.Option(
    None,
    "--registry-file",
    help="Providers YAML file (default: built-in registry).",
)
_ASSEMBLER_CMD_OPTION = typer.Option(
    "uxnasm",
    "--assembler-cmd",
    help="uxntal assembler binary.",
)


def _load_registry(registry_file: Path | None) -> tuple[ProviderEntry, ...]:
    if registry_file is None:
        return DEFAULT_REGISTRY
    if not registry_file.exists():
        raise typer.BadParameter(f"Registry file not found: {registry_file}")
    try:
        return load_registry_file(registry_file)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _summary_table(result: BatchResult) -> Table:
    table = Table(title=f"shrub run {result.run_id}")
    table.add_column("Model")
    table.add_column("Adapter")
    table.add_column("Status")
    table.add_column("Candidates")
    for p in result.providers:
        verdicts = ", ".join(f"{o.candidate.origin}={o.result}" for o in p.outcomes)
        table.add_row(p.entry.model_id, p.adapter, p.status, verdicts or "-")
    for s in result.skipped:
        table.add_row(s.model_id, "-", "SKIPPED", f"{s.credential_var} not set")
    return table


@app.command()
def run(
    registry_file: Path | None = _REGISTRY_FILE_OPTION,
    prompt_file: Path | None = typer.Option(None, "--prompt-file", help="User prompt file."),
    system: str = typer.Option(DEFAULT_SYSTEM_PROMPT, "--system", help="System prompt."),
    stream: bool = typer.Option(True, "--stream/--no-stream", help="Replay the prompt in streaming mode."),
    hide_question: bool = typer.Option(False, "--hide-question", help="Do not echo the prompt."),
    model: list[str] | None = typer.Option(None, "--model", help="Only run these model ids (repeatable)."),
    assembler_cmd: str = _ASSEMBLER_CMD_OPTION,
    replay_dir: Path | None = typer.Option(None, "--replay-dir", help="Replay saved answers instead of calling providers."),
    report_dir: Path | None = typer.Option(None, "--report-dir", help="Write REPORT.json and answers here."),
    run_id: str | None = typer.Option(None, "--run-id", help="Run id (default: auto)."),
    fail_on_error: bool = typer.Option(False, "--fail-on-error", help="Exit 1 if a provider errored or nothing assembled."),
) -> None:
    """Run the prompt against every enabled provider."""
    registry = _load_registry(registry_file)

    question = DEFAULT_QUESTION
    if prompt_file is not None:
        if not prompt_file.exists():
            raise typer.BadParameter(f"Prompt file not found: {prompt_file}")
        question = prompt_file.read_text(encoding="utf-8")

    if run_id is not None:
        try:
            validate_run_id(run_id)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e

    executor: ChatExecutor
    if replay_dir is not None:
        if not replay_dir.is_dir():
            raise typer.BadParameter(f"Replay dir not found: {replay_dir}")
        executor = ReplayExecutor.from_dir(replay_dir)
    else:
        executor = OpenAICompatExecutor(
            key_vars={e.model_id: e.credential_var for e in registry if e.credential_var}
        )

    cfg = BatchConfig(
        registry=registry,
        question=question,
        system_prompt=system,
        stream=stream,
        show_question=not hide_question,
        only=tuple(model or ()),
        run_id=run_id,
        report_dir=report_dir,
        fail_on_error=fail_on_error,
    )
    validator = Validator(UxnasmAssembler(cmd=assembler_cmd))
    result = asyncio.run(run_batch(cfg, executor=executor, validator=validator, console=console))

    console.print(_summary_table(result))
    if result.report_file:
        console.print(f"Report: {result.report_file}")
    if cfg.fail_on_error and result.failed:
        raise typer.Exit(code=1)


@app.command()
def providers(registry_file: Path | None = _REGISTRY_FILE_OPTION) -> None:
    """List the registry and which providers the credential gate lets through."""
    registry = _load_registry(registry_file)
    gate = gate_providers(registry)
    enabled = {e.model_id for e in gate.enabled}

    table = Table(title="shrub providers")
    table.add_column("Model")
    table.add_column("Adapter")
    table.add_column("Credential")
    table.add_column("Status")
    for entry in registry:
        try:
            adapter = resolve_adapter(entry.model_id).kind
        except ValueError:
            adapter = "unknown"
        status = "[green]enabled[/green]" if entry.model_id in enabled else "[yellow]skipped[/yellow]"
        table.add_row(entry.model_id, adapter, entry.credential_var or "-", status)
    console.print(table)


@app.command()
def extract(
    answer_file: Path = typer.Argument(..., help="Saved model reply."),
    assemble: bool = typer.Option(True, "--assemble/--no-assemble", help="Validate each candidate."),
    assembler_cmd: str = _ASSEMBLER_CMD_OPTION,
) -> None:
    """Extract (and optionally assemble) uxntal candidates from a saved reply."""
    if not answer_file.exists():
        raise typer.BadParameter(f"Answer file not found: {answer_file}")
    text = answer_file.read_text(encoding="utf-8")
    validator = Validator(UxnasmAssembler(cmd=assembler_cmd))
    for candidate in extract_candidates(text):
        console.print(f"--- Extracted TAL Code ({candidate.origin}):", markup=False)
        console.print(candidate.source, markup=False, emoji=False, highlight=False, soft_wrap=True)
        if not assemble:
            continue
        outcome = validator.validate(candidate)
        if outcome.ok:
            console.print("[green]TAL code assembled successfully.[/green]")
        else:
            console.print(f"Error assembling TAL code: {outcome.detail}", markup=False, emoji=False)


@app.command()
def doctor(
    registry_file: Path | None = _REGISTRY_FILE_OPTION,
    assembler_cmd: str = _ASSEMBLER_CMD_OPTION,
) -> None:
    """Environment and credential checks."""
    report = doctor_report(_load_registry(registry_file), assembler_cmd=assembler_cmd)
    table = Table(title="shrub doctor")
    table.add_column("Check")
    table.add_column("Status")
    table.add_column("Details")
    for item in report.items:
        table.add_row(item.name, item.status, item.details)
    console.print(table)
    if report.ok:
        console.print("[green]OK[/green]")
    else:
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
