import json
import sys

import pytest
from typer.testing import CliRunner

from shrub.cli import app

runner = CliRunner()

FAKE_UXNASM = """#!/bin/sh
if grep -q BRK "$1"; then printf 'rom' > "$2"; exit 0; fi
echo "Assembly: Unknown token" >&2
exit 1
"""


@pytest.fixture
def fake_uxnasm(tmp_path):
    if sys.platform == "win32":
        pytest.skip("uses a POSIX shell script as assembler")
    exe = tmp_path / "uxnasm"
    exe.write_text(FAKE_UXNASM)
    exe.chmod(0o755)
    return str(exe)


@pytest.fixture
def registry_file(tmp_path):
    p = tmp_path / "providers.yaml"
    p.write_text(
        "providers:\n"
        "  - model: gpt-4o-mini\n"
        "    credential_env: SHRUB_TEST_MISSING_KEY\n"
        "  - model: codellama:7b\n"
        "    credential_env: ''\n"
    )
    return p


@pytest.fixture
def replay_dir(tmp_path):
    d = tmp_path / "answers"
    d.mkdir()
    (d / "codellama_7b.txt").write_text("Here it is ```uxntal\n( shrub )\n|0100 BRK\n``` enjoy")
    return d


def test_cli_help():
    res = runner.invoke(app, ["--help"])
    assert res.exit_code == 0
    assert "uxntal shrub" in res.stdout


def test_cli_version():
    res = runner.invoke(app, ["--version"])
    assert res.exit_code == 0
    assert "shrub version" in res.stdout


@pytest.mark.parametrize("cmd", ["run", "providers", "extract", "doctor"])
def test_subcommand_help(cmd):
    res = runner.invoke(app, [cmd, "--help"])
    assert res.exit_code == 0


def test_run_with_replay(tmp_path, registry_file, replay_dir, fake_uxnasm):
    res = runner.invoke(
        app,
        [
            "run",
            "--registry-file", str(registry_file),
            "--replay-dir", str(replay_dir),
            "--assembler-cmd", fake_uxnasm,
            "--report-dir", str(tmp_path / "reports"),
            "--run-id", "cli_run",
            "--hide-question",
        ],
    )
    assert res.exit_code == 0, res.stdout
    assert "Skipping model: gpt-4o-mini (env var not set: SHRUB_TEST_MISSING_KEY)" in res.stdout
    assert "MODEL: codellama:7b (ollama)" in res.stdout
    assert "TAL code assembled successfully." in res.stdout
    assert "--- Question:" not in res.stdout

    report = json.loads((tmp_path / "reports" / "cli_run" / "REPORT.json").read_text())
    assert report["providers"][0]["assembled_origins"] == ["inner"]


def test_run_fail_on_error(tmp_path, registry_file, fake_uxnasm):
    empty = tmp_path / "empty"
    empty.mkdir()
    res = runner.invoke(
        app,
        [
            "run",
            "--registry-file", str(registry_file),
            "--replay-dir", str(empty),
            "--assembler-cmd", fake_uxnasm,
            "--no-stream",
            "--fail-on-error",
        ],
    )
    assert res.exit_code == 1
    assert "Provider codellama:7b errored" in res.stdout


def test_run_bad_registry(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("providers: nope\n")
    res = runner.invoke(app, ["run", "--registry-file", str(bad)])
    assert res.exit_code == 2


def test_run_bad_run_id(registry_file):
    res = runner.invoke(app, ["run", "--registry-file", str(registry_file), "--run-id", "bad id"])
    assert res.exit_code == 2


def test_providers_table(registry_file):
    res = runner.invoke(app, ["providers", "--registry-file", str(registry_file)])
    assert res.exit_code == 0
    assert "codellama:7b" in res.stdout
    assert "enabled" in res.stdout
    assert "skipped" in res.stdout


def test_extract_no_assemble(tmp_path):
    f = tmp_path / "reply.txt"
    f.write_text("```uxntal\n|0100 BRK\n```")
    res = runner.invoke(app, ["extract", str(f), "--no-assemble"])
    assert res.exit_code == 0
    assert "Extracted TAL Code (inner)" in res.stdout
    assert "Extracted TAL Code (outer)" in res.stdout
    assert "assembled" not in res.stdout


def test_extract_prints_emoji_codes_verbatim(tmp_path):
    f = tmp_path / "reply.txt"
    f.write_text("( shrub :o: ) |0100 BRK")
    res = runner.invoke(app, ["extract", str(f), "--no-assemble"])
    assert res.exit_code == 0
    assert "( shrub :o: ) |0100 BRK" in res.stdout


def test_extract_assemble(tmp_path, fake_uxnasm):
    f = tmp_path / "reply.txt"
    f.write_text("|0100 #01")
    res = runner.invoke(app, ["extract", str(f), "--assembler-cmd", fake_uxnasm])
    assert res.exit_code == 0
    assert "Error assembling TAL code: Assembly: Unknown token" in res.stdout


def test_doctor_smoke(registry_file):
    res = runner.invoke(app, ["doctor", "--registry-file", str(registry_file)])
    # codellama:7b needs no credential, so at least one provider is enabled.
    assert res.exit_code == 0
    assert "shrub doctor" in res.stdout
