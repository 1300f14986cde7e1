import sys

import pytest

from shrub.util.shell import run_cmd, which

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="POSIX commands")


def test_run_cmd_success(tmp_path):
    stdout = tmp_path / "out.log"
    stderr = tmp_path / "err.log"

    res = run_cmd("echo 'hello'", tmp_path, stdout, stderr)

    assert res.returncode == 0
    assert "hello" in res.stdout_text
    assert res.stdout_bytes > 0
    assert res.elapsed_s >= 0


def test_run_cmd_argv_list(tmp_path):
    res = run_cmd(["echo", "a b"], tmp_path)
    assert res.returncode == 0
    assert res.stdout_text.strip() == "a b"
    assert res.cmd == "echo a b"


def test_run_cmd_failure(tmp_path):
    res = run_cmd("false", tmp_path)
    assert res.returncode != 0


def test_run_cmd_missing_executable(tmp_path):
    res = run_cmd(["definitely-not-a-binary-xyz"], tmp_path)
    assert res.returncode == 127
    assert "Exception" in res.stderr_text


def test_run_cmd_timeout(tmp_path):
    res = run_cmd("sleep 2", tmp_path, timeout_s=0.5)
    assert res.returncode == 124
    assert "Timeout expired" in res.stderr_text


def test_run_cmd_capture_stderr(tmp_path):
    res = run_cmd("echo 'error message' >&2", tmp_path)
    assert res.returncode == 0
    assert "error message" in res.stderr_text
    assert res.stderr_bytes > 0


def test_which():
    assert which("sh") is not None
    assert which("definitely-not-a-binary-xyz") is None
