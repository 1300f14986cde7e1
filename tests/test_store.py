import pytest

from shrub.artifacts.schemas import BatchReport
from shrub.artifacts.store import ArtifactStore


def test_store_path_ok(tmp_path):
    store = ArtifactStore(tmp_path / "runs")
    p = store.path("answers", "file.txt")
    assert p == tmp_path / "runs" / "answers" / "file.txt"


def test_store_path_traversal(tmp_path):
    store = ArtifactStore(tmp_path / "runs")

    with pytest.raises(ValueError, match="Refusing to access path"):
        store.path("..", "secret.txt")

    with pytest.raises(ValueError, match="Refusing to access path"):
        store.path("answers", "../../secret.txt")


def test_store_ensure(tmp_path):
    store = ArtifactStore(tmp_path / "runs")
    assert not (tmp_path / "runs").exists()
    store.ensure()
    assert (tmp_path / "runs" / "answers").is_dir()


def test_write_answer_sanitizes_model(tmp_path):
    store = ArtifactStore(tmp_path)
    p = store.write_answer("together::openai/gpt-oss-20b", "hi")
    assert p.parent == tmp_path / "answers"
    assert p.name == "together_openai_gpt-oss-20b.txt"
    assert p.read_text() == "hi"


def test_write_report_roundtrip(tmp_path):
    store = ArtifactStore(tmp_path)
    store.write_report(BatchReport(run_id="r1", status="EMPTY"))
    data = store.read_json("REPORT.json")
    assert data["run_id"] == "r1"
    assert data["providers"] == []
