import pytest

from shrub.config import DEFAULT_REGISTRY, BatchConfig, ProviderEntry, load_registry_file


def test_default_registry_shape():
    ids = [e.model_id for e in DEFAULT_REGISTRY]
    assert len(ids) == len(set(ids))
    assert ids[0] == "gpt-4o-mini"
    local = [e for e in DEFAULT_REGISTRY if not e.needs_credential]
    assert [e.model_id for e in local] == ["codellama:7b"]


def test_load_registry_file(tmp_path):
    p = tmp_path / "providers.yaml"
    p.write_text(
        """
providers:
  - model: gpt-4o-mini
    credential_env: OPENAI_API_KEY
  - model: codellama:7b
    credential_env: ""
  - model: llama3.2
"""
    )
    reg = load_registry_file(p)
    assert reg == (
        ProviderEntry("gpt-4o-mini", "OPENAI_API_KEY"),
        ProviderEntry("codellama:7b", ""),
        ProviderEntry("llama3.2", ""),
    )


def test_registry_schema_error(tmp_path):
    p = tmp_path / "providers.yaml"
    p.write_text("providers:\n  - credential_env: X\n")
    with pytest.raises(ValueError, match="Invalid registry file schema"):
        load_registry_file(p)


def test_registry_missing_providers_key(tmp_path):
    p = tmp_path / "providers.yaml"
    p.write_text("")
    with pytest.raises(ValueError, match="Invalid registry file schema"):
        load_registry_file(p)


def test_registry_duplicate_model(tmp_path):
    p = tmp_path / "providers.yaml"
    p.write_text("providers:\n  - model: a\n  - model: a\n")
    with pytest.raises(ValueError, match="Duplicate model"):
        load_registry_file(p)


def test_selected_registry_keeps_order():
    cfg = BatchConfig(
        registry=(ProviderEntry("a"), ProviderEntry("b"), ProviderEntry("c")), only=("c", "a")
    )
    assert [e.model_id for e in cfg.selected_registry()] == ["a", "c"]
    assert BatchConfig().selected_registry() == DEFAULT_REGISTRY


def test_registry_bad_yaml(tmp_path):
    p = tmp_path / "providers.yaml"
    p.write_text("providers: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid registry file YAML"):
        load_registry_file(p)
