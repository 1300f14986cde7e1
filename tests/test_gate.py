from shrub.config import DEFAULT_REGISTRY, ProviderEntry
from shrub.gate import SkipNotice, gate_providers, gated_providers


def test_empty_credential_always_enabled():
    reg = [ProviderEntry("codellama:7b", "")]
    assert gated_providers(reg, env={}) == reg
    assert gated_providers(reg, env={"ANYTHING": "x"}) == reg


def test_credential_present_enables():
    reg = [ProviderEntry("gpt-4o-mini", "OPENAI_API_KEY")]
    # Presence is enough; the value is irrelevant.
    assert gated_providers(reg, env={"OPENAI_API_KEY": ""}) == reg


def test_credential_absent_skips_with_notice():
    reg = [ProviderEntry("gpt-4o-mini", "OPENAI_API_KEY")]
    report = gate_providers(reg, env={})
    assert report.enabled == []
    assert report.skipped == [SkipNotice("gpt-4o-mini", "OPENAI_API_KEY")]
    assert "gpt-4o-mini" in report.skipped[0].message
    assert "OPENAI_API_KEY" in report.skipped[0].message


def test_registry_order_preserved():
    reg = [
        ProviderEntry("c", ""),
        ProviderEntry("a", "KEY_A"),
        ProviderEntry("b", ""),
        ProviderEntry("d", "KEY_D"),
    ]
    report = gate_providers(reg, env={"KEY_D": "1"})
    assert [e.model_id for e in report.enabled] == ["c", "b", "d"]
    assert [s.model_id for s in report.skipped] == ["a"]


def test_default_registry_without_env_keeps_only_local():
    enabled = gated_providers(DEFAULT_REGISTRY, env={})
    assert [e.model_id for e in enabled] == ["codellama:7b"]


def test_uses_process_env_by_default(monkeypatch):
    monkeypatch.setenv("SHRUB_TEST_KEY", "1")
    reg = [ProviderEntry("m", "SHRUB_TEST_KEY")]
    assert gated_providers(reg) == reg
    monkeypatch.delenv("SHRUB_TEST_KEY")
    assert gated_providers(reg) == []
