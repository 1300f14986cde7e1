from __future__ import annotations

"""Configuration models.

CONTRACT
- Inputs: YAML registry file path (providers.yaml) or built-in defaults
- Outputs (required):
  - Ordered list of ProviderEntry, validated BatchConfig
- Invariants:
  - Registry order is the display/iteration order
  - Model ids are unique within a registry
  - An empty credential_var marks a provider that is always enabled (local model)
- Failure:
  - Raises ValueError on invalid schema or duplicate model ids
"""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .prompts import DEFAULT_QUESTION, DEFAULT_SYSTEM_PROMPT


@dataclass(frozen=True)
class ProviderEntry:
    model_id: str
    credential_var: str = ""

    @property
    def needs_credential(self) -> bool:
        return bool(self.credential_var)


MODEL_OPENAI = "gpt-4o-mini"
MODEL_ANTHROPIC = "claude-3-haiku-20240307"
MODEL_FIREWORKS = "accounts/fireworks/models/qwen3-30b-a3b"
MODEL_TOGETHER = "together::openai/gpt-oss-20b"
MODEL_GEMINI = "gemini-2.0-flash"
MODEL_GROQ = "llama-3.1-8b-instant"
MODEL_OLLAMA = "codellama:7b"
MODEL_XAI = "grok-3-mini"
MODEL_DEEPSEEK = "deepseek-chat"
MODEL_ZAI = "glm-4-plus"
MODEL_COHERE = "command-r7b-12-2024"

DEFAULT_REGISTRY: tuple[ProviderEntry, ...] = (
    ProviderEntry(MODEL_OPENAI, "OPENAI_API_KEY"),
    ProviderEntry(MODEL_ANTHROPIC, "ANTHROPIC_API_KEY"),
    ProviderEntry(MODEL_GEMINI, "GEMINI_API_KEY"),
    ProviderEntry(MODEL_FIREWORKS, "FIREWORKS_API_KEY"),
    ProviderEntry(MODEL_TOGETHER, "TOGETHER_API_KEY"),
    ProviderEntry(MODEL_GROQ, "GROQ_API_KEY"),
    ProviderEntry(MODEL_XAI, "XAI_API_KEY"),
    ProviderEntry(MODEL_DEEPSEEK, "DEEPSEEK_API_KEY"),
    ProviderEntry(MODEL_OLLAMA, ""),
    ProviderEntry(MODEL_ZAI, "ZAI_API_KEY"),
    ProviderEntry(MODEL_COHERE, "COHERE_API_KEY"),
)


@dataclass(frozen=True)
class BatchConfig:
    registry: tuple[ProviderEntry, ...] = DEFAULT_REGISTRY
    question: str = DEFAULT_QUESTION
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    stream: bool = True
    show_question: bool = True
    only: tuple[str, ...] = field(default_factory=tuple)
    run_id: str | None = None
    report_dir: Path | None = None
    fail_on_error: bool = False

    def selected_registry(self) -> tuple[ProviderEntry, ...]:
        if not self.only:
            return self.registry
        wanted = set(self.only)
        return tuple(e for e in self.registry if e.model_id in wanted)


REGISTRY_SCHEMA = {
    "type": "object",
    "properties": {
        "providers": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "model": {"type": "string", "minLength": 1},
                    "credential_env": {"type": ["string", "null"]},
                },
                "required": ["model"],
            },
        },
    },
    "required": ["providers"],
}


def parse_registry(data: dict) -> tuple[ProviderEntry, ...]:
    import jsonschema  # lazy import

    try:
        jsonschema.validate(instance=data, schema=REGISTRY_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ValueError(f"Invalid registry file schema: {e.message}") from e

    entries: list[ProviderEntry] = []
    seen: set[str] = set()
    for p in data["providers"]:
        model_id = str(p["model"]).strip()
        if model_id in seen:
            raise ValueError(f"Duplicate model in registry: {model_id}")
        seen.add(model_id)
        entries.append(
            ProviderEntry(model_id=model_id, credential_var=str(p.get("credential_env") or "").strip())
        )
    return tuple(entries)


def load_registry_file(path: Path) -> tuple[ProviderEntry, ...]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid registry file YAML: {path}: {e}") from e
    return parse_registry(data)
