from __future__ import annotations

"""Model id -> adapter (provider service) resolution.

CONTRACT
- Inputs: Model id, optionally namespaced as "<kind>::<model>"
- Outputs (required):
  - AdapterTarget(kind, model, base_url, credential_var)
- Invariants:
  - A namespace always wins over name-based rules and is stripped from `model`
  - Name rules: gpt/o1/o3/o4 -> openai, claude -> anthropic, command -> cohere,
    gemini -> gemini, known Groq models -> groq, glm -> zai, grok -> xai,
    deepseek -> deepseek, accounts/fireworks/ -> fireworks, anything else -> ollama
  - Every adapter speaks the OpenAI chat-completions wire format at base_url
- Failure:
  - Raises ValueError on an unknown namespace
"""

from dataclasses import dataclass

ADAPTERS: dict[str, tuple[str, str]] = {
    # kind: (base_url, default credential env var)
    "openai": ("https://api.openai.com/v1", "OPENAI_API_KEY"),
    "anthropic": ("https://api.anthropic.com/v1/", "ANTHROPIC_API_KEY"),
    "gemini": ("https://generativelanguage.googleapis.com/v1beta/openai/", "GEMINI_API_KEY"),
    "fireworks": ("https://api.fireworks.ai/inference/v1", "FIREWORKS_API_KEY"),
    "together": ("https://api.together.xyz/v1", "TOGETHER_API_KEY"),
    "groq": ("https://api.groq.com/openai/v1", "GROQ_API_KEY"),
    "xai": ("https://api.x.ai/v1", "XAI_API_KEY"),
    "deepseek": ("https://api.deepseek.com/v1", "DEEPSEEK_API_KEY"),
    "zai": ("https://api.z.ai/api/paas/v4/", "ZAI_API_KEY"),
    "cohere": ("https://api.cohere.ai/compatibility/v1", "COHERE_API_KEY"),
    "ollama": ("http://localhost:11434/v1", ""),
}

GROQ_MODELS = frozenset(
    {
        "llama-3.1-8b-instant",
        "llama-3.3-70b-versatile",
        "llama3-8b-8192",
        "llama3-70b-8192",
        "gemma2-9b-it",
        "mixtral-8x7b-32768",
        "meta-llama/llama-4-scout-17b-16e-instruct",
        "meta-llama/llama-4-maverick-17b-128e-instruct",
    }
)

_NAMESPACE_SEP = "::"


@dataclass(frozen=True)
class AdapterTarget:
    kind: str
    model: str
    base_url: str
    credential_var: str


def _kind_for_name(model: str) -> str:
    if model.startswith(("gpt", "o1", "o3", "o4", "chatgpt")):
        return "openai"
    if model.startswith("claude"):
        return "anthropic"
    if model.startswith("command"):
        return "cohere"
    if model.startswith("gemini"):
        return "gemini"
    if model in GROQ_MODELS:
        return "groq"
    if model.startswith("glm"):
        return "zai"
    if model.startswith("grok"):
        return "xai"
    if model.startswith("deepseek"):
        return "deepseek"
    if model.startswith("accounts/fireworks/"):
        return "fireworks"
    return "ollama"


def resolve_adapter(model_id: str) -> AdapterTarget:
    if _NAMESPACE_SEP in model_id:
        kind, model = model_id.split(_NAMESPACE_SEP, 1)
        kind = kind.strip().lower()
        if kind not in ADAPTERS:
            raise ValueError(f"Unknown adapter namespace '{kind}' in model id: {model_id}")
        # "fireworks::qwen3" is shorthand for the fully qualified fireworks model path.
        if kind == "fireworks" and "/" not in model:
            model = f"accounts/fireworks/models/{model}"
    else:
        model = model_id
        kind = _kind_for_name(model)
    base_url, credential_var = ADAPTERS[kind]
    return AdapterTarget(kind=kind, model=model, base_url=base_url, credential_var=credential_var)
