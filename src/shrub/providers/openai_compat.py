"""OpenAI-compatible chat executor.

CONTRACT
- Inputs: Model id, ChatRequest
- Outputs (required):
  - RawAnswer with the first choice's text (None when the choice has no content)
  - Streamed content deltas, non-empty fragments only
- Invariants:
  - One AsyncOpenAI client per (adapter kind, credential variable), created lazily and reused
  - aclose() closes every cached client and empties the cache
  - The API key is read from the adapter's credential variable (or a per-model override)
  - Local adapters (no credential variable) get a placeholder key
- Failure:
  - Raises ProviderError on missing key or any SDK error (message redacted)
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import openai
from loguru import logger

from ..util.redaction import Redactor
from .adapters import AdapterTarget, resolve_adapter
from .base import ChatExecutor, ChatRequest, ProviderError, RawAnswer

_LOCAL_API_KEY = "ollama"


@dataclass
class OpenAICompatExecutor(ChatExecutor):
    timeout_s: float = 120.0
    max_retries: int = 2
    # model_id -> env var, for registry entries whose credential differs from the adapter default
    key_vars: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] | None = None
    base_url_overrides: Mapping[str, str] = field(default_factory=dict)
    redactor: Redactor = field(default_factory=Redactor)
    _clients: dict[tuple[str, str], Any] = field(default_factory=dict, init=False, repr=False)

    def adapter_name(self, model_id: str) -> str:
        return resolve_adapter(model_id).kind

    def _key_var(self, model_id: str, target: AdapterTarget) -> str:
        return self.key_vars.get(model_id) or target.credential_var

    def _api_key(self, var: str, target: AdapterTarget) -> str:
        env = os.environ if self.env is None else self.env
        if not var:
            return _LOCAL_API_KEY
        key = env.get(var)
        if not key:
            raise ProviderError(f"Missing env var {var} for {target.kind} API key")
        return key

    def _client_for(self, model_id: str) -> tuple[Any, AdapterTarget]:
        target = resolve_adapter(model_id)
        # Models on one adapter may authenticate with different keys.
        cache_key = (target.kind, self._key_var(model_id, target))
        client = self._clients.get(cache_key)
        if client is None:
            base_url = self.base_url_overrides.get(target.kind, target.base_url)
            logger.debug(f"Creating {target.kind} client at {base_url}")
            client = openai.AsyncOpenAI(
                api_key=self._api_key(cache_key[1], target),
                base_url=base_url,
                timeout=self.timeout_s,
                max_retries=self.max_retries,
            )
            self._clients[cache_key] = client
        return client, target

    async def aclose(self) -> None:
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.close()

    def _error(self, model_id: str, exc: Exception) -> ProviderError:
        return ProviderError(self.redactor.redact(f"{model_id}: {exc}"))

    async def exec_chat(self, model_id: str, request: ChatRequest) -> RawAnswer:
        client, target = self._client_for(model_id)
        try:
            resp = await client.chat.completions.create(
                model=target.model,
                messages=request.as_messages(),
            )
        except openai.OpenAIError as e:
            raise self._error(model_id, e) from e

        text = None
        if resp.choices:
            text = resp.choices[0].message.content
        return RawAnswer(model_id=model_id, text=text, adapter=target.kind)

    async def exec_chat_stream(self, model_id: str, request: ChatRequest) -> AsyncIterator[str]:
        client, target = self._client_for(model_id)
        try:
            stream = await client.chat.completions.create(
                model=target.model,
                messages=request.as_messages(),
                stream=True,
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except openai.OpenAIError as e:
            raise self._error(model_id, e) from e
