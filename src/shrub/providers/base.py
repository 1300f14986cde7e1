from __future__ import annotations

"""Chat executor protocol definition.

CONTRACT
- Inputs: Model id, ChatRequest (ordered system + user turns)
- Outputs (required):
  - exec_chat -> RawAnswer (text may be None: "no text returned")
  - exec_chat_stream -> async iterator of text fragments (finite, not restartable)
- Invariants:
  - The same ChatRequest is replayed unchanged for every provider and both modes
  - The system turn always precedes the user turn
  - aclose() releases transport resources; the executor may be reused afterwards
- Failure:
  - Raises ProviderError on transport/auth/timeout faults
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Literal, Protocol

Role = Literal["system", "user"]


class ProviderError(RuntimeError):
    """Raised when a chat executor cannot produce an answer."""


@dataclass(frozen=True)
class ChatTurn:
    role: Role
    text: str


@dataclass(frozen=True)
class ChatRequest:
    turns: tuple[ChatTurn, ...]

    @classmethod
    def build(cls, system: str, user: str) -> ChatRequest:
        return cls(turns=(ChatTurn("system", system), ChatTurn("user", user)))

    def as_messages(self) -> list[dict[str, str]]:
        return [{"role": t.role, "content": t.text} for t in self.turns]


@dataclass(frozen=True)
class RawAnswer:
    model_id: str
    text: str | None
    adapter: str = ""


class ChatExecutor(Protocol):
    async def exec_chat(self, model_id: str, request: ChatRequest) -> RawAnswer: ...

    def exec_chat_stream(self, model_id: str, request: ChatRequest) -> AsyncIterator[str]: ...

    def adapter_name(self, model_id: str) -> str: ...

    async def aclose(self) -> None: ...
