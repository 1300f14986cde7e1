from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from ..util.paths import safe_filename
from .adapters import resolve_adapter
from .base import ChatExecutor, ChatRequest, ProviderError, RawAnswer

_NO_ANSWER_MARKER = "NO ANSWER"


@dataclass
class ReplayExecutor(ChatExecutor):
    """Offline executor that replays saved answers.

    CONTRACT
    - Inputs: Model id (request is ignored)
    - Outputs:
      - RawAnswer from `answers[model_id]` (None allowed: "no text returned")
      - Streaming replays the same text line by line
    - Invariants:
      - Never touches the network
    - Failure:
      - Raises ProviderError when no answer is recorded for the model
    """

    answers: Mapping[str, str | None] = field(default_factory=dict)

    @classmethod
    def from_dir(cls, directory: Path) -> ReplayExecutor:
        """Load `<safe_filename(model)>.txt` files; a file holding only NO ANSWER maps to None."""
        answers: dict[str, str | None] = {}
        for p in sorted(directory.glob("*.txt")):
            text = p.read_text(encoding="utf-8")
            answers[p.stem] = None if text.strip() == _NO_ANSWER_MARKER else text
        return cls(answers=answers)

    def _lookup(self, model_id: str) -> str | None:
        for key in (model_id, safe_filename(model_id)):
            if key in self.answers:
                return self.answers[key]
        raise ProviderError(f"No recorded answer for model: {model_id}")

    def adapter_name(self, model_id: str) -> str:
        try:
            return resolve_adapter(model_id).kind
        except ValueError:
            return "replay"

    async def aclose(self) -> None:
        return None

    async def exec_chat(self, model_id: str, request: ChatRequest) -> RawAnswer:
        return RawAnswer(
            model_id=model_id, text=self._lookup(model_id), adapter=self.adapter_name(model_id)
        )

    async def exec_chat_stream(self, model_id: str, request: ChatRequest) -> AsyncIterator[str]:
        text = self._lookup(model_id)
        if text is None:
            return
        for line in text.splitlines(keepends=True):
            yield line
