from .base import ChatExecutor, ChatRequest, ChatTurn, ProviderError, RawAnswer
from .openai_compat import OpenAICompatExecutor
from .replay import ReplayExecutor

__all__ = [
    "ChatExecutor",
    "ChatRequest",
    "ChatTurn",
    "OpenAICompatExecutor",
    "ProviderError",
    "RawAnswer",
    "ReplayExecutor",
]
