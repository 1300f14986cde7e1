import io

import pytest
from rich.console import Console

from shrub.assembler import AssemblerError
from shrub.providers.base import ProviderError, RawAnswer


class ScriptedExecutor:
    """Answers from a dict; records every call so tests can assert on order."""

    def __init__(self, answers=None, errors=None, stream_errors=None):
        self.answers = answers or {}
        self.errors = errors or {}
        self.stream_errors = stream_errors or {}
        self.calls = []
        self.closed = 0

    def adapter_name(self, model_id):
        return "fake"

    async def aclose(self):
        self.closed += 1

    async def exec_chat(self, model_id, request):
        self.calls.append(("chat", model_id, request))
        if model_id in self.errors:
            raise self.errors[model_id]
        if model_id not in self.answers:
            raise ProviderError(f"no answer scripted for {model_id}")
        return RawAnswer(model_id=model_id, text=self.answers[model_id], adapter="fake")

    async def exec_chat_stream(self, model_id, request):
        self.calls.append(("stream", model_id, request))
        if model_id in self.stream_errors:
            raise self.stream_errors[model_id]
        text = self.answers.get(model_id)
        if text:
            for line in text.splitlines(keepends=True):
                yield line


class FakeAssembler:
    """Accepts any source that ends with BRK; records what it was given."""

    def __init__(self):
        self.calls = []

    def assemble(self, source, origin=None):
        self.calls.append((source, origin))
        if not source.rstrip().endswith("BRK"):
            raise AssemblerError(f"Assembly: Unknown token ({len(source)} bytes)")


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)


@pytest.fixture
def fake_assembler():
    return FakeAssembler()


@pytest.fixture
def make_executor():
    return ScriptedExecutor
