import asyncio
import io

import pytest
from rich.console import Console

from devflow.cancellation import CancellationBroker
from devflow.prompts import PromptAdapter


class FakeSession:
    """Stands in for `PromptSession`, answering from a script.

    A `None` entry blocks until the pending prompt is cancelled; an exception
    entry is raised.
    """

    def __init__(self, script, calls, **kwargs):
        self.script = script
        self.calls = calls
        self.kwargs = kwargs
        self.app = None

    async def prompt_async(self, message, **kwargs):
        self.calls.append(
            {
                "label": "".join(text for _, text in message),
                "key_bindings": self.kwargs.get("key_bindings"),
                **kwargs,
            }
        )
        answer = self.script.pop(0)
        if answer is None:
            await asyncio.Event().wait()
        if isinstance(answer, BaseException):
            raise answer
        return answer


@pytest.fixture
def make_adapter():
    """Build a `PromptAdapter` whose prompts answer from `script`."""

    def factory(script, calls=None, broker=None):
        calls = [] if calls is None else calls
        return PromptAdapter(
            broker=broker or CancellationBroker(),
            session_factory=lambda **kwargs: FakeSession(script, calls, **kwargs),
            console=Console(file=io.StringIO(), width=120),
        )

    return factory


@pytest.fixture
def press_back():
    """Signal the broker as soon as a prompt is pending."""

    async def press(broker, after=0, calls=None):
        while broker.occupant is None or (calls is not None and len(calls) < after):
            await asyncio.sleep(0)
        assert broker.signal() is True

    return press
