# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Routes the "go back" key-press to whichever prompt is currently pending.

The `CancellationBroker` owns a single slot holding the `CancellationHandle`
of the prompt that is awaiting input, if any. Its prompt_toolkit key bindings
listen for one designated key (Escape by default). When the key is pressed the
occupant of the slot is cancelled; when the slot is empty the key-press has no
effect.

The slot is deliberately a single entry and not a registry: devflow renders
exactly one prompt at a time. A second claim while the slot is occupied raises
`BrokerBusyError` instead of silently replacing the first prompt, so running
two flows concurrently in one process fails loudly.

Usage:
    broker = CancellationBroker()
    handle = CancellationHandle("scope", on_cancel=task.cancel)
    with broker.pending(handle):
        await task

Only prompts rendered with back navigation enabled merge `broker.key_bindings`
into their session. Every other prompt never sees the binding, so the key keeps
its normal meaning there.
"""
from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Callable, Iterator

from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.key_binding.key_processor import KeyPressEvent

from devflow.exceptions import BrokerBusyError
from devflow.logger import logger


class CancellationHandle:
    """The cancellable side of one pending prompt.

    Args:
        name (str): Label used in log messages, usually the step id.
        on_cancel (Callable[[], None]): Invoked once on the first `cancel()`.
    """

    def __init__(self, name: str, on_cancel: Callable[[], None]) -> None:
        self.name = name
        self._on_cancel = on_cancel
        self.cancelled: bool = False

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        self._on_cancel()

    def __repr__(self) -> str:
        return f"CancellationHandle(name={self.name!r}, cancelled={self.cancelled})"


class CancellationBroker:
    """
    Turns one key-press into a cancellation of the currently pending prompt.

    Args:
        key (str): prompt_toolkit key name to listen for. Defaults to "escape".
    """

    def __init__(self, key: str = "escape") -> None:
        self.key = key
        self._slot: CancellationHandle | None = None
        self._key_bindings: KeyBindings | None = None

    @property
    def key_bindings(self) -> KeyBindings:
        """The listener, attached lazily on first use and then reused."""
        if self._key_bindings is None:
            self._key_bindings = self._attach()
        return self._key_bindings

    @property
    def attached(self) -> bool:
        return self._key_bindings is not None

    @property
    def occupant(self) -> CancellationHandle | None:
        return self._slot

    def _attach(self) -> KeyBindings:
        key_bindings = KeyBindings()

        @key_bindings.add(self.key, eager=True)
        def _(_: KeyPressEvent) -> None:
            self.signal()

        logger.debug("Cancellation listener attached to '%s'.", self.key)
        return key_bindings

    def claim(self, handle: CancellationHandle) -> None:
        if self._slot is not None:
            raise BrokerBusyError(
                f"Cannot register '{handle.name}': prompt '{self._slot.name}' is "
                "still pending. Only one prompt may await input at a time."
            )
        self._slot = handle

    def release(self, handle: CancellationHandle) -> None:
        if self._slot is handle:
            self._slot = None

    @contextmanager
    def pending(self, handle: CancellationHandle) -> Iterator[CancellationHandle]:
        """Occupy the slot for the duration of one render."""
        self.claim(handle)
        try:
            yield handle
        finally:
            self.release(handle)

    def signal(self) -> bool:
        """Cancel the pending prompt. Returns False when nothing is pending."""
        handle = self._slot
        if handle is None:
            return False
        logger.debug("Cancelling pending prompt '%s'.", handle.name)
        handle.cancel()
        return True


@functools.cache
def get_broker() -> CancellationBroker:
    """Return the process-wide broker, constructing it on first use."""
    return CancellationBroker()
