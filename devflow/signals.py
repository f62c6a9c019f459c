# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines flow control signals used internally by devflow.

These signals are raised to interrupt or redirect a guided workflow without
being treated as traditional exceptions.

All signals inherit from `FlowSignal`, which is a subclass of `BaseException`
to ensure they bypass standard `except Exception` blocks, including the
lifecycle hooks that wrap every step render.

Signals:
- BackSignal: Abort the pending prompt and return to the previous step.
- CancelSignal: Abort the whole command (Ctrl-C / Ctrl-D).
"""


class FlowSignal(BaseException):
    """Base class for all flow control signals in devflow.

    These are not errors. They're used to control flow like going back
    one step or abandoning the command from user input.
    """


class BackSignal(FlowSignal):
    """Raised to abandon the pending prompt in favour of the previous step.

    Only the prompt adapter raises and catches this signal; it never escapes
    a single render.
    """

    def __init__(self, message: str = "Back signal received."):
        super().__init__(message)


class CancelSignal(FlowSignal):
    """Raised to cancel the current command.

    The flow controller never catches it. The CLI entry point translates it
    into a "Cancelled." notice and a successful exit status.
    """

    def __init__(self, message: str = "Cancel signal received."):
        super().__init__(message)
