"""
Devflow CLI

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .cancellation import CancellationBroker, CancellationHandle, get_broker
from .flow import BaseStep, Flow, FlowState, PromptStep, Step, run_steps
from .outcomes import Back, Next
from .prompts import BACK, PromptAdapter, PromptKind, PromptOptions
from .signals import CancelSignal
from .version import __version__

__all__ = [
    "BACK",
    "BaseStep",
    "Back",
    "CancelSignal",
    "CancellationBroker",
    "CancellationHandle",
    "Flow",
    "FlowState",
    "Next",
    "PromptAdapter",
    "PromptKind",
    "PromptOptions",
    "PromptStep",
    "Step",
    "__version__",
    "get_broker",
    "run_steps",
]
