# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""debug.py"""
from devflow.context import StepContext
from devflow.hook_manager import HookManager, HookType
from devflow.logger import logger


def log_before(context: StepContext):
    """Log the start of a step render."""
    logger.info(
        "[%s:%s] Rendering step %d (back %s)",
        context.flow,
        context.name,
        context.index,
        "disabled" if context.is_first else "enabled",
    )


def log_success(context: StepContext):
    """Log the outcome of a step render."""
    outcome_str = repr(context.outcome)
    if len(outcome_str) > 100:
        outcome_str = f"{outcome_str[:100]} ..."
    logger.debug("[%s:%s] Outcome -> %s", context.flow, context.name, outcome_str)


def log_after(context: StepContext):
    """Log the completion of a render, regardless of outcome."""
    logger.debug("Finished %s", context.to_log_line())


def log_error(context: StepContext):
    """Log an error raised by a step."""
    logger.error(
        "[%s:%s] Error (%s): %s",
        context.flow,
        context.name,
        type(context.exception).__name__,
        context.exception,
        exc_info=context.exception,
    )


def register_debug_hooks(hooks: HookManager):
    hooks.register(HookType.BEFORE, log_before)
    hooks.register(HookType.AFTER, log_after)
    hooks.register(HookType.ON_SUCCESS, log_success)
    hooks.register(HookType.ON_ERROR, log_error)
