# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `PromptAdapter`, the single entry point devflow uses to ask the user
anything.

Each render wraps one prompt_toolkit prompt of a given `PromptKind`:

- SELECT: pick one of N choices from a numbered table.
- INPUT: free text entry with an optional validation rule.
- CONFIRM: yes/no question with a default.
- CHECKBOX: pick any number of choices from a numbered table.
- SEARCH: type-to-filter over a choice source with live completions.

When a render is made with `allow_back=True`, the label gets a dimmed
"(Esc to go back)" hint, the broker's key bindings are merged into the
session, and the render registers a `CancellationHandle` with the
`CancellationBroker` for as long as it awaits input. Pressing the key makes
the render return the `BACK` sentinel instead of a value. With
`allow_back=False` nothing is registered and the key is left to prompt_toolkit.

Ctrl-C and Ctrl-D raise `CancelSignal`, a full cancellation that is never
interpreted as "back". Validation failures are handled by prompt_toolkit
itself: the error is shown inline and the same prompt stays active.

Example:
    adapter = PromptAdapter()
    scope = await adapter.search(
        "Select scope:",
        choices=["auth", "api", "ui"],
        allow_back=True,
    )
    if scope is BACK:
        ...
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from rich.console import Console
from rich.markup import escape

from devflow.cancellation import CancellationBroker, CancellationHandle, get_broker
from devflow.console import console as default_console
from devflow.logger import logger
from devflow.prompt_utils import prompt_label
from devflow.selection import Choice, coerce_choices, render_choice_table
from devflow.signals import BackSignal, CancelSignal
from devflow.validators import (
    YES_WORDS,
    MultiIndexValidator,
    SearchValidator,
    callable_validator,
    choice_validator,
    yes_no_validator,
)


class _BackSentinel:
    """Value returned by a render when the user asked to go back."""

    _instance: _BackSentinel | None = None

    def __new__(cls) -> _BackSentinel:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "BACK"


BACK = _BackSentinel()


class PromptKind(Enum):
    """
    The primitive interactions a `PromptAdapter` can render.

    Members:
        SELECT: Pick one of N choices.
        INPUT: Free text entry.
        CONFIRM: Yes/no question.
        CHECKBOX: Pick any number of choices.
        SEARCH: Filtered search over a choice source.

    Example:
        PromptKind("text") → PromptKind.INPUT
    """

    SELECT = "select"
    INPUT = "input"
    CONFIRM = "confirm"
    CHECKBOX = "checkbox"
    SEARCH = "search"

    @classmethod
    def _get_alias(cls, value: str) -> str:
        aliases = {
            "choice": "select",
            "text": "input",
            "yes_no": "confirm",
            "multi": "checkbox",
            "multiselect": "checkbox",
            "filter": "search",
        }
        return aliases.get(value, value)

    @classmethod
    def _missing_(cls, value: object) -> PromptKind:
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        normalized = value.strip().lower()
        alias = cls._get_alias(normalized)
        for member in cls:
            if member.value == alias:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__}: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


@dataclass
class PromptOptions:
    """
    Configuration for one render.

    Attributes:
        message (str): Prompt label, rich markup allowed.
        choices (list): Choices for SELECT, CHECKBOX and SEARCH. Bare values are
            wrapped into `Choice` objects.
        default (Any): Value used when the user submits an empty answer.
        validate (Callable[[str], bool | str] | None): INPUT rule. Return True to
            accept or an error message to reject.
        required (bool): INPUT rejects blank text, CHECKBOX rejects no selection.
        source (Callable[[str], Sequence] | None): SEARCH choice source called
            with the current search term. Defaults to filtering `choices`.
        title (str): Optional title above choice tables.
    """

    message: str
    choices: Sequence[Choice | Any] = field(default_factory=list)
    default: Any = None
    validate: Callable[[str], bool | str] | None = None
    required: bool = False
    source: Callable[[str], Sequence[Choice | Any]] | None = None
    title: str = ""


class SourceCompleter(Completer):
    """Offers the current search results as completions."""

    def __init__(self, lookup: Callable[[str], list[Choice]]) -> None:
        self.lookup = lookup

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        for choice in self.lookup(text):
            yield Completion(
                str(choice.value),
                start_position=-len(text),
                display=choice.name,
                display_meta=choice.description or None,
            )


class PromptAdapter:
    """
    Renders single prompts with optional back navigation.

    Args:
        broker (CancellationBroker | None): Broker used for back navigation.
            Defaults to the process-wide broker from `get_broker()`.
        session_factory (Callable[..., PromptSession]): Builds one session per
            render. Tests substitute a scripted session here.
        console (Console | None): Console used for choice tables.
    """

    def __init__(
        self,
        broker: CancellationBroker | None = None,
        session_factory: Callable[..., PromptSession] = PromptSession,
        console: Console | None = None,
    ) -> None:
        self.broker = broker or get_broker()
        self.session_factory = session_factory
        self.console = console or default_console

    def _session(self, allow_back: bool) -> PromptSession:
        return self.session_factory(
            interrupt_exception=CancelSignal,
            eof_exception=CancelSignal,
            key_bindings=self.broker.key_bindings if allow_back else None,
        )

    async def _ask(
        self,
        message: str,
        allow_back: bool,
        **prompt_kwargs: Any,
    ) -> str | _BackSentinel:
        session = self._session(allow_back)
        label = prompt_label(message, allow_back)
        if not allow_back:
            return await session.prompt_async(label, **prompt_kwargs)

        def abort() -> None:
            app = session.app
            if app is not None and app.is_running:
                app.exit(exception=BackSignal())
            else:
                task.cancel()

        handle = CancellationHandle(message, on_cancel=abort)
        with self.broker.pending(handle):
            task = asyncio.ensure_future(session.prompt_async(label, **prompt_kwargs))
            try:
                return await task
            except BackSignal:
                logger.debug("[%s] Back requested.", message)
                return BACK
            except asyncio.CancelledError:
                if not handle.cancelled:
                    raise
                logger.debug("[%s] Back requested.", message)
                return BACK

    async def render(
        self,
        kind: PromptKind | str,
        options: PromptOptions,
        allow_back: bool = False,
    ) -> Any:
        """Render one prompt and return its value or `BACK`."""
        kind = PromptKind(kind)
        match kind:
            case PromptKind.SELECT:
                return await self._render_select(options, allow_back)
            case PromptKind.INPUT:
                return await self._render_input(options, allow_back)
            case PromptKind.CONFIRM:
                return await self._render_confirm(options, allow_back)
            case PromptKind.CHECKBOX:
                return await self._render_checkbox(options, allow_back)
            case PromptKind.SEARCH:
                return await self._render_search(options, allow_back)
            case _:
                raise ValueError(f"Unknown prompt kind: {kind}")

    async def _render_select(self, options: PromptOptions, allow_back: bool) -> Any:
        choices = coerce_choices(options.choices)
        if not choices:
            raise ValueError(f"Select prompt '{options.message}' has no choices.")
        self.console.print(
            render_choice_table(choices, title=options.title, default=options.default)
        )
        answer = await self._ask(
            options.message,
            allow_back,
            validator=choice_validator(
                [choice.value for choice in choices],
                allow_empty=options.default is not None,
            ),
            validate_while_typing=False,
        )
        if answer is BACK:
            return BACK
        return resolve_choice(answer, choices, options.default)

    async def _render_input(self, options: PromptOptions, allow_back: bool) -> Any:
        rule = options.validate
        if rule is None and options.required:
            rule = _required_rule
        answer = await self._ask(
            options.message,
            allow_back,
            default="" if options.default is None else str(options.default),
            validator=callable_validator(rule) if rule else None,
            validate_while_typing=False,
        )
        return answer

    async def _render_confirm(self, options: PromptOptions, allow_back: bool) -> Any:
        if options.default is None:
            suffix = "[y/n]"
        elif options.default:
            suffix = "[Y/n]"
        else:
            suffix = "[y/N]"
        answer = await self._ask(
            f"{options.message} {escape(suffix)}",
            allow_back,
            validator=yes_no_validator(allow_empty=options.default is not None),
            validate_while_typing=False,
        )
        if answer is BACK:
            return BACK
        if not answer.strip():
            return bool(options.default)
        return answer.strip().upper() in YES_WORDS

    async def _render_checkbox(self, options: PromptOptions, allow_back: bool) -> Any:
        choices = coerce_choices(options.choices)
        if not choices:
            raise ValueError(f"Checkbox prompt '{options.message}' has no choices.")
        self.console.print(render_choice_table(choices, title=options.title, multi=True))
        preselected = ",".join(
            str(index) for index, choice in enumerate(choices, start=1) if choice.checked
        )
        answer = await self._ask(
            options.message,
            allow_back,
            default=preselected,
            validator=MultiIndexValidator(1, len(choices), required=options.required),
            validate_while_typing=False,
        )
        if answer is BACK:
            return BACK
        indexes = dict.fromkeys(
            int(index) for index in answer.split(",") if index.strip()
        )
        return [choices[index - 1].value for index in indexes]

    async def _render_search(self, options: PromptOptions, allow_back: bool) -> Any:
        static_choices = coerce_choices(options.choices)

        def lookup(term: str) -> list[Choice]:
            if options.source is not None:
                return coerce_choices(options.source(term))
            return [choice for choice in static_choices if choice.matches(term)]

        def resolve(text: str) -> Any | None:
            return resolve_search(text, lookup, options.default)

        answer = await self._ask(
            options.message,
            allow_back,
            completer=SourceCompleter(lookup),
            complete_while_typing=True,
            validator=SearchValidator(resolve),
            validate_while_typing=False,
        )
        if answer is BACK:
            return BACK
        return resolve(answer)

    async def select(
        self,
        message: str,
        choices: Sequence[Choice | Any],
        *,
        default: Any = None,
        allow_back: bool = False,
    ) -> Any:
        return await self.render(
            PromptKind.SELECT,
            PromptOptions(message=message, choices=choices, default=default),
            allow_back,
        )

    async def text(
        self,
        message: str,
        *,
        default: str | None = None,
        validate: Callable[[str], bool | str] | None = None,
        required: bool = False,
        allow_back: bool = False,
    ) -> Any:
        return await self.render(
            PromptKind.INPUT,
            PromptOptions(
                message=message, default=default, validate=validate, required=required
            ),
            allow_back,
        )

    async def confirm(
        self, message: str, *, default: bool | None = None, allow_back: bool = False
    ) -> Any:
        return await self.render(
            PromptKind.CONFIRM,
            PromptOptions(message=message, default=default),
            allow_back,
        )

    async def checkbox(
        self,
        message: str,
        choices: Sequence[Choice | Any],
        *,
        required: bool = False,
        allow_back: bool = False,
    ) -> Any:
        return await self.render(
            PromptKind.CHECKBOX,
            PromptOptions(message=message, choices=choices, required=required),
            allow_back,
        )

    async def search(
        self,
        message: str,
        *,
        choices: Sequence[Choice | Any] = (),
        source: Callable[[str], Sequence[Choice | Any]] | None = None,
        default: Any = None,
        allow_back: bool = False,
    ) -> Any:
        return await self.render(
            PromptKind.SEARCH,
            PromptOptions(message=message, choices=choices, source=source, default=default),
            allow_back,
        )


def _required_rule(text: str) -> bool | str:
    return bool(text.strip()) or "A value is required."


def resolve_choice(answer: str, choices: Sequence[Choice], default: Any = None) -> Any:
    """Map a select answer (blank, exact value or 1-based index) to a value."""
    answer = answer.strip()
    if not answer:
        return default
    for choice in choices:
        if str(choice.value) == answer:
            return choice.value
    return choices[int(answer) - 1].value


def resolve_search(
    text: str, lookup: Callable[[str], list[Choice]], default: Any = None
) -> Any | None:
    """Map search text to a value: blank → default, exact value, or single match."""
    term = text.strip()
    if not term:
        return default
    matches = lookup(term)
    for choice in matches:
        if str(choice.value) == term:
            return choice.value
    if len(matches) == 1:
        return matches[0].value
    return None
