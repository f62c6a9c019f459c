# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Input validators for the prompts rendered by `PromptAdapter`.

Every validator raises `prompt_toolkit.validation.ValidationError` on bad
input. prompt_toolkit then shows the message inline and keeps the same prompt
active, which is how a validation failure stays local to one render and never
reaches the flow controller.

Included Validators:
- callable_validator: Wraps a `value -> bool | str` rule supplied by a step.
- yes_no_validator: Restricts input to yes/no words, optionally allowing empty.
- choice_validator: Accepts a 1-based index or an exact choice value.
- MultiIndexValidator: Validates comma separated index lists for multi-select.
- SearchValidator: Accepts input that resolves to exactly one search result.
"""
from typing import Any, Callable, Sequence

from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError, Validator

YES_WORDS = ("Y", "YES")
NO_WORDS = ("N", "NO")


def callable_validator(
    rule: Callable[[str], bool | str], error_message: str = "Invalid input."
) -> Validator:
    """Validator for step-supplied rules.

    The rule returns True to accept. A string return value is used as the
    error message; any other falsy value falls back to `error_message`.
    """

    class _RuleValidator(Validator):
        def validate(self, document: Document) -> None:
            outcome = rule(document.text)
            if outcome is True:
                return
            message = outcome if isinstance(outcome, str) and outcome else error_message
            raise ValidationError(message=message, cursor_position=len(document.text))

    return _RuleValidator()


def yes_no_validator(allow_empty: bool = False) -> Validator:
    """Validator for yes/no inputs."""

    def validate(text: str) -> bool:
        answer = text.strip().upper()
        if not answer:
            return allow_empty
        return answer in YES_WORDS + NO_WORDS

    return Validator.from_callable(validate, error_message="Enter 'y' or 'n'.")


def choice_validator(values: Sequence[Any], allow_empty: bool = False) -> Validator:
    """Validator for single choice inputs given by number or by value."""
    valid_values = [str(value) for value in values]

    def validate(text: str) -> bool:
        answer = text.strip()
        if not answer:
            return allow_empty
        if answer in valid_values:
            return True
        try:
            index = int(answer)
        except ValueError:
            return False
        return 1 <= index <= len(valid_values)

    return Validator.from_callable(
        validate,
        error_message=f"Enter a number between 1 and {len(valid_values)}.",
    )


class MultiIndexValidator(Validator):
    def __init__(
        self,
        minimum: int,
        maximum: int,
        required: bool = False,
        separator: str = ",",
    ) -> None:
        self.minimum = minimum
        self.maximum = maximum
        self.required = required
        self.separator = separator
        super().__init__()

    def validate(self, document: Document) -> None:
        selections = [
            index.strip()
            for index in document.text.strip().split(self.separator)
            if index.strip()
        ]
        if not selections:
            if self.required:
                raise ValidationError(message="Select at least 1 item.")
            return
        for selection in selections:
            try:
                index = int(selection)
            except ValueError:
                raise ValidationError(
                    message=f"Invalid selection: {selection}. Select a number between "
                    f"{self.minimum} and {self.maximum}."
                )
            if not self.minimum <= index <= self.maximum:
                raise ValidationError(
                    message=f"Invalid selection: {selection}. Select a number between "
                    f"{self.minimum} and {self.maximum}."
                )
            if selections.count(selection) > 1:
                raise ValidationError(message=f"Duplicate selection: {selection}")


class SearchValidator(Validator):
    """Accepts text that `resolve` maps to a value."""

    def __init__(self, resolve: Callable[[str], Any | None]) -> None:
        self.resolve = resolve
        super().__init__()

    def validate(self, document: Document) -> None:
        if self.resolve(document.text) is None:
            raise ValidationError(
                message="No single match. Keep typing or pick a suggestion.",
                cursor_position=len(document.text),
            )
