import pytest
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError

from devflow.validators import SearchValidator, callable_validator


def test_callable_validator_uses_rule_message():
    validator = callable_validator(lambda text: bool(text.strip()) or "Required")
    validator.validate(Document("value"))
    with pytest.raises(ValidationError) as error:
        validator.validate(Document("  "))
    assert error.value.message == "Required"


def test_callable_validator_falls_back_to_default_message():
    validator = callable_validator(lambda text: text.isdigit(), "Digits only.")
    validator.validate(Document("42"))
    with pytest.raises(ValidationError) as error:
        validator.validate(Document("4x"))
    assert error.value.message == "Digits only."


def test_search_validator_requires_resolution():
    known = {"auth": "auth", "": ""}
    validator = SearchValidator(known.get)
    validator.validate(Document("auth"))
    validator.validate(Document(""))
    with pytest.raises(ValidationError):
        validator.validate(Document("au"))
