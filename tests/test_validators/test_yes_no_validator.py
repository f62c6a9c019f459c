import pytest
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError

from devflow.validators import yes_no_validator


def test_yes_no_validator_accepts_yes_and_no_words():
    validator = yes_no_validator()
    for valid in ["Y", "y", "N", "n", "yes", "No", " YES "]:
        validator.validate(Document(valid))


@pytest.mark.parametrize("invalid", ["maybe", "", "1", "yep"])
def test_yes_no_validator_rejects_invalid(invalid):
    validator = yes_no_validator()
    with pytest.raises(ValidationError):
        validator.validate(Document(invalid))


def test_yes_no_validator_allows_empty_when_default_exists():
    yes_no_validator(allow_empty=True).validate(Document(""))
