import pytest
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError

from devflow.validators import choice_validator


def test_choice_validator_accepts_index_or_value():
    validator = choice_validator(["feat", "fix", "docs"])
    for valid in ["1", "3", "fix", " docs "]:
        validator.validate(Document(valid))


@pytest.mark.parametrize("invalid", ["0", "4", "feature", "", "-1"])
def test_choice_validator_rejects_invalid(invalid):
    validator = choice_validator(["feat", "fix", "docs"])
    with pytest.raises(ValidationError):
        validator.validate(Document(invalid))


def test_choice_validator_allows_empty_with_default():
    choice_validator(["feat"], allow_empty=True).validate(Document(""))
