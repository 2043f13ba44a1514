"""Tests for field predicates and expertise normalisation."""

import pytest
from django.core.exceptions import ValidationError

from apps.accounts.validators import (
    StrongPasswordValidator,
    is_alpha_name,
    is_strong_password,
    is_valid_email,
    normalize_expertise,
    normalize_expertise_tag,
    validate_alpha_name,
)


class TestAlphaName:

    @pytest.mark.parametrize("value", ["Jane", "Jane Doe", "  Oil  Portraits "])
    def test_letters_and_spaces_accepted(self, value):
        assert is_alpha_name(value)

    @pytest.mark.parametrize("value", ["Jane123", "Jane-Doe", "", "   ", None, 42])
    def test_rejected(self, value):
        assert not is_alpha_name(value)

    def test_validator_raises(self):
        with pytest.raises(ValidationError):
            validate_alpha_name("R2D2")


class TestEmail:

    def test_valid(self):
        assert is_valid_email("jane@example.com")

    @pytest.mark.parametrize("value", ["jane", "jane@", "@example.com", "", None])
    def test_invalid(self, value):
        assert not is_valid_email(value)


class TestStrongPassword:

    def test_accepted(self):
        assert is_strong_password("Abcdef1!")

    @pytest.mark.parametrize(
        "value",
        [
            "abcdefgh",   # no upper, digit, symbol
            "ABCDEFG1!",  # no lower
            "Abcdefg!",   # no digit
            "Abcdefg1",   # no symbol
            "Ab1!",       # too short
        ],
    )
    def test_rejected(self, value):
        assert not is_strong_password(value)

    def test_django_validator(self):
        validator = StrongPasswordValidator()
        validator.validate("Abcdef1!")
        with pytest.raises(ValidationError):
            validator.validate("abcdefgh")
        assert "uppercase" in validator.get_help_text()


class TestExpertiseNormalisation:

    def test_list_normalised(self):
        assert normalize_expertise(["fine-art ", "MUSIC"]) == ["Fineart", "Music"]

    def test_single_string(self):
        assert normalize_expertise("wood carving") == ["Woodcarving"]

    def test_empty_results_dropped(self):
        assert normalize_expertise(["123", "", "dance"]) == ["Dance"]

    def test_none(self):
        assert normalize_expertise(None) == []

    def test_tag(self):
        assert normalize_expertise_tag("  sTaGe  Lighting!") == "Stagelighting"
