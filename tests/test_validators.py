"""Tests for the prompt validators."""

from datetime import date, timedelta

import pytest

from hotelbot.errors import PromptRejected
from hotelbot.models.conversation import PromptId
from hotelbot.prompts import (
    ChoiceValidator,
    ConfirmValidator,
    DateValidator,
    NumberValidator,
    TextValidator,
    format_choices,
    get_validator,
)

BED_CHOICES = ["single bed", "double bed"]


class TestDateValidator:
    def test_written_date(self):
        assert DateValidator().parse("December 24, 2026") == date(2026, 12, 24)

    def test_month_first_by_default(self):
        assert DateValidator(date_order="MDY").parse("03/04/2027") == date(2027, 3, 4)

    def test_day_first_when_configured(self):
        assert DateValidator(date_order="DMY").parse("03/04/2027") == date(2027, 4, 3)

    def test_relative_date(self):
        assert DateValidator().parse("tomorrow") == date.today() + timedelta(days=1)

    def test_date_inside_sentence(self):
        assert DateValidator().parse("arriving December 24, 2026") == date(2026, 12, 24)

    def test_rejects_text_without_date(self):
        with pytest.raises(PromptRejected):
            DateValidator().parse("asdf qwerty")

    def test_rejects_blank(self):
        with pytest.raises(PromptRejected):
            DateValidator().parse("  ")

    @pytest.mark.parametrize("text", ["3", "15", "2027"])
    def test_rejects_bare_number(self, text):
        with pytest.raises(PromptRejected):
            DateValidator().parse(text)


class TestNumberValidator:
    def test_digits(self):
        assert NumberValidator().parse("3") == 3

    def test_number_inside_sentence(self):
        assert NumberValidator().parse("we are 2 adults") == 2

    def test_number_words(self):
        assert NumberValidator().parse("Three nights") == 3

    def test_rejects_zero(self):
        with pytest.raises(PromptRejected):
            NumberValidator(min_value=1).parse("0")

    def test_rejects_negative(self):
        with pytest.raises(PromptRejected):
            NumberValidator(min_value=1).parse("-2")

    def test_rejects_non_numeric(self):
        with pytest.raises(PromptRejected):
            NumberValidator().parse("lots")

    def test_no_upper_bound(self):
        assert NumberValidator().parse("365") == 365

    @pytest.mark.parametrize("text,expected", [
        ("twenty one", 21),
        ("twenty-two guests", 22),
        ("Ninety nine", 99),
        ("twenty", 20),
        ("thirty days please", 30),
    ])
    def test_compound_number_words(self, text, expected):
        assert NumberValidator().parse(text) == expected

    def test_trailing_punctuation(self):
        assert NumberValidator().parse("4.") == 4

    @pytest.mark.parametrize("text", ["2.5", "1,000", "about 1.5 days"])
    def test_rejects_decimals_and_grouping(self, text):
        with pytest.raises(PromptRejected):
            NumberValidator().parse(text)

    def test_rejects_huge_digit_run(self):
        with pytest.raises(PromptRejected):
            NumberValidator().parse("9" * 5000)


class TestChoiceValidator:
    def test_numeric_selection(self):
        assert ChoiceValidator().parse("2", BED_CHOICES) == "double bed"

    def test_exact_match_ignores_case(self):
        assert ChoiceValidator().parse("  Single   BED ", BED_CHOICES) == "single bed"

    def test_fuzzy_match(self):
        assert ChoiceValidator().parse("double", BED_CHOICES) == "double bed"

    def test_rejects_out_of_range_number(self):
        with pytest.raises(PromptRejected):
            ChoiceValidator().parse("3", BED_CHOICES)

    def test_rejects_unrelated_text(self):
        with pytest.raises(PromptRejected):
            ChoiceValidator().parse("penthouse", BED_CHOICES)

    def test_rejects_without_choices(self):
        with pytest.raises(PromptRejected):
            ChoiceValidator().parse("single bed", [])

    def test_rejects_tie_between_labels(self):
        with pytest.raises(PromptRejected):
            ChoiceValidator().parse("bed", BED_CHOICES)

    def test_rejects_huge_selection_number(self):
        with pytest.raises(PromptRejected):
            ChoiceValidator().parse("1" * 5000, BED_CHOICES)


class TestConfirmValidator:
    @pytest.mark.parametrize("text", ["yes", "Yes please", "ok", "sure, go ahead"])
    def test_affirmative(self, text):
        assert ConfirmValidator().parse(text) is True

    @pytest.mark.parametrize("text", ["no", "No thanks", "nope", "cancel it", "don't book it", "not now"])
    def test_negative(self, text):
        assert ConfirmValidator().parse(text) is False

    @pytest.mark.parametrize("text", [
        "maybe", "yes no", "", "that's not right", "not correct", "don't confirm",
    ])
    def test_ambiguous(self, text):
        with pytest.raises(PromptRejected):
            ConfirmValidator().parse(text)


class TestTextValidator:
    def test_strips(self):
        assert TextValidator().parse("  Ada Lovelace ") == "Ada Lovelace"

    def test_rejects_blank(self):
        with pytest.raises(PromptRejected):
            TextValidator().parse("   ")


class TestRegistry:
    def test_every_prompt_id_has_a_validator(self):
        for prompt_id in PromptId:
            assert get_validator(prompt_id).prompt_id is prompt_id

    def test_format_choices(self):
        assert format_choices(BED_CHOICES) == "(1) single bed, (2) double bed"
