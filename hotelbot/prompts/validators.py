"""Prompt validators: parse free text or raise PromptRejected.

Each ``PromptId`` maps to exactly one validator class.  Validators are
stateless apart from their configuration; the choice list for a choice
prompt comes from the step that issued it, so it is passed in by the
engine rather than persisted.

Rules:
  date     dateparser with a fixed DATE_ORDER (MDY by default); a date
           embedded in a sentence is found with search_dates
  number   whole number from digits or English number words (up to
           ninety-nine), at least ``min_value``
  choice   "1"/"2" selection, exact label, then a rapidfuzz fuzzy match
           that must beat every other label
  confirm  yes/no vocabularies, negations count as no; anything matching
           both or neither is rejected
  text     any non-blank text
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Sequence

import dateparser
from dateparser.search import search_dates
from rapidfuzz import fuzz, process, utils

from hotelbot.config import settings
from hotelbot.errors import PromptRejected
from hotelbot.models.conversation import PromptId

_UNIT_WORDS = {
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14,
    "fifteen": 15, "sixteen": 16, "seventeen": 17, "eighteen": 18,
    "nineteen": 19,
}
_TENS_WORDS = {
    "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
    "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
}
# Longest digit run accepted by the number prompt
_MAX_DIGITS = 6

_YES = {
    "yes", "y", "yeah", "yep", "yup", "sure", "ok", "okay", "confirm",
    "confirmed", "correct", "right", "absolutely", "definitely",
}
_NO = {"no", "n", "nope", "nah", "cancel", "wrong", "incorrect", "never"}
# Negations count as "no", so "not correct" matches both sides and is rejected
_NEGATIONS = {
    "not", "don't", "dont", "isn't", "isnt", "wasn't", "can't",
    "cannot", "won't", "shouldn't",
}


def normalize_text(text: str) -> str:
    """Lowercase and collapse whitespace."""
    return re.sub(r"\s+", " ", text.lower().strip())


def format_choices(choices: Sequence[str]) -> str:
    """Render a choice list inline: ``(1) single bed, (2) double bed``."""
    return ", ".join(f"({i}) {label}" for i, label in enumerate(choices, start=1))


class Validator(ABC):
    """Parse raw text into a typed value, or raise PromptRejected."""

    prompt_id: PromptId

    @abstractmethod
    def parse(self, text: str, choices: Sequence[str] = ()) -> Any:
        """Return the parsed value for ``text``."""


class TextValidator(Validator):
    prompt_id = PromptId.TEXT

    def parse(self, text: str, choices: Sequence[str] = ()) -> str:
        value = text.strip()
        if not value:
            raise PromptRejected("empty text")
        return value


class DateValidator(Validator):
    """Free-text date expression → ``datetime.date``.

    Day/month ambiguity is resolved by ``date_order`` ("MDY" reads
    ``03/04/2027`` as March 4th); relative expressions are anchored to the
    future ("friday" is the next Friday).
    """

    prompt_id = PromptId.DATE

    def __init__(
        self,
        date_order: str | None = None,
        languages: list[str] | None = None,
        prefer_dates_from: str | None = None,
    ) -> None:
        self._languages = list(languages or settings.date_languages)
        self._settings = {
            "DATE_ORDER": (date_order or settings.date_order).upper(),
            "PREFER_DATES_FROM": prefer_dates_from or settings.prefer_dates_from,
            "RETURN_AS_TIMEZONE_AWARE": False,
        }

    def parse(self, text: str, choices: Sequence[str] = ()) -> date:
        value = text.strip()
        if not value:
            raise PromptRejected("empty date")
        # dateparser reads a bare "3" as the 3rd of some month
        if value.isdigit():
            raise PromptRejected(f"{value!r} is a number, not a date")

        parsed = dateparser.parse(value, languages=self._languages, settings=self._settings)
        if parsed is None:
            found = search_dates(value, languages=self._languages, settings=self._settings)
            if found:
                parsed = found[0][1]

        if parsed is None:
            raise PromptRejected(f"no date found in {value!r}")
        return parsed.date()


def _words_to_number(words: Sequence[str]) -> int | None:
    """First number spelled out in ``words``: "twenty two" → 22."""
    for i, word in enumerate(words):
        if word in _TENS_WORDS:
            number = _TENS_WORDS[word]
            following = words[i + 1] if i + 1 < len(words) else ""
            if 1 <= _UNIT_WORDS.get(following, 0) <= 9:
                number += _UNIT_WORDS[following]
            return number
        if word in _UNIT_WORDS:
            return _UNIT_WORDS[word]
    return None


class NumberValidator(Validator):
    """Whole number from digits or number words, bounded below by ``min_value``.

    Decimals ("2.5") and grouped digits ("1,000") are rejected rather than
    truncated.
    """

    prompt_id = PromptId.NUMBER

    def __init__(self, min_value: int = 1) -> None:
        self.min_value = min_value

    def parse(self, text: str, choices: Sequence[str] = ()) -> int:
        normalized = normalize_text(text)

        match = re.search(r"-?\d[\d.,]*", normalized)
        if match:
            token = match.group().rstrip(".,")
            if "." in token or "," in token:
                raise PromptRejected(f"{token!r} is not a whole number")
            if len(token.lstrip("-")) > _MAX_DIGITS:
                raise PromptRejected(f"{token[:_MAX_DIGITS]}... is too large")
            number = int(token)
        else:
            number = _words_to_number(re.findall(r"[a-z]+", normalized))
            if number is None:
                raise PromptRejected(f"no number found in {text!r}")

        if number < self.min_value:
            raise PromptRejected(f"{number} is below the minimum of {self.min_value}")
        return number


class ChoiceValidator(Validator):
    """Match text against an ordered list of labels; returns the label.

    Resolution order:
      1. Numeric selection: "2" → second choice
      2. Exact label match: case-insensitive, whitespace-normalized
      3. Fuzzy label match: rapidfuzz WRatio ≥ ``score_cutoff``
    """

    prompt_id = PromptId.CHOICE

    def __init__(self, score_cutoff: float | None = None) -> None:
        self.score_cutoff = score_cutoff if score_cutoff is not None else settings.choice_score_cutoff

    def parse(self, text: str, choices: Sequence[str] = ()) -> str:
        if not choices:
            raise PromptRejected("no choices to match against")

        normalized = normalize_text(text)
        if not normalized:
            raise PromptRejected("empty choice")

        if normalized.isdigit():
            index = int(normalized) - 1 if len(normalized) <= _MAX_DIGITS else -1
            if 0 <= index < len(choices):
                return choices[index]
            raise PromptRejected(f"choice {normalized[:_MAX_DIGITS]} is out of range")

        for label in choices:
            if normalize_text(label) == normalized:
                return label

        ranked = process.extract(
            normalized,
            list(choices),
            scorer=fuzz.WRatio,
            processor=utils.default_process,
            score_cutoff=self.score_cutoff,
            limit=2,
        )
        if not ranked:
            raise PromptRejected(f"{text!r} matches none of {list(choices)}")
        # "bed" fits "single bed" and "double bed" equally well
        if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
            raise PromptRejected(f"{text!r} matches {ranked[0][0]!r} and {ranked[1][0]!r} equally")
        label, _score, _index = ranked[0]
        return label


class ConfirmValidator(Validator):
    """Yes/no answer; negated answers ("not correct") are rejected as ambiguous."""

    prompt_id = PromptId.CONFIRM

    def parse(self, text: str, choices: Sequence[str] = ()) -> bool:
        normalized = normalize_text(text).replace("’", "'")
        words = {w.strip("'") for w in re.findall(r"[a-z']+", normalized)}
        yes = bool(words & _YES)
        no = bool(words & (_NO | _NEGATIONS))
        if yes == no:
            raise PromptRejected(f"ambiguous confirmation {text!r}")
        return yes


def get_validator(prompt_id: PromptId) -> Validator:
    """Build the validator for a persisted prompt id."""
    if prompt_id is PromptId.TEXT:
        return TextValidator()
    elif prompt_id is PromptId.DATE:
        return DateValidator()
    elif prompt_id is PromptId.NUMBER:
        return NumberValidator(min_value=1)
    elif prompt_id is PromptId.CHOICE:
        return ChoiceValidator()
    elif prompt_id is PromptId.CONFIRM:
        return ConfirmValidator()
    raise ValueError(f"Unknown prompt id: {prompt_id!r}")
