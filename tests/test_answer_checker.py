"""Tests for submitted answer checking."""

import pytest

from app.services.answer_checker import (
    AnswerCheckError,
    AnswerKeyNotFound,
    UnsupportedAnswerType,
    check_answer,
    levenshtein_distance,
    normalize_number_words,
)

OPTIONS = [
    {"id": 1, "content": "4", "is_correct": 0},
    {"id": 2, "content": "5", "is_correct": 1},
    {"id": 3, "content": "6", "is_correct": 1},
]


def question(answer_type):
    return {"id": 10, "answer_type": answer_type}


class TestSingleChoice:
    def test_correct_option(self):
        assert check_answer(question("single_choice"), OPTIONS, option_id=2) is True

    def test_wrong_option(self):
        assert check_answer(question("single_choice"), OPTIONS, option_id="1") is False

    def test_missing_option(self):
        with pytest.raises(AnswerCheckError):
            check_answer(question("single_choice"), OPTIONS)

    def test_option_from_other_question(self):
        with pytest.raises(AnswerKeyNotFound):
            check_answer(question("single_choice"), OPTIONS, option_id=99)


class TestMultipleChoice:
    def test_exactly_the_correct_set(self):
        assert check_answer(question("multiple_choice"), OPTIONS, answer_text="3, 2") is True

    def test_partial_selection_is_wrong(self):
        assert check_answer(question("multiple_choice"), OPTIONS, answer_text="2") is False

    def test_extra_selection_is_wrong(self):
        assert check_answer(question("multiple_choice"), OPTIONS, answer_text="1,2,3") is False

    def test_empty_selection(self):
        with pytest.raises(AnswerCheckError):
            check_answer(question("multiple_choice"), OPTIONS, answer_text=" , ")

    def test_no_answer_key(self):
        with pytest.raises(AnswerKeyNotFound):
            check_answer(
                question("multiple_choice"),
                [{"id": 1, "content": "x", "is_correct": 0}],
                answer_text="1",
            )


class TestShortAnswer:
    def _check(self, expected, given):
        options = [{"id": 1, "content": expected, "is_correct": 1}]
        return check_answer(question("short_answer"), options, answer_text=given)

    def test_case_and_whitespace_insensitive(self):
        assert self._check("Segitiga", "  segitiga ") is True

    def test_number_words(self):
        assert self._check("3", "tiga") is True
        assert self._check("dua belas", "12") is True

    def test_typo_tolerance(self):
        # 9 letters allow one edit
        assert self._check("lingkaran", "lingkarn") is True
        assert self._check("lingkaran", "lingkrn") is False

    def test_short_keys_need_exact_match(self):
        assert self._check("12", "13") is False

    def test_wrong_number(self):
        assert self._check("5", "6") is False

    def test_no_answer_key(self):
        with pytest.raises(AnswerKeyNotFound):
            check_answer(question("short_answer"), [], answer_text="5")


class TestHelpers:
    def test_unsupported_type(self):
        with pytest.raises(UnsupportedAnswerType):
            check_answer(question("essay"), OPTIONS, answer_text="...")

    def test_levenshtein(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    def test_number_words_passthrough(self):
        assert normalize_number_words("sepuluh") == "10"
        assert normalize_number_words("42") == "42"
