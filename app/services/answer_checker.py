"""
answer_checker.py - Decide whether a submitted answer is correct

Provides:
- check_answer(question, options, option_id, answer_text) - correctness for one answer
- normalize_number_words(text) - "tiga" -> "3"
- levenshtein_distance(a, b) - edit distance used for typo tolerance
"""

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SINGLE_CHOICE = "single_choice"
MULTIPLE_CHOICE = "multiple_choice"
SHORT_ANSWER = "short_answer"
ANSWER_TYPES = (SINGLE_CHOICE, MULTIPLE_CHOICE, SHORT_ANSWER)

# Short answers within 20% edits of the key (at least one) are accepted
TYPO_TOLERANCE_RATIO = 0.2

# Students often spell small numbers out
NUMBER_WORDS = {
    "nol": "0",
    "kosong": "0",
    "satu": "1",
    "se": "1",
    "dua": "2",
    "tiga": "3",
    "empat": "4",
    "lima": "5",
    "enam": "6",
    "tujuh": "7",
    "delapan": "8",
    "sembilan": "9",
    "sepuluh": "10",
    "sebelas": "11",
    "dua belas": "12",
    "duabelas": "12",
    "tiga belas": "13",
    "tigabelas": "13",
    "empat belas": "14",
    "empatbelas": "14",
    "lima belas": "15",
    "limabelas": "15",
    "enam belas": "16",
    "enambelas": "16",
    "tujuh belas": "17",
    "tujuhbelas": "17",
    "delapan belas": "18",
    "delapanbelas": "18",
    "sembilan belas": "19",
    "sembilanbelas": "19",
    "dua puluh": "20",
    "duapuluh": "20",
}


class AnswerCheckError(ValueError):
    """The submission cannot be checked as given (client error)."""


class UnsupportedAnswerType(AnswerCheckError):
    pass


class AnswerKeyNotFound(LookupError):
    """The question or option has no usable answer key."""


def normalize_answer(answer: Optional[str]) -> str:
    if not answer:
        return ""
    return answer.strip().lower()


def normalize_number_words(text: str) -> str:
    return NUMBER_WORDS.get(text, text)


def levenshtein_distance(a: str, b: str) -> int:
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j - 1], previous[j], current[j - 1]))
        previous = current
    return previous[-1]


def _check_single_choice(question_id, options, option_id) -> bool:
    if option_id is None or str(option_id).strip() == "":
        raise AnswerCheckError("option_id is required for single choice questions")
    chosen = next((o for o in options if str(o["id"]) == str(option_id).strip()), None)
    if chosen is None:
        raise AnswerKeyNotFound(f"Option {option_id} not found for question {question_id}")
    return bool(chosen["is_correct"])


def _check_multiple_choice(question_id, options, answer_text) -> bool:
    selected = {s.strip() for s in (answer_text or "").split(",") if s.strip()}
    if not selected:
        raise AnswerCheckError("At least one option must be selected")
    correct = {str(o["id"]) for o in options if o["is_correct"]}
    if not correct:
        raise AnswerKeyNotFound(f"No correct option configured for question {question_id}")
    # Every correct option and nothing else
    return selected == correct


def _check_short_answer(question_id, options, answer_text) -> bool:
    key = next((o for o in options if o["is_correct"]), None)
    if key is None:
        raise AnswerKeyNotFound(f"No correct answer configured for question {question_id}")

    student = normalize_answer(answer_text)
    expected = normalize_answer(key["content"])

    if student == expected:
        return True
    if normalize_number_words(student) == normalize_number_words(expected):
        return True

    if len(expected) > 2:
        distance = levenshtein_distance(student, expected)
        allowed = max(1, int(len(expected) * TYPO_TOLERANCE_RATIO))
        if distance <= allowed:
            logger.info(
                "Accepted %r for %r with typo tolerance (distance %d)",
                answer_text, key["content"], distance,
            )
            return True
    return False


def check_answer(
    question: Dict[str, Any],
    options: List[Dict[str, Any]],
    option_id: Optional[str] = None,
    answer_text: str = "",
) -> bool:
    """
    Check one submitted answer against the question's options.

    Args:
        question: row with at least ``id`` and ``answer_type``
        options: rows with ``id``, ``content`` and ``is_correct``
        option_id: chosen option for single choice questions
        answer_text: comma-separated option ids (multiple choice) or free text

    Raises:
        UnsupportedAnswerType: unknown ``answer_type``
        AnswerCheckError: the submission is missing what the type needs
        AnswerKeyNotFound: the option or the answer key does not exist
    """
    answer_type = question.get("answer_type")
    question_id = question.get("id")

    if answer_type == SINGLE_CHOICE:
        return _check_single_choice(question_id, options, option_id)
    if answer_type == MULTIPLE_CHOICE:
        return _check_multiple_choice(question_id, options, answer_text)
    if answer_type == SHORT_ANSWER:
        return _check_short_answer(question_id, options, answer_text)
    raise UnsupportedAnswerType(f"Unsupported answer type: {answer_type!r}")
