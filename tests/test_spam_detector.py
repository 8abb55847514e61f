import pytest

from app.core.spam_detector import (
    clean_phone,
    evaluate_phone,
    max_repeated_digit,
    sequential_count,
)
from app.models.schemas import Recommendation


# ----------------------------
# HELPERS
# ----------------------------

def test_clean_phone_strips_formatting():
    assert clean_phone("(555) 123-4567") == "5551234567"
    assert clean_phone(" +91 98765\t43210 ") == "+919876543210"
    assert clean_phone("--()  ") == ""


def test_max_repeated_digit_ignores_non_digits():
    assert max_repeated_digit("1111111111") == 10
    assert max_repeated_digit("+++++++12") == 1
    assert max_repeated_digit("") == 0


def test_sequential_count_never_resets():
    assert sequential_count("123") == 3
    assert sequential_count("12x34") == 3
    assert sequential_count("1212121212") == 6
    assert sequential_count("90") == 1
    assert sequential_count("") == 1


# ----------------------------
# FULL EVALUATION
# ----------------------------

def test_repeated_digits_are_blocked():
    result = evaluate_phone("1111111111")

    assert result.reasons == [
        "Matches Repeated digits pattern",
        "Starts with known spam prefix: 1111",
        "Excessive repeated digits (10 times)",
    ]
    assert result.confidence == 75
    assert result.recommendation == Recommendation.BLOCK
    assert result.isSpam is True


def test_ordinary_number_with_ascending_run():
    result = evaluate_phone("5551234567")

    assert result.reasons == ["Contains long sequential digit pattern"]
    assert result.confidence == 15
    assert result.recommendation == Recommendation.SAFE
    assert result.isSpam is False


def test_clean_number_gets_sentinel_reason():
    result = evaluate_phone("(987) 654-3210")

    assert result.reasons == ["No spam indicators detected"]
    assert result.confidence == 0
    assert result.recommendation == Recommendation.SAFE
    assert result.phone == "(987) 654-3210"


def test_telemarketing_number_is_blocked():
    result = evaluate_phone("1409876543")

    assert result.reasons == [
        "Matches Telemarketing (140xxxxxx) pattern",
        "Starts with known spam prefix: 140",
    ]
    assert result.confidence == 55
    assert result.recommendation == Recommendation.BLOCK


def test_toll_free_number_is_blocked():
    result = evaluate_phone("1800 987 6543")

    prefix_reasons = [r for r in result.reasons if r.startswith("Starts with")]
    assert prefix_reasons == ["Starts with known spam prefix: 1800"]
    assert "Matches Toll-free number pattern" in result.reasons
    assert result.confidence == 55


def test_every_matching_pattern_scores():
    result = evaluate_phone("1234567890")

    assert result.reasons == [
        "Matches Sequential digits pattern",
        "Contains long sequential digit pattern",
    ]
    assert result.confidence == 45
    assert result.recommendation == Recommendation.CAUTION
    assert result.isSpam is True


def test_prefix_alone_is_safe():
    result = evaluate_phone("9999 86 4208")

    assert result.reasons == ["Starts with known spam prefix: 9999"]
    assert result.confidence == 25
    assert result.recommendation == Recommendation.SAFE
    assert result.isSpam is False


@pytest.mark.parametrize("phone, flagged", [
    ("987654321", True),
    ("9876543210", False),
    ("987654321098", False),
    ("9876543210987", True),
])
def test_length_bounds(phone, flagged):
    result = evaluate_phone(phone)

    assert ("Unusual phone number length" in result.reasons) is flagged


def test_empty_after_cleaning():
    result = evaluate_phone(" - ")

    assert result.reasons == ["Unusual phone number length"]
    assert result.confidence == 10
    assert result.recommendation == Recommendation.SAFE


def test_non_digit_input_never_raises():
    result = evaluate_phone("call me!")

    assert result.recommendation == Recommendation.SAFE
    assert result.reasons == ["Unusual phone number length"]


def test_unicode_digits_do_not_match_patterns():
    result = evaluate_phone("١١١١١١١١١١")

    assert result.reasons == ["No spam indicators detected"]


def test_evaluation_is_idempotent():
    first = evaluate_phone("0000000000")
    second = evaluate_phone("0000000000")

    assert first.model_dump(exclude={"timestamp"}) == second.model_dump(exclude={"timestamp"})


def test_repeated_symbols_are_not_repeated_digits():
    result = evaluate_phone("+++++++9876543210")

    assert not any(r.startswith("Excessive repeated digits") for r in result.reasons)
    assert result.reasons == ["Unusual phone number length"]
    assert result.confidence == 10
