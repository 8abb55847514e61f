# app/core/spam_detector.py

import re
import string
from collections import Counter
from datetime import datetime, timezone

from app.core.rules import KNOWN_SPAM_PREFIXES, SPAM_PATTERNS
from app.models.schemas import PhoneCheckResult, Recommendation

STRIP_REGEX = re.compile(r"[\s\-()]")

BLOCK_THRESHOLD = 50
CAUTION_THRESHOLD = 30


def clean_phone(phone: str) -> str:
    """Drops whitespace, hyphens and parentheses."""
    return STRIP_REGEX.sub("", phone)


def max_repeated_digit(phone: str) -> int:
    counts = Counter(ch for ch in phone if ch in string.digits)
    return max(counts.values(), default=0)


def sequential_count(phone: str) -> int:
    """
    Counts ascending adjacent digit pairs across the whole number, starting at 1.

    The count never resets: "12x34" scores 3, the same as "123".
    """
    count = 1

    for prev, cur in zip(phone, phone[1:]):
        if prev in string.digits and cur in string.digits:
            if int(cur) == int(prev) + 1:
                count += 1

    return count


def evaluate_phone(phone: str) -> PhoneCheckResult:
    """
    Scores a phone number for spam indicators.
    """
    cleaned = clean_phone(phone)
    reasons = []
    confidence = 0

    # 1. Known spam patterns (every match counts)
    for pattern, name in SPAM_PATTERNS:
        if pattern.fullmatch(cleaned):
            reasons.append(f"Matches {name} pattern")
            confidence += 30

    # 2. Known spam prefixes (first match only)
    for prefix in KNOWN_SPAM_PREFIXES:
        if cleaned.startswith(prefix):
            reasons.append(f"Starts with known spam prefix: {prefix}")
            confidence += 25
            break

    # 3. Repeated digits
    repeated = max_repeated_digit(cleaned)
    if repeated >= 7:
        reasons.append(f"Excessive repeated digits ({repeated} times)")
        confidence += 20

    # 4. Sequential digits
    if sequential_count(cleaned) >= 5:
        reasons.append("Contains long sequential digit pattern")
        confidence += 15

    # 5. Length
    if len(cleaned) < 10 or len(cleaned) > 12:
        reasons.append("Unusual phone number length")
        confidence += 10

    if confidence >= BLOCK_THRESHOLD:
        is_spam = True
        recommendation = Recommendation.BLOCK
    elif confidence >= CAUTION_THRESHOLD:
        is_spam = True
        recommendation = Recommendation.CAUTION
    else:
        is_spam = False
        recommendation = Recommendation.SAFE

    if not reasons:
        reasons.append("No spam indicators detected")

    return PhoneCheckResult(
        phone=phone,
        isSpam=is_spam,
        confidence=confidence,
        reasons=reasons,
        recommendation=recommendation,
        timestamp=datetime.now(timezone.utc)
    )
