# app/core/rules.py

import re
from types import MappingProxyType

from app.models.schemas import ThreatSummary

RULES_LAST_UPDATED = "2025-01-15"

# -------------------------
# URL RULES
# -------------------------
SUSPICIOUS_TLDS = (
    ".tk", ".ml", ".ga", ".cf", ".gq",
    ".pw", ".top", ".work", ".click", ".loan",
)

LEGITIMATE_DOMAINS = frozenset({
    "google.com",
    "facebook.com",
    "amazon.com",
    "apple.com",
    "microsoft.com",
    "netflix.com",
})

# Insertion order matters: first impersonated domain wins
TYPOSQUAT_DOMAINS = MappingProxyType({
    "google.com": frozenset({"goog1e.com", "gooogle.com", "googlle.com"}),
    "facebook.com": frozenset({"faceb00k.com", "facebok.com", "faecbook.com"}),
    "amazon.com": frozenset({"amaz0n.com", "amazonn.com", "arnazom.com"}),
})

# -------------------------
# PHONE RULES
# -------------------------
# Matched against the whole cleaned number, ASCII digits only
SPAM_PATTERNS = (
    (re.compile(r"140\d{7}", re.ASCII), "Telemarketing (140xxxxxx)"),
    (re.compile(r"1800\d{6,7}", re.ASCII), "Toll-free number"),
    (re.compile(r"(\d)\1{9}", re.ASCII), "Repeated digits"),
    (re.compile(r"0123456789|1234567890", re.ASCII), "Sequential digits"),
)

KNOWN_SPAM_PREFIXES = ("140", "1800", "0000", "1111", "9999")


def threat_summary():
    """
    Counts of the configured rules, served as-is by /threats.
    """
    phishing_domains = sum(len(fakes) for fakes in TYPOSQUAT_DOMAINS.values())

    return ThreatSummary(
        totalThreats=phishing_domains + len(SPAM_PATTERNS),
        suspiciousTlds=len(SUSPICIOUS_TLDS),
        phishingDomains=phishing_domains,
        spamPatterns=len(SPAM_PATTERNS),
        spamPrefixes=len(KNOWN_SPAM_PREFIXES),
        legitimateDomains=len(LEGITIMATE_DOMAINS),
        lastUpdated=RULES_LAST_UPDATED,
    )
