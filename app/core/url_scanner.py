# app/core/url_scanner.py

import ipaddress
import re
import string
from datetime import datetime, timezone
from urllib.parse import unquote, urlsplit

from app.core.rules import LEGITIMATE_DOMAINS, SUSPICIOUS_TLDS, TYPOSQUAT_DOMAINS
from app.models.schemas import RiskLevel, ScanResult

IPV4_REGEX = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}", re.ASCII)

SCHEME_REGEX = re.compile(r"([a-zA-Z][a-zA-Z0-9+.\-]*):(.*)", re.DOTALL)

# Schemes that cannot be used without a host
WEB_SCHEMES = {"http", "https", "ftp", "ws", "wss"}

FORBIDDEN_HOST_CHARS = set(" \t\r\n#/:<>?[\\]^|%\x7f")

HEX_DIGITS = set(string.hexdigits)
OCTAL_DIGITS = set(string.octdigits)
DECIMAL_DIGITS = set(string.digits)

DANGEROUS_THRESHOLD = 50
SUSPICIOUS_THRESHOLD = 25


def _normalize_slashes(url: str) -> str:
    """
    For web schemes, browsers skip any run of / or \\ after the colon
    and read \\ as / up to the query, so "http:\\\\host" means "http://host".
    """
    match = SCHEME_REGEX.fullmatch(url)
    if not match or match.group(1).lower() not in WEB_SCHEMES:
        return url

    scheme, rest = match.groups()
    rest = rest.lstrip("/\\")

    end = len(rest)
    for marker in ("?", "#"):
        index = rest.find(marker)
        if index != -1:
            end = min(end, index)

    return f"{scheme}://{rest[:end].replace(chr(92), '/')}{rest[end:]}"


def _parse_ipv4_number(part: str):
    """
    Reads one IPv4 label in decimal, octal (leading 0) or hex (0x).
    Returns None if the label is not a number.
    """
    if not part:
        return None

    radix, digits = 10, DECIMAL_DIGITS
    if part.startswith(("0x", "0X")):
        part, radix, digits = part[2:], 16, HEX_DIGITS
    elif len(part) > 1 and part.startswith("0"):
        part, radix, digits = part[1:], 8, OCTAL_DIGITS

    if not part:
        return 0
    if not set(part) <= digits:
        return None

    return int(part, radix)


def _host_labels(host: str):
    labels = host.split(".")
    if len(labels) > 1 and labels[-1] == "":
        labels.pop()
    return labels


def _ends_in_number(host: str) -> bool:
    last = _host_labels(host)[-1]
    if last and set(last) <= DECIMAL_DIGITS:
        return True
    return _parse_ipv4_number(last) is not None


def _canonical_ipv4(host: str):
    """
    Rewrites numeric hosts ("3232235777", "0xC0A80101", "0300.0250.1.1")
    as a dotted quad. Returns None if the host is not a valid address.
    """
    labels = _host_labels(host)
    if len(labels) > 4:
        return None

    numbers = [_parse_ipv4_number(label) for label in labels]
    if None in numbers:
        return None
    if any(number > 255 for number in numbers[:-1]):
        return None
    if numbers[-1] >= 256 ** (5 - len(numbers)):
        return None

    address = numbers[-1]
    for index, number in enumerate(numbers[:-1]):
        address += number * 256 ** (3 - index)

    return str(ipaddress.IPv4Address(address))


def _parse(url: str):
    """
    Returns (scheme, hostname) lower-cased, or None if the URL is unusable.

    The hostname is percent-decoded and numeric hosts are rewritten as a
    dotted quad, the way a browser resolves them before connecting.
    """
    try:
        parts = urlsplit(_normalize_slashes(url.strip()))
        _ = parts.port  # raises ValueError on a malformed port
    except ValueError:
        return None

    scheme = parts.scheme.lower()
    hostname = (parts.hostname or "").lower()

    # urlsplit only leaves colons in a bracketed IPv6 literal
    is_ipv6 = ":" in hostname
    if not is_ipv6:
        hostname = unquote(hostname).lower()

    if not scheme:
        return None
    if scheme in WEB_SCHEMES and not hostname:
        return None
    if is_ipv6:
        return scheme, hostname

    if any(ch in FORBIDDEN_HOST_CHARS or ord(ch) < 0x20 for ch in hostname):
        return None

    if hostname and _ends_in_number(hostname):
        hostname = _canonical_ipv4(hostname)
        if hostname is None:
            return None

    return scheme, hostname


def evaluate_url(url: str) -> ScanResult:
    """
    Scores a URL for phishing indicators.

    Only the scheme and hostname are inspected. Checks are additive;
    a known legitimate domain overrides everything at the end.
    """
    parsed = _parse(url)

    if parsed is None:
        return ScanResult(
            url=url,
            isPhishing=False,
            riskLevel=RiskLevel.UNKNOWN,
            confidence=0,
            threats=["Invalid URL format"],
            timestamp=datetime.now(timezone.utc)
        )

    scheme, domain = parsed
    threats = []
    confidence = 0

    # 1. HTTPS
    if scheme != "https":
        threats.append("Not using HTTPS - insecure connection")
        confidence += 15

    # 2. Suspicious TLD
    if domain.endswith(SUSPICIOUS_TLDS):
        threats.append("Suspicious top-level domain")
        confidence += 25

    # 3. Typosquatting
    for legit, fakes in TYPOSQUAT_DOMAINS.items():
        if domain in fakes:
            threats.append(f"Typosquatting attempt - impersonating {legit}")
            confidence += 40
            break

    # 4. Length and special characters
    if len(domain) > 50:
        threats.append("Unusually long domain name")
        confidence += 10

    if "@" in domain:
        threats.append("Contains @ symbol (potential credential phishing)")
        confidence += 30

    if domain.count("-") > 3:
        threats.append("Excessive hyphens in domain")
        confidence += 15

    # 5. Raw IP address
    if IPV4_REGEX.fullmatch(domain):
        threats.append("Using IP address instead of domain name")
        confidence += 20

    is_phishing = False
    if confidence >= DANGEROUS_THRESHOLD:
        is_phishing = True
        risk_level = RiskLevel.DANGEROUS
    elif confidence >= SUSPICIOUS_THRESHOLD:
        risk_level = RiskLevel.SUSPICIOUS
    else:
        risk_level = RiskLevel.SAFE

    # Allow-list wins, but isPhishing keeps its computed value
    if domain in LEGITIMATE_DOMAINS:
        risk_level = RiskLevel.SAFE
        threats = ["Verified legitimate website"]
        confidence = 0

    return ScanResult(
        url=url,
        isPhishing=is_phishing,
        riskLevel=risk_level,
        confidence=confidence,
        threats=threats,
        timestamp=datetime.now(timezone.utc)
    )
