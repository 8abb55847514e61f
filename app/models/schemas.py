from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class RiskLevel(str, Enum):
    SAFE = "safe"
    SUSPICIOUS = "suspicious"
    DANGEROUS = "dangerous"
    UNKNOWN = "unknown"


class Recommendation(str, Enum):
    SAFE = "safe"
    CAUTION = "caution"
    BLOCK = "block"


# -------------------------
# REQUESTS
# -------------------------
# Fields are optional so that a missing value reaches the route
# and is rejected with 400 like an empty one.
class ScanUrlRequest(BaseModel):
    url: Optional[str] = None


class CheckPhoneRequest(BaseModel):
    phone: Optional[str] = None


# -------------------------
# RESULTS
# -------------------------
class ScanResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    isPhishing: bool
    riskLevel: RiskLevel
    confidence: int
    threats: List[str]
    timestamp: datetime


class PhoneCheckResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    phone: str
    isSpam: bool
    confidence: int
    reasons: List[str]
    recommendation: Recommendation
    timestamp: datetime


class ThreatSummary(BaseModel):
    totalThreats: int
    suspiciousTlds: int
    phishingDomains: int
    spamPatterns: int
    spamPrefixes: int
    legitimateDomains: int
    lastUpdated: str


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime
