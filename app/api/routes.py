# app/api/routes.py

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

from app.core.rules import threat_summary
from app.core.spam_detector import evaluate_phone
from app.core.url_scanner import evaluate_url
from app.models.schemas import (
    CheckPhoneRequest,
    HealthStatus,
    PhoneCheckResult,
    ScanResult,
    ScanUrlRequest,
    ThreatSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthStatus)
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc)}


# -------------------------
# URL SCANNER
# -------------------------
@router.post("/scan-url", response_model=ScanResult)
def scan_url(payload: ScanUrlRequest):
    if not payload.url:
        raise HTTPException(status_code=400, detail="URL is required")

    result = evaluate_url(payload.url)

    logger.info(
        "URL scanned: risk=%s confidence=%d threats=%d",
        result.riskLevel.value, result.confidence, len(result.threats)
    )
    return result


# -------------------------
# PHONE SPAM CHECKER
# -------------------------
@router.post("/check-phone", response_model=PhoneCheckResult)
def check_phone(payload: CheckPhoneRequest):
    if not payload.phone:
        raise HTTPException(status_code=400, detail="Phone number is required")

    result = evaluate_phone(payload.phone)

    logger.info(
        "Phone checked: recommendation=%s confidence=%d",
        result.recommendation.value, result.confidence
    )
    return result


# -------------------------
# THREAT STATISTICS
# -------------------------
@router.get("/threats", response_model=ThreatSummary)
def threats():
    return threat_summary()
