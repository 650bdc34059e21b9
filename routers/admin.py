"""
Admin API endpoints
===================

Pass-through admin operations with the checks the portal owns:
- System config values are validated against the registry before forwarding
- Donation caps only accept known claim types
- Claim verification only accepts known claim statuses

Authorisation is enforced upstream; a 401/403 from the ESCT API is returned as-is.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
import logging

from app_config_registry import group_by_category, merge_config, validate_config_value
from deps import AdminClientDep, DashboardServiceDep
from payment_utils import get_path
from schemas import (
    CAP_CODES,
    ClaimVerifyRequest,
    ConfigEntry,
    ConfigUpdateRequest,
    DonationCapUpdateRequest,
)

log = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/api/admin", tags=["admin"])


@admin_router.get("/dashboard")
async def get_admin_dashboard(service: DashboardServiceDep):
    return await service.load_admin_dashboard()


# ==========================================
# System config
# ==========================================

@admin_router.get("/config")
async def get_config(admin: AdminClientDep):
    body = await admin.get_app_config()
    entries = [ConfigEntry(**entry).model_dump() for entry in merge_config(get_path(body, "data", default={}))]
    return group_by_category(entries)


@admin_router.put("/config/{key}")
async def update_config(key: str, update: ConfigUpdateRequest, admin: AdminClientDep):
    # ConfigValidationError is mapped to 422 by the app-level handler
    value = validate_config_value(key, update.value)
    body = await admin.update_app_config(key, value)
    log.info(f"Config {key} set to {value!r}")
    return {"key": key, "value": value, "message": get_path(body, "message") or "Configuration updated"}


# ==========================================
# Claims
# ==========================================

@admin_router.get("/claims")
async def list_claims(
    admin: AdminClientDep,
    claim_status: Optional[str] = Query(None, alias="status"),
    claim_type: Optional[str] = Query(None, alias="type"),
    page: Optional[int] = None,
    limit: Optional[int] = None,
):
    return await admin.get_claims({"status": claim_status, "type": claim_type, "page": page, "limit": limit})


@admin_router.put("/claims/{claim_id}/verify")
async def verify_claim(claim_id: str, request: ClaimVerifyRequest, admin: AdminClientDep):
    return await admin.verify_claim(claim_id, request.status, request.verificationNotes)


# ==========================================
# Donation caps
# ==========================================

@admin_router.get("/donation-caps")
async def get_donation_caps(admin: AdminClientDep, month_year: Optional[str] = Query(None, alias="monthYear")):
    body = await admin.get_donation_caps(month_year)
    return get_path(body, "data", "donationCaps", default=[])


@admin_router.put("/donation-caps/{claim_type}")
async def update_donation_cap(claim_type: str, request: DonationCapUpdateRequest, admin: AdminClientDep):
    if claim_type not in CAP_CODES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown claim type: {claim_type}",
        )
    return await admin.update_donation_cap(claim_type, request.capAmount, request.monthYear)
