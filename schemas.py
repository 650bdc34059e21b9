# schemas.py
# Enums for the upstream ESCT vocabulary and Pydantic models for portal requests/responses.
#
# Upstream entities (claims, donations, calendar events, users) stay plain JSON
# mappings: the backend owns their shape and aggregation must tolerate gaps.

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ClaimType(str, Enum):
    DEATH_DURING_SERVICE = "Death During Service"
    DEATH_AFTER_SERVICE = "Death After Service"
    RETIREMENT_FAREWELL = "Retirement Farewell"
    DAUGHTERS_MARRIAGE = "Daughter's Marriage"
    MEDICAL_CLAIM = "Medical Claim"

    @property
    def cap_code(self) -> str:
        """Identifier the donation-caps endpoints use for this type."""
        return _CAP_CODES[self]


_CAP_CODES = {
    ClaimType.DEATH_DURING_SERVICE: "DEATH_DURING_SERVICE",
    ClaimType.DEATH_AFTER_SERVICE: "DEATH_AFTER_SERVICE",
    ClaimType.RETIREMENT_FAREWELL: "RETIREMENT_FAREWELL",
    ClaimType.DAUGHTERS_MARRIAGE: "DAUGHTER_MARRIAGE",
    ClaimType.MEDICAL_CLAIM: "MEDICAL_CLAIM",
}

CAP_CODES = frozenset(_CAP_CODES.values())


class ClaimStatus(str, Enum):
    PENDING_VERIFICATION = "PendingVerification"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    FULLY_FUNDED = "FullyFunded"
    CLOSED = "Closed"


class DonationStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class CalendarStatus(str, Enum):
    COMPLETED = "COMPLETED"
    PARTIAL = "PARTIAL"
    PENDING = "PENDING"


# ---------------------------------------------------------------------------
# Requests accepted by the portal API
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    ehrmsCode: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ClaimCreate(BaseModel):
    type: ClaimType
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    amountRequested: float = Field(..., gt=0)
    beneficiary: Optional[Dict[str, Any]] = None

    class Config:
        extra = "allow"


class QueueAddRequest(BaseModel):
    claimId: str = Field(..., min_length=1)


class OrderCreateRequest(BaseModel):
    donationId: str = Field(..., min_length=1)


class ClaimVerifyRequest(BaseModel):
    status: ClaimStatus
    verificationNotes: str = ""


class ConfigUpdateRequest(BaseModel):
    value: Any


class DonationCapUpdateRequest(BaseModel):
    capAmount: float = Field(..., ge=0)
    monthYear: str = Field(..., pattern=r"^\d{4}-(0[1-9]|1[0-2])$")


# ---------------------------------------------------------------------------
# Portal responses
# ---------------------------------------------------------------------------

class DonationCalendar(BaseModel):
    calendar: Dict[int, List[Optional[Dict[str, Any]]]]
    totalDonations: float = 0


class HomeDashboard(BaseModel):
    user: Optional[Dict[str, Any]] = None
    claimAmounts: Dict[str, float]
    beneficiaryCounts: Dict[str, int]
    calendar: DonationCalendar
    totalContribution: float = 0
    queue: List[Dict[str, Any]] = []
    upcomingClaims: List[Dict[str, Any]] = []
    gallery: List[Dict[str, Any]] = []
    news: List[Dict[str, Any]] = []
    testimonials: List[Dict[str, Any]] = []
    # Names of the slices that failed to load and were defaulted
    failed: List[str] = []


class ConfigEntry(BaseModel):
    key: str
    value: Any = None
    category: str
    label: Optional[str] = None
    valueType: Optional[str] = None
    description: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
