# claims_service.py
# Client-side claim statistics: per-type totals, distinct beneficiaries, percent funded.

import math
from typing import Any, Dict, List, Mapping, Optional

from payment_utils import as_amount, get_path, normalize_list
from schemas import ClaimStatus, ClaimType

# Dashboard key -> claim type, in display order
CATEGORY_KEYS = {
    "retirement": ClaimType.RETIREMENT_FAREWELL,
    "deathAfter": ClaimType.DEATH_AFTER_SERVICE,
    "deathDuring": ClaimType.DEATH_DURING_SERVICE,
    "medical": ClaimType.MEDICAL_CLAIM,
    "marriage": ClaimType.DAUGHTERS_MARRIAGE,
}


def _type_value(claim_type: Any) -> Any:
    return claim_type.value if isinstance(claim_type, ClaimType) else claim_type


def _claims(claims: Any) -> List[Mapping[str, Any]]:
    return [claim for claim in normalize_list(claims) if isinstance(claim, Mapping)]


def claims_of_type(claims: Any, claim_type: Any) -> List[Mapping[str, Any]]:
    wanted = _type_value(claim_type)
    return [claim for claim in _claims(claims) if claim.get("type") == wanted]


def sum_requested_by_type(claims: Any, claim_type: Any) -> float:
    return sum(as_amount(claim.get("amountRequested")) for claim in claims_of_type(claims, claim_type))


def beneficiary_id(claim: Mapping[str, Any]) -> Optional[Any]:
    """``beneficiary._id``, falling back to ``beneficiary.ehrmsCode``."""
    beneficiary = claim.get("beneficiary")
    if not isinstance(beneficiary, Mapping):
        return None
    return beneficiary.get("_id") or beneficiary.get("ehrmsCode") or None


def count_distinct_beneficiaries_by_type(claims: Any, claim_type: Any) -> int:
    # Claims without a beneficiary id are not counted at all
    ids = set()
    for claim in claims_of_type(claims, claim_type):
        key = beneficiary_id(claim)
        if key is not None:
            ids.add(key)
    return len(ids)


def claim_amount_breakdown(claims: Any) -> Dict[str, float]:
    """
    Requested amount per category plus a grand ``total``.

    Unknown claim types only show up in ``total``.
    """
    items = _claims(claims)
    breakdown = {
        key: sum_requested_by_type(items, claim_type)
        for key, claim_type in CATEGORY_KEYS.items()
    }
    breakdown["total"] = sum(as_amount(claim.get("amountRequested")) for claim in items)
    return breakdown


def beneficiary_breakdown(claims: Any) -> Dict[str, int]:
    items = _claims(claims)
    return {
        key: count_distinct_beneficiaries_by_type(items, claim_type)
        for key, claim_type in CATEGORY_KEYS.items()
    }


def percent_funded(raised: Any, goal: Any) -> int:
    """
    Whole percent of ``goal`` covered by ``raised``, clamped to 0..100.

    A zero, negative or missing goal is 0%. Halves round up.
    """
    goal = as_amount(goal)
    if goal <= 0:
        return 0
    percent = math.floor(as_amount(raised) / goal * 100 + 0.5)
    return max(0, min(100, percent))


def claim_percent_funded(claim: Mapping[str, Any]) -> int:
    return percent_funded(claim.get("amountRaised"), claim.get("amountRequested"))


def filter_claims_by_category(
    claims: Any,
    category: Optional[str],
    status: Optional[str] = ClaimStatus.APPROVED.value,
) -> List[Mapping[str, Any]]:
    """Claims in ``status`` whose type contains ``category`` (case-insensitive)."""
    items = _claims(claims)
    if status:
        items = [claim for claim in items if claim.get("status") == status]
    category = _type_value(category)
    if not category:
        return items
    needle = category.lower()
    return [claim for claim in items if needle in str(claim.get("type") or "").lower()]


def find_claim(claims: Any, claim_id: Any) -> Optional[Mapping[str, Any]]:
    for claim in _claims(claims):
        if claim.get("_id") == claim_id or claim.get("id") == claim_id:
            return claim
    return None


def deduce_users_from_claims(claims: Any) -> List[Dict[str, Any]]:
    """Distinct user ids referenced by claims, as ``[{"id": ...}]``, first-seen order."""
    seen = {}
    for claim in _claims(claims):
        user_id = (
            get_path(claim, "beneficiary", "_id")
            or get_path(claim, "beneficiary", "userId")
            or get_path(claim, "beneficiary", "ehrmsCode")
            or claim.get("owner")
            or claim.get("createdBy")
        )
        if user_id and user_id not in seen:
            seen[user_id] = {"id": user_id}
    return list(seen.values())
