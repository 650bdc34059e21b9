"""Claims API endpoints."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from claims_service import claim_percent_funded, filter_claims_by_category
from deps import ApiClientDep
from schemas import ClaimCreate, ClaimStatus

claims_router = APIRouter(prefix="/api/claims", tags=["claims"])


@claims_router.get("")
async def list_claims(
    client: ApiClientDep,
    category: Optional[str] = Query(None, description="Substring of the claim type, e.g. 'Medical Claim'"),
    status_filter: Optional[ClaimStatus] = Query(ClaimStatus.APPROVED, alias="status"),
):
    claims = await client.fetch_all_claims()
    status_value = status_filter.value if status_filter else None
    filtered = filter_claims_by_category(claims, category, status=status_value)
    return [{**claim, "percentFunded": claim_percent_funded(claim)} for claim in filtered]


@claims_router.get("/mine")
async def list_my_claims(client: ApiClientDep):
    return await client.get_my_claims()


@claims_router.get("/{claim_id}")
async def get_claim(claim_id: str, client: ApiClientDep):
    claim = await client.fetch_claim_by_id(claim_id)
    if not isinstance(claim, dict):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Claim not found")
    return {**claim, "percentFunded": claim_percent_funded(claim)}


@claims_router.post("", status_code=status.HTTP_201_CREATED)
async def create_claim(claim: ClaimCreate, client: ApiClientDep):
    message = await client.create_claim(claim.model_dump(mode="json", exclude_none=True))
    return {"message": message}
