"""Donation queue and member donation endpoints."""

import logging

from fastapi import APIRouter, status

from deps import ApiClientDep
from donation_service import group_donations_by_category, remove_queue_item, total_contribution
from schemas import OrderCreateRequest, QueueAddRequest
from settle import settle_all

log = logging.getLogger(__name__)

donations_router = APIRouter(prefix="/api/donations", tags=["donations"])


@donations_router.get("/mine")
async def get_my_donations(client: ApiClientDep):
    donations = await client.get_my_donations()
    return {
        "totalContribution": total_contribution(donations),
        "byCategory": group_donations_by_category(donations),
    }


@donations_router.get("/queue")
async def get_queue(client: ApiClientDep):
    return await client.get_donation_queue()


@donations_router.post("/queue", status_code=status.HTTP_201_CREATED)
async def add_to_queue(request: QueueAddRequest, client: ApiClientDep):
    return {"data": await client.add_to_queue(request.claimId)}


@donations_router.delete("/queue/{claim_id}")
async def remove_from_queue(claim_id: str, client: ApiClientDep):
    """
    Delete upstream, then return the queue without the removed entry.

    A failed queue refresh does not undo the delete: the queue comes back
    empty and ``failed`` names it.
    """
    await client.remove_from_queue(claim_id)

    [result] = await settle_all(client.get_donation_queue())
    failed = []
    if not result.is_ok:
        log.warning(f"Queue refresh after removing {claim_id} failed: {result.error}")
        failed.append("queue")

    return {
        "message": "Claim removed from queue.",
        "queue": remove_queue_item(result.unwrap_or([]), claim_id),
        "failed": failed,
    }


@donations_router.post("/orders", status_code=status.HTTP_201_CREATED)
async def create_order(request: OrderCreateRequest, client: ApiClientDep):
    return {"order": await client.create_donation_order(request.donationId)}
