# donation_service.py
# Totals and groupings over the signed-in member's donations and donation queue.

from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Set

from payment_utils import as_amount, get_path, normalize_list
from schemas import DonationStatus

UNCATEGORIZED = "Uncategorized"


def total_contribution(donations: Any) -> float:
    """
    Sum of ``amount`` over COMPLETED donations.

    ``donations`` may be a list, a ``{"data": [...]}`` envelope or a malformed
    payload; anything that is not a list of donations totals 0.
    """
    total = 0
    for donation in normalize_list(donations):
        if not isinstance(donation, Mapping):
            continue
        if donation.get("status") != DonationStatus.COMPLETED.value:
            continue
        total += as_amount(donation.get("amount"))
    return total


def group_donations_by_category(donations: Any) -> Dict[str, List[Mapping[str, Any]]]:
    """``{claim type: [donations]}`` in first-seen order; untyped claims go under Uncategorized."""
    groups: Dict[str, List[Mapping[str, Any]]] = OrderedDict()
    for donation in normalize_list(donations):
        if not isinstance(donation, Mapping):
            continue
        category = get_path(donation, "claimId", "type") or UNCATEGORIZED
        groups.setdefault(category, []).append(donation)
    return groups


def _ref_id(ref: Any) -> Any:
    if isinstance(ref, Mapping):
        return ref.get("_id") or ref.get("id")
    return ref


def queue_item_ids(item: Mapping[str, Any]) -> Set[Any]:
    """Ids a queue entry can be addressed by: its pending donation and its claim."""
    ids = {_ref_id(item.get("donationId")), _ref_id(item.get("claimId"))}
    ids.discard(None)
    return ids


def remove_queue_item(queue: Any, item_id: Any) -> List[Mapping[str, Any]]:
    """The queue as it looks after ``item_id`` (donation or claim id) was deleted upstream."""
    return [
        item for item in normalize_list(queue)
        if isinstance(item, Mapping) and item_id not in queue_item_ids(item)
    ]
