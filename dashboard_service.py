"""
Home dashboard loader.

Fans out every read the home screen needs at once and tolerates each one
failing on its own: a failed slice is logged, replaced with a safe default and
named in ``failed``, and the aggregation below it never sees an error.
"""

import logging
from typing import Any, Dict, List, Optional

from admin_api import AdminApiClient
from api_client import EsctApiClient
from calendar_service import build_donation_calendar
from claims_service import beneficiary_breakdown, claim_amount_breakdown, filter_claims_by_category
from config import settings
from donation_service import total_contribution
from payment_utils import get_path, normalize_list
from schemas import DonationCalendar, HomeDashboard
from settle import settle_all

log = logging.getLogger(__name__)


def _objects(value: Any) -> List[Dict[str, Any]]:
    return [item for item in normalize_list(value) if isinstance(item, dict)]


class DashboardService:
    """Builds dashboard views for the member signed in on ``client``."""

    def __init__(self, client: EsctApiClient, upcoming_limit: Optional[int] = None):
        self.client = client
        self.upcoming_limit = upcoming_limit if upcoming_limit is not None else settings.UPCOMING_CLAIMS_LIMIT

    async def load_home(self) -> HomeDashboard:
        slices = [
            ("user", self.client.get_me(), None),
            ("claims", self.client.fetch_all_claims(), []),
            ("queue", self.client.get_donation_queue(), []),
            ("calendar", self.client.get_donation_calendar(), []),
            ("donations", self.client.get_my_donations(), []),
            ("gallery", self.client.get_gallery(), []),
            ("news", self.client.get_news(), []),
            ("testimonials", self.client.get_testimonials(), []),
        ]
        results = await settle_all(*(call for _, call, _ in slices))

        loaded = {}
        failed = []
        for (name, _, default), result in zip(slices, results):
            if not result.is_ok:
                log.warning(f"Dashboard slice '{name}' failed to load: {result.error}")
                failed.append(name)
            loaded[name] = result.unwrap_or(default)

        claims = _objects(loaded["claims"])
        calendar = build_donation_calendar(loaded["calendar"])

        return HomeDashboard(
            user=loaded["user"] if isinstance(loaded["user"], dict) else None,
            claimAmounts=claim_amount_breakdown(claims),
            beneficiaryCounts=beneficiary_breakdown(claims),
            calendar=DonationCalendar(**calendar),
            totalContribution=total_contribution(loaded["donations"]),
            queue=_objects(loaded["queue"]),
            upcomingClaims=filter_claims_by_category(claims, None)[: self.upcoming_limit],
            gallery=_objects(loaded["gallery"]),
            news=_objects(loaded["news"]),
            testimonials=_objects(loaded["testimonials"]),
            failed=failed,
        )

    async def load_calendar(self) -> DonationCalendar:
        events = await self.client.get_donation_calendar()
        return DonationCalendar(**build_donation_calendar(events))

    async def load_contribution_total(self) -> float:
        return total_contribution(await self.client.get_my_donations())

    async def load_admin_dashboard(self) -> Any:
        body = await AdminApiClient(self.client).get_dashboard()
        return get_path(body, "data", default={})
