import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from api_client import ApiError
from dashboard_service import DashboardService

CLAIMS = [
    {"_id": "c1", "type": "Medical Claim", "status": "Approved", "amountRequested": 5000, "beneficiary": {"_id": "b1"}},
    {"_id": "c2", "type": "Medical Claim", "status": "Approved", "amountRequested": 3000, "beneficiary": {"_id": "b1"}},
    {"_id": "c3", "type": "Retirement Farewell", "status": "PendingVerification", "amountRequested": 1000,
     "beneficiary": {"ehrmsCode": "E9"}},
]


@pytest.fixture
def client():
    client = MagicMock()
    client.get_me = AsyncMock(return_value={"name": "Ravi", "ehrmsCode": "E1"})
    client.fetch_all_claims = AsyncMock(return_value=CLAIMS)
    client.get_donation_queue = AsyncMock(return_value=[{"claimId": "c1"}])
    client.get_donation_calendar = AsyncMock(return_value=[
        {"monthYear": "2024-01", "status": "COMPLETED", "donationsCompleted": 2},
        {"monthYear": "2024-03", "status": "PARTIAL", "donationsCompleted": 1},
    ])
    client.get_my_donations = AsyncMock(return_value=[
        {"status": "COMPLETED", "amount": 500},
        {"status": "PENDING", "amount": 300},
        {"status": "COMPLETED", "amount": 200},
    ])
    client.get_gallery = AsyncMock(return_value=[{"_id": "g1"}])
    client.get_news = AsyncMock(return_value=[{"_id": "n1"}])
    client.get_testimonials = AsyncMock(return_value=[{"_id": "t1"}])
    return client


def test_load_home_aggregates_every_slice(client):
    # Act
    home = asyncio.run(DashboardService(client).load_home())

    # Assert
    assert home.failed == []
    assert home.user["name"] == "Ravi"
    assert home.claimAmounts["medical"] == 8000
    assert home.claimAmounts["retirement"] == 1000
    assert home.claimAmounts["total"] == 9000
    assert home.beneficiaryCounts["medical"] == 1
    assert home.beneficiaryCounts["retirement"] == 1
    assert home.calendar.totalDonations == 3
    assert home.calendar.calendar[2024][0]["status"] == "COMPLETED"
    assert home.totalContribution == 700
    assert [c["_id"] for c in home.upcomingClaims] == ["c1", "c2"]
    assert home.queue == [{"claimId": "c1"}]
    assert home.news == [{"_id": "n1"}]


def test_failed_slices_default_without_hiding_others(client):
    # Arrange
    client.fetch_all_claims.side_effect = ApiError("Request failed with status code 500", status_code=500)
    client.get_news.side_effect = ApiError("Network Error")

    # Act
    home = asyncio.run(DashboardService(client).load_home())

    # Assert
    assert home.failed == ["claims", "news"]
    assert home.claimAmounts["total"] == 0
    assert home.beneficiaryCounts == {"retirement": 0, "deathAfter": 0, "deathDuring": 0, "medical": 0, "marriage": 0}
    assert home.upcomingClaims == []
    assert home.news == []
    # Unaffected slices still load
    assert home.totalContribution == 700
    assert home.calendar.totalDonations == 3
    assert home.gallery == [{"_id": "g1"}]


def test_unauthenticated_user_slice(client):
    client.get_me.side_effect = ApiError("Unauthorized", status_code=401)

    home = asyncio.run(DashboardService(client).load_home())

    assert home.user is None
    assert home.failed == ["user"]


def test_malformed_payloads_are_tolerated(client):
    client.get_my_donations.return_value = {"foo": "bar"}
    client.get_gallery.return_value = "not a list"
    client.get_donation_queue.return_value = [{"claimId": "c1"}, "junk"]

    home = asyncio.run(DashboardService(client).load_home())

    assert home.failed == []
    assert home.totalContribution == 0
    assert home.gallery == []
    assert home.queue == [{"claimId": "c1"}]


def test_upcoming_claims_are_capped(client):
    client.fetch_all_claims.return_value = [
        {"_id": f"c{i}", "type": "Medical Claim", "status": "Approved", "amountRequested": 1} for i in range(5)
    ]

    home = asyncio.run(DashboardService(client, upcoming_limit=2).load_home())

    assert [c["_id"] for c in home.upcomingClaims] == ["c0", "c1"]


def test_load_calendar_and_contribution_total(client):
    service = DashboardService(client)

    calendar = asyncio.run(service.load_calendar())
    total = asyncio.run(service.load_contribution_total())

    assert calendar.totalDonations == 3
    assert calendar.calendar[2024][2]["monthYear"] == "2024-03"
    assert total == 700


def test_load_admin_dashboard_unwraps_data(client):
    client.get = AsyncMock(return_value={"success": True, "data": {"pendingClaims": 4}})

    stats = asyncio.run(DashboardService(client).load_admin_dashboard())

    assert stats == {"pendingClaims": 4}
    client.get.assert_awaited_once_with("/admin/dashboard")
