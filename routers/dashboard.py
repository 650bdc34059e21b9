"""Member dashboard API endpoints."""

from typing import Optional

from fastapi import APIRouter

from calendar_service import calendar_months
from deps import DashboardServiceDep
from schemas import DonationCalendar, HomeDashboard

dashboard_router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@dashboard_router.get("/home", response_model=HomeDashboard)
async def get_home(service: DashboardServiceDep):
    """Everything the home screen shows; slices that failed upstream are listed in `failed`."""
    return await service.load_home()


@dashboard_router.get("/calendar", response_model=DonationCalendar)
async def get_calendar(service: DashboardServiceDep):
    return await service.load_calendar()


@dashboard_router.get("/calendar/{year}")
async def get_calendar_year(year: int, service: DashboardServiceDep):
    """Twelve month rows for one year, PENDING where there is no record."""
    calendar = await service.load_calendar()
    return {"year": year, "months": calendar_months(calendar.calendar, year)}


@dashboard_router.get("/contributions")
async def get_contributions(service: DashboardServiceDep, currency: Optional[str] = "INR"):
    total = await service.load_contribution_total()
    return {"totalContribution": total, "currency": currency}
