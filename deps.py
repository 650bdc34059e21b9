# deps.py
# Dependency injections for routes: token resolution and upstream API clients.

from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, Header

from admin_api import AdminApiClient
from api_client import EsctApiClient
from dashboard_service import DashboardService
from token_store import AuthTokenStore, InMemoryTokenStore


# -----------------------
#  TOKEN STORE
# -----------------------
def get_token_store(
    authorization: Annotated[Optional[str], Header()] = None,
) -> AuthTokenStore:
    """
    Per-request token store holding the caller's own bearer token.

    Requests without one go upstream anonymous; nothing is shared between callers.
    """
    if authorization and authorization.lower().startswith("bearer "):
        return InMemoryTokenStore(authorization.split(" ", 1)[1].strip())
    return InMemoryTokenStore()

TokenStoreDep = Annotated[AuthTokenStore, Depends(get_token_store)]


# -----------------------
#  UPSTREAM CLIENTS
# -----------------------
async def get_api_client(token_store: TokenStoreDep) -> AsyncGenerator[EsctApiClient, None]:
    async with EsctApiClient(token_store=token_store) as client:
        yield client

ApiClientDep = Annotated[EsctApiClient, Depends(get_api_client)]


def get_admin_client(client: ApiClientDep) -> AdminApiClient:
    return AdminApiClient(client)

AdminClientDep = Annotated[AdminApiClient, Depends(get_admin_client)]


def get_dashboard_service(client: ApiClientDep) -> DashboardService:
    return DashboardService(client)

DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]
