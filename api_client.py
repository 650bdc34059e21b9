"""
ESCT REST API client
====================

Async client for the member-facing surface of the ESCT backend.

Every request:
1. Attaches ``Authorization: Bearer <token>`` when the token store has one
   (anonymous requests go out without the header)
2. Raises ``ApiError`` on transport failures and non-2xx responses, with the
   server's ``message`` unwrapped into the error message
3. Returns the decoded JSON body; endpoint helpers then unwrap ``data``

Nothing is retried. Timeouts are aiohttp's unless REQUEST_TIMEOUT_SECONDS is set.
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import aiohttp

from claims_service import deduce_users_from_claims, find_claim
from config import settings
from payment_utils import get_path
from token_store import AuthTokenStore, FileTokenStore, InMemoryTokenStore

log = logging.getLogger(__name__)

# (filename, content, content_type)
FileUpload = Tuple[str, Any, Optional[str]]


class ApiError(Exception):
    """Network or HTTP failure talking to the ESCT API."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


def error_message(payload: Any, status_code: int) -> str:
    message = get_path(payload, "message")
    if isinstance(message, str) and message:
        return message
    return f"Request failed with status code {status_code}"


def clean_params(params: Optional[Mapping[str, Any]]) -> Optional[Dict[str, str]]:
    """Drop None/empty filters; stringify the rest the way a query string would."""
    if not params:
        return None
    cleaned = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = str(value)
    return cleaned or None


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value)
    return str(value)


def build_form_data(
    fields: Mapping[str, Any],
    file_field: Optional[str] = None,
    file: Optional[FileUpload] = None,
) -> aiohttp.FormData:
    """
    Multipart body for upload endpoints.

    None values are skipped, list values are repeated once per item, nested
    mappings are sent as JSON strings, and ``file`` is attached under
    ``file_field``.
    """
    form = aiohttp.FormData()
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            for item in value:
                form.add_field(key, _form_value(item))
        else:
            form.add_field(key, _form_value(value))

    if file is not None and file_field:
        filename, content, content_type = file
        form.add_field(file_field, content, filename=filename, content_type=content_type)
    return form


class EsctApiClient:
    """Member-facing ESCT endpoints over one aiohttp session."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_store: Optional[AuthTokenStore] = None,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.ESCT_API_BASE_URL).rstrip("/")
        self.token_store = token_store or InMemoryTokenStore()
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS
        self._session = session
        self._owns_session = session is None

    @classmethod
    def with_file_store(cls, path: Optional[str] = None, **kwargs) -> "EsctApiClient":
        """
        Client for a single-user script whose login survives restarts.

        The token is persisted in a local JSON file, so never hand this to
        code that serves more than one caller.
        """
        store = FileTokenStore(path or settings.TOKEN_STORE_PATH, key=settings.TOKEN_KEY)
        return cls(token_store=store, **kwargs)

    async def __aenter__(self) -> "EsctApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            kwargs = {}
            if self.timeout:
                kwargs["timeout"] = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(**kwargs)
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def build_headers(self, multipart: bool = False) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if not multipart:
            # aiohttp sets the multipart boundary itself
            headers["Content-Type"] = "application/json"
        token = self.token_store.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    async def _read_payload(response) -> Any:
        text = await response.text()
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
        data: Any = None,
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        multipart = isinstance(data, aiohttp.FormData)
        session = self._get_session()

        try:
            async with session.request(
                method,
                url,
                params=clean_params(params),
                json=json_body,
                data=data,
                headers=self.build_headers(multipart=multipart),
            ) as response:
                payload = await self._read_payload(response)
                status_code = response.status
        except aiohttp.ClientError as e:
            log.error(f"{method} {url} failed: {e}")
            raise ApiError(str(e) or "Network Error") from e
        except asyncio.TimeoutError as e:
            log.error(f"{method} {url} timed out")
            raise ApiError("Request timed out") from e

        if status_code >= 400:
            message = error_message(payload, status_code)
            log.warning(f"{method} {url} -> {status_code}: {message}")
            raise ApiError(message, status_code=status_code, payload=payload)
        return payload

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json_body: Any = None, data: Any = None) -> Any:
        return await self.request("POST", path, json_body=json_body, data=data)

    async def put(self, path: str, json_body: Any = None, data: Any = None) -> Any:
        return await self.request("PUT", path, json_body=json_body, data=data)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def login(self, ehrms_code: str, password: str) -> str:
        body = await self.post("/auth/login", {"ehrmsCode": ehrms_code, "password": password})
        token = get_path(body, "data", "token")
        if not token:
            raise ApiError("Token missing in response")
        self.token_store.set(token)
        log.info(f"Logged in as {ehrms_code}")
        return token

    async def register(
        self,
        fields: Mapping[str, Any],
        file_field: Optional[str] = None,
        file: Optional[FileUpload] = None,
    ) -> str:
        body = await self.post("/auth/register", data=build_form_data(fields, file_field, file))
        token = get_path(body, "data", "token")
        if not token:
            raise ApiError("Token missing after registration")
        self.token_store.set(token)
        return token

    def logout(self) -> None:
        self.token_store.clear()

    async def get_me(self) -> Optional[Dict[str, Any]]:
        body = await self.get("/auth/me")
        return get_path(body, "data")

    # ------------------------------------------------------------------
    # Claims
    # ------------------------------------------------------------------

    async def fetch_all_claims(self) -> List[Dict[str, Any]]:
        body = await self.get("/claims")
        return get_path(body, "data", "claims", default=[])

    async def create_claim(self, claim: Mapping[str, Any]) -> str:
        body = await self.post("/claims", dict(claim))
        log.info(f"Claim submitted: {claim.get('title')}")
        return get_path(body, "message") or "Claim submitted successfully!"

    async def fetch_claim_by_id(self, claim_id: str) -> Optional[Dict[str, Any]]:
        try:
            body = await self.get(f"/claims/{claim_id}")
            return get_path(body, "data")
        except ApiError as e:
            # Not every deployment serves /claims/:id; search the full list instead
            log.warning(f"GET /claims/{claim_id} failed ({e}); falling back to the claims list")
            return find_claim(await self.fetch_all_claims(), claim_id)

    async def get_my_claims(self) -> List[Dict[str, Any]]:
        body = await self.get("/claims/my-claims")
        return get_path(body, "data", default=[])

    async def get_random_claims(self) -> List[Dict[str, Any]]:
        body = await self.get("/claims/random")
        return get_path(body, "data", default=[])

    async def get_claims_by_type(self, claim_type: str, page: int = 1, limit: int = 10) -> Any:
        body = await self.get(f"/claims/{claim_type}", params={"page": page, "limit": limit})
        return get_path(body, "data", default=[])

    # ------------------------------------------------------------------
    # Donations & calendar
    # ------------------------------------------------------------------

    async def get_donation_queue(self) -> List[Dict[str, Any]]:
        body = await self.get("/donations/queue")
        return get_path(body, "data", default=[])

    async def add_to_queue(self, claim_id: str) -> Any:
        body = await self.post("/donations/add-to-queue", {"claimId": claim_id})
        log.info(f"Claim {claim_id} added to donation queue")
        return get_path(body, "data")

    async def remove_from_queue(self, claim_id: str) -> Any:
        body = await self.delete(f"/donations/queue/{claim_id}")
        log.info(f"Removed {claim_id} from donation queue")
        return get_path(body, "data")

    async def create_donation_order(self, donation_id: str) -> Any:
        body = await self.post("/donations/create-order", {"donationId": donation_id})
        return get_path(body, "data")

    async def get_my_donations(self) -> Any:
        """Raw ``data`` of GET /donations; callers normalise it (it is not always a list)."""
        body = await self.get("/donations")
        return get_path(body, "data", default=[])

    async def get_donation_calendar(self) -> List[Dict[str, Any]]:
        body = await self.get("/users/calendar")
        return get_path(body, "data", default=[])

    # ------------------------------------------------------------------
    # Profile, nominees, users
    # ------------------------------------------------------------------

    async def update_profile(self, section: str, data: Mapping[str, Any]) -> Any:
        return await self.put(f"/users/{section}", dict(data))

    async def get_my_nominees(self) -> List[Dict[str, Any]]:
        body = await self.get("/nominees")
        return get_path(body, "data", default=[])

    async def add_nominee(self, nominee: Mapping[str, Any]) -> Any:
        body = await self.post("/nominees", dict(nominee))
        return get_path(body, "data")

    async def delete_nominee(self, nominee_id: str) -> Any:
        return await self.delete(f"/nominees/{nominee_id}")

    async def get_all_users(self, use_users_endpoint: Optional[bool] = None) -> List[Dict[str, Any]]:
        """
        All users, from GET /users when enabled, otherwise deduced from claims.

        A 404 from /users also falls back to the claims; other errors propagate.
        """
        if use_users_endpoint is None:
            use_users_endpoint = settings.USE_USERS_ENDPOINT
        if not use_users_endpoint:
            return deduce_users_from_claims(await self.fetch_all_claims())

        try:
            body = await self.get("/users")
        except ApiError as e:
            if e.status_code != 404:
                raise
            log.warning("GET /users not found (404). Falling back to deducing users from claims.")
            try:
                return deduce_users_from_claims(await self.fetch_all_claims())
            except ApiError as fallback_error:
                log.warning(f"Failed to deduce users from claims: {fallback_error}")
                return []

        users = get_path(body, "data")
        if users is None:
            users = body if body is not None else []
        return users

    # ------------------------------------------------------------------
    # Public content
    # ------------------------------------------------------------------

    async def get_gallery(self) -> List[Dict[str, Any]]:
        body = await self.get("/gallery")
        return get_path(body, "data", default=[])

    async def get_news(self) -> List[Dict[str, Any]]:
        body = await self.get("/news")
        return get_path(body, "data", default=[])

    async def get_testimonials(self) -> List[Dict[str, Any]]:
        body = await self.get("/testimonials")
        return get_path(body, "data", default=[])
