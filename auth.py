from fastapi import APIRouter, HTTPException, status
import logging

from deps import ApiClientDep
from schemas import LoginRequest

auth_router = APIRouter(tags=["auth"])
log = logging.getLogger(__name__)


@auth_router.post("/login")
async def login(credentials: LoginRequest, client: ApiClientDep):
    """
    Exchange EHRMS code + password for a token.

    The token is only returned, never kept server-side: callers send it back
    as ``Authorization: Bearer <token>`` on later requests.
    """
    token = await client.login(credentials.ehrmsCode, credentials.password)
    return {"token": token, "token_type": "bearer"}


@auth_router.post("/logout")
async def logout(client: ApiClientDep):
    # The portal holds no session; the caller signs out by discarding its token
    client.logout()
    return {"message": "Logged out. Discard the bearer token to end the session."}


@auth_router.get("/me")
async def read_me(client: ApiClientDep):
    me = await client.get_me()
    if me is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return me
