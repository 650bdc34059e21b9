import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from api_client import ApiError
from app_config_registry import ConfigValidationError
from auth import auth_router
from config import settings
from routers.admin import admin_router
from routers.claims import claims_router
from routers.dashboard import dashboard_router
from routers.donations import donations_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

app = FastAPI(title="ESCT Portal")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    # Upstream status passes through; transport failures have none
    status_code = exc.status_code if exc.status_code and exc.status_code >= 400 else status.HTTP_502_BAD_GATEWAY
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.exception_handler(ConfigValidationError)
async def config_validation_error_handler(request: Request, exc: ConfigValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "key": exc.key},
    )


@app.on_event("startup")
async def startup_event():
    log.info(f"ESCT portal starting; upstream API at {settings.ESCT_API_BASE_URL}")


@app.get("/health")
async def health():
    return {"status": "ok"}


# --- Routers ---
app.include_router(auth_router, prefix="/auth")
app.include_router(dashboard_router)  # /api/dashboard/*
app.include_router(claims_router)  # /api/claims/*
app.include_router(donations_router)  # /api/donations/*
app.include_router(admin_router)  # /api/admin/*


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=False)
