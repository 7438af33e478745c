import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from api.api_v1.api import api_router
from core.config import settings
from core.constants import StoreBackend
from core.db import init_db
from core.exceptions import RewardError
from log import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings)
    if settings.REWARD_STORE_BACKEND == StoreBackend.database:
        init_db()
    logger.info(
        "%s started with %s reward store", settings.PROJECT_NAME, settings.REWARD_STORE_BACKEND.value
    )
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RewardError)
async def reward_exception_handler(request: Request, exc: RewardError):
    if settings.REDEEM_LEGACY_STATUS_CODES:
        status_code = exc.legacy_status_code
    else:
        status_code = exc.status_code
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "kind": exc.kind.value,
                "message": exc.message,
            },
        },
    )


@app.exception_handler(Exception)
async def exception_handler(request: Request, exc: Exception):
    logger.error(exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": str(exc)},
    )


app.include_router(api_router, prefix=settings.API_V1_STR)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8001)
