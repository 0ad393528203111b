from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from locus_app.auth.database import init_db
from locus_app.auth.router import router as auth_router
from locus_app.config import get_settings
from locus_app.locations.router import router as locations_router
from locus_app.utils.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)
app = FastAPI(title="Locus Location Service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(locations_router)


@app.on_event("startup")
async def on_startup() -> None:
    init_db(get_settings())
    logger.info("Locus service started")


@app.get("/healthz")
async def healthcheck():
    return {"status": "ok"}
