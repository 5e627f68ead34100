from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.core import logger
from app.core.discord_logger import send_discord_alert
from app.database import init_db
from app.routers import api_router


# --- FastAPI configuration ---
api_description = """
EEG feed-in tariff lookup.

Finds the regulatory tariff categories (and their ct/kWh rates) that apply to an
installation, given its energy source, commissioning date and power output.

* `GET /api/v1/tariff`: filtered, power-sorted tariff categories.
* `POST /api/v1/webhook`: automation step that writes the best match onto an entity.
"""

@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    logger.info("🚀 Starting EEG tariff API...")
    init_db()

    yield

    # --- Shutdown ---
    logger.info("🛑 Stopping EEG tariff API...")


app = FastAPI(
    title="EEG Tariff API",
    description=api_description,
    version="1.0.0",
    lifespan=lifespan
)


# --- CORS middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Routers ---
app.include_router(api_router)


@app.get("/", tags=["Root"])
def read_root():
    return {"message": "EEG Tariff API v1"}


# --- Global error handling ---
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    message = f"Error 500 on {request.url.path}: {exc}"
    logger.exception(message)
    send_discord_alert(message, level="CRITICAL")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )
