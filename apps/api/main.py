# apps/api/main.py
# Sim test harness: the "parent window" that collects errors posted by sims
# launched with ?postMessageOnError, plus a view of the startup globals.

from __future__ import annotations

import logging
import os
import time
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chipper.core.logging import configure_logging, request_logging_middleware
from chipper.core.settings import get_settings
from chipper.runtime.error_reporting import ErrorReport
from chipper.runtime.initialize_globals import initialize_globals
from chipper.runtime.query_parameters import KNOWN_PARAMETERS

settings = get_settings()
configure_logging(level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
log_err = logging.getLogger("chipper.harness.errors")

allow_origins = os.environ.get("CORS_ALLOWED_ORIGINS", "http://127.0.0.1:8080").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(request_logging_middleware)

# Oldest reports drop off once the buffer is full
ERRORS: Deque[Dict[str, Any]] = deque(maxlen=max(1, settings.error_buffer_size))


@app.get("/health")
async def health() -> JSONResponse:
    return JSONResponse(
        {
            "status": "ok",
            "time": datetime.now(timezone.utc).isoformat(),
            "sim_level": settings.sim_level,
            "errors_buffered": len(ERRORS),
        }
    )


@app.get("/config")
async def config() -> JSONResponse:
    return JSONResponse(
        {
            "app_name": settings.app_name,
            "env": settings.app_env,
            "log_level": settings.log_level,
            "fallback_locale": settings.fallback_locale,
            "sim_level": settings.sim_level,
            "query_parameters": sorted(KNOWN_PARAMETERS),
        }
    )


@app.get("/initialize")
async def initialize(request: Request) -> JSONResponse:
    # The harness never installs hooks in its own process
    sim = initialize_globals(
        str(request.url),
        is_production=settings.is_production,
        install_hook=False,
    )
    return JSONResponse(
        {
            "query_parameters": sim.query_parameters.as_dict(),
            "enable_basic_assertions": sim.assertion_flags.enable_basic,
            "enable_all_assertions": sim.assertion_flags.enable_all,
            "cache_buster_args": sim.get_cache_buster_args(),
            "post_message_on_error": sim.query_parameters.is_set("postMessageOnError"),
        }
    )


@app.post("/errors")
async def post_error(report: ErrorReport) -> JSONResponse:
    entry = {**report.model_dump(), "received_at": int(time.time())}
    ERRORS.append(entry)
    log_err.error({"event": "sim_error", "url": report.url, "message": report.message})
    return JSONResponse({"ok": True, "count": len(ERRORS)}, status_code=201)


@app.get("/errors")
async def list_errors() -> JSONResponse:
    return JSONResponse({"data": list(ERRORS), "count": len(ERRORS)})


@app.delete("/errors")
async def clear_errors() -> JSONResponse:
    cleared = len(ERRORS)
    ERRORS.clear()
    return JSONResponse({"cleared": cleared})
