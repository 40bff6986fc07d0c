#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - FastAPI Application
HTTP API over the store, the advisor chat, the reports and the trade simulator

Version: 1.0.0
Date: 2026-10-18
"""

import time
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from thanos_finance import __version__
from thanos_finance.config import config
from thanos_finance.core.models import ValidationError
from thanos_finance.core.store import FinanceStore
from thanos_finance.database.storage import create_storage
from thanos_finance.services.advice import create_advice_service
from thanos_finance.services.chat import AdvisorChat
from thanos_finance.services.market import MarketSimulator, MarketTicker
from thanos_finance.web.api import chat, finance, market, stats
from thanos_finance.web.schemas import HealthCheck

logger = logging.getLogger(__name__)

def create_app(store: Optional[FinanceStore] = None,
               advisor: Optional[AdvisorChat] = None,
               simulator: Optional[MarketSimulator] = None,
               run_ticker: bool = True) -> FastAPI:
    """Build the application; missing components are created from the configuration"""
    store = store or FinanceStore(create_storage())
    advisor = advisor or AdvisorChat(store, create_advice_service())
    simulator = simulator or MarketSimulator()
    ticker = MarketTicker(simulator)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Starting Thanos Finance API...")
        logger.debug(f"Configuration: {config.to_dict()}")
        if run_ticker:
            ticker.start()

        yield

        logger.info("🛑 Stopping Thanos Finance API...")
        ticker.stop()

    app = FastAPI(
        title="Thanos Finance",
        description="Finanças pessoais gamificadas com um mentor financeiro",
        version=__version__,
        docs_url="/api/docs" if config.server.debug_mode else None,
        redoc_url=None,
        lifespan=lifespan
    )

    app.state.store = store
    app.state.advisor = advisor
    app.state.market = simulator
    app.state.ticker = ticker
    app.state.started_at = time.time()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s")
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.get("/api/health", response_model=HealthCheck)
    async def health_check():
        ai_status = advisor.advice_service.get_health_status()
        return HealthCheck(
            status="healthy",
            service="thanos-finance",
            version=__version__,
            timestamp=time.time(),
            uptime_seconds=round(time.time() - app.state.started_at, 3),
            ai_enabled=bool(ai_status.get("enabled")),
            market_running=ticker.running,
            ai=ai_status
        )

    app.include_router(finance.router)
    app.include_router(stats.router)
    app.include_router(chat.router)
    app.include_router(market.router)

    return app

def run_server(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the API with uvicorn"""
    host = host or config.server.host
    port = port or config.server.port
    debug = config.server.debug_mode

    logger.info(f"🌐 Thanos Finance on http://{host}:{port}")
    logger.info(f"📁 Data directory: {config.data_dir}")

    uvicorn.run(
        create_app(),
        host=host,
        port=port,
        log_level="debug" if debug else "info",
        access_log=debug,
        server_header=False
    )
