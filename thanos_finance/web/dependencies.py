#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - Web Dependencies
Providers for the components the application factory attaches to app.state

Version: 1.0.0
Date: 2026-10-18
"""

from fastapi import HTTPException, Request, status

from thanos_finance.core.store import FinanceStore
from thanos_finance.services.chat import AdvisorChat
from thanos_finance.services.market import MarketSimulator

def _component(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Serviço indisponível: {name}"
        )
    return component

def get_store(request: Request) -> FinanceStore:
    return _component(request, "store")

def get_advisor(request: Request) -> AdvisorChat:
    return _component(request, "advisor")

def get_market(request: Request) -> MarketSimulator:
    return _component(request, "market")

def not_found(entity: str, entity_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{entity} não encontrado(a): {entity_id}"
    )
