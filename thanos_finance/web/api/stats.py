from fastapi import APIRouter, Depends

from thanos_finance.core.store import FinanceStore
from thanos_finance.services.reports import store_dashboard, store_reports
from thanos_finance.web.dependencies import get_store

router = APIRouter(prefix="/api", tags=["statistics"])

@router.get("/state")
async def get_state(store: FinanceStore = Depends(get_store)):
    """Every persisted group, as stored"""
    return store.snapshot()

@router.get("/progress")
async def get_progress(store: FinanceStore = Depends(get_store)):
    progress = store.progress
    return {
        **progress.to_dict(),
        'nextLevelXp': progress.next_level_threshold,
        'levelProgress': round(progress.level_progress, 2),
        'stones': store.flags.to_dict(),
        'stonesCollected': store.flags.collected_count
    }

@router.get("/reports")
async def get_reports(store: FinanceStore = Depends(get_store)):
    return store_reports(store)

@router.get("/dashboard")
async def get_dashboard(store: FinanceStore = Depends(get_store)):
    return store_dashboard(store)

@router.post("/tutorial/complete")
async def complete_tutorial(store: FinanceStore = Depends(get_store)):
    store.complete_tutorial()
    return {'tutorialCompleted': store.is_tutorial_completed()}
