from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from thanos_finance.core.models import Transaction
from thanos_finance.core.store import FinanceStore
from thanos_finance.web.dependencies import get_store, not_found
from thanos_finance.web.schemas import GoalIn, GoalProgressIn, HabitIn, InvestmentIn, TransactionIn

router = APIRouter(prefix="/api", tags=["finance"])

# ===== TRANSACTIONS =====

@router.get("/transactions", response_model=List[Dict[str, Any]])
async def list_transactions(store: FinanceStore = Depends(get_store)):
    """Most recent first"""
    return [t.to_dict() for t in store.transactions]

@router.post("/transactions", status_code=status.HTTP_201_CREATED)
async def create_transaction(body: TransactionIn, store: FinanceStore = Depends(get_store)):
    transaction = Transaction.create(
        amount=body.amount,
        description=body.description,
        category=body.category.value,
        kind=body.type,
        date=body.date
    )
    return store.add_transaction(transaction).to_dict()

@router.put("/transactions/{transaction_id}")
async def update_transaction(transaction_id: str, body: TransactionIn,
                             store: FinanceStore = Depends(get_store)):
    existing = store.get_transaction(transaction_id)
    if existing is None:
        raise not_found("Transação", transaction_id)

    transaction = Transaction(
        id=transaction_id,
        amount=body.amount,
        description=body.description,
        category=body.category.value,
        date=body.date or existing.date,
        kind=body.type
    )
    store.edit_transaction(transaction)
    return transaction.to_dict()

@router.delete("/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(transaction_id: str, store: FinanceStore = Depends(get_store)):
    if not store.delete_transaction(transaction_id):
        raise not_found("Transação", transaction_id)

# ===== HABITS =====

@router.get("/habits")
async def list_habits(store: FinanceStore = Depends(get_store)):
    return [h.to_dict() for h in store.habits]

@router.post("/habits", status_code=status.HTTP_201_CREATED)
async def create_habit(body: HabitIn, store: FinanceStore = Depends(get_store)):
    return store.add_habit(body.name, body.icon).to_dict()

@router.post("/habits/{habit_id}/toggle")
async def toggle_habit(habit_id: str, store: FinanceStore = Depends(get_store)):
    habit = store.toggle_habit(habit_id)
    if habit is None:
        raise not_found("Hábito", habit_id)
    return habit.to_dict()

# ===== INVESTMENTS =====

@router.get("/investments")
async def list_investments(store: FinanceStore = Depends(get_store)):
    return [i.to_dict() for i in store.investments]

@router.post("/investments", status_code=status.HTTP_201_CREATED)
async def create_investment(body: InvestmentIn, store: FinanceStore = Depends(get_store)):
    return store.add_investment(body.name, body.amount, body.type.value).to_dict()

# ===== GOALS =====

@router.get("/goals")
async def list_goals(store: FinanceStore = Depends(get_store)):
    return [{**g.to_dict(), 'percent': round(g.percent, 2), 'reached': g.reached} for g in store.goals]

@router.post("/goals", status_code=status.HTTP_201_CREATED)
async def create_goal(body: GoalIn, store: FinanceStore = Depends(get_store)):
    return store.add_goal(body.name, body.target, body.current, body.deadline).to_dict()

@router.post("/goals/{goal_id}/progress")
async def update_goal_progress(goal_id: str, body: GoalProgressIn,
                               store: FinanceStore = Depends(get_store)):
    goal = store.update_goal_progress(goal_id, body.amount)
    if goal is None:
        raise not_found("Meta", goal_id)
    return {**goal.to_dict(), 'percent': round(goal.percent, 2), 'reached': goal.reached}

@router.delete("/goals/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(goal_id: str, store: FinanceStore = Depends(get_store)):
    if not store.delete_goal(goal_id):
        raise not_found("Meta", goal_id)
