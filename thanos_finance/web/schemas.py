"""Request bodies of the HTTP API"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from thanos_finance.core.models import InvestmentCategory, TransactionCategory

class TransactionIn(BaseModel):
    amount: float = Field(..., gt=0)
    description: str = Field(..., min_length=1, max_length=200)
    category: TransactionCategory = TransactionCategory.FOOD
    type: Literal["expense", "income"] = "expense"
    date: Optional[str] = None

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        if not v.strip():
            raise ValueError('A descrição não pode ficar vazia')
        return v.strip()

class HabitIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    icon: str = Field("⚡", min_length=1, max_length=16)

class InvestmentIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., gt=0)
    type: InvestmentCategory = InvestmentCategory.STOCKS

class GoalIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    target: float = Field(..., gt=0)
    current: float = Field(0.0, ge=0)
    deadline: Optional[str] = None

class GoalProgressIn(BaseModel):
    amount: float

class ChatIn(BaseModel):
    text: str = Field(..., max_length=4000)

class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
    uptime_seconds: float = 0.0
    ai_enabled: bool = False
    market_running: bool = False
    ai: Optional[Dict[str, Any]] = None
