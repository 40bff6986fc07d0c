#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - Core Data Models
Domain records with validation and snapshot serialisation

Version: 1.0.0
Date: 2026-10-18
"""

import math
import uuid
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from enum import Enum
import logging

from thanos_finance.utils.datetime_utils import utc_timestamp, parse_timestamp, parse_date

logger = logging.getLogger(__name__)

# ===== ENUMS =====

class TransactionKind(Enum):
    """Direction of a transaction"""
    EXPENSE = "expense"
    INCOME = "income"

class TransactionCategory(Enum):
    """Transaction categories"""
    FOOD = "Alimentação"
    TRANSPORT = "Transporte"
    EDUCATION = "Educação"
    LEISURE = "Lazer"
    HEALTH = "Saúde"
    INVESTMENT = "Investimento"
    OTHER = "Outros"
    INCOME = "Renda"

class InvestmentCategory(Enum):
    """Investment asset classes"""
    FIXED_INCOME = "Renda Fixa"
    CRYPTO = "Cripto"
    STOCKS = "Ações"
    BUSINESS = "Negócios"
    REAL_ESTATE_FUNDS = "FIIs"

class ChatRole(Enum):
    """Author of a chat message"""
    USER = "user"
    ASSISTANT = "assistant"

class RankTitle(Enum):
    """Rank labels, from the starting rank up"""
    INITIATE = "Iniciado"
    CONQUEROR = "Conquistador"
    GENERAL = "General da Ordem"
    MAD_TITAN = "Titã Louco"

# ===== VALIDATION HELPERS =====

class ValidationError(Exception):
    """Invalid domain data"""
    pass

def validate_text(text: str, min_length: int = 1, max_length: Optional[int] = 1000,
                  field_name: str = "text") -> str:
    """Validate and strip a text field"""
    if not isinstance(text, str):
        raise ValidationError(f"{field_name} must be a string")

    text = text.strip()
    if len(text) < min_length:
        raise ValidationError(f"{field_name} must contain at least {min_length} characters")

    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field_name} must contain at most {max_length} characters")

    return text

def validate_enum_value(value: str, enum_class: type, field_name: str = "value") -> str:
    """Validate an enum value"""
    try:
        enum_class(value)
        return value
    except ValueError:
        valid_values = [e.value for e in enum_class]
        raise ValidationError(f"{field_name} must be one of: {valid_values}")

def validate_amount(value: Any, field_name: str = "amount", allow_zero: bool = False) -> float:
    """Validate a monetary amount"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name} must be a number")

    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(f"{field_name} must be finite")

    if value < 0 or (value == 0 and not allow_zero):
        raise ValidationError(f"{field_name} must be positive")

    return value

def new_id() -> str:
    return str(uuid.uuid4())

# Minimum level for each rank, highest first
RANK_THRESHOLDS = (
    (20, RankTitle.MAD_TITAN),
    (10, RankTitle.GENERAL),
    (5, RankTitle.CONQUEROR),
)

def rank_for_level(level: int) -> str:
    """Rank title for a level"""
    for min_level, rank in RANK_THRESHOLDS:
        if level >= min_level:
            return rank.value
    return RankTitle.INITIATE.value

# ===== CORE MODELS =====

@dataclass
class Transaction:
    """Income or expense entry"""
    id: str
    amount: float
    description: str
    category: str
    date: str  # ISO-8601 timestamp
    kind: str = TransactionKind.EXPENSE.value

    def __post_init__(self):
        self.amount = validate_amount(self.amount)
        self.description = validate_text(self.description, max_length=200, field_name="description")
        self.category = validate_enum_value(self.category, TransactionCategory, "category")
        self.kind = validate_enum_value(self.kind, TransactionKind, "kind")

        if not isinstance(self.date, str):
            raise ValidationError(f"Invalid transaction date: {self.date}")
        try:
            parse_timestamp(self.date)
        except ValueError:
            raise ValidationError(f"Invalid transaction date: {self.date}")

    @property
    def is_income(self) -> bool:
        return self.kind == TransactionKind.INCOME.value

    @property
    def is_expense(self) -> bool:
        return self.kind == TransactionKind.EXPENSE.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'amount': self.amount,
            'description': self.description,
            'category': self.category,
            'date': self.date,
            'type': self.kind
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        return cls(
            id=str(data['id']),
            amount=data['amount'],
            description=data['description'],
            category=data['category'],
            date=data['date'],
            kind=data.get('type', TransactionKind.EXPENSE.value)
        )

    @classmethod
    def create(cls, amount: float, description: str, category: str,
               kind: str = TransactionKind.EXPENSE.value, date: Optional[str] = None) -> "Transaction":
        """Create a new transaction dated now unless a date is given"""
        return cls(
            id=new_id(),
            amount=amount,
            description=description,
            category=category,
            date=date or utc_timestamp(),
            kind=kind
        )

@dataclass
class Habit:
    """Daily habit"""
    id: str
    name: str
    icon: str = "⚡"
    completed: bool = False
    streak: int = 0  # reserved, never incremented

    def __post_init__(self):
        self.name = validate_text(self.name, max_length=100, field_name="name")
        self.icon = validate_text(self.icon, max_length=16, field_name="icon")
        self.completed = bool(self.completed)
        self.streak = max(0, int(self.streak))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'icon': self.icon,
            'completed': self.completed,
            'streak': self.streak
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Habit":
        return cls(
            id=str(data['id']),
            name=data['name'],
            icon=data.get('icon', "⚡"),
            completed=data.get('completed', False),
            streak=data.get('streak', 0)
        )

    @classmethod
    def create(cls, name: str, icon: str) -> "Habit":
        return cls(id=new_id(), name=name, icon=icon)

@dataclass
class Investment:
    """Portfolio position"""
    id: str
    name: str
    amount: float
    category: str = InvestmentCategory.STOCKS.value
    performance: Optional[float] = 0.0  # percentage, never recomputed

    def __post_init__(self):
        self.name = validate_text(self.name, max_length=100, field_name="name")
        self.amount = validate_amount(self.amount)
        self.category = validate_enum_value(self.category, InvestmentCategory, "category")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'amount': self.amount,
            'type': self.category,
            'performance': self.performance
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Investment":
        return cls(
            id=str(data['id']),
            name=data['name'],
            amount=data['amount'],
            category=data.get('type', InvestmentCategory.STOCKS.value),
            performance=data.get('performance')
        )

    @classmethod
    def create(cls, name: str, amount: float,
               category: str = InvestmentCategory.STOCKS.value) -> "Investment":
        return cls(id=new_id(), name=name, amount=amount, category=category, performance=0.0)

@dataclass
class ChatMessage:
    """Entry of the advisor conversation"""
    id: str
    role: str
    text: str
    is_transaction_confirmation: bool = False

    def __post_init__(self):
        self.role = validate_enum_value(self.role, ChatRole, "role")
        self.text = validate_text(self.text, max_length=None, field_name="text")

    @property
    def is_user(self) -> bool:
        return self.role == ChatRole.USER.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'role': self.role,
            'text': self.text,
            'isTransactionConfirmation': self.is_transaction_confirmation
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        role = data['role']
        # browser snapshots name the assistant "model"
        if role == "model":
            role = ChatRole.ASSISTANT.value
        return cls(
            id=str(data['id']),
            role=role,
            text=data['text'],
            is_transaction_confirmation=bool(data.get('isTransactionConfirmation', False))
        )

    @classmethod
    def create(cls, role: str, text: str, is_transaction_confirmation: bool = False) -> "ChatMessage":
        return cls(
            id=new_id(),
            role=role,
            text=text,
            is_transaction_confirmation=is_transaction_confirmation
        )

@dataclass
class Goal:
    """Savings goal"""
    id: str
    name: str
    target: float
    current: float = 0.0
    deadline: Optional[str] = None  # ISO date

    def __post_init__(self):
        self.name = validate_text(self.name, max_length=100, field_name="name")
        self.target = validate_amount(self.target, "target")
        self.current = min(self.target, max(0.0, float(self.current or 0)))

        if self.deadline:
            try:
                parse_date(self.deadline)
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid deadline: {self.deadline}")
        else:
            self.deadline = None

    @property
    def percent(self) -> float:
        """Completion percentage (0-100)"""
        return min(100.0, (self.current / self.target) * 100) if self.target > 0 else 0.0

    @property
    def reached(self) -> bool:
        return self.current >= self.target

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'target': self.target,
            'current': self.current,
            'deadline': self.deadline
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Goal":
        return cls(
            id=str(data['id']),
            name=data['name'],
            target=data['target'],
            current=data.get('current', 0.0),
            deadline=data.get('deadline')
        )

    @classmethod
    def create(cls, name: str, target: float, current: float = 0.0,
               deadline: Optional[str] = None) -> "Goal":
        return cls(id=new_id(), name=name, target=target, current=current, deadline=deadline)

@dataclass
class Progress:
    """Experience and level of the user; the rank follows the level"""
    experience: int = 0
    level: int = 1

    LEVEL_XP_STEP = 1000

    def __post_init__(self):
        self.experience = max(0, int(self.experience))
        self.level = max(1, int(self.level))

    @property
    def rank_title(self) -> str:
        return rank_for_level(self.level)

    @property
    def next_level_threshold(self) -> int:
        """Cumulative XP needed to leave the current level"""
        return self.level * self.LEVEL_XP_STEP

    @property
    def level_progress(self) -> float:
        """Progress bar value (0-100%)"""
        return min(100.0, (self.experience / self.next_level_threshold) * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'xp': self.experience,
            'level': self.level,
            'rankTitle': self.rank_title
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Progress":
        return cls(
            experience=data.get('xp', 0),
            level=data.get('level', 1)
        )

@dataclass
class AchievementFlags:
    """The six stones"""
    power: bool = False
    space: bool = False
    reality: bool = False
    soul: bool = False
    time: bool = False
    mind: bool = False

    FIELDS = ('power', 'space', 'reality', 'soul', 'time', 'mind')

    @property
    def collected_count(self) -> int:
        return sum(1 for name in self.FIELDS if getattr(self, name))

    @property
    def all_collected(self) -> bool:
        return self.collected_count == len(self.FIELDS)

    def to_dict(self) -> Dict[str, bool]:
        return {name: getattr(self, name) for name in self.FIELDS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AchievementFlags":
        return cls(**{name: bool(data.get(name, False)) for name in cls.FIELDS})

@dataclass
class Collections:
    """Evaluator input: the four collections the stones are derived from"""
    transactions: List[Transaction] = field(default_factory=list)
    habits: List[Habit] = field(default_factory=list)
    investments: List[Investment] = field(default_factory=list)
    chat_messages: List[ChatMessage] = field(default_factory=list)
