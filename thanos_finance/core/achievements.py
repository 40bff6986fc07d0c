#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - Stone Achievement System
Six stones derived from the current collections, with one-time XP bonuses

Version: 1.0.0
Date: 2026-10-18
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import logging

from thanos_finance.core.models import (
    AchievementFlags, Collections, TransactionKind
)

logger = logging.getLogger(__name__)

# ===== DATA CLASSES =====

@dataclass
class StoneDefinition:
    """Definition of a stone"""
    stone_id: str
    title: str
    description: str
    icon: str
    xp_reward: int
    predicate: Callable[[Collections], bool] = field(repr=False)

    def to_dict(self) -> Dict[str, object]:
        return {
            'stone_id': self.stone_id,
            'title': self.title,
            'description': self.description,
            'icon': self.icon,
            'xp_reward': self.xp_reward
        }

@dataclass
class EvaluationResult:
    """Outcome of one evaluation pass"""
    flags: AchievementFlags
    xp_delta: int = 0
    unlocked: List[str] = field(default_factory=list)
    lost: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.unlocked or self.lost)

# ===== PREDICATES =====

def total_income(collections: Collections) -> float:
    return sum(t.amount for t in collections.transactions if t.kind == TransactionKind.INCOME.value)

def total_expenses(collections: Collections) -> float:
    return sum(t.amount for t in collections.transactions if t.kind == TransactionKind.EXPENSE.value)

def habit_completion_rate(collections: Collections) -> float:
    """Share of completed habits, 0 when there are none"""
    if not collections.habits:
        return 0.0
    completed = sum(1 for habit in collections.habits if habit.completed)
    return completed / len(collections.habits)

def _power(collections: Collections) -> bool:
    income = total_income(collections)
    return income > total_expenses(collections) and income > 0

def _space(collections: Collections) -> bool:
    return habit_completion_rate(collections) >= 0.5

def _reality(collections: Collections) -> bool:
    return len(collections.investments) > 0

def _soul(collections: Collections) -> bool:
    return len(collections.habits) >= 3

def _time(collections: Collections) -> bool:
    return any(message.is_user for message in collections.chat_messages)

def _mind(collections: Collections) -> bool:
    return total_income(collections) - total_expenses(collections) > 0

# ===== REGISTRY =====

STONES: List[StoneDefinition] = [
    StoneDefinition(
        stone_id="power",
        title="Joia do Poder",
        description="Renda maior que as despesas",
        icon="🟣",
        xp_reward=500,
        predicate=_power
    ),
    StoneDefinition(
        stone_id="space",
        title="Joia do Espaço",
        description="Metade ou mais dos hábitos concluídos",
        icon="🔵",
        xp_reward=200,
        predicate=_space
    ),
    StoneDefinition(
        stone_id="reality",
        title="Joia da Realidade",
        description="Ter ao menos um investimento",
        icon="🔴",
        xp_reward=1000,
        predicate=_reality
    ),
    StoneDefinition(
        stone_id="soul",
        title="Joia da Alma",
        description="Ter três ou mais hábitos",
        icon="🟠",
        xp_reward=300,
        predicate=_soul
    ),
    StoneDefinition(
        stone_id="time",
        title="Joia do Tempo",
        description="Conversar com o mentor",
        icon="🟢",
        xp_reward=100,
        predicate=_time
    ),
    StoneDefinition(
        stone_id="mind",
        title="Joia da Mente",
        description="Saldo positivo",
        icon="🟡",
        # no bonus for the mind stone
        xp_reward=0,
        predicate=_mind
    ),
]

_STONES_BY_ID: Dict[str, StoneDefinition] = {stone.stone_id: stone for stone in STONES}

def get_stone(stone_id: str) -> Optional[StoneDefinition]:
    return _STONES_BY_ID.get(stone_id)

# ===== EVALUATOR =====

def derive_flags(collections: Collections) -> AchievementFlags:
    """Apply every stone predicate to the current collections"""
    return AchievementFlags(**{stone.stone_id: stone.predicate(collections) for stone in STONES})

def diff_for_xp(old_flags: AchievementFlags, new_flags: AchievementFlags) -> int:
    """Sum of the bonuses of the stones that went from false to true"""
    return sum(
        stone.xp_reward for stone in STONES
        if getattr(new_flags, stone.stone_id) and not getattr(old_flags, stone.stone_id)
    )

def evaluate(collections: Collections, previous: AchievementFlags) -> EvaluationResult:
    """Derive the new flags and the XP earned against the previous flags"""
    flags = derive_flags(collections)
    result = EvaluationResult(flags=flags, xp_delta=diff_for_xp(previous, flags))

    for stone in STONES:
        was = getattr(previous, stone.stone_id)
        now = getattr(flags, stone.stone_id)
        if now and not was:
            result.unlocked.append(stone.stone_id)
        elif was and not now:
            result.lost.append(stone.stone_id)

    return result
