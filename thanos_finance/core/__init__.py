# core/__init__.py

"""Domain models, stone evaluation, leveling and the persisted store"""

from .models import (
    TransactionKind, TransactionCategory, InvestmentCategory, ChatRole, RankTitle,
    ValidationError, Transaction, Habit, Investment, ChatMessage, Goal,
    Progress, AchievementFlags, Collections
)
from .progress import grant_experience, rank_for_level
from .achievements import STONES, derive_flags, diff_for_xp, evaluate
from .store import FinanceStore

__all__ = [
    'TransactionKind', 'TransactionCategory', 'InvestmentCategory', 'ChatRole', 'RankTitle',
    'ValidationError', 'Transaction', 'Habit', 'Investment', 'ChatMessage', 'Goal',
    'Progress', 'AchievementFlags', 'Collections',
    'grant_experience', 'rank_for_level',
    'STONES', 'derive_flags', 'diff_for_xp', 'evaluate',
    'FinanceStore'
]
