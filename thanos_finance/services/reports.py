#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - Reports
Aggregates for the reports, portfolio and dashboard views

Version: 1.0.0
Date: 2026-10-18
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from thanos_finance.core.achievements import STONES, habit_completion_rate
from thanos_finance.core.models import (
    AchievementFlags, Collections, Investment, Progress, Transaction
)
from thanos_finance.core.store import FinanceStore

@dataclass
class CategoryTotal:
    category: str
    amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {'category': self.category, 'amount': round(self.amount, 2)}

@dataclass
class TransactionReport:
    """Income, spending and the expense breakdown by category"""
    total_income: float = 0.0
    total_spent: float = 0.0
    transaction_count: int = 0
    expenses_by_category: List[CategoryTotal] = field(default_factory=list)

    @property
    def net_result(self) -> float:
        return self.total_income - self.total_spent

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_income': round(self.total_income, 2),
            'total_spent': round(self.total_spent, 2),
            'net_result': round(self.net_result, 2),
            'transaction_count': self.transaction_count,
            'expenses_by_category': [c.to_dict() for c in self.expenses_by_category]
        }

@dataclass
class PortfolioSummary:
    total_value: float = 0.0
    position_count: int = 0
    allocation: List[CategoryTotal] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_value': round(self.total_value, 2),
            'position_count': self.position_count,
            'allocation': [c.to_dict() for c in self.allocation]
        }

def _ranked(totals: Dict[str, float]) -> List[CategoryTotal]:
    """Largest amount first"""
    return sorted(
        (CategoryTotal(category, amount) for category, amount in totals.items()),
        key=lambda c: c.amount,
        reverse=True
    )

def build_transaction_report(transactions: Sequence[Transaction]) -> TransactionReport:
    report = TransactionReport(transaction_count=len(transactions))
    by_category: Dict[str, float] = defaultdict(float)

    for transaction in transactions:
        if transaction.is_income:
            report.total_income += transaction.amount
        else:
            report.total_spent += transaction.amount
            by_category[transaction.category] += transaction.amount

    report.expenses_by_category = _ranked(by_category)
    return report

def build_portfolio_summary(investments: Sequence[Investment]) -> PortfolioSummary:
    by_category: Dict[str, float] = defaultdict(float)
    for investment in investments:
        by_category[investment.category] += investment.amount

    return PortfolioSummary(
        total_value=sum(i.amount for i in investments),
        position_count=len(investments),
        allocation=_ranked(by_category)
    )

def build_dashboard(progress: Progress, flags: AchievementFlags, collections: Collections) -> Dict[str, Any]:
    """
    Home screen summary.

    Level and rank with the bar towards the next level, the stones with their
    metadata, today's habit completion and the headline money figures.
    """
    report = build_transaction_report(collections.transactions)
    completed_habits = sum(1 for habit in collections.habits if habit.completed)

    return {
        'rank_title': progress.rank_title,
        'level': progress.level,
        'xp': progress.experience,
        'next_level_xp': progress.next_level_threshold,
        'level_progress': round(progress.level_progress, 2),
        'stones_collected': flags.collected_count,
        'stones_total': len(AchievementFlags.FIELDS),
        'gauntlet_complete': flags.all_collected,
        'stones': [
            {**stone.to_dict(), 'collected': getattr(flags, stone.stone_id)}
            for stone in STONES
        ],
        'habits_completed': completed_habits,
        'habits_total': len(collections.habits),
        'habit_completion_rate': round(habit_completion_rate(collections) * 100, 2),
        'balance': round(report.net_result, 2),
        'portfolio_value': round(sum(i.amount for i in collections.investments), 2)
    }

def store_reports(store: FinanceStore) -> Dict[str, Any]:
    return {
        'transactions': build_transaction_report(store.transactions).to_dict(),
        'portfolio': build_portfolio_summary(store.investments).to_dict()
    }

def store_dashboard(store: FinanceStore) -> Dict[str, Any]:
    return build_dashboard(store.progress, store.flags, store.collections())
