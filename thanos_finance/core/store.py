#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - Domain Store
Authoritative in-memory state with per-group persistence and stone re-evaluation

Version: 1.0.0
Date: 2026-10-18
"""

import json
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, TypeVar
import logging

from thanos_finance.core.achievements import EvaluationResult, evaluate, get_stone
from thanos_finance.core.models import (
    AchievementFlags, ChatMessage, Collections, Goal, Habit, Investment,
    InvestmentCategory, Progress, Transaction, ValidationError, new_id
)
from thanos_finance.core.progress import grant_experience
from thanos_finance.database.storage import StorageError, StoragePort

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ===== STORAGE KEYS =====

KEY_TRANSACTIONS = "thanos_transactions"
KEY_HABITS = "thanos_habits"
KEY_INVESTMENTS = "thanos_investments"
KEY_CHAT = "thanos_chat"
KEY_GOALS = "thanos_goals"
KEY_PROGRESS = "thanos_stats"
KEY_FLAGS = "thanos_stones"
KEY_TUTORIAL = "thanos_tutorial_completed"

# ===== XP PER ACTION =====

XP_ADD_TRANSACTION = 20
XP_ADD_HABIT = 100
XP_COMPLETE_HABIT = 50
XP_USER_MESSAGE = 10
XP_ADD_INVESTMENT = 200

class FinanceStore:
    """Collections, progress and stones, persisted group by group"""

    def __init__(self, storage: StoragePort):
        self.storage = storage
        self.persistence_errors = 0
        self.load_errors = 0

        self._transactions: List[Transaction] = self._load_list(KEY_TRANSACTIONS, Transaction.from_dict)
        self._habits: List[Habit] = self._load_list(KEY_HABITS, Habit.from_dict)
        self._investments: List[Investment] = self._load_list(KEY_INVESTMENTS, Investment.from_dict)
        self._chat: List[ChatMessage] = self._load_list(KEY_CHAT, ChatMessage.from_dict)
        self._goals: List[Goal] = self._load_list(KEY_GOALS, Goal.from_dict)
        self._progress: Progress = self._load_record(KEY_PROGRESS, Progress.from_dict, Progress)
        self._flags: AchievementFlags = self._load_record(KEY_FLAGS, AchievementFlags.from_dict, AchievementFlags)
        self._tutorial_completed = self._load_marker(KEY_TUTORIAL)

        logger.info(
            f"Store loaded: {len(self._transactions)} transactions, {len(self._habits)} habits, "
            f"{len(self._investments)} investments, {len(self._chat)} messages, {len(self._goals)} goals"
        )

        # stones stored by an older snapshot may lag behind the collections
        self.reevaluate()

    # ===== LOADING =====

    def _read_json(self, key: str) -> Any:
        raw = self.storage.read(key)
        if raw is None:
            return None
        return json.loads(raw)

    def _load_list(self, key: str, factory: Callable[[Dict[str, Any]], T]) -> List[T]:
        """Load one collection, falling back to an empty list on any failure"""
        try:
            data = self._read_json(key)
            if data is None:
                return []
            if not isinstance(data, list):
                raise ValueError(f"expected a list, got {type(data).__name__}")
            return [factory(item) for item in data]
        except (StorageError, ValueError, KeyError, TypeError, AttributeError, ValidationError) as e:
            logger.warning(f"⚠️ Could not load '{key}', starting empty: {e}")
            self.load_errors += 1
            return []

    def _load_record(self, key: str, factory: Callable[[Dict[str, Any]], T], default: Callable[[], T]) -> T:
        """Load a singleton record, falling back to its default on any failure"""
        try:
            data = self._read_json(key)
            if data is None:
                return default()
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
            return factory(data)
        except (StorageError, ValueError, KeyError, TypeError, AttributeError, ValidationError) as e:
            logger.warning(f"⚠️ Could not load '{key}', using defaults: {e}")
            self.load_errors += 1
            return default()

    def _load_marker(self, key: str) -> bool:
        try:
            return self.storage.read(key) is not None
        except StorageError as e:
            logger.warning(f"⚠️ Could not read marker '{key}': {e}")
            self.load_errors += 1
            return False

    # ===== PERSISTENCE =====

    def _write(self, key: str, payload: Any) -> bool:
        return self._write_raw(key, json.dumps(payload, ensure_ascii=False))

    def _write_raw(self, key: str, value: str) -> bool:
        """Persist one value; failures are logged and never raised"""
        try:
            self.storage.write(key, value)
            return True
        except StorageError as e:
            self.persistence_errors += 1
            logger.warning(f"⚠️ Failed to persist '{key}', keeping in-memory state: {e}")
            return False

    def _save_transactions(self) -> None:
        self._write(KEY_TRANSACTIONS, [t.to_dict() for t in self._transactions])

    def _save_habits(self) -> None:
        self._write(KEY_HABITS, [h.to_dict() for h in self._habits])

    def _save_investments(self) -> None:
        self._write(KEY_INVESTMENTS, [i.to_dict() for i in self._investments])

    def _save_chat(self) -> None:
        self._write(KEY_CHAT, [m.to_dict() for m in self._chat])

    def _save_goals(self) -> None:
        self._write(KEY_GOALS, [g.to_dict() for g in self._goals])

    def _save_progress(self) -> None:
        self._write(KEY_PROGRESS, self._progress.to_dict())

    def _save_flags(self) -> None:
        self._write(KEY_FLAGS, self._flags.to_dict())

    # ===== GAMIFICATION =====

    def _award(self, xp: int, reason: str) -> bool:
        """One XP grant; returns True on level-up"""
        if xp <= 0:
            return False
        self._progress, leveled_up = grant_experience(self._progress, xp)
        logger.debug(f"+{xp} XP ({reason}), total {self._progress.experience}")
        self._save_progress()
        return leveled_up

    def reevaluate(self) -> EvaluationResult:
        """Recompute the stones over the full snapshot and apply their bonus"""
        result = evaluate(self.collections(), self._flags)

        if result.changed:
            self._flags = result.flags
            self._save_flags()

            for stone_id in result.unlocked:
                stone = get_stone(stone_id)
                logger.info(f"💎 Stone collected: {stone.title} (+{stone.xp_reward} XP)")
            for stone_id in result.lost:
                logger.info(f"Stone lost: {get_stone(stone_id).title}")

            if self._flags.all_collected:
                logger.info("🧤 All six stones collected")

        # all bonuses of one pass go into a single grant
        self._award(result.xp_delta, "stones")
        return result

    # ===== TRANSACTIONS =====

    def add_transaction(self, transaction: Transaction) -> Transaction:
        """Prepend a transaction (most recent first)"""
        if any(t.id == transaction.id for t in self._transactions):
            transaction = replace(transaction, id=new_id())

        self._transactions.insert(0, transaction)
        self._save_transactions()
        self._award(XP_ADD_TRANSACTION, "transaction")
        self.reevaluate()
        return transaction

    def edit_transaction(self, transaction: Transaction) -> bool:
        """Replace the transaction with the same id; no-op when absent"""
        for index, existing in enumerate(self._transactions):
            if existing.id == transaction.id:
                self._transactions[index] = transaction
                self._save_transactions()
                self.reevaluate()
                return True
        return False

    def delete_transaction(self, transaction_id: str) -> bool:
        """Remove the transaction with this id; no-op when absent"""
        for index, existing in enumerate(self._transactions):
            if existing.id == transaction_id:
                del self._transactions[index]
                self._save_transactions()
                self.reevaluate()
                return True
        return False

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return next((t for t in self._transactions if t.id == transaction_id), None)

    # ===== HABITS =====

    def add_habit(self, name: str, icon: str) -> Habit:
        habit = Habit.create(name, icon)
        self._habits.append(habit)
        self._save_habits()
        self._award(XP_ADD_HABIT, "habit created")
        self.reevaluate()
        return habit

    def toggle_habit(self, habit_id: str) -> Optional[Habit]:
        """Flip a habit; completing it earns XP, un-completing costs nothing"""
        for index, habit in enumerate(self._habits):
            if habit.id == habit_id:
                toggled = replace(habit, completed=not habit.completed)
                self._habits[index] = toggled
                self._save_habits()
                if toggled.completed:
                    self._award(XP_COMPLETE_HABIT, "habit completed")
                self.reevaluate()
                return toggled
        return None

    # ===== INVESTMENTS =====

    def add_investment(self, name: str, amount: float,
                       category: str = InvestmentCategory.STOCKS.value) -> Investment:
        investment = Investment.create(name, amount, category)
        self._investments.append(investment)
        self._save_investments()
        self._award(XP_ADD_INVESTMENT, "investment")
        self.reevaluate()
        return investment

    # ===== CHAT =====

    def append_chat_message(self, message: ChatMessage) -> ChatMessage:
        if any(m.id == message.id for m in self._chat):
            message = replace(message, id=new_id())

        self._chat.append(message)
        self._save_chat()
        if message.is_user:
            self._award(XP_USER_MESSAGE, "chat")
        self.reevaluate()
        return message

    # ===== GOALS =====

    def add_goal(self, name: str, target: float, current: float = 0.0,
                 deadline: Optional[str] = None) -> Goal:
        goal = Goal.create(name, target, current, deadline)
        self._goals.append(goal)
        self._save_goals()
        return goal

    def update_goal_progress(self, goal_id: str, amount: float) -> Optional[Goal]:
        """Add (or subtract) an amount, clamped to [0, target]"""
        for index, goal in enumerate(self._goals):
            if goal.id == goal_id:
                updated = replace(goal, current=goal.current + amount)
                self._goals[index] = updated
                self._save_goals()
                return updated
        return None

    def delete_goal(self, goal_id: str) -> bool:
        for index, goal in enumerate(self._goals):
            if goal.id == goal_id:
                del self._goals[index]
                self._save_goals()
                return True
        return False

    # ===== TUTORIAL =====

    def is_tutorial_completed(self) -> bool:
        return self._tutorial_completed

    def complete_tutorial(self) -> None:
        self._tutorial_completed = True
        self._write_raw(KEY_TUTORIAL, "true")

    def reset_tutorial(self) -> None:
        self._tutorial_completed = False
        try:
            self.storage.remove(KEY_TUTORIAL)
        except StorageError as e:
            self.persistence_errors += 1
            logger.warning(f"⚠️ Failed to clear tutorial marker: {e}")

    # ===== READ API =====

    @property
    def transactions(self) -> List[Transaction]:
        return list(self._transactions)

    @property
    def habits(self) -> List[Habit]:
        return list(self._habits)

    @property
    def investments(self) -> List[Investment]:
        return list(self._investments)

    @property
    def chat_messages(self) -> List[ChatMessage]:
        return list(self._chat)

    @property
    def goals(self) -> List[Goal]:
        return list(self._goals)

    @property
    def progress(self) -> Progress:
        return self._progress

    @property
    def flags(self) -> AchievementFlags:
        return self._flags

    def collections(self) -> Collections:
        return Collections(
            transactions=list(self._transactions),
            habits=list(self._habits),
            investments=list(self._investments),
            chat_messages=list(self._chat)
        )

    def snapshot(self) -> Dict[str, Any]:
        """Every persisted group, serialised"""
        return {
            'transactions': [t.to_dict() for t in self._transactions],
            'habits': [h.to_dict() for h in self._habits],
            'investments': [i.to_dict() for i in self._investments],
            'chat': [m.to_dict() for m in self._chat],
            'goals': [g.to_dict() for g in self._goals],
            'stats': self._progress.to_dict(),
            'stones': self._flags.to_dict(),
            'tutorialCompleted': self._tutorial_completed
        }
