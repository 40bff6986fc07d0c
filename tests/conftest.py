import asyncio
from types import SimpleNamespace
from typing import List, Optional, Sequence

import pytest

from thanos_finance.config import AIConfig
from thanos_finance.core.models import ChatMessage, Transaction
from thanos_finance.core.store import FinanceStore
from thanos_finance.database.storage import MemoryStorage, StorageWriteError
from thanos_finance.services.advice import AdviceResult, AdviceService


class ScriptedAdvice(AdviceService):
    """Returns queued results in order, then a plain reply"""

    def __init__(self, results: Optional[List[AdviceResult]] = None):
        self.results = list(results or [])
        self.calls = []

    async def get_advice(self, text: str, history: Sequence[ChatMessage] = ()) -> AdviceResult:
        self.calls.append((text, list(history)))
        if self.results:
            return self.results.pop(0)
        return AdviceResult(reply="Equilíbrio.")


class BlockingAdvice(AdviceService):
    """Holds the request open until released"""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def get_advice(self, text: str, history: Sequence[ChatMessage] = ()) -> AdviceResult:
        self.started.set()
        await self.release.wait()
        return AdviceResult(reply="Tudo tem seu preço.")


class FailingWriteStorage(MemoryStorage):
    def write(self, key: str, value: str) -> None:
        raise StorageWriteError(f"disk full: {key}")


class FakeCompletions:
    """Stand-in for client.chat.completions with scripted outcomes"""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=outcome))]
        )


def fake_client(*outcomes):
    completions = FakeCompletions(outcomes)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def income(amount: float, description: str = "Salário") -> Transaction:
    return Transaction.create(amount=amount, description=description, category="Renda", kind="income")


def expense(amount: float, description: str = "Mercado", category: str = "Alimentação") -> Transaction:
    return Transaction.create(amount=amount, description=description, category=category, kind="expense")


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return FinanceStore(storage)


@pytest.fixture
def ai_config():
    return AIConfig(openai_api_key="test-key", max_retries=2, retry_delay=0, history_turns=4)
