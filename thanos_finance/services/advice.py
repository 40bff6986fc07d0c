#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - Advice Service
Conversational finance advice with transaction inference, over any
OpenAI-compatible chat completions endpoint

Version: 1.0.0
Date: 2026-10-18
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Sequence
import logging

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from thanos_finance.config import AIConfig, config
from thanos_finance.core.models import (
    ChatMessage, ChatRole, Transaction, TransactionCategory, TransactionKind
)

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "O universo está desequilibrado. Não consegui processar essa requisição. (Erro de API)"
MISSING_KEY_REPLY = "A Joia da Mente (API Key) está faltando. Não posso funcionar sem poder."

# ===== EXCEPTIONS =====

class AdviceServiceError(Exception):
    """Base advice service error"""
    pass

class AdviceProviderError(AdviceServiceError):
    """Provider call failed"""
    pass

class AdviceRateLimitError(AdviceServiceError):
    """Provider rate limit exceeded"""
    pass

class AdviceResponseError(AdviceServiceError):
    """Provider answered with an empty or malformed payload"""
    pass

# ===== ENUMS =====

class AdviceProvider(Enum):
    OPENAI = "openai"
    FALLBACK = "fallback"

# ===== RESPONSE SCHEMA =====

class InferredTransactionSchema(BaseModel):
    amount: float = Field(gt=0)
    description: str = Field(min_length=1, max_length=200)
    category: str = TransactionCategory.OTHER.value
    type: Literal["expense", "income"] = "expense"

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, value: Any) -> str:
        valid = {c.value for c in TransactionCategory}
        if isinstance(value, str) and value.strip() in valid:
            return value.strip()
        return TransactionCategory.OTHER.value

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("description is empty")
        return value

class AdviceResponseSchema(BaseModel):
    reply: str = Field(min_length=1)
    transaction: Optional[InferredTransactionSchema] = None

    @field_validator("reply")
    @classmethod
    def strip_reply(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("reply is empty")
        return value

# ===== DATA CLASSES =====

@dataclass
class InferredTransaction:
    """Transaction the advisor read out of the user's text"""
    amount: float
    description: str
    category: str
    kind: str = TransactionKind.EXPENSE.value

    def to_transaction(self) -> Transaction:
        return Transaction.create(
            amount=self.amount,
            description=self.description,
            category=self.category,
            kind=self.kind
        )

@dataclass
class AdviceResult:
    """Reply of the advisor"""
    reply: str
    transaction: Optional[InferredTransaction] = None
    provider: AdviceProvider = AdviceProvider.FALLBACK
    response_time_ms: int = 0

    @property
    def is_fallback(self) -> bool:
        return self.provider == AdviceProvider.FALLBACK

@dataclass
class AdviceStats:
    """Advice service counters"""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    inferred_transactions: int = 0
    provider_usage: Dict[str, int] = field(default_factory=dict)

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return (self.successful_requests / self.total_requests) * 100

    def record(self, provider: AdviceProvider) -> None:
        self.provider_usage[provider.value] = self.provider_usage.get(provider.value, 0) + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_requests': self.total_requests,
            'successful_requests': self.successful_requests,
            'failed_requests': self.failed_requests,
            'inferred_transactions': self.inferred_transactions,
            'success_rate': round(self.success_rate, 2),
            'provider_usage': self.provider_usage
        }

# ===== PROMPT =====

SYSTEM_PROMPT = """Você é o 'Thanos Finance', um mentor financeiro que mistura estoicismo, disciplina militar e a filosofia do Titã Louco.

Persona:
- Fale em português do Brasil.
- Use metáforas sobre equilíbrio, destino, recursos e poder.
- Quando pedirem conselhos, responda de forma inspiradora e rigorosa; o impacto importa mais que a brevidade.
- Diante de um gasto fútil, pergunte se ele era "inevitável".
- Diante de um investimento, reconheça a visão de longo prazo.

Tarefa:
1. Analise o texto do usuário.
2. Se ele mencionar gastar ou ganhar dinheiro (ex.: "comprei um livro por 50"), preencha 'transaction':
   - 'type' é "expense" para gastos e "income" para ganhos (salário, vendas);
   - 'category' é uma de: {categories}.
3. Se for apenas conversa ou pedido de conselho, 'transaction' deve ser null.
4. Escreva a reação ao usuário em 'reply'; seja breve quando registrar uma transação.

Responda somente com um objeto JSON no formato:
{{"reply": "...", "transaction": {{"amount": 0, "description": "...", "category": "...", "type": "expense"}} ou null}}"""

def build_system_prompt() -> str:
    return SYSTEM_PROMPT.format(categories=", ".join(c.value for c in TransactionCategory))

# ===== SERVICES =====

class AdviceService(ABC):
    """Capability: advice for a text given the prior conversation"""

    @abstractmethod
    async def get_advice(self, text: str, history: Sequence[ChatMessage] = ()) -> AdviceResult:
        """Never raises; failures become a fallback reply"""
        pass

    def get_health_status(self) -> Dict[str, Any]:
        return {'enabled': True}

class OpenAIAdviceService(AdviceService):
    """Advice over the OpenAI chat completions API"""

    def __init__(self, ai_config: Optional[AIConfig] = None, client: Optional[Any] = None):
        self.config = ai_config or config.ai
        self.client = client if client is not None else self._initialize_client()
        self.stats = AdviceStats()
        self.system_prompt = build_system_prompt()

        logger.info(f"Advice service initialized - provider: {'✅' if self.enabled else '❌'}")

    def _initialize_client(self) -> Optional[AsyncOpenAI]:
        """Create the OpenAI client when a key is configured"""
        if not self.config.openai_api_key:
            logger.warning("OPENAI_API_KEY not configured - advice disabled")
            return None

        try:
            return AsyncOpenAI(
                api_key=self.config.openai_api_key,
                base_url=self.config.openai_base_url,
                timeout=self.config.request_timeout,
                max_retries=0
            )
        except openai.OpenAIError as e:
            logger.error(f"Failed to initialize OpenAI client: {e}")
            return None

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def build_messages(self, text: str, history: Sequence[ChatMessage]) -> List[Dict[str, str]]:
        messages = [{"role": "system", "content": self.system_prompt}]

        turns = list(history)[-self.config.history_turns:] if self.config.history_turns else []
        for message in turns:
            role = "user" if message.role == ChatRole.USER.value else "assistant"
            messages.append({"role": role, "content": message.text})

        messages.append({"role": "user", "content": text})
        return messages

    async def get_advice(self, text: str, history: Sequence[ChatMessage] = ()) -> AdviceResult:
        start_time = time.time()
        self.stats.total_requests += 1

        if not self.enabled:
            self.stats.record(AdviceProvider.FALLBACK)
            return AdviceResult(reply=MISSING_KEY_REPLY)

        try:
            content = await self._request(self.build_messages(text, history))
            result = self._parse(content)
        except Exception as e:
            logger.error(f"Advice request failed: {e}")
            self.stats.failed_requests += 1
            self.stats.record(AdviceProvider.FALLBACK)
            return AdviceResult(reply=FALLBACK_REPLY)

        result.response_time_ms = int((time.time() - start_time) * 1000)
        self.stats.successful_requests += 1
        self.stats.record(result.provider)
        if result.transaction:
            self.stats.inferred_transactions += 1
        return result

    async def _request(self, messages: List[Dict[str, str]]) -> str:
        """Chat completion with retries on rate limits and timeouts"""
        max_retries = self.config.max_retries

        for attempt in range(max_retries):
            try:
                response = await self.client.chat.completions.create(
                    model=self.config.openai_model,
                    messages=messages,
                    max_tokens=self.config.openai_max_tokens,
                    temperature=0.7,
                    response_format={"type": "json_object"}
                )

                if not response.choices:
                    raise AdviceResponseError("No choices in response")
                content = response.choices[0].message.content
                if not content or not content.strip():
                    raise AdviceResponseError("Empty response")
                return content

            except openai.RateLimitError:
                logger.warning(f"Rate limit hit, attempt {attempt + 1}")
                if attempt < max_retries - 1:
                    await asyncio.sleep(self.config.retry_delay * (2 ** attempt))
                else:
                    raise AdviceRateLimitError("Rate limit exceeded")

            except openai.APIConnectionError as e:
                logger.warning(f"Connection problem, attempt {attempt + 1}: {e}")
                if attempt < max_retries - 1:
                    await asyncio.sleep(self.config.retry_delay)
                else:
                    raise AdviceProviderError(f"Provider unreachable: {e}")

            except openai.APIError as e:
                raise AdviceProviderError(f"Provider error: {e}")

        raise AdviceProviderError("No attempts made")

    def _parse(self, content: str) -> AdviceResult:
        """Validate the JSON payload"""
        try:
            payload = AdviceResponseSchema.model_validate_json(content)
        except PydanticValidationError as e:
            raise AdviceResponseError(f"Malformed response: {e}")

        transaction = None
        if payload.transaction is not None:
            transaction = InferredTransaction(
                amount=payload.transaction.amount,
                description=payload.transaction.description,
                category=payload.transaction.category,
                kind=payload.transaction.type
            )

        return AdviceResult(
            reply=payload.reply,
            transaction=transaction,
            provider=AdviceProvider.OPENAI
        )

    def get_health_status(self) -> Dict[str, Any]:
        return {
            'enabled': self.enabled,
            'model': self.config.openai_model,
            'stats': self.stats.to_dict()
        }

def create_advice_service(ai_config: Optional[AIConfig] = None) -> AdviceService:
    return OpenAIAdviceService(ai_config)
