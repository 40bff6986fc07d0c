#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - Advisor Chat
One advice turn at a time: log the user message, ask the advisor, log the
reply and record any transaction it inferred

Version: 1.0.0
Date: 2026-10-18
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

from thanos_finance.core.models import ChatMessage, ChatRole, Transaction, ValidationError
from thanos_finance.core.store import FinanceStore
from thanos_finance.services.advice import AdviceResult, AdviceService

logger = logging.getLogger(__name__)

@dataclass
class ChatTurn:
    """Result of one send"""
    user_message: ChatMessage
    reply_message: ChatMessage
    advice: AdviceResult
    transaction: Optional[Transaction] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'user_message': self.user_message.to_dict(),
            'reply_message': self.reply_message.to_dict(),
            'transaction': self.transaction.to_dict() if self.transaction else None,
            'provider': self.advice.provider.value,
            'fallback': self.advice.is_fallback
        }

class AdvisorChat:
    """Busy-gated conversation between the user and the advisor"""

    def __init__(self, store: FinanceStore, advice_service: AdviceService):
        self.store = store
        self.advice_service = advice_service
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    async def send(self, text: str) -> Optional[ChatTurn]:
        """
        Run one advice turn.

        Returns None without side effects for blank input or while a previous
        request is still pending.
        """
        if not text or not text.strip():
            return None

        if self._busy:
            logger.info("Advice request ignored: previous request still pending")
            return None

        self._busy = True
        try:
            history = self.store.chat_messages
            user_message = self.store.append_chat_message(
                ChatMessage.create(ChatRole.USER.value, text.strip())
            )

            advice = await self.advice_service.get_advice(user_message.text, history)

            transaction = None
            if advice.transaction is not None:
                try:
                    transaction = advice.transaction.to_transaction()
                except ValidationError as e:
                    logger.warning(f"Discarded inferred transaction: {e}")

            # reply first, then the transaction it confirms
            reply_message = self.store.append_chat_message(
                ChatMessage.create(
                    ChatRole.ASSISTANT.value,
                    advice.reply,
                    is_transaction_confirmation=transaction is not None
                )
            )

            if transaction is not None:
                transaction = self.store.add_transaction(transaction)
                logger.info(
                    f"Recorded inferred {transaction.kind}: {transaction.amount:.2f} ({transaction.category})"
                )

            return ChatTurn(
                user_message=user_message,
                reply_message=reply_message,
                advice=advice,
                transaction=transaction
            )
        finally:
            self._busy = False
