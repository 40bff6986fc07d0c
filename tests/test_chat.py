import asyncio

import pytest

from thanos_finance.services.advice import (
    FALLBACK_REPLY, AdviceProvider, AdviceResult, InferredTransaction
)
from thanos_finance.services.chat import AdvisorChat

from conftest import BlockingAdvice, ScriptedAdvice


@pytest.mark.asyncio
async def test_send_logs_both_messages(store):
    advice = ScriptedAdvice([AdviceResult(reply="Disciplina.", provider=AdviceProvider.OPENAI)])
    chat = AdvisorChat(store, advice)

    turn = await chat.send("  Como investir?  ")

    roles = [m.role for m in store.chat_messages]
    assert roles == ["user", "assistant"]
    assert turn.user_message.text == "Como investir?"
    assert turn.reply_message.text == "Disciplina."
    assert turn.transaction is None
    assert store.progress.experience == 10 + 100


@pytest.mark.asyncio
async def test_history_excludes_current_message(store):
    advice = ScriptedAdvice()
    chat = AdvisorChat(store, advice)

    await chat.send("primeira")
    await chat.send("segunda")

    text, history = advice.calls[1]
    assert text == "segunda"
    assert [m.text for m in history] == ["primeira", "Equilíbrio."]


@pytest.mark.asyncio
async def test_inferred_transaction_is_recorded(store):
    advice = ScriptedAdvice([AdviceResult(
        reply="Um livro. Inevitável.",
        transaction=InferredTransaction(amount=50, description="Livro", category="Educação"),
        provider=AdviceProvider.OPENAI
    )])
    chat = AdvisorChat(store, advice)

    turn = await chat.send("Comprei um livro por 50")

    assert store.transactions[0].description == "Livro"
    assert turn.transaction.id == store.transactions[0].id
    assert turn.reply_message.is_transaction_confirmation is True
    assert store.progress.experience == 10 + 100 + 20


@pytest.mark.asyncio
async def test_fallback_reply_records_nothing(store):
    chat = AdvisorChat(store, ScriptedAdvice([AdviceResult(reply=FALLBACK_REPLY)]))

    turn = await chat.send("Olá")

    assert turn.reply_message.text == FALLBACK_REPLY
    assert turn.to_dict()["fallback"] is True
    assert store.transactions == []


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\n"])
async def test_blank_text_is_not_sent(store, text):
    advice = ScriptedAdvice()
    chat = AdvisorChat(store, advice)

    assert await chat.send(text) is None
    assert advice.calls == []
    assert store.chat_messages == []


@pytest.mark.asyncio
async def test_second_send_while_busy_is_rejected(store):
    advice = BlockingAdvice()
    chat = AdvisorChat(store, advice)

    pending = asyncio.create_task(chat.send("primeira"))
    await advice.started.wait()

    assert chat.busy
    assert await chat.send("segunda") is None
    assert [m.text for m in store.chat_messages] == ["primeira"]

    advice.release.set()
    turn = await pending

    assert turn.reply_message.text == "Tudo tem seu preço."
    assert not chat.busy
    assert len(store.chat_messages) == 2


@pytest.mark.asyncio
async def test_long_reply_is_stored_with_its_transaction(store):
    reply = "Equilíbrio. " * 400
    advice = ScriptedAdvice([AdviceResult(
        reply=reply,
        transaction=InferredTransaction(amount=80, description="Mercado", category="Alimentação"),
        provider=AdviceProvider.OPENAI
    )])
    chat = AdvisorChat(store, advice)

    turn = await chat.send("Gastei 80 no mercado")

    assert [m.role for m in store.chat_messages] == ["user", "assistant"]
    assert store.chat_messages[1].text == reply.strip()
    assert store.chat_messages[1].is_transaction_confirmation is True
    assert [t.id for t in store.transactions] == [turn.transaction.id]


@pytest.mark.asyncio
async def test_reply_is_logged_before_the_transaction(store, monkeypatch):
    order = []
    append_chat_message = store.append_chat_message
    add_transaction = store.add_transaction

    def record_message(message):
        order.append(message.role)
        return append_chat_message(message)

    def record_transaction(transaction):
        order.append("transaction")
        return add_transaction(transaction)

    monkeypatch.setattr(store, "append_chat_message", record_message)
    monkeypatch.setattr(store, "add_transaction", record_transaction)

    advice = ScriptedAdvice([AdviceResult(
        reply="Registrado.",
        transaction=InferredTransaction(amount=12, description="Café", category="Alimentação"),
        provider=AdviceProvider.OPENAI
    )])
    await AdvisorChat(store, advice).send("Café de 12")

    assert order == ["user", "assistant", "transaction"]


@pytest.mark.asyncio
async def test_invalid_inferred_transaction_is_discarded(store):
    advice = ScriptedAdvice([AdviceResult(
        reply="Registrado.",
        transaction=InferredTransaction(amount=-5, description="Erro", category="Lazer"),
        provider=AdviceProvider.OPENAI
    )])

    turn = await AdvisorChat(store, advice).send("Gastei algo")

    assert turn.transaction is None
    assert turn.reply_message.is_transaction_confirmation is False
    assert store.transactions == []
