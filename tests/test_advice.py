import json
from types import SimpleNamespace

import httpx
import openai
import pytest

from thanos_finance.config import AIConfig
from thanos_finance.core.models import ChatMessage
from thanos_finance.services.advice import (
    FALLBACK_REPLY, MISSING_KEY_REPLY, AdviceProvider, OpenAIAdviceService
)

from conftest import fake_client


def payload(reply="Inevitável.", transaction=None):
    return json.dumps({"reply": reply, "transaction": transaction})


def rate_limit_error():
    request = httpx.Request("POST", "https://api.example.test/v1/chat/completions")
    return openai.RateLimitError(
        "Rate limit reached", response=httpx.Response(429, request=request), body=None
    )


def connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", "https://api.example.test/v1/chat/completions"))


@pytest.mark.asyncio
async def test_plain_reply(ai_config):
    client, _ = fake_client(payload("O equilíbrio exige disciplina."))
    result = await OpenAIAdviceService(ai_config, client=client).get_advice("Como poupar?")

    assert result.reply == "O equilíbrio exige disciplina."
    assert result.transaction is None
    assert result.provider == AdviceProvider.OPENAI


@pytest.mark.asyncio
async def test_inferred_transaction(ai_config):
    client, _ = fake_client(payload("Um livro. Sábio.", {
        "amount": 50, "description": "Livro", "category": "Educação", "type": "expense"
    }))
    result = await OpenAIAdviceService(ai_config, client=client).get_advice("Comprei um livro por 50")

    assert result.transaction.amount == 50
    assert result.transaction.category == "Educação"
    assert result.transaction.kind == "expense"
    assert result.transaction.to_transaction().description == "Livro"


@pytest.mark.asyncio
async def test_unknown_category_becomes_outros(ai_config):
    client, _ = fake_client(payload("Registrado.", {
        "amount": 30, "description": "Gibi", "category": "Quadrinhos", "type": "expense"
    }))
    result = await OpenAIAdviceService(ai_config, client=client).get_advice("Gastei 30 num gibi")
    assert result.transaction.category == "Outros"


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [
    "isto não é json",
    payload(reply=""),
    payload(transaction={"amount": -5, "description": "x", "category": "Lazer", "type": "expense"}),
    payload(transaction={"amount": 5, "description": "x", "category": "Lazer", "type": "gift"}),
])
async def test_malformed_responses_fall_back(ai_config, content):
    client, _ = fake_client(content)
    result = await OpenAIAdviceService(ai_config, client=client).get_advice("Olá")

    assert result.reply == FALLBACK_REPLY
    assert result.transaction is None
    assert result.is_fallback


@pytest.mark.asyncio
async def test_unexpected_error_falls_back(ai_config):
    client, _ = fake_client(RuntimeError("boom"))
    service = OpenAIAdviceService(ai_config, client=client)
    result = await service.get_advice("Olá")

    assert result.reply == FALLBACK_REPLY
    assert service.stats.failed_requests == 1


@pytest.mark.asyncio
async def test_connection_errors_are_retried(ai_config):
    client, completions = fake_client(connection_error(), payload("Voltei."))
    result = await OpenAIAdviceService(ai_config, client=client).get_advice("Olá")

    assert result.reply == "Voltei."
    assert len(completions.requests) == 2


@pytest.mark.asyncio
async def test_retries_are_bounded(ai_config):
    client, completions = fake_client(connection_error())
    result = await OpenAIAdviceService(ai_config, client=client).get_advice("Olá")

    assert result.reply == FALLBACK_REPLY
    assert len(completions.requests) == ai_config.max_retries


@pytest.mark.asyncio
async def test_missing_key():
    service = OpenAIAdviceService(AIConfig(openai_api_key=None))
    result = await service.get_advice("Olá")

    assert not service.enabled
    assert result.reply == MISSING_KEY_REPLY
    assert result.transaction is None


def test_history_is_trimmed(ai_config):
    client, _ = fake_client(payload())
    service = OpenAIAdviceService(ai_config, client=client)
    history = [ChatMessage.create("user" if i % 2 == 0 else "assistant", f"msg {i}") for i in range(7)]

    messages = service.build_messages("agora", history)

    assert messages[0]["role"] == "system"
    assert [m["content"] for m in messages[1:-1]] == ["msg 3", "msg 4", "msg 5", "msg 6"]
    assert messages[-1] == {"role": "user", "content": "agora"}


def test_system_prompt_lists_categories(ai_config):
    client, _ = fake_client(payload())
    prompt = OpenAIAdviceService(ai_config, client=client).system_prompt
    assert "Alimentação" in prompt
    assert "Renda" in prompt


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [None, "   "])
async def test_empty_content_falls_back(ai_config, content):
    client, completions = fake_client(content)
    service = OpenAIAdviceService(ai_config, client=client)
    result = await service.get_advice("Olá")

    assert result.reply == FALLBACK_REPLY
    assert result.is_fallback
    assert len(completions.requests) == 1
    assert service.stats.failed_requests == 1


@pytest.mark.asyncio
async def test_no_choices_falls_back(ai_config):
    async def create(**kwargs):
        return SimpleNamespace(choices=[])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    result = await OpenAIAdviceService(ai_config, client=client).get_advice("Olá")

    assert result.reply == FALLBACK_REPLY


@pytest.mark.asyncio
async def test_rate_limit_is_retried(ai_config):
    client, completions = fake_client(rate_limit_error(), payload("Paciência."))
    result = await OpenAIAdviceService(ai_config, client=client).get_advice("Olá")

    assert result.reply == "Paciência."
    assert len(completions.requests) == 2


@pytest.mark.asyncio
async def test_persistent_rate_limit_falls_back(ai_config):
    client, completions = fake_client(rate_limit_error())
    result = await OpenAIAdviceService(ai_config, client=client).get_advice("Olá")

    assert result.reply == FALLBACK_REPLY
    assert len(completions.requests) == ai_config.max_retries
