from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any, Dict, List, Optional

import httpx
import pytest

from app.core.exceptions import ModelError, ModelUnavailableError, RateLimitedError
from app.services.ai.llm_service import Generation, LLMService
from app.services.chat.service import ChatService
from app.services.content.categories import ContentCategory
from app.services.content.store import ContentStoreAdapter


class _FakeLLM:
    def __init__(self, *, text: str = "model answer", error: Optional[Exception] = None, delay: float = 0.0):
        self.text = text
        self.error = error
        self.delay = delay
        self.prompts: List[str] = []

    async def generate_with_model(self, prompt: str) -> Generation:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return Generation(text=self.text, model="gemini-1.5-flash")


def _service(config, store, llm, events: Optional[List[Dict[str, Any]]] = None) -> ChatService:
    def log_event(event: str, payload: Dict[str, Any]) -> None:
        if events is not None:
            events.append({"event": event, **payload})

    return ChatService(config=config, content=ContentStoreAdapter(store), llm=llm, log_event=log_event)


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [None, [], {}, {"message": ""}, {"message": "   "}, {"message": 42}])
async def test_missing_or_invalid_message_is_rejected(chat_config, make_store, payload) -> None:
    llm = _FakeLLM()
    store = make_store({})
    service = _service(chat_config, store, llm)

    outcome = await service.process_chat(payload)

    assert outcome.status_code == 400
    assert outcome.body == {"error": "Message is required"}
    assert llm.prompts == []
    assert store.calls == []


@pytest.mark.asyncio
async def test_model_answer_is_returned_with_model_id(chat_config, make_store, portfolio_tables) -> None:
    llm = _FakeLLM(text="Ada built Alpha and Beta.")
    service = _service(chat_config, make_store(portfolio_tables), llm)

    outcome = await service.process_chat({"message": "What projects have you built?"})

    assert outcome.status_code == 200
    assert outcome.body == {"response": "Ada built Alpha and Beta.", "model": "gemini-1.5-flash"}
    prompt = llm.prompts[0]
    assert "Alpha" in prompt and "Beta" in prompt
    assert "Gamma" not in prompt
    assert prompt.rstrip().endswith("What projects have you built?")


@pytest.mark.asyncio
async def test_unconfigured_model_answers_from_fallback(chat_config, make_store, portfolio_tables) -> None:
    llm = _FakeLLM(error=ModelUnavailableError("GEMINI_API_KEY is not configured"))
    service = _service(chat_config, make_store(portfolio_tables), llm)

    outcome = await service.process_chat({"message": "What projects have you built?"})

    assert outcome.status_code == 200
    assert outcome.body["note"] == "fallback"
    bullets = [line for line in outcome.body["response"].splitlines() if line.startswith("• ")]
    assert [b.split(" (")[0] for b in bullets] == ["• Alpha", "• Beta"]
    assert "Gamma" not in outcome.body["response"]


@pytest.mark.asyncio
async def test_exhausted_rate_limit_is_surfaced_as_500_with_fallback(chat_config, make_store, portfolio_tables) -> None:
    llm = _FakeLLM(error=RateLimitedError("Too Many Requests", status=429))
    service = _service(chat_config, make_store(portfolio_tables), llm)

    outcome = await service.process_chat({"message": "What skills do you have?"})

    assert outcome.status_code == 500
    assert outcome.body["error"] == "Too Many Requests"
    assert "note" not in outcome.body
    assert "• Python — Languages" in outcome.body["fallback"]


@pytest.mark.asyncio
async def test_non_retryable_model_error_returns_500_with_fallback(chat_config, make_store, portfolio_tables) -> None:
    llm = _FakeLLM(error=ModelError("API key not valid", status=400))
    service = _service(chat_config, make_store(portfolio_tables), llm)

    outcome = await service.process_chat({"message": "Any certifications?"})

    assert outcome.status_code == 500
    assert outcome.body["error"] == "API key not valid"
    assert "• AWS Solutions Architect — Amazon (2023-05)" in outcome.body["fallback"]


@pytest.mark.asyncio
async def test_unexpected_failure_returns_500_error(chat_config, make_store) -> None:
    llm = _FakeLLM(error=KeyError("boom"))
    service = _service(chat_config, make_store({}), llm)

    outcome = await service.process_chat({"message": "hello"})

    assert outcome.status_code == 500
    assert set(outcome.body) == {"error"}
    assert "boom" in outcome.body["error"]


@pytest.mark.asyncio
async def test_request_deadline_falls_back_with_assembled_context(chat_config, make_store, portfolio_tables) -> None:
    llm = _FakeLLM(delay=1.0)
    config = replace(chat_config, request_timeout_seconds=0.05)
    service = _service(config, make_store(portfolio_tables), llm)

    outcome = await service.process_chat({"message": "What projects have you built?"})

    assert outcome.status_code == 200
    assert outcome.body["note"] == "fallback"
    assert "• Alpha" in outcome.body["response"]


@pytest.mark.asyncio
async def test_no_resolvable_tables_gives_zero_count_summary(chat_config, make_store) -> None:
    llm = _FakeLLM(error=ModelUnavailableError("GEMINI_API_KEY is not configured"))
    store = make_store({})
    service = _service(chat_config, store, llm)

    outcome = await service.process_chat({"message": "Tell me about yourself"})

    assert outcome.status_code == 200
    assert outcome.body["note"] == "fallback"
    for phrase in ("0 project(s)", "0 experience item(s)", "0 certification(s)", "0 publication(s)", "0 skill(s)"):
        assert phrase in outcome.body["response"]
    # every alias of every category was tried
    assert len(store.calls) == sum(len(names) for names in chat_config.table_aliases.values())


@pytest.mark.asyncio
async def test_context_respects_configured_caps(chat_config, make_store) -> None:
    tables = {"projects": [{"title": f"P{i}", "sort_order": i} for i in range(12)]}
    config = replace(chat_config, context_caps={**chat_config.context_caps, ContentCategory.PROJECTS: 3})
    service = _service(config, make_store(tables), _FakeLLM())

    context = await service.build_context()

    assert [row["title"] for row in context.get(ContentCategory.PROJECTS)] == ["P0", "P1", "P2"]


@pytest.mark.asyncio
async def test_debug_event_recorded_when_enabled(chat_config, make_store, portfolio_tables) -> None:
    events: List[Dict[str, Any]] = []
    config = replace(chat_config, debug_log_enabled=True)
    service = _service(config, make_store(portfolio_tables), _FakeLLM(), events)

    await service.process_chat({"message": "hi"})

    assert len(events) == 1
    assert events[0]["event"] == "chat_request"
    assert events[0]["outcome"] == "model"
    assert events[0]["model"] == "gemini-1.5-flash"
    assert events[0]["ctx_sizes"]["projects"] == 2


@pytest.mark.asyncio
async def test_gemini_rate_limited_twice_returns_error_with_fallback(chat_config, make_store, portfolio_tables, sleep_recorder) -> None:
    calls: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(429, json={"error": {"code": 429, "message": "Resource has been exhausted"}})

    llm = LLMService(
        chat_config,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        sleep=sleep_recorder,
    )
    service = ChatService(config=chat_config, content=ContentStoreAdapter(make_store(portfolio_tables)), llm=llm)

    outcome = await service.process_chat({"message": "What projects have you built?"})

    assert len(calls) == 2
    assert sleep_recorder.delays == [chat_config.rate_limit_backoff_seconds]
    assert outcome.status_code == 500
    assert outcome.body["error"]
    assert "• Alpha (2022) — Portfolio site" in outcome.body["fallback"]
