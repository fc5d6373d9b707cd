from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from app.core.exceptions import (
    ChatRequestError,
    ModelError,
    ModelUnavailableError,
)
from app.core.logging import get_logger
from app.services.ai.llm_service import Generation, LLMService
from app.services.chat.config import ChatConfig
from app.services.chat.context import ChatContext, build_context
from app.services.chat.fallback import FallbackSynthesizer
from app.services.chat.prompt_composer import PromptComposer
from app.services.content.store import ContentStoreAdapter
from app.utils.debug_log import debug_log as _debug_log

logger = get_logger(__name__)

FALLBACK_NOTE = "fallback"


@dataclass
class ChatOutcome:
    status_code: int
    body: Dict[str, Any]


@dataclass
class _RequestState:
    context: ChatContext = field(default_factory=ChatContext.empty)
    model: Optional[str] = None


class ChatService:
    """Grounded chat orchestration (content -> context -> prompt -> model, with fallback)."""

    def __init__(
        self,
        config: ChatConfig,
        content: ContentStoreAdapter,
        llm: LLMService,
        composer: Optional[PromptComposer] = None,
        fallback: Optional[FallbackSynthesizer] = None,
        log_event: Callable[[str, Dict[str, Any]], None] = _debug_log,
    ):
        self.config = config
        self.content = content
        self.llm = llm
        self.composer = composer or PromptComposer(config.owner_name)
        self.fallback = fallback or FallbackSynthesizer(config.owner_name, config.fallback_caps)
        self._log_event = log_event

    @staticmethod
    def extract_message(payload: Any) -> str:
        message = payload.get("message") if isinstance(payload, dict) else None
        if not isinstance(message, str) or not message.strip():
            raise ChatRequestError("Message is required")
        return message

    async def build_context(self) -> ChatContext:
        raw = await self.content.fetch_all(self.config.table_aliases, self.config.fetch_limit)
        context = build_context(raw, self.config.context_caps)
        logger.info(f"chat ctx sizes {context.sizes()}")
        return context

    async def _answer(self, message: str, state: _RequestState) -> Generation:
        state.context = await self.build_context()
        prompt = self.composer.compose(state.context, message)
        return await self.llm.generate_with_model(prompt)

    def _fallback_outcome(self, message: str, state: _RequestState) -> ChatOutcome:
        return ChatOutcome(
            status_code=200,
            body={"response": self.fallback.synthesize(message, state.context), "note": FALLBACK_NOTE},
        )

    async def process_chat(self, payload: Any) -> ChatOutcome:
        """
        Answer one visitor message.

        Returns the HTTP status and JSON body to send; all failure classes are
        mapped here so the route stays thin.
        """
        try:
            message = self.extract_message(payload)
        except ChatRequestError as e:
            return ChatOutcome(status_code=e.status_code, body={"error": e.detail})

        started = time.monotonic()
        state = _RequestState()
        outcome_name = "model"
        try:
            generation = await asyncio.wait_for(
                self._answer(message, state),
                timeout=self.config.request_timeout_seconds,
            )
            state.model = generation.model
            outcome = ChatOutcome(status_code=200, body={"response": generation.text, "model": generation.model})
        except asyncio.TimeoutError:
            logger.warning(f"chat request exceeded {self.config.request_timeout_seconds}s; answering from fallback")
            outcome_name = "timeout_fallback"
            outcome = self._fallback_outcome(message, state)
        except ModelUnavailableError as e:
            logger.warning(f"Gemini unavailable: {e.message}; answering from fallback")
            outcome_name = "fallback"
            outcome = self._fallback_outcome(message, state)
        except ModelError as e:
            logger.error(f"Gemini error: {e.message}")
            outcome_name = "model_error"
            state.model = e.model
            outcome = ChatOutcome(
                status_code=500,
                body={"error": e.message, "fallback": self.fallback.synthesize(message, state.context)},
            )
        except Exception as e:
            logger.error(f"chat fatal error: {e}", exc_info=True)
            outcome_name = "internal_error"
            outcome = ChatOutcome(status_code=500, body={"error": str(e) or "Internal error"})

        if self.config.debug_log_enabled:
            self._log_event(
                "chat_request",
                {
                    "outcome": outcome_name,
                    "status": outcome.status_code,
                    "model": state.model,
                    "ctx_sizes": state.context.sizes(),
                    "latency_ms": int((time.monotonic() - started) * 1000),
                },
            )
        return outcome
