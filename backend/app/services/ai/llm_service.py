from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

import httpx

from app.core.exceptions import (
    ModelError,
    ModelNotFoundError,
    ModelUnavailableError,
    RateLimitedError,
)
from app.core.logging import get_logger
from app.services.chat.config import ChatConfig
from app.utils.retry import retry_with_backoff

logger = get_logger(__name__)

GENERATE_METHOD = "generateContent"
RATE_LIMIT_PATTERN = re.compile(r"too many requests|quota|rate[ -]?limit", re.IGNORECASE)
MAX_RATE_LIMIT_ATTEMPTS = 2
MAX_MODEL_LIST_PAGES = 5


@dataclass(frozen=True)
class ModelInfo:
    name: str
    supported_methods: Tuple[str, ...] = ()

    @property
    def can_generate(self) -> bool:
        return GENERATE_METHOD in self.supported_methods


@dataclass(frozen=True)
class Generation:
    text: str
    model: str


def extract_text(data: Any) -> str:
    """Pull the answer text out of a generateContent response; tolerant of partial shapes."""
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""
    first = candidates[0] if isinstance(candidates[0], dict) else {}
    content = first.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if isinstance(parts, list):
        texts = [p.get("text") for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
        if texts:
            return "".join(texts)
    # older response shape
    output = first.get("output")
    return output if isinstance(output, str) else ""


def is_rate_limited(error: Exception) -> bool:
    return isinstance(error, RateLimitedError)


class LLMService:
    """Gemini REST client with model rediscovery (404) and one backoff retry (429)."""

    def __init__(
        self,
        config: ChatConfig,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config
        self.model = config.model
        self._client = client
        self._sleep = sleep

    @property
    def configured(self) -> bool:
        return bool(self.config.api_key)

    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", "x-goog-api-key": self.config.api_key or ""}

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            if self._client is not None:
                return await self._client.request(method, url, headers=self._headers(), **kwargs)
            async with httpx.AsyncClient(timeout=self.config.http_timeout_seconds) as client:
                return await client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            raise ModelError(f"Gemini request failed: {e.__class__.__name__}: {e}") from e

    @staticmethod
    def _json_body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _error_message(response: httpx.Response, body: Any) -> str:
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and isinstance(error.get("message"), str):
                return error["message"]
        return response.text or f"HTTP {response.status_code}"

    def _raise_for_error(self, response: httpx.Response, body: Any, model: Optional[str]) -> None:
        if response.is_success:
            return
        message = self._error_message(response, body)
        status = response.status_code
        if status == 404:
            raise ModelNotFoundError(message, status=status, model=model)
        if status == 429 or RATE_LIMIT_PATTERN.search(message):
            raise RateLimitedError(message, status=status, model=model)
        raise ModelError(message, status=status, model=model)

    async def generate_content(self, prompt: str, model: str) -> str:
        url = f"{self.config.api_base}/models/{model}:{GENERATE_METHOD}"
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        response = await self._request("POST", url, json=payload)
        body = self._json_body(response)
        self._raise_for_error(response, body, model)
        if body is None:
            raise ModelError("Gemini returned a non-JSON response", status=response.status_code, model=model)
        return extract_text(body)

    async def list_models(self) -> List[ModelInfo]:
        url = f"{self.config.api_base}/models"
        models: List[ModelInfo] = []
        page_token: Optional[str] = None
        for _ in range(MAX_MODEL_LIST_PAGES):
            params = {"pageToken": page_token} if page_token else None
            response = await self._request("GET", url, params=params)
            body = self._json_body(response)
            self._raise_for_error(response, body, None)
            if not isinstance(body, dict):
                break
            for raw in body.get("models") or []:
                if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
                    continue
                methods = raw.get("supportedGenerationMethods")
                models.append(
                    ModelInfo(
                        name=raw["name"].removeprefix("models/"),
                        supported_methods=tuple(m for m in methods if isinstance(m, str))
                        if isinstance(methods, list)
                        else (),
                    )
                )
            page_token = body.get("nextPageToken")
            if not page_token:
                break
        return models

    async def pick_supported_model(self) -> Optional[str]:
        """Best generation-capable model: first priority match, else the first capable one."""
        capable = [m.name for m in await self.list_models() if m.can_generate]
        for preferred in self.config.model_priority:
            if preferred in capable:
                return preferred
        return capable[0] if capable else None

    async def _attempt(self, prompt: str) -> Generation:
        model = self.model
        try:
            return Generation(text=await self.generate_content(prompt, model), model=model)
        except ModelNotFoundError:
            logger.warning(f"model not found: {model} - discovering alternatives...")

        try:
            discovered = await self.pick_supported_model()
            if not discovered:
                raise ModelError("No supported models returned")
            text = await self.generate_content(prompt, discovered)
        except RateLimitedError:
            raise
        except ModelError as e:
            raise ModelError(e.message, status=e.status, model=e.model) from e
        logger.info(f"using model: {discovered}")
        return Generation(text=text, model=discovered)

    async def generate_with_model(self, prompt: str) -> Generation:
        if not self.configured:
            raise ModelUnavailableError("GEMINI_API_KEY is not configured")
        return await retry_with_backoff(
            lambda: self._attempt(prompt),
            max_attempts=MAX_RATE_LIMIT_ATTEMPTS,
            is_retryable=is_rate_limited,
            delay=self.config.rate_limit_backoff_seconds,
            sleep=self._sleep,
            label="gemini",
            log_to=logger,
        )

    async def generate(self, prompt: str) -> str:
        return (await self.generate_with_model(prompt)).text
