from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from app.core.logging import get_logger
from app.services.content.categories import CATEGORY_ORDER, DEFAULT_TABLE_ALIASES, ContentCategory

logger = get_logger(__name__)

DEFAULT_CONTEXT_CAP = 8
DEFAULT_MODEL = "gemini-1.5-flash-latest"
DEFAULT_MODEL_PRIORITY: Tuple[str, ...] = (
    "gemini-1.5-flash-002",
    "gemini-1.5-flash-latest",
    "gemini-1.5-flash",
    "gemini-1.5-pro-latest",
    "gemini-1.5-pro",
)
DEFAULT_FALLBACK_CAPS: Dict[ContentCategory, int] = {
    ContentCategory.PROJECTS: 5,
    ContentCategory.EXPERIENCES: 4,
    ContentCategory.CERTIFICATIONS: 6,
    ContentCategory.PUBLICATIONS: 6,
    ContentCategory.SKILLS: 10,
}


def _default_aliases() -> Dict[ContentCategory, Tuple[str, ...]]:
    return {category: tuple(names) for category, names in DEFAULT_TABLE_ALIASES.items()}


def _default_caps() -> Dict[ContentCategory, int]:
    return {category: DEFAULT_CONTEXT_CAP for category in CATEGORY_ORDER}


@dataclass(frozen=True)
class ChatConfig:
    """Everything the chat pipeline needs, resolved once at startup."""

    owner_name: str = "Vidya"
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    model_priority: Tuple[str, ...] = DEFAULT_MODEL_PRIORITY
    api_base: str = "https://generativelanguage.googleapis.com/v1"
    http_timeout_seconds: float = 20.0
    rate_limit_backoff_seconds: float = 1.5
    fetch_limit: int = 12
    context_caps: Dict[ContentCategory, int] = field(default_factory=_default_caps)
    fallback_caps: Dict[ContentCategory, int] = field(default_factory=lambda: dict(DEFAULT_FALLBACK_CAPS))
    table_aliases: Dict[ContentCategory, Tuple[str, ...]] = field(default_factory=_default_aliases)
    request_timeout_seconds: float = 25.0
    debug_log_enabled: bool = False

    def cap_for(self, category: ContentCategory) -> int:
        return max(0, int(self.context_caps.get(category, DEFAULT_CONTEXT_CAP)))

    def fallback_cap_for(self, category: ContentCategory) -> int:
        return max(0, int(self.fallback_caps.get(category, DEFAULT_FALLBACK_CAPS[category])))

    @classmethod
    def from_settings(cls, settings: Any) -> "ChatConfig":
        default_cap = int(getattr(settings, "CHAT_CONTEXT_MAX_ITEMS", DEFAULT_CONTEXT_CAP))
        caps = {category: default_cap for category in CATEGORY_ORDER}
        for category, value in _parse_category_json(
            getattr(settings, "CHAT_CONTEXT_CAPS_JSON", "{}"), "CHAT_CONTEXT_CAPS_JSON"
        ).items():
            try:
                caps[category] = int(value)
            except (TypeError, ValueError):
                logger.warning(f"ignoring non-integer cap for {category.value}: {value!r}")

        aliases = _default_aliases()
        for category, value in _parse_category_json(
            getattr(settings, "CHAT_TABLE_ALIASES_JSON", "{}"), "CHAT_TABLE_ALIASES_JSON"
        ).items():
            if isinstance(value, str):
                value = [value]
            names = tuple(str(v).strip() for v in (value or []) if str(v).strip())
            if names:
                aliases[category] = names

        priority = tuple(
            p.strip() for p in str(getattr(settings, "GEMINI_MODEL_PRIORITY", "") or "").split(",") if p.strip()
        )

        return cls(
            owner_name=str(getattr(settings, "OWNER_NAME", "") or "Vidya"),
            api_key=getattr(settings, "GEMINI_API_KEY", None) or None,
            model=str(getattr(settings, "GEMINI_MODEL", "") or DEFAULT_MODEL),
            model_priority=priority or DEFAULT_MODEL_PRIORITY,
            api_base=str(getattr(settings, "GEMINI_API_BASE", cls.api_base)).rstrip("/"),
            http_timeout_seconds=float(getattr(settings, "GEMINI_HTTP_TIMEOUT_SECONDS", 20.0)),
            rate_limit_backoff_seconds=float(getattr(settings, "GEMINI_RATE_LIMIT_BACKOFF_SECONDS", 1.5)),
            fetch_limit=int(getattr(settings, "CHAT_FETCH_LIMIT", 12)),
            context_caps=caps,
            table_aliases=aliases,
            request_timeout_seconds=float(getattr(settings, "CHAT_REQUEST_TIMEOUT_SECONDS", 25.0)),
            debug_log_enabled=bool(getattr(settings, "CHAT_DEBUG_LOG_ENABLED", False)),
        )


def _parse_category_json(raw: str, setting_name: str) -> Dict[ContentCategory, Any]:
    try:
        data = json.loads(raw or "{}")
    except json.JSONDecodeError as e:
        logger.warning(f"{setting_name} is not valid JSON, using defaults: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"{setting_name} must be a JSON object, using defaults")
        return {}
    parsed: Dict[ContentCategory, Any] = {}
    for key, value in data.items():
        try:
            parsed[ContentCategory(key)] = value
        except ValueError:
            logger.warning(f"{setting_name}: unknown category '{key}' ignored")
    return parsed
