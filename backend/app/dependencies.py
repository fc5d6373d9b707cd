from functools import lru_cache

from app.core.config import settings
from app.services.ai.llm_service import LLMService
from app.services.chat.config import ChatConfig
from app.services.chat.service import ChatService
from app.services.content.store import ContentStoreAdapter, SupabaseContentStore


@lru_cache
def get_chat_config() -> ChatConfig:
    return ChatConfig.from_settings(settings)


@lru_cache
def get_chat_service() -> ChatService:
    """Dependency providing the process-wide chat service (stateless between requests)."""
    config = get_chat_config()
    return ChatService(
        config=config,
        content=ContentStoreAdapter(SupabaseContentStore()),
        llm=LLMService(config),
    )
