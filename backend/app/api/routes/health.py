from fastapi import APIRouter, Depends

from app.core.config import settings
from app.dependencies import get_chat_config
from app.schemas.chat import HealthResponse
from app.services.chat.config import ChatConfig
from app.services.content.categories import CATEGORY_ORDER

router = APIRouter()

@router.get("/health", response_model=HealthResponse)
async def health_check(config: ChatConfig = Depends(get_chat_config)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        service=settings.PROJECT_NAME,
        model=config.model,
        model_configured=bool(config.api_key),
        content_store_configured=bool(settings.SUPABASE_URL and settings.SUPABASE_KEY),
        context_caps={category.value: config.cap_for(category) for category in CATEGORY_ORDER},
    )

@router.get("/")
async def root():
    """Root endpoint."""
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}
