from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.logging import get_logger
from app.dependencies import get_chat_service
from app.schemas.chat import ChatErrorResponse, ChatResponse
from app.services.chat.service import ChatService

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ChatErrorResponse}, 500: {"model": ChatErrorResponse}},
)
async def chat(
    request: Request,
    service: ChatService = Depends(get_chat_service),
):
    """
    Visitor chat endpoint.

    Handles:
    1. Content fetch from Supabase (every category in parallel)
    2. Context assembly and prompt composition
    3. Gemini generation with model rediscovery and rate-limit retry
    4. Deterministic fallback answer when the model cannot answer
    """
    try:
        payload = await request.json()
    except ValueError:
        # Malformed body is treated like a missing message.
        payload = None
    outcome = await service.process_chat(payload)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)
