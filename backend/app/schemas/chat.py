from pydantic import BaseModel, Field
from typing import Dict, Literal, Optional


class ChatResponse(BaseModel):
    response: str
    model: Optional[str] = Field(default=None, description="Model that produced the answer")
    note: Optional[Literal["fallback"]] = Field(
        default=None, description="Set when the answer was synthesized without the model"
    )


class ChatErrorResponse(BaseModel):
    error: str
    fallback: Optional[str] = Field(default=None, description="Renderable answer built from context")


class HealthResponse(BaseModel):
    status: str
    service: str
    model: str
    model_configured: bool
    content_store_configured: bool
    context_caps: Dict[str, int] = {}
