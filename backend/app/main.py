from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import get_logger, setup_logging
from app.api.routes import health, chat
from app.dependencies import get_chat_config

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_chat_config()
    logger.info(f"{settings.PROJECT_NAME} is starting up...")
    logger.info(f"chat env: has_gemini_key={bool(config.api_key)} model={config.model}")
    if not (settings.SUPABASE_URL and settings.SUPABASE_KEY):
        logger.warning("Missing Supabase env vars; every content read will fail and chat context will be empty")
    if not config.api_key:
        logger.warning("Missing GEMINI_API_KEY; chat will answer from fallback only")
    yield
    logger.info(f"{settings.PROJECT_NAME} is shutting down...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# CORS configuration
allowed_origins = ["http://localhost:5173", "http://localhost:8080", "http://localhost:3000"]
if settings.ALLOWED_ORIGINS and settings.ALLOWED_ORIGINS != "*":
    allowed_origins = [origin.strip() for origin in settings.ALLOWED_ORIGINS.split(",")] + allowed_origins
elif settings.ALLOWED_ORIGINS == "*":
    allowed_origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allowed_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health, tags=["Health"])
app.include_router(chat, prefix=f"{settings.API_V1_STR}/chat", tags=["Chat"])
# Same handler at the path the portfolio frontend already calls.
app.include_router(chat, prefix="/api/chat", tags=["Chat"], include_in_schema=False)
