from app.api.routes.chat import router as chat
from app.api.routes.health import router as health

__all__ = ["chat", "health"]
