from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from app.core.config import settings

BACKEND_ROOT = Path(__file__).resolve().parents[2]
DEBUG_LOG_PATH = BACKEND_ROOT / settings.LOG_DIR / settings.DEBUG_LOG_FILE


def debug_log(event: str, payload: Dict[str, Any], path: Optional[Path] = None) -> None:
    """Append a single NDJSON line for ``event`` to the chat debug log. Never raises."""
    target = path or DEBUG_LOG_PATH
    record = {"ts": datetime.now(timezone.utc).isoformat(), "event": event, **payload}
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
    except Exception:
        # Never let debug logging break the request
        pass
