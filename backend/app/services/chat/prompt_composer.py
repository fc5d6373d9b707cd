from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping

from app.prompts.system_prompts import portfolio_assistant_prompt
from app.services.chat.context import ChatContext
from app.services.chat.fields import TITLE_ALIASES, pick_str

CONTEXT_LABEL = "Context (authoritative JSON):"
QUESTION_LABEL = "User question:"

# Bookkeeping columns that only cost prompt tokens.
_HIDDEN_FIELDS = frozenset({"id", "published", "sort_order", "created_at", "updated_at", "user_id"})


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict, tuple)):
        return len(value) == 0
    return False


def compact_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    out = {key: value for key, value in row.items() if key not in _HIDDEN_FIELDS and not _is_blank(value)}
    if "title" not in out:
        title = pick_str(row, *TITLE_ALIASES)
        if title:
            out = {"title": title, **out}
    return out


def serialize_context(context: ChatContext) -> str:
    payload: Dict[str, List[Dict[str, Any]]] = {
        key: [compact_row(row) for row in rows] for key, rows in context.to_payload().items()
    }
    return json.dumps(payload, ensure_ascii=False, default=str)


class PromptComposer:
    def __init__(self, owner_name: str, instructions: str | None = None):
        self.owner_name = owner_name
        self.instructions = instructions or portfolio_assistant_prompt(owner_name)

    def compose(self, context: ChatContext, question: str) -> str:
        return (
            self.instructions
            + "\n\n"
            + CONTEXT_LABEL
            + "\n"
            + serialize_context(context)
            + "\n\n"
            + QUESTION_LABEL
            + "\n"
            + question
        )
