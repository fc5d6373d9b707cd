from __future__ import annotations

import json

from app.utils.debug_log import debug_log


def test_debug_log_appends_ndjson_lines(tmp_path) -> None:
    target = tmp_path / "logs" / "chat_debug.log"

    debug_log("chat_request", {"outcome": "model", "ctx_sizes": {"projects": 2}}, path=target)
    debug_log("chat_request", {"outcome": "fallback"}, path=target)

    lines = target.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["event"] == "chat_request"
    assert first["ctx_sizes"] == {"projects": 2}
    assert "ts" in first
    assert json.loads(lines[1])["outcome"] == "fallback"


def test_debug_log_never_raises_on_unwritable_target(tmp_path) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")

    debug_log("chat_request", {"outcome": "model"}, path=blocker / "chat_debug.log")
