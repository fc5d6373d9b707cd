from __future__ import annotations

import re
from typing import Any, Mapping

_URL_RE = re.compile(r"^https?://", re.IGNORECASE)

# Display attribute -> acceptable column names, most specific first.
TITLE_ALIASES = ("title", "name", "project_title")
YEAR_ALIASES = ("year",)
DESCRIPTION_ALIASES = ("description", "blurb", "summary")
URL_ALIASES = ("url", "link", "doi", "certificate_url")


def pick_str(row: Mapping[str, Any], *keys: str) -> str:
    """First non-blank string value among ``keys``."""
    for key in keys:
        value = row.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def pick_year(row: Mapping[str, Any], *keys: str) -> str:
    """Like pick_str, but numeric values (e.g. ``year: 2023``) count too."""
    for key in keys:
        value = row.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def pick_url(row: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = row.get(key)
        if isinstance(value, str) and _URL_RE.match(value):
            return value
    return ""
