"""Deterministic, template-based answers used when the model cannot answer."""
from __future__ import annotations

import re
from typing import Callable, Dict, List, Mapping, Optional, Pattern, Tuple

from app.services.chat.context import ChatContext, Row
from app.services.chat.fields import (
    DESCRIPTION_ALIASES,
    TITLE_ALIASES,
    URL_ALIASES,
    YEAR_ALIASES,
    pick_str,
    pick_url,
    pick_year,
)
from app.services.content.categories import CATEGORY_ORDER, ContentCategory


def _project_line(row: Row) -> str:
    title = pick_str(row, *TITLE_ALIASES) or "Project"
    year = pick_year(row, *YEAR_ALIASES)
    brief = pick_str(row, *DESCRIPTION_ALIASES)
    return f"• {title}{f' ({year})' if year else ''}{f' — {brief}' if brief else ''}"


def _experience_line(row: Row) -> str:
    role = pick_str(row, "role", "title") or "Role"
    company = pick_str(row, "company", "org", "organization") or "Company"
    start = pick_str(row, "start", "start_date")
    end = pick_str(row, "end", "end_date") or "Present"
    brief = pick_str(row, "summary", "description")
    span = " → ".join(part for part in (start, end) if part)
    return f"• {role} @ {company}{f' ({span})' if span else ''}{f' — {brief}' if brief else ''}"


def _certification_line(row: Row) -> str:
    name = pick_str(row, "name", "title") or "Certification"
    issuer = pick_str(row, "issuer", "organization") or "Issuer"
    when = pick_year(row, "issued_on", "date", "year")
    return f"• {name} — {issuer}{f' ({when})' if when else ''}"


def _publication_line(row: Row) -> str:
    title = pick_str(row, "title", "name") or "Publication"
    venue = pick_str(row, "venue", "journal", "conference")
    year = pick_year(row, *YEAR_ALIASES) or pick_str(row, "published_on")
    url = pick_url(row, *URL_ALIASES)
    tail = ", ".join(part for part in (venue, year) if part)
    return f"• {title}{f' — {tail}' if tail else ''}{f' — {url}' if url else ''}"


def _skill_line(row: Row) -> str:
    name = pick_str(row, "name", "title") or "Skill"
    group = pick_str(row, "group_name", "group", "category")
    return f"• {name}{f' — {group}' if group else ''}"


# Checked in this order; the first category whose keywords match and has rows wins.
KEYWORD_RULES: Tuple[Tuple[ContentCategory, Pattern[str], Callable[[Row], str]], ...] = (
    (ContentCategory.PROJECTS, re.compile(r"project|build|made|portfolio"), _project_line),
    (ContentCategory.EXPERIENCES, re.compile(r"experience|work|role|company|intern"), _experience_line),
    (ContentCategory.CERTIFICATIONS, re.compile(r"cert|certificate|certification"), _certification_line),
    (ContentCategory.PUBLICATIONS, re.compile(r"publication|paper|journal|conference|article"), _publication_line),
    (ContentCategory.SKILLS, re.compile(r"skill|stack|tech|technology|tools?"), _skill_line),
)

_COUNT_NOUNS: Dict[ContentCategory, str] = {
    ContentCategory.PROJECTS: "project(s)",
    ContentCategory.EXPERIENCES: "experience item(s)",
    ContentCategory.CERTIFICATIONS: "certification(s)",
    ContentCategory.PUBLICATIONS: "publication(s)",
    ContentCategory.SKILLS: "skill(s)",
}


class FallbackSynthesizer:
    def __init__(self, owner_name: str, caps: Optional[Mapping[ContentCategory, int]] = None):
        self.owner_name = owner_name
        self.caps = dict(caps or {})

    def _cap(self, category: ContentCategory) -> int:
        return max(0, int(self.caps.get(category, 6)))

    def summarize(self, category: ContentCategory, context: ChatContext) -> Optional[str]:
        render = next(fn for cat, _, fn in KEYWORD_RULES if cat == category)
        lines: List[str] = [render(row) for row in context.get(category)[: self._cap(category)]]
        if not lines:
            return None
        return f"Portfolio summary — **{category.label}**:\n" + "\n".join(lines)

    def generic_summary(self, context: ChatContext) -> str:
        counts = ", ".join(f"{len(context.get(c))} {_COUNT_NOUNS[c]}" for c in CATEGORY_ORDER)
        return (
            f"**{self.owner_name}'s Assistant** — {counts}. "
            "Ask about role fit, or request summaries and evidence for a specific area "
            "(projects, experience, certifications, publications, skills)."
        )

    def synthesize(self, question: str, context: ChatContext) -> str:
        """Answer from context alone. Pure and never raises."""
        q = (question or "").lower()
        for category, pattern, _ in KEYWORD_RULES:
            if not pattern.search(q):
                continue
            summary = self.summarize(category, context)
            if summary:
                return summary
        return self.generic_summary(context)
