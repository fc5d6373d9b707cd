from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple


class ContentCategory(str, Enum):
    """Logical portfolio categories; the value is the context key sent to the model."""

    PROJECTS = "projects"
    EXPERIENCES = "experiences"
    CERTIFICATIONS = "certifications"
    PUBLICATIONS = "publications"
    SKILLS = "skills"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


# Context key order is also the order categories are listed in prompts and summaries.
CATEGORY_ORDER: Tuple[ContentCategory, ...] = (
    ContentCategory.PROJECTS,
    ContentCategory.EXPERIENCES,
    ContentCategory.CERTIFICATIONS,
    ContentCategory.PUBLICATIONS,
    ContentCategory.SKILLS,
)

CATEGORY_LABELS: Dict[ContentCategory, str] = {
    ContentCategory.PROJECTS: "Projects",
    ContentCategory.EXPERIENCES: "Experience",
    ContentCategory.CERTIFICATIONS: "Certifications",
    ContentCategory.PUBLICATIONS: "Publications",
    ContentCategory.SKILLS: "Skills",
}

# First entry is the preferred table name; the rest are tried in order when it does not resolve.
DEFAULT_TABLE_ALIASES: Dict[ContentCategory, List[str]] = {
    ContentCategory.PROJECTS: ["projects", "project", "portfolio_projects"],
    ContentCategory.EXPERIENCES: ["experiences", "experience", "work_experience", "work_experiences"],
    ContentCategory.CERTIFICATIONS: ["certifications", "certs", "certifications_list", "certs_list"],
    ContentCategory.PUBLICATIONS: ["publications", "publication", "papers", "articles"],
    ContentCategory.SKILLS: ["skills", "skill", "skill_items", "skill_list"],
}
