from __future__ import annotations

import copy

from app.services.chat.context import ChatContext, build_context, sort_key
from app.services.content.categories import CATEGORY_ORDER, ContentCategory


def _projects(*rows):
    return {ContentCategory.PROJECTS: list(rows)}


def test_unpublished_rows_are_excluded_and_missing_flag_means_published() -> None:
    context = build_context(
        _projects(
            {"title": "Hidden", "published": False},
            {"title": "Visible"},
            {"title": "Explicit", "published": True},
            {"title": "Null flag", "published": None},
        )
    )

    titles = [row["title"] for row in context.get(ContentCategory.PROJECTS)]
    assert titles == ["Visible", "Explicit", "Null flag"]


def test_rows_sorted_by_sort_order_with_missing_as_999_and_stable_ties() -> None:
    context = build_context(
        _projects(
            {"title": "no-order-1"},
            {"title": "ten", "sort_order": 10},
            {"title": "tie-a", "sort_order": 5},
            {"title": "no-order-2"},
            {"title": "tie-b", "sort_order": 5},
            {"title": "late", "sort_order": 1000},
        )
    )

    titles = [row["title"] for row in context.get(ContentCategory.PROJECTS)]
    assert titles == ["tie-a", "tie-b", "ten", "no-order-1", "no-order-2", "late"]
    orders = [sort_key(row) for row in context.get(ContentCategory.PROJECTS)]
    assert orders == sorted(orders)


def test_non_numeric_sort_order_is_treated_as_missing() -> None:
    assert sort_key({"sort_order": "3"}) == 3.0
    assert sort_key({"sort_order": "first"}) == 999.0
    assert sort_key({"sort_order": True}) == 999.0


def test_each_category_is_capped() -> None:
    raw = {category: [{"n": i} for i in range(20)] for category in CATEGORY_ORDER}

    context = build_context(raw, caps=8)

    assert context.sizes() == {category.value: 8 for category in CATEGORY_ORDER}


def test_per_category_caps_override_default() -> None:
    raw = {category: [{"n": i} for i in range(20)] for category in CATEGORY_ORDER}

    context = build_context(raw, caps={ContentCategory.SKILLS: 12, ContentCategory.PROJECTS: 2})

    sizes = context.sizes()
    assert sizes["skills"] == 12
    assert sizes["projects"] == 2
    assert sizes["publications"] == 8


def test_cap_applies_after_filtering_unpublished() -> None:
    rows = [{"n": i, "published": i % 2 == 0} for i in range(10)]

    context = build_context(_projects(*rows), caps=3)

    assert [row["n"] for row in context.get(ContentCategory.PROJECTS)] == [0, 2, 4]


def test_build_context_is_pure_and_idempotent() -> None:
    raw = _projects({"title": "b", "sort_order": 2}, {"title": "a", "sort_order": 1})
    snapshot = copy.deepcopy(raw)

    first = build_context(raw)
    second = build_context(raw)

    assert first == second
    assert raw == snapshot


def test_missing_categories_come_out_empty() -> None:
    context = build_context({})

    assert context == ChatContext.empty()
    assert context.to_payload() == {category.value: [] for category in CATEGORY_ORDER}
