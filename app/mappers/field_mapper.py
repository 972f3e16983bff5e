"""
app/mappers/field_mapper.py

Heuristic mapping of profiled columns onto the five canonical roles.

Every role is resolved independently: two roles may bind to the same source
column. Resolution never fails; unmapped roles fall back to defaults applied
by the record normalizer.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Sequence

from app.domain.dataset import ColumnProfile, ColumnType, FieldMapping

logger = logging.getLogger(__name__)

DEFAULT_ROLE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "date": ("date", "time"),
    "sales": ("sales", "revenue", "amount", "value"),
    "region": ("region", "location", "area"),
    "product": ("product", "item", "name"),
    "category": ("category", "type", "group"),
}

STRATEGY_KEYWORD = "keyword"
STRATEGY_TYPE = "type"
STRATEGY_FIRST_NUMBER = "first_number"
STRATEGY_FALLBACK = "fallback"


def name_contains_any(name: str, keywords: Sequence[str]) -> bool:
    """
    Case-insensitive substring test against any keyword.
    """

    lowered = name.lower()
    return any(keyword in lowered for keyword in keywords)


class FieldMapper:
    """
    Resolves canonical roles from column profiles.
    """

    def __init__(self, *, keywords: Mapping[str, Sequence[str]] | None = None) -> None:
        merged = dict(DEFAULT_ROLE_KEYWORDS)
        if keywords:
            merged.update({role: tuple(values) for role, values in keywords.items()})
        self._keywords: dict[str, tuple[str, ...]] = {
            role: tuple(value.lower() for value in values) for role, values in merged.items()
        }

    def resolve(self, profiles: Sequence[ColumnProfile]) -> FieldMapping:
        """
        Build a FieldMapping for *profiles*, scanning in column order.
        """

        strategies: dict[str, str] = {}

        date_column = self._resolve_date(profiles, strategies)
        sales_column = self._first_match(
            profiles,
            lambda p: p.inferred_type is ColumnType.NUMBER
            and name_contains_any(p.name, self._keywords["sales"]),
        )
        first_number = self._first_match(
            profiles,
            lambda p: p.inferred_type is ColumnType.NUMBER,
        )
        if sales_column is not None:
            strategies["sales"] = STRATEGY_KEYWORD
        elif first_number is not None:
            sales_column = first_number
            strategies["sales"] = STRATEGY_FIRST_NUMBER
        else:
            strategies["sales"] = STRATEGY_FALLBACK

        text_roles: dict[str, str | None] = {}
        for role in ("region", "product", "category"):
            column = self._first_match(
                profiles,
                lambda p, role=role: name_contains_any(p.name, self._keywords[role]),
            )
            text_roles[role] = column
            strategies[role] = STRATEGY_KEYWORD if column is not None else STRATEGY_FALLBACK

        mapping = FieldMapping(
            date=date_column,
            sales=sales_column,
            region=text_roles["region"],
            product=text_roles["product"],
            category=text_roles["category"],
            sales_fallback=first_number,
            match_strategies=strategies,
        )
        logger.debug(
            "Resolved field mapping %s strategies=%s",
            mapping.role_to_source(),
            strategies,
        )
        return mapping

    def _resolve_date(
        self,
        profiles: Sequence[ColumnProfile],
        strategies: dict[str, str],
    ) -> str | None:
        for profile in profiles:
            if profile.inferred_type is ColumnType.DATE:
                strategies["date"] = STRATEGY_TYPE
                return profile.name
            if name_contains_any(profile.name, self._keywords["date"]):
                strategies["date"] = STRATEGY_KEYWORD
                return profile.name
        strategies["date"] = STRATEGY_FALLBACK
        return None

    @staticmethod
    def _first_match(
        profiles: Sequence[ColumnProfile],
        predicate: Callable[[ColumnProfile], bool],
    ) -> str | None:
        for profile in profiles:
            if predicate(profile):
                return profile.name
        return None
