"""Domain types, list items and the per-group context."""

from __future__ import annotations

import math
import unicodedata
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum as PyEnum
from typing import Any

from listkeeper.errors import GroupNotReady


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def normalize_label(text: str) -> str:
    """Lower-case, trim, strip accents and surrounding punctuation."""
    decomposed = unicodedata.normalize("NFKD", text.strip().lower())
    plain = "".join(c for c in decomposed if not unicodedata.combining(c))
    return plain.strip(" .,;:!?\"'*`")


def _lookup(members: dict[str, Any], raw: str) -> Any | None:
    return members.get(normalize_label(raw))


# ---------------------------------------------------------------------------
# enums
# ---------------------------------------------------------------------------


class DomainType(str, PyEnum):
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    EXPENSE = "expense"
    UNDETERMINED = "undetermined"

    @property
    def label(self) -> str:
        return _DOMAIN_LABELS[self]

    @classmethod
    def parse(cls, raw: str) -> DomainType | None:
        """Match an English value or Portuguese label; ``None`` if unknown."""
        return _lookup(_DOMAIN_INDEX, raw)


class EntertainmentCategory(str, PyEnum):
    FILM = "film"
    SERIES = "series"
    CARTOON = "cartoon"
    DOCUMENTARY = "documentary"
    ANIME = "anime"
    BOOK = "book"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _ENTERTAINMENT_LABELS[self]

    @classmethod
    def parse(cls, raw: str) -> EntertainmentCategory:
        return _lookup(_ENTERTAINMENT_INDEX, raw) or cls.OTHER


class ExpenseCategory(str, PyEnum):
    GROCERIES = "groceries"
    TRANSPORT = "transport"
    LEISURE = "leisure"
    FOOD = "food"
    HEALTH = "health"
    EDUCATION = "education"
    BILLS = "bills"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _EXPENSE_LABELS[self]

    @classmethod
    def parse(cls, raw: str) -> ExpenseCategory:
        return _lookup(_EXPENSE_INDEX, raw) or cls.OTHER


_DOMAIN_LABELS = {
    DomainType.ENTERTAINMENT: "entretenimento",
    DomainType.SHOPPING: "compras",
    DomainType.EXPENSE: "gastos",
    DomainType.UNDETERMINED: "indefinido",
}

_ENTERTAINMENT_LABELS = {
    EntertainmentCategory.FILM: "filme",
    EntertainmentCategory.SERIES: "série",
    EntertainmentCategory.CARTOON: "desenho",
    EntertainmentCategory.DOCUMENTARY: "documentário",
    EntertainmentCategory.ANIME: "anime",
    EntertainmentCategory.BOOK: "livro",
    EntertainmentCategory.OTHER: "outros",
}

_EXPENSE_LABELS = {
    ExpenseCategory.GROCERIES: "mercado",
    ExpenseCategory.TRANSPORT: "transporte",
    ExpenseCategory.LEISURE: "lazer",
    ExpenseCategory.FOOD: "comida",
    ExpenseCategory.HEALTH: "saúde",
    ExpenseCategory.EDUCATION: "educação",
    ExpenseCategory.BILLS: "contas",
    ExpenseCategory.OTHER: "outros",
}

# Extra spellings the classifier tends to answer with.
_SYNONYMS: dict[Any, tuple[str, ...]] = {
    DomainType.ENTERTAINMENT: ("entretenimento", "entertainment"),
    DomainType.EXPENSE: ("gasto", "despesas", "expenses"),
    DomainType.SHOPPING: ("compra", "lista de compras"),
    EntertainmentCategory.FILM: ("movie", "filmes"),
    EntertainmentCategory.SERIES: ("serie", "seriado", "tv show", "show"),
    EntertainmentCategory.CARTOON: ("animacao", "animation"),
    EntertainmentCategory.DOCUMENTARY: ("doc", "documentario"),
    EntertainmentCategory.BOOK: ("livros",),
    EntertainmentCategory.OTHER: ("outro",),
    ExpenseCategory.GROCERIES: ("supermercado", "grocery"),
    ExpenseCategory.FOOD: ("alimentacao", "restaurante", "restaurant"),
    ExpenseCategory.BILLS: ("conta",),
    ExpenseCategory.OTHER: ("outro",),
}


def _build_index(labels: dict[Any, str]) -> dict[str, Any]:
    index: dict[str, Any] = {}
    for member, label in labels.items():
        for name in (member.value, label, *_SYNONYMS.get(member, ())):
            index[normalize_label(name)] = member
    return index


_DOMAIN_INDEX = _build_index(_DOMAIN_LABELS)
_ENTERTAINMENT_INDEX = _build_index(_ENTERTAINMENT_LABELS)
_EXPENSE_INDEX = _build_index(_EXPENSE_LABELS)


# ---------------------------------------------------------------------------
# items
# ---------------------------------------------------------------------------


@dataclass
class EntertainmentItem:
    name: str
    category: EntertainmentCategory
    added_at: datetime = field(default_factory=datetime.now)
    added_by: str = ""
    watched: bool = False
    watched_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("entertainment title must not be empty")


@dataclass
class ExpenseItem:
    description: str
    value: float
    category: ExpenseCategory
    date: datetime = field(default_factory=datetime.now)
    added_by: str = ""
    original_message: str = ""

    def __post_init__(self) -> None:
        if not self.description.strip():
            raise ValueError("expense description must not be empty")
        if not math.isfinite(self.value) or self.value < 0:
            raise ValueError(f"invalid expense value: {self.value!r}")


# ---------------------------------------------------------------------------
# group context
# ---------------------------------------------------------------------------


@dataclass
class GroupContext:
    """Mutable list state of one conversation.

    ``items`` holds records of the type matching ``domain_type``
    (``EntertainmentItem``, ``ExpenseItem`` or ``str`` for shopping), in
    insertion order. A context still ``UNDETERMINED`` refuses mutation.
    """

    group_id: str
    domain_type: DomainType = DomainType.UNDETERMINED
    items: list[Any] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_ready(self) -> bool:
        return self.domain_type is not DomainType.UNDETERMINED

    def _require(self, domain: DomainType) -> None:
        if not self.is_ready:
            raise GroupNotReady(f"group {self.group_id} has no domain yet")
        if self.domain_type is not domain:
            raise GroupNotReady(
                f"group {self.group_id} is {self.domain_type.value}, not {domain.value}"
            )

    # ── entertainment ──

    def find_title(self, name: str) -> EntertainmentItem | None:
        wanted = name.strip().lower()
        for item in self.items:
            if item.name.lower() == wanted:
                return item
        return None

    def add_title(self, item: EntertainmentItem) -> tuple[EntertainmentItem, bool]:
        """Append *item* unless the title exists. Returns (stored item, created)."""
        self._require(DomainType.ENTERTAINMENT)
        existing = self.find_title(item.name)
        if existing is not None:
            return existing, False
        self.items.append(item)
        return item, True

    def mark_watched(self, name: str) -> EntertainmentItem | None:
        self._require(DomainType.ENTERTAINMENT)
        item = self.find_title(name)
        if item is not None and not item.watched:
            item.watched = True
            item.watched_at = datetime.now()
        return item

    # ── expenses ──

    def add_expense(self, item: ExpenseItem) -> int:
        """Append *item* and return the new expense count."""
        self._require(DomainType.EXPENSE)
        self.items.append(item)
        return len(self.items)

    # ── shopping ──

    def add_shopping(self, labels: list[str]) -> int:
        """Append labels not yet on the list (case-insensitive). Returns added count."""
        self._require(DomainType.SHOPPING)
        seen = {label.lower() for label in self.items}
        added = 0
        for label in labels:
            key = label.strip().lower()
            if not key or key in seen:
                continue
            self.items.append(label.strip())
            seen.add(key)
            added += 1
        return added
