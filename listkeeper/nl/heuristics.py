"""Deterministic fallback extraction.

Keyword and regex rules used whenever the classifier is unavailable or its
answer fails validation. Nothing here does I/O. Keyword tables are ordered:
the first matching row wins.
"""

from __future__ import annotations

import math
import re

from listkeeper.lists.models import DomainType, EntertainmentCategory, ExpenseCategory
from listkeeper.nl.extraction import ExtractedExpense, ExtractedTitle
from listkeeper.nl.results import Extraction, Invalid, Ok

EXPENSE_HINT = "💰 Formato: 'descrição valor' \nEx: 'uber 15' ou 'pizza 40,50'"
SHOPPING_HINT = "🛒 Formato: 'item1, item2, item3'"

_ENTERTAINMENT_MARKERS = ("assistir", "filme", "série", "serie", "watch", "series", "movie")
_EXPENSE_MARKERS = ("gasto", "gastar", "gastei", "paguei", "spent", "expense")
_DIGIT_RE = re.compile(r"\d")

_ENTERTAINMENT_TABLE: tuple[tuple[EntertainmentCategory, tuple[str, ...]], ...] = (
    (EntertainmentCategory.SERIES, ("série", "serie", "temp", "season")),
    (EntertainmentCategory.FILM, ("filme", "movie")),
    (EntertainmentCategory.CARTOON, ("desenho", "cartoon")),
    (EntertainmentCategory.ANIME, ("anime",)),
    (EntertainmentCategory.DOCUMENTARY, ("doc", "documentário")),
    (EntertainmentCategory.BOOK, ("livro", "book")),
)

_EXPENSE_TABLE: tuple[tuple[ExpenseCategory, tuple[str, ...]], ...] = (
    (ExpenseCategory.TRANSPORT, ("uber", "táxi", "taxi", "transporte", "ônibus", "gasolina")),
    (ExpenseCategory.GROCERIES, ("mercado", "super", "compras", "feira")),
    (ExpenseCategory.FOOD, ("restaurant", "comida", "pizza", "lanche", "jantar", "almoço")),
    (ExpenseCategory.LEISURE, ("cinema", "lazer", "show", "bar")),
    (ExpenseCategory.HEALTH, ("farmacia", "farmácia", "saúde", "médico", "remédio")),
    (ExpenseCategory.EDUCATION, ("curso", "livro", "educação", "escola")),
    (ExpenseCategory.BILLS, ("conta", "aluguel", "luz", "internet", "água")),
)

# <description> <number>  |  <number> <description>
_TRAILING_VALUE_RE = re.compile(r"(.+?)\s+([\d,.]+)$")
_LEADING_VALUE_RE = re.compile(r"([\d,.]+)\s+(.+)$")


def _first_match(text: str, table):
    lowered = text.lower()
    for category, keywords in table:
        if any(keyword in lowered for keyword in keywords):
            return category
    return None


def detect_domain(text: str) -> DomainType:
    lowered = text.lower()
    if any(marker in lowered for marker in _ENTERTAINMENT_MARKERS):
        return DomainType.ENTERTAINMENT
    if any(marker in lowered for marker in _EXPENSE_MARKERS) or _DIGIT_RE.search(text):
        return DomainType.EXPENSE
    return DomainType.SHOPPING


def entertainment_category(title: str) -> EntertainmentCategory:
    return _first_match(title, _ENTERTAINMENT_TABLE) or EntertainmentCategory.OTHER


def expense_category(description: str) -> ExpenseCategory:
    return _first_match(description, _EXPENSE_TABLE) or ExpenseCategory.OTHER


def categorize_title(title: str) -> Extraction[ExtractedTitle]:
    return Ok(ExtractedTitle(name=title, category=entertainment_category(title)))


def parse_number(token: str) -> float | None:
    """Parse a value token; the first comma is read as the decimal separator."""
    try:
        value = float(token.replace(",", ".", 1))
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def parse_expense(text: str) -> Extraction[ExtractedExpense]:
    text = text.strip()
    description = token = None

    match = _TRAILING_VALUE_RE.search(text)
    if match:
        description, token = match.group(1), match.group(2)
    else:
        match = _LEADING_VALUE_RE.search(text)
        if match:
            token, description = match.group(1), match.group(2)

    if not match:
        return Invalid("no value token found", hint=EXPENSE_HINT)
    value = parse_number(token)
    description = description.strip()
    if value is None or not description:
        return Invalid(f"unparsable value token {token!r}", hint=EXPENSE_HINT)

    return Ok(ExtractedExpense(
        description=description,
        value=value,
        category=expense_category(description),
    ))


def parse_shopping(text: str) -> Extraction[list[str]]:
    items = [part.strip() for part in text.split(",")]
    items = [item for item in items if item]
    if not items:
        return Invalid("no shopping items found", hint=SHOPPING_HINT)
    return Ok(items)
