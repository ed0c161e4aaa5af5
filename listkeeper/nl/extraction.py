"""Classifier-backed extraction.

Each operation builds a domain prompt, calls the classifier and runs the
answer through a strict parse-then-validate step. Classifier failures and
malformed payloads are logged and returned as ``Invalid`` so the caller can
switch to the heuristics in ``listkeeper.nl.heuristics``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from listkeeper.errors import ClassifierUnavailable, ExtractionInvalid
from listkeeper.lists.models import DomainType, EntertainmentCategory, ExpenseCategory
from listkeeper.nl import prompts
from listkeeper.nl.classifier import Classifier
from listkeeper.nl.results import Extraction, Invalid, Ok

_DETECTABLE = (DomainType.ENTERTAINMENT, DomainType.EXPENSE, DomainType.SHOPPING)


@dataclass(frozen=True, slots=True)
class ExtractedTitle:
    name: str
    category: EntertainmentCategory


@dataclass(frozen=True, slots=True)
class ExtractedExpense:
    description: str
    value: float
    category: ExpenseCategory


# ---------------------------------------------------------------------------
# payload schemas
# ---------------------------------------------------------------------------


class ExpensePayload(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    description: str = Field(
        min_length=1,
        validation_alias=AliasChoices("description", "descricao", "descrição"),
    )
    value: float = Field(ge=0, allow_inf_nan=False, validation_alias=AliasChoices("value", "valor"))
    category: str = Field(min_length=1, validation_alias=AliasChoices("category", "categoria"))

    @field_validator("value", mode="before")
    @classmethod
    def _reject_bool(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("value must be a number")
        return v


class ShoppingPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[str] = Field(validation_alias=AliasChoices("items", "itens"))


# ---------------------------------------------------------------------------
# parsing
# ---------------------------------------------------------------------------


def extract_json_object(raw: str) -> dict[str, Any]:
    """Pull the JSON object out of a free-text completion.

    Strategies (in order):
    1. Direct json.loads after stripping markdown fences.
    2. Parse the first '{' ... last '}' substring.
    """
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[-1].rsplit("```", 1)[0].strip()

    candidates = [text]
    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        candidates.append(text[first : last + 1])

    for candidate in candidates:
        try:
            obj = json.loads(candidate)
        except (ValueError, TypeError):
            continue
        if isinstance(obj, dict):
            return obj
    raise ExtractionInvalid(f"no JSON object in classifier answer ({len(raw)} chars)")


def parse_domain(raw: str) -> DomainType:
    """Map a detection answer to a domain; unknown answers mean shopping."""
    detected = DomainType.parse(raw.strip().lower())
    return detected if detected in _DETECTABLE else DomainType.SHOPPING


def parse_expense(raw: str) -> ExtractedExpense:
    try:
        payload = ExpensePayload.model_validate(extract_json_object(raw))
    except ValidationError as exc:
        raise ExtractionInvalid(f"expense payload rejected: {exc.error_count()} error(s)") from exc
    return ExtractedExpense(
        description=payload.description,
        value=payload.value,
        category=ExpenseCategory.parse(payload.category),
    )


def parse_shopping(raw: str) -> list[str]:
    try:
        payload = ShoppingPayload.model_validate(extract_json_object(raw))
    except ValidationError as exc:
        raise ExtractionInvalid(f"shopping payload rejected: {exc.error_count()} error(s)") from exc
    return [item.strip() for item in payload.items if item.strip()]


# ---------------------------------------------------------------------------
# pipeline
# ---------------------------------------------------------------------------


class ExtractionPipeline:
    """Classifier-first extraction for each list domain."""

    def __init__(self, classifier: Classifier) -> None:
        self.classifier = classifier

    async def _ask(self, kind: str, prompt: str, system: str, parse) -> Extraction:
        try:
            answer = await self.classifier.complete(prompt, system)
            return Ok(parse(answer))
        except ClassifierUnavailable as exc:
            logger.warning(f"{kind}: classifier unavailable, using fallback ({exc})")
            return Invalid(str(exc))
        except ExtractionInvalid as exc:
            logger.warning(f"{kind}: invalid classifier payload, using fallback ({exc})")
            return Invalid(str(exc))

    async def detect_domain(self, text: str) -> Extraction[DomainType]:
        return await self._ask(
            "detect_domain",
            prompts.DETECTION_PROMPT.format(message=text),
            prompts.DETECTION_SYSTEM,
            parse_domain,
        )

    async def categorize_entertainment(self, title: str) -> Extraction[ExtractedTitle]:
        return await self._ask(
            "categorize_entertainment",
            prompts.ENTERTAINMENT_PROMPT.format(message=title),
            prompts.ENTERTAINMENT_SYSTEM,
            lambda answer: ExtractedTitle(name=title, category=EntertainmentCategory.parse(answer)),
        )

    async def extract_expense(self, text: str) -> Extraction[ExtractedExpense]:
        return await self._ask(
            "extract_expense",
            prompts.EXPENSE_PROMPT.format(message=text),
            prompts.EXPENSE_SYSTEM,
            parse_expense,
        )

    async def extract_shopping(self, text: str) -> Extraction[list[str]]:
        return await self._ask(
            "extract_shopping",
            prompts.SHOPPING_PROMPT.format(message=text),
            prompts.SHOPPING_SYSTEM,
            parse_shopping,
        )

    async def analyze_expenses(self, total: str, categories: str) -> str:
        """Short advisory sentence for the expense digest; empty on any failure."""
        try:
            return await self.classifier.complete(
                prompts.INSIGHT_PROMPT.format(total=total, categories=categories),
                prompts.INSIGHT_SYSTEM,
            )
        except ClassifierUnavailable as exc:
            logger.debug(f"Expense insight skipped: {exc}")
            return ""
