"""Domain detection for a conversation's first message.

The classifier is asked first; if it is unavailable or answers nonsense the
keyword heuristic decides. The result is always a concrete domain.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from listkeeper.lists.models import DomainType
from listkeeper.nl import heuristics
from listkeeper.nl.extraction import ExtractionPipeline
from listkeeper.nl.results import Ok


@dataclass(frozen=True, slots=True)
class Detection:
    domain_type: DomainType
    source: str  # "classifier" | "heuristic"


class IntentEngine:
    def __init__(self, pipeline: ExtractionPipeline) -> None:
        self.pipeline = pipeline

    async def detect(self, text: str) -> Detection:
        result = await self.pipeline.detect_domain(text)
        if isinstance(result, Ok):
            detection = Detection(result.value, "classifier")
        else:
            detection = Detection(heuristics.detect_domain(text), "heuristic")
        logger.info(f"Domain detected: {detection.domain_type.value} (via {detection.source})")
        return detection
