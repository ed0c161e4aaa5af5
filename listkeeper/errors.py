"""Error taxonomy for the message pipeline."""

from __future__ import annotations


class ListkeeperError(Exception):
    """Base class for every error raised by listkeeper."""


class ClassifierUnavailable(ListkeeperError):
    """The AI classifier could not be reached (network, timeout, credentials)."""


class ExtractionInvalid(ListkeeperError):
    """The classifier answered, but the payload is malformed or incomplete."""


class InputRejected(ListkeeperError):
    """User text cannot be parsed even by the fallback heuristics.

    ``hint`` is the short usage example sent back to the user.
    """

    def __init__(self, hint: str) -> None:
        super().__init__(hint)
        self.hint = hint


class GroupNotReady(ListkeeperError):
    """A mutation was attempted on a group whose domain is still undetermined."""
