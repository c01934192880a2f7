"""Data models used by the migration workflow."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

REPORT_COLUMNS = ("id", "path", "title", "views", "rating", "result", "error")


@dataclass(slots=True, frozen=True)
class CatalogRecord:
    """A Stash scene as returned by the ``allScenes`` query."""

    id: str
    path: str
    play_count: int = 0
    rating100: int = 0
    title: str = ""


@dataclass(slots=True, frozen=True)
class ExternalRecord:
    """One row of the Plex export. Empty ``views``/``rating`` mean absent."""

    path: str
    title: str
    views: Optional[str] = None
    rating: Optional[str] = None


@dataclass(slots=True, frozen=True)
class UpdateCandidate:
    id: str
    path: str
    title: str
    views: Optional[str] = None
    rating: Optional[str] = None


@dataclass(slots=True, frozen=True)
class OutcomeRecord:
    id: str
    path: str
    title: str
    views: str
    rating: str
    result: str = ""
    error: str = ""

    @property
    def succeeded(self) -> bool:
        return not self.error

    def as_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "path": self.path,
            "title": self.title,
            "views": self.views,
            "rating": self.rating,
            "result": self.result,
            "error": self.error,
        }


class MutationShape(Enum):
    COMBINED = "combined"
    VIEWS_ONLY = "views"
    RATING_ONLY = "rating"


@dataclass(slots=True, frozen=True)
class Mutation:
    """A ``sceneUpdate`` call ready to be handed to the client."""

    shape: MutationShape
    query: str
    variables: Dict[str, object]


@dataclass(slots=True, frozen=True)
class UpdateSuccess:
    payload: str


@dataclass(slots=True, frozen=True)
class UpdateFailure:
    error: str


UpdateResult = Union[UpdateSuccess, UpdateFailure]


@dataclass(slots=True)
class RunSummary:
    external_total: int = 0
    catalog_total: int = 0
    matched: int = 0
    candidates: int = 0
    succeeded: int = 0
    failed: int = 0
    dry_run: bool = False
    report_path: Optional[Path] = None

    @property
    def skipped(self) -> int:
        return self.matched - self.candidates

    @property
    def unmatched(self) -> int:
        return self.external_total - self.matched
