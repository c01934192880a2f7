"""Thin GraphQL client for the Stash API."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol

import requests

from .models import CatalogRecord

LOGGER = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30

MUTATION_RATING = """
mutation SceneUpdate($id: ID!, $rating100: Int) {
    sceneUpdate(input: { id: $id, rating100: $rating100 }) {
        rating100
        play_count
    }
}
"""

MUTATION_VIEWS = """
mutation SceneUpdate($id: ID!, $play_count: Int) {
    sceneUpdate(input: { id: $id, play_count: $play_count }) {
        rating100
        play_count
    }
}
"""

MUTATION_COMBINED = """
mutation SceneUpdate($id: ID!, $rating100: Int, $play_count: Int) {
    sceneUpdate(input: { id: $id, rating100: $rating100, play_count: $play_count }) {
        rating100
        play_count
    }
}
"""

QUERY_ALL_SCENES = """
query {
    allScenes {
        id
        path
        play_count
        rating100
    }
}
"""


class StashAPIError(RuntimeError):
    """Raised when a GraphQL call fails at any level."""


class GraphQLClient(Protocol):
    def execute(self, query: str, variables: Dict[str, Any] | None = None) -> Dict[str, Any]:
        ...


class StashClient:
    """POSTs GraphQL documents to Stash with the ``ApiKey`` header set."""

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "ApiKey": api_key,
            }
        )

    def execute(self, query: str, variables: Dict[str, Any] | None = None) -> Dict[str, Any]:
        """Run ``query`` and return the ``data`` member of the response."""

        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.JSONDecodeError as exc:
            raise StashAPIError(f"Response from {self.url} is not valid JSON") from exc
        except requests.RequestException as exc:
            raise StashAPIError(f"Request to {self.url} failed: {exc}") from exc

        if not isinstance(body, dict):
            raise StashAPIError("Unexpected GraphQL response shape")

        errors = body.get("errors")
        if errors:
            messages = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err) for err in errors
            )
            raise StashAPIError(f"GraphQL errors: {messages}")

        data = body.get("data")
        if data is None:
            raise StashAPIError("GraphQL response carried no data")
        return data


def scene_from_payload(item: Dict[str, Any]) -> CatalogRecord:
    return CatalogRecord(
        id=str(item["id"]),
        path=str(item["path"]),
        play_count=int(item.get("play_count") or 0),
        rating100=int(item.get("rating100") or 0),
        title=str(item.get("title") or ""),
    )


def fetch_all_scenes(client: GraphQLClient) -> list[CatalogRecord]:
    LOGGER.info("Requesting all scenes from Stash, this can take a while")
    data = client.execute(QUERY_ALL_SCENES)
    try:
        scenes: List[CatalogRecord] = [scene_from_payload(item) for item in data.get("allScenes") or []]
    except (KeyError, TypeError, ValueError) as exc:
        raise StashAPIError(f"Invalid scene entry in allScenes response: {exc!r}") from exc
    LOGGER.info("Stash returned %d scenes", len(scenes))
    return scenes
