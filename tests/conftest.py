import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from plex2stash.client import StashAPIError


class FakeStashClient:
    """Records every call and answers ``sceneUpdate`` mutations in memory."""

    def __init__(self, scenes=None, fail_ids=()):
        self.scenes = list(scenes or [])
        self.fail_ids = set(fail_ids)
        self.calls = []

    def execute(self, query, variables=None):
        self.calls.append((query, dict(variables or {})))
        if "allScenes" in query:
            return {"allScenes": self.scenes}

        scene_id = (variables or {}).get("id")
        if scene_id in self.fail_ids:
            raise StashAPIError(f"GraphQL errors: scene {scene_id} rejected")
        return {
            "sceneUpdate": {
                "rating100": (variables or {}).get("rating100"),
                "play_count": (variables or {}).get("play_count"),
            }
        }


@pytest.fixture
def fake_client():
    return FakeStashClient()


@pytest.fixture
def make_fake_client():
    return FakeStashClient
