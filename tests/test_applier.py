import json

from plex2stash.applier import apply_updates, attempt_update, select_mutation
from plex2stash.client import MUTATION_COMBINED, MUTATION_RATING, MUTATION_VIEWS
from plex2stash.models import MutationShape, UpdateCandidate, UpdateFailure, UpdateSuccess


def make_candidate(scene_id: str = "1", views=None, rating=None) -> UpdateCandidate:
    return UpdateCandidate(id=scene_id, path=f"media/{scene_id}.mp4", title=f"Title {scene_id}", views=views, rating=rating)


def test_rating_only_candidate_scales_rating():
    mutation = select_mutation(make_candidate(rating="7"))
    assert mutation.shape is MutationShape.RATING_ONLY
    assert mutation.query == MUTATION_RATING
    assert mutation.variables == {"id": "1", "rating100": 70}


def test_views_only_candidate_sends_play_count():
    mutation = select_mutation(make_candidate(views="4"))
    assert mutation.shape is MutationShape.VIEWS_ONLY
    assert mutation.query == MUTATION_VIEWS
    assert mutation.variables == {"id": "1", "play_count": 4}


def test_combined_candidate_sends_both_fields():
    mutation = select_mutation(make_candidate(views="3", rating="9"))
    assert mutation.shape is MutationShape.COMBINED
    assert mutation.query == MUTATION_COMBINED
    assert mutation.variables == {"id": "1", "play_count": 3, "rating100": 90}


def test_candidate_without_values_falls_back_to_rating_shape():
    mutation = select_mutation(make_candidate())
    assert mutation.shape is MutationShape.RATING_ONLY
    assert mutation.variables == {"id": "1", "rating100": None}


def test_attempt_update_returns_payload_verbatim(fake_client):
    result = attempt_update(fake_client, make_candidate(views="3", rating="9"))
    assert isinstance(result, UpdateSuccess)
    assert json.loads(result.payload) == {"sceneUpdate": {"rating100": 90, "play_count": 3}}


def test_attempt_update_captures_remote_failure(make_fake_client):
    client = make_fake_client(fail_ids={"1"})
    result = attempt_update(client, make_candidate(rating="2"))
    assert isinstance(result, UpdateFailure)
    assert "scene 1 rejected" in result.error


def test_apply_updates_isolates_failures(make_fake_client):
    client = make_fake_client(fail_ids={"2"})
    worklist = [make_candidate(str(n), views="1") for n in range(1, 5)]

    outcomes = apply_updates(client, worklist)

    assert len(outcomes) == 4
    assert [outcome.id for outcome in outcomes] == ["1", "2", "3", "4"]
    failed = outcomes[1]
    assert failed.error and not failed.result
    for outcome in outcomes[:1] + outcomes[2:]:
        assert outcome.result and not outcome.error
    assert [variables["id"] for _, variables in client.calls] == ["1", "2", "3", "4"]


def test_apply_updates_notifies_observer_after_each_attempt(make_fake_client):
    client = make_fake_client(fail_ids={"1"})
    seen = []
    apply_updates(client, [make_candidate("1", views="2"), make_candidate("2", rating="3")], observer=lambda done, total: seen.append((done, total)))
    assert seen == [(1, 2), (2, 2)]


def test_outcome_keeps_candidate_fields(fake_client):
    (outcome,) = apply_updates(fake_client, [make_candidate("9", rating="6")])
    assert outcome.path == "media/9.mp4"
    assert outcome.title == "Title 9"
    assert outcome.views == ""
    assert outcome.rating == "6"
