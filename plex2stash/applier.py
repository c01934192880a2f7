"""Sequential application of scene updates against Stash."""
from __future__ import annotations

import json
import logging
from typing import Callable, Dict, Iterable, List

from .checks import RATING_SCALE
from .client import (
    MUTATION_COMBINED,
    MUTATION_RATING,
    MUTATION_VIEWS,
    GraphQLClient,
    StashAPIError,
)
from .models import (
    Mutation,
    MutationShape,
    OutcomeRecord,
    UpdateCandidate,
    UpdateFailure,
    UpdateResult,
    UpdateSuccess,
)

LOGGER = logging.getLogger(__name__)

ProgressObserver = Callable[[int, int], None]

_QUERIES = {
    MutationShape.COMBINED: MUTATION_COMBINED,
    MutationShape.VIEWS_ONLY: MUTATION_VIEWS,
    MutationShape.RATING_ONLY: MUTATION_RATING,
}


def select_shape(candidate: UpdateCandidate) -> MutationShape:
    if candidate.views and candidate.rating:
        return MutationShape.COMBINED
    if candidate.views:
        return MutationShape.VIEWS_ONLY
    return MutationShape.RATING_ONLY


def select_mutation(candidate: UpdateCandidate) -> Mutation:
    """Build the mutation for ``candidate``.

    ``rating100`` is the rating scaled by ten and ``play_count`` is the view
    count as is. Absent fields are sent as ``None``, never as zero, and only
    the variables declared by the chosen mutation are included.
    """

    shape = select_shape(candidate)
    rating100 = int(candidate.rating) * RATING_SCALE if candidate.rating else None
    play_count = int(candidate.views) if candidate.views else None

    variables: Dict[str, object] = {"id": candidate.id}
    if shape in (MutationShape.COMBINED, MutationShape.RATING_ONLY):
        variables["rating100"] = rating100
    if shape in (MutationShape.COMBINED, MutationShape.VIEWS_ONLY):
        variables["play_count"] = play_count

    return Mutation(shape=shape, query=_QUERIES[shape], variables=variables)


def attempt_update(client: GraphQLClient, candidate: UpdateCandidate) -> UpdateResult:
    mutation = select_mutation(candidate)
    LOGGER.debug("Updating scene %s with %s mutation", candidate.id, mutation.shape.value)
    try:
        data = client.execute(mutation.query, mutation.variables)
    except StashAPIError as exc:
        LOGGER.warning("Update failed for scene %s (%s): %s", candidate.id, candidate.path, exc)
        return UpdateFailure(error=str(exc) or exc.__class__.__name__)
    return UpdateSuccess(payload=json.dumps(data))


def to_outcome(candidate: UpdateCandidate, result: UpdateResult) -> OutcomeRecord:
    if isinstance(result, UpdateSuccess):
        result_text, error_text = result.payload, ""
    else:
        result_text, error_text = "", result.error
    return OutcomeRecord(
        id=candidate.id,
        path=candidate.path,
        title=candidate.title,
        views=candidate.views or "",
        rating=candidate.rating or "",
        result=result_text,
        error=error_text,
    )


def apply_updates(
    client: GraphQLClient,
    worklist: Iterable[UpdateCandidate],
    *,
    observer: ProgressObserver | None = None,
) -> list[OutcomeRecord]:
    """Apply every candidate in order, one call at a time.

    A failed call is recorded in that candidate's outcome and the loop moves
    on to the next one.
    """

    items = list(worklist)
    total = len(items)
    outcomes: List[OutcomeRecord] = []
    for candidate in items:
        result = attempt_update(client, candidate)
        outcomes.append(to_outcome(candidate, result))
        if observer is not None:
            observer(len(outcomes), total)
    return outcomes
