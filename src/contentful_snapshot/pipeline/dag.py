from enum import Enum

from ..core.errors import FailurePolicy


class FetchStage(str, Enum):
    BOOTSTRAP = "bootstrap"
    FETCH_SPACE = "fetch_space"
    FETCH_CONTENT_TYPES = "fetch_content_types"
    NORMALIZE = "normalize"
    ASSEMBLE = "assemble"
    DONE = "done"
    FAILED = "failed"


DEFAULT_STAGES: list[FetchStage] = [
    FetchStage.BOOTSTRAP,
    FetchStage.FETCH_SPACE,
    FetchStage.FETCH_CONTENT_TYPES,
    FetchStage.NORMALIZE,
    FetchStage.ASSEMBLE,
    FetchStage.DONE,
]

# Stages that talk to the remote and what their failure means for the run.
# NORMALIZE and ASSEMBLE are pure; an error there is a defect and propagates.
STAGE_POLICIES: dict[FetchStage, FailurePolicy] = {
    FetchStage.BOOTSTRAP: FailurePolicy.FATAL,
    FetchStage.FETCH_SPACE: FailurePolicy.FATAL,
    FetchStage.FETCH_CONTENT_TYPES: FailurePolicy.DEGRADED,
}

TRANSITIONS: dict[FetchStage, set[FetchStage]] = {
    FetchStage.BOOTSTRAP: {FetchStage.FETCH_SPACE, FetchStage.FAILED},
    FetchStage.FETCH_SPACE: {FetchStage.FETCH_CONTENT_TYPES, FetchStage.FAILED},
    FetchStage.FETCH_CONTENT_TYPES: {FetchStage.NORMALIZE},
    FetchStage.NORMALIZE: {FetchStage.ASSEMBLE},
    FetchStage.ASSEMBLE: {FetchStage.DONE},
    FetchStage.DONE: set(),
    FetchStage.FAILED: set(),
}


def validate_transition(current: FetchStage, target: FetchStage) -> FetchStage:
    if target not in TRANSITIONS[current]:
        raise ValueError(f"Invalid stage transition: {current.value} -> {target.value}")
    return target
