from triggerpal.core.types.events import (
    ENTITY_EVENTS,
    EventInputs,
    EventName,
    GitHubContext,
    RepositoryContext,
)
from triggerpal.core.types.modes import (
    BranchInfo,
    CommentData,
    FetchDataResult,
    ModeContext,
    ModeData,
    ModeResult,
)

__all__ = [
    'ENTITY_EVENTS',
    'EventInputs',
    'EventName',
    'GitHubContext',
    'RepositoryContext',
    'BranchInfo',
    'CommentData',
    'FetchDataResult',
    'ModeContext',
    'ModeData',
    'ModeResult',
]
