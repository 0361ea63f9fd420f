"""Standardized event types for triggerpal"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


class EventName(str, Enum):
    """GitHub event kinds the action reacts to"""
    ISSUES = "issues"
    ISSUE_COMMENT = "issue_comment"
    PULL_REQUEST = "pull_request"
    PULL_REQUEST_REVIEW = "pull_request_review"
    PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"
    WORKFLOW_DISPATCH = "workflow_dispatch"
    SCHEDULE = "schedule"


# Events scoped to an issue or pull request
ENTITY_EVENTS = frozenset({
    EventName.ISSUES,
    EventName.ISSUE_COMMENT,
    EventName.PULL_REQUEST,
    EventName.PULL_REQUEST_REVIEW,
    EventName.PULL_REQUEST_REVIEW_COMMENT,
})


@dataclass(frozen=True)
class RepositoryContext:
    """Repository information for the event"""
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class EventInputs:
    """Action inputs, read once from the workflow configuration"""
    mode: str = "tag"
    trigger_phrase: str = "@claude"
    assignee_trigger: str = ""
    label_trigger: str = ""
    allowed_tools: Tuple[str, ...] = ()
    disallowed_tools: Tuple[str, ...] = ()
    custom_instructions: str = ""
    direct_prompt: str = ""
    override_prompt: str = ""
    base_branch: Optional[str] = None
    branch_prefix: str = "claude/"
    use_sticky_comment: bool = False
    additional_permissions: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    use_commit_signing: bool = False


@dataclass(frozen=True)
class GitHubContext:
    """Unified context for all supported GitHub events.

    ``payload`` is the raw event body; ``event_name`` tells which shape it has.
    """
    run_id: str
    event_name: EventName
    event_action: Optional[str]
    repository: RepositoryContext
    actor: str
    payload: Dict[str, Any]
    entity_number: int
    is_pr: bool
    inputs: EventInputs = field(default_factory=EventInputs)

    def __post_init__(self):
        if self.entity_number < 0:
            raise ValueError(f"Entity number must be non-negative: {self.entity_number}")
