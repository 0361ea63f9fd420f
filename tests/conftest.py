from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

import pytest

from triggerpal.actions import ActionOutputs
from triggerpal.core.types.events import EventInputs, EventName, GitHubContext, RepositoryContext
from triggerpal.core.types.modes import (
    BranchInfo,
    CommentData,
    FetchDataResult,
    ModeContext,
    ModeData,
    ModeResult,
)
from triggerpal.modes.base import Mode
from triggerpal.modes.collaborators import ActionCollaborators, ModeOptions
from triggerpal.modes.registry import ModeRegistry, reset_registry


def make_context(
    event_name: str = "issue_comment",
    event_action: Optional[str] = "created",
    payload: Optional[Dict[str, Any]] = None,
    entity_number: int = 1,
    is_pr: bool = False,
    **input_overrides,
) -> GitHubContext:
    if payload is None:
        payload = {
            "action": event_action,
            "issue": {"number": entity_number, "title": "Test Issue", "body": "Test body"},
            "comment": {"id": 1, "body": "Test comment", "user": {"login": "test-user"}},
        }
    return GitHubContext(
        run_id="1234567890",
        event_name=EventName(event_name),
        event_action=event_action,
        repository=RepositoryContext(owner="test-owner", repo="test-repo"),
        actor="test-actor",
        payload=payload,
        entity_number=entity_number,
        is_pr=is_pr,
        inputs=replace(EventInputs(), **input_overrides),
    )


class StubMode(Mode):
    """Configurable mode for registry and error tests"""

    def __init__(
        self,
        name: str,
        description: str = "Stub mode",
        trigger: Callable[[GitHubContext], bool] = lambda ctx: False,
        allowed_tools: Optional[List[str]] = None,
        disallowed_tools: Optional[List[str]] = None,
        tracking_comment: bool = False,
        context_hook: Optional[Callable[[GitHubContext, Optional[ModeData]], None]] = None,
    ):
        self.name = name
        self.description = description
        self._trigger = trigger
        self._allowed = allowed_tools or []
        self._disallowed = disallowed_tools or []
        self._tracking_comment = tracking_comment
        self._context_hook = context_hook

    def should_trigger(self, context):
        return self._trigger(context)

    def prepare_context(self, context, data=None):
        if self._context_hook:
            self._context_hook(context, data)
        data = data or ModeData()
        return ModeContext(mode=self.name, github_context=context, comment_id=data.comment_id)

    def get_allowed_tools(self):
        return list(self._allowed)

    def get_disallowed_tools(self):
        return list(self._disallowed)

    def should_create_tracking_comment(self):
        return self._tracking_comment

    async def prepare(self, options: ModeOptions) -> ModeResult:
        return await self._prepare_entity(options)


class FakeCollaborators(ActionCollaborators):
    """Records the order collaborators are called in"""

    def __init__(self, pr_state: str = "open", fail_git_auth: bool = False):
        self.calls: List[str] = []
        self.pr_state = pr_state
        self.fail_git_auth = fail_git_auth
        self.prompt_mode_context: Optional[ModeContext] = None
        self.mcp_allowed_tools: Optional[List[str]] = None
        self.git_auth_user: Optional[str] = None

    async def create_initial_comment(self, context):
        self.calls.append("comment")
        return CommentData(id=456, user="claude[bot]", user_id=209825114)

    async def fetch_github_data(self, context):
        self.calls.append("fetch")
        return FetchDataResult(context_data={"title": "Fix bug", "body": "", "state": self.pr_state})

    async def setup_branch(self, data, context):
        self.calls.append("branch")
        return BranchInfo(base_branch="main", current_branch="claude/issue-1", claude_branch="claude/issue-1")

    async def configure_git_auth(self, context, comment_user):
        self.calls.append("git_auth")
        self.git_auth_user = comment_user
        if self.fail_git_auth:
            raise RuntimeError("git config failed")

    async def create_prompt(self, mode, mode_context, data, context):
        self.calls.append("prompt")
        self.prompt_mode_context = mode_context

    async def prepare_mcp_config(self, context, branch_info, comment_id, allowed_tools, additional_mcp_config):
        self.calls.append("mcp")
        self.mcp_allowed_tools = allowed_tools
        return '{"mcpServers": {}}'


@pytest.fixture(autouse=True)
def clean_default_registry():
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def registry():
    return ModeRegistry()


@pytest.fixture
def outputs():
    return ActionOutputs(environ={})


@pytest.fixture
def collaborators():
    return FakeCollaborators()
