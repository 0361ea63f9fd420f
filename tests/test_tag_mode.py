import pytest

from conftest import FakeCollaborators, make_context
from triggerpal.core.exceptions import ModeError
from triggerpal.core.types.modes import ModeData
from triggerpal.modes.base import BASE_ALLOWED_TOOLS, BASE_DISALLOWED_TOOLS
from triggerpal.modes.collaborators import ModeOptions
from triggerpal.modes.tag import tag_mode


def test_tag_mode_properties():
    assert tag_mode.name == "tag"
    assert tag_mode.description == "Traditional implementation mode triggered by @claude mentions"
    assert tag_mode.should_create_tracking_comment() is True
    assert tag_mode.get_allowed_tools() == []
    assert tag_mode.get_disallowed_tools() == []


def test_should_trigger_on_mention():
    with_trigger = make_context(payload={"comment": {"body": "Hey @claude, can you help?"}})
    without_trigger = make_context(payload={"comment": {"body": "This is just a regular comment"}})

    assert tag_mode.should_trigger(with_trigger) is True
    assert tag_mode.should_trigger(without_trigger) is False


def test_should_trigger_on_assignee_and_label():
    assigned = make_context(
        event_name="issues",
        event_action="assigned",
        payload={"action": "assigned", "assignee": {"login": "claude-bot"}, "issue": {"number": 1}},
        assignee_trigger="claude-bot",
    )
    labeled = make_context(
        event_name="issues",
        event_action="labeled",
        payload={"action": "labeled", "label": {"name": "claude-help"}, "issue": {"number": 1}},
        label_trigger="claude-help",
    )
    assert tag_mode.should_trigger(assigned)
    assert tag_mode.should_trigger(labeled)


def test_should_not_trigger_without_entity():
    dispatch = make_context(
        event_name="workflow_dispatch",
        event_action=None,
        payload={"inputs": {}},
        entity_number=0,
        direct_prompt="Run the nightly cleanup",
    )
    assert tag_mode.should_trigger(dispatch) is False


def test_pull_request_without_mention_does_not_trigger():
    context = make_context(
        event_name="pull_request",
        event_action="opened",
        is_pr=True,
        payload={"pull_request": {"number": 2, "title": "Bump deps", "body": "Routine"}},
    )
    assert tag_mode.should_trigger(context) is False


def test_should_trigger_with_markdown_mentions():
    body = """
        ## Complex Markdown

        ```javascript
        console.log("@claude");
        ```

        But @claude is also mentioned outside code blocks.
    """
    assert tag_mode.should_trigger(make_context(payload={"comment": {"body": body}}))


def test_prepare_context_with_data():
    context = make_context()
    mode_context = tag_mode.prepare_context(
        context, ModeData(comment_id=123, base_branch="main", claude_branch="claude/fix-bug")
    )

    assert mode_context.mode == "tag"
    assert mode_context.github_context is context
    assert mode_context.comment_id == 123
    assert mode_context.base_branch == "main"
    assert mode_context.claude_branch == "claude/fix-bug"


def test_prepare_context_without_data():
    context = make_context()
    mode_context = tag_mode.prepare_context(context)

    assert mode_context.github_context is context
    assert mode_context.comment_id is None
    assert mode_context.base_branch is None
    assert mode_context.claude_branch is None


def test_prepare_context_with_partial_data():
    context = make_context()

    only_comment = tag_mode.prepare_context(context, ModeData(comment_id=456))
    only_branches = tag_mode.prepare_context(
        context, ModeData(base_branch="develop", claude_branch="claude/feature")
    )

    assert only_comment.comment_id == 456
    assert only_comment.base_branch is None
    assert only_branches.comment_id is None
    assert only_branches.base_branch == "develop"
    assert only_branches.claude_branch == "claude/feature"


@pytest.mark.parametrize(
    "branch",
    ["feature/test-123", "bugfix/issue-#123", "release/v1.0.0", "feature/test with spaces", "a" * 300],
)
def test_prepare_context_keeps_branch_names_verbatim(branch):
    mode_context = tag_mode.prepare_context(
        make_context(), ModeData(comment_id=1, base_branch=branch, claude_branch=f"claude/{branch}")
    )
    assert mode_context.base_branch == branch
    assert mode_context.claude_branch == f"claude/{branch}"


def test_resolve_tools_concatenates_base_mode_and_user_tools():
    context = make_context(allowed_tools=("Bash(npm test)",), disallowed_tools=("Bash(rm:*)",))
    allowed, disallowed = tag_mode.resolve_tools(context)

    assert allowed == [*BASE_ALLOWED_TOOLS, "Bash(npm test)"]
    assert disallowed == [*BASE_DISALLOWED_TOOLS, "Bash(rm:*)"]


@pytest.mark.asyncio
async def test_prepare_runs_collaborators_in_order(outputs, collaborators):
    context = make_context(payload={"comment": {"body": "@claude fix"}}, entity_number=12,
                           allowed_tools=("Bash(make)",))
    result = await tag_mode.prepare(ModeOptions(context=context, collaborators=collaborators, outputs=outputs))

    assert collaborators.calls == ["comment", "fetch", "branch", "git_auth", "prompt", "mcp"]
    assert result.comment_id == 456
    assert result.branch_info.claude_branch == "claude/issue-1"
    assert result.mcp_config == '{"mcpServers": {}}'

    assert collaborators.git_auth_user == "claude[bot]"
    assert collaborators.prompt_mode_context.mode == "tag"
    assert collaborators.prompt_mode_context.comment_id == 456
    assert collaborators.prompt_mode_context.base_branch == "main"
    assert collaborators.mcp_allowed_tools == ["Bash(make)"]

    assert outputs.outputs["claude_comment_id"] == "456"
    assert outputs.outputs["mcp_config"] == '{"mcpServers": {}}'
    assert outputs.variables["INPUT_ALLOWED_TOOLS"] == ",".join([*BASE_ALLOWED_TOOLS, "Bash(make)"])
    assert outputs.variables["INPUT_DISALLOWED_TOOLS"] == "WebSearch,WebFetch"


@pytest.mark.asyncio
async def test_prepare_skips_git_auth_with_commit_signing(outputs, collaborators):
    context = make_context(use_commit_signing=True)
    await tag_mode.prepare(ModeOptions(context=context, collaborators=collaborators, outputs=outputs))

    assert "git_auth" not in collaborators.calls


@pytest.mark.asyncio
async def test_prepare_reraises_git_auth_failure(outputs):
    collaborators = FakeCollaborators(fail_git_auth=True)

    with pytest.raises(RuntimeError, match="git config failed"):
        await tag_mode.prepare(ModeOptions(context=make_context(), collaborators=collaborators, outputs=outputs))

    assert collaborators.calls == ["comment", "fetch", "branch", "git_auth"]


@pytest.mark.asyncio
async def test_prepare_requires_entity_context(outputs, collaborators):
    context = make_context(event_name="schedule", event_action=None, payload={}, entity_number=0)

    with pytest.raises(ModeError, match="Tag mode requires entity context"):
        await tag_mode.prepare(ModeOptions(context=context, collaborators=collaborators, outputs=outputs))

    assert collaborators.calls == []
