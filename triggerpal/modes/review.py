"""Review mode: inline pull request review through the GitHub tools.

Not a built-in; enable it with ``registry.register(ReviewMode())``.
"""

from typing import List, Optional

from triggerpal.core.types.events import EventName, GitHubContext
from triggerpal.core.types.modes import (
    FetchDataResult,
    ModeContext,
    ModeData,
    ModeResult,
)
from triggerpal.github.context import is_entity_context
from triggerpal.github.trigger import check_contains_trigger, check_direct_entity_trigger
from triggerpal.modes.base import Mode
from triggerpal.modes.collaborators import ModeOptions

REVIEW_TOOLS = [
    "mcp__github__*",
    "mcp__github_comment__*",
    # Listed explicitly as well, in case wildcards are not honored
    "mcp__github__create_pending_pull_request_review",
    "mcp__github__add_comment_to_pending_review",
    "mcp__github__submit_pending_pull_request_review",
    "mcp__github__get_pull_request",
    "mcp__github__get_pull_request_diff",
    "mcp__github__get_pull_request_files",
]

COMMENT_EVENTS = {
    EventName.ISSUE_COMMENT,
    EventName.PULL_REQUEST_REVIEW_COMMENT,
    EventName.PULL_REQUEST_REVIEW,
}

REVIEW_WORKFLOW = """REVIEW MODE WORKFLOW:

1. Understand the PR: use mcp__github__get_pull_request, mcp__github__get_pull_request_diff
   and mcp__github__get_pull_request_files, and Read for deeper analysis.
2. Start a pending review with mcp__github__create_pending_pull_request_review.
3. Add inline comments with mcp__github__add_comment_to_pending_review
   (path, line or startLine/line, side LEFT or RIGHT, subjectType "line", body).
   Put code suggestions in a ```suggestion block.
4. Submit with mcp__github__submit_pending_pull_request_review using event
   COMMENT, REQUEST_CHANGES or APPROVE and an overall summary.
5. Keep the tracking comment current with mcp__github_comment__update_claude_comment.

Focus on security issues, bugs, performance, maintainability and error handling.
Give specific, actionable feedback."""


def _format_comments(comments) -> str:
    lines = []
    for comment in comments:
        author = (comment.get("author") or {}).get("login", "unknown")
        lines.append(f"[{author}]: {comment.get('body') or ''}")
    return "\n\n".join(lines)


def _format_changed_files(files) -> str:
    return "\n".join(
        f"- {f.get('path')} ({f.get('changeType', 'MODIFIED')}) "
        f"+{f.get('additions', 0)}/-{f.get('deletions', 0)}"
        for f in files
    )


class ReviewMode(Mode):
    """Code review mode.

    Engages on any pull request event, or on a trigger in an issue or review
    comment, and grants the review tools of the GitHub tool server.
    """

    name = "review"
    description = "Code review mode for inline comments and suggestions"

    def should_trigger(self, context: GitHubContext) -> bool:
        return is_entity_context(context) and (
            check_direct_entity_trigger(context) or check_contains_trigger(context)
        )

    def prepare_context(
        self, context: GitHubContext, data: Optional[ModeData] = None
    ) -> ModeContext:
        data = data or ModeData()
        return ModeContext(
            mode=self.name,
            github_context=context,
            comment_id=data.comment_id,
            base_branch=data.base_branch,
            claude_branch=data.claude_branch,
        )

    def get_allowed_tools(self) -> List[str]:
        return list(REVIEW_TOOLS)

    def get_disallowed_tools(self) -> List[str]:
        return []

    def should_create_tracking_comment(self) -> bool:
        return True

    def generate_prompt(
        self, mode_context: ModeContext, data: FetchDataResult
    ) -> Optional[str]:
        context = mode_context.github_context
        pr = data.context_data
        sections = [
            "You are reviewing a GitHub pull request. Provide review feedback "
            "through inline comments and suggestions.",
            "<formatted_context>\n"
            f"PR Title: {pr.get('title', '')}\n"
            f"PR Author: {(pr.get('author') or {}).get('login', '')}\n"
            f"PR Branch: {pr.get('headRefName', '')} -> {pr.get('baseRefName', '')}\n"
            "</formatted_context>",
            f"<comments>\n{_format_comments(data.comments) or 'No comments yet'}\n</comments>",
            f"<changed_files>\n{_format_changed_files(data.changed_files)}\n</changed_files>",
            f"<formatted_body>\n{pr.get('body') or 'No description provided'}\n</formatted_body>",
        ]

        if context.event_name in COMMENT_EVENTS:
            body_key = "review" if context.event_name == EventName.PULL_REQUEST_REVIEW else "comment"
            trigger_body = (context.payload.get(body_key) or {}).get("body")
            if trigger_body:
                sections.append(
                    f"<trigger_comment>\nUser @{context.actor}: {trigger_body}\n</trigger_comment>"
                )

        if context.inputs.direct_prompt:
            sections.append(f"<direct_prompt>\n{context.inputs.direct_prompt}\n</direct_prompt>")

        sections.append(REVIEW_WORKFLOW)
        return "\n\n".join(sections)

    async def prepare(self, options: ModeOptions) -> ModeResult:
        return await self._prepare_entity(options)
