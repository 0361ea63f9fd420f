"""GitHub service integration: the default collaborators used by the CLI"""

import json
import logging
import os
import subprocess
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from urllib.parse import urlparse

from github import Github, GithubException
from github.Repository import Repository

from triggerpal.config import Config
from triggerpal.core.exceptions import ServiceConnectionError
from triggerpal.core.types.events import GitHubContext
from triggerpal.core.types.modes import (
    BranchInfo,
    CommentData,
    FetchDataResult,
    ModeContext,
)
from triggerpal.modes.collaborators import ActionCollaborators

if TYPE_CHECKING:
    from triggerpal.modes.base import Mode

logger = logging.getLogger(__name__)

TRACKING_COMMENT_MARKER = "<!-- triggerpal-tracking-comment -->"
GITHUB_ACTIONS_BOT = ("github-actions[bot]", 41898282)
GITHUB_MCP_SERVER_IMAGE = "ghcr.io/github/github-mcp-server:latest"


def _login(user: Any) -> str:
    return getattr(user, "login", None) or "unknown"


def _format_comments(comments: List[Dict[str, Any]]) -> str:
    return "\n\n".join(
        f"[{c['author']['login']} at {c['createdAt']}]: {c['body']}" for c in comments
    )


class GitHubCollaborators(ActionCollaborators):
    """Collaborators backed by the GitHub REST API through PyGithub"""

    def __init__(self, client: Github, config: Config):
        self.client = client
        self.config = config
        self._repo: Optional[Repository] = None

    def _get_repo(self, context: GitHubContext) -> Repository:
        if self._repo is None:
            try:
                self._repo = self.client.get_repo(context.repository.full_name)
            except GithubException as e:
                raise ServiceConnectionError(
                    f"Failed to get repository {context.repository.full_name}: {str(e)}"
                ) from e
        return self._repo

    def _initial_comment_body(self, context: GitHubContext) -> str:
        job_url = (
            f"{self.config.GITHUB_SERVER_URL}/{context.repository.full_name}"
            f"/actions/runs/{context.run_id}"
        )
        return (
            f"{TRACKING_COMMENT_MARKER}\n"
            "Working on it…\n\n"
            f"[View job run]({job_url})"
        )

    async def create_initial_comment(self, context: GitHubContext) -> CommentData:
        """Create the tracking comment, reusing an existing one when sticky"""
        repo = self._get_repo(context)
        body = self._initial_comment_body(context)
        try:
            issue = repo.get_issue(context.entity_number)
            comment = None
            if context.inputs.use_sticky_comment and context.is_pr:
                comment = next(
                    (c for c in issue.get_comments() if TRACKING_COMMENT_MARKER in (c.body or "")),
                    None,
                )
            if comment is not None:
                comment.edit(body)
                logger.info("Updated sticky tracking comment", extra={'comment_id': comment.id})
            else:
                comment = issue.create_comment(body)
                logger.info("Created tracking comment", extra={'comment_id': comment.id})
        except GithubException as e:
            logger.error(
                "Failed to create tracking comment",
                extra={'error': str(e), 'entity_number': context.entity_number}
            )
            raise ServiceConnectionError(f"Failed to create tracking comment: {str(e)}") from e

        return CommentData(
            id=comment.id,
            user=_login(comment.user),
            user_id=getattr(comment.user, "id", None),
        )

    async def fetch_github_data(self, context: GitHubContext) -> FetchDataResult:
        """Fetch the issue or pull request, its comments and changes"""
        repo = self._get_repo(context)
        try:
            issue = repo.get_issue(context.entity_number)
            comments = [
                {
                    'id': c.id,
                    'body': c.body or "",
                    'author': {'login': _login(c.user)},
                    'createdAt': c.created_at.isoformat() if c.created_at else "",
                }
                for c in issue.get_comments()
                if TRACKING_COMMENT_MARKER not in (c.body or "")
            ]

            changed_files: List[Dict[str, Any]] = []
            review_data = None
            if context.is_pr:
                pr = repo.get_pull(context.entity_number)
                context_data = {
                    'title': pr.title,
                    'body': pr.body or "",
                    'author': {'login': _login(pr.user)},
                    'state': pr.state,
                    'headRefName': pr.head.ref,
                    'baseRefName': pr.base.ref,
                    'headRefOid': pr.head.sha,
                }
                changed_files = [
                    {
                        'path': f.filename,
                        'additions': f.additions,
                        'deletions': f.deletions,
                        'changeType': (f.status or "modified").upper(),
                        'sha': f.sha,
                    }
                    for f in pr.get_files()
                ]
                review_data = [
                    {
                        'id': r.id,
                        'body': r.body or "",
                        'state': r.state,
                        'author': {'login': _login(r.user)},
                    }
                    for r in pr.get_reviews()
                ]
            else:
                context_data = {
                    'title': issue.title,
                    'body': issue.body or "",
                    'author': {'login': _login(issue.user)},
                    'state': issue.state,
                }
        except GithubException as e:
            raise ServiceConnectionError(
                f"Failed to fetch data for #{context.entity_number}: {str(e)}"
            ) from e

        logger.info(
            "Fetched GitHub data",
            extra={
                'entity_number': context.entity_number,
                'comment_count': len(comments),
                'changed_file_count': len(changed_files),
            }
        )
        return FetchDataResult(
            context_data=context_data,
            comments=comments,
            changed_files=changed_files,
            review_data=review_data,
            trigger_display_name=context.actor,
        )

    async def setup_branch(
        self, data: FetchDataResult, context: GitHubContext
    ) -> BranchInfo:
        """Use the open PR head branch, or create a new working branch"""
        repo = self._get_repo(context)

        if context.is_pr and data.context_data.get('state', '').lower() == 'open':
            head = data.context_data['headRefName']
            return BranchInfo(
                base_branch=data.context_data.get('baseRefName') or repo.default_branch,
                current_branch=head,
                claude_branch=None,
            )

        base_branch = context.inputs.base_branch or repo.default_branch
        entity_type = "pr" if context.is_pr else "issue"
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M")
        new_branch = f"{context.inputs.branch_prefix}{entity_type}-{context.entity_number}-{timestamp}"

        try:
            sha = repo.get_branch(base_branch).commit.sha
            repo.create_git_ref(ref=f"refs/heads/{new_branch}", sha=sha)
        except GithubException as e:
            raise ServiceConnectionError(f"Failed to create branch {new_branch}: {str(e)}") from e

        logger.info(
            "Created working branch",
            extra={'branch': new_branch, 'base_branch': base_branch}
        )
        return BranchInfo(
            base_branch=base_branch,
            current_branch=new_branch,
            claude_branch=new_branch,
        )

    async def configure_git_auth(
        self, context: GitHubContext, comment_user: Optional[str]
    ) -> None:
        """Set the commit identity and an authenticated remote"""
        server_url = self.config.GITHUB_SERVER_URL.rstrip("/")
        host = urlparse(server_url).hostname or "github.com"
        noreply = "users.noreply.github.com" if host == "github.com" else f"users.noreply.{host}"
        name, user_id = GITHUB_ACTIONS_BOT
        if comment_user and comment_user != "unknown":
            name, user_id = comment_user, None
        email = f"{user_id}+{name}@{noreply}" if user_id else f"{name}@{noreply}"

        remote = (
            f"https://x-access-token:{self.config.GITHUB_TOKEN}@{host}/"
            f"{context.repository.full_name}.git"
        )
        commands = [
            ["git", "config", "user.name", name],
            ["git", "config", "user.email", email],
            ["git", "config", "--unset-all", f"http.{server_url}/.extraheader"],
            ["git", "remote", "set-url", "origin", remote],
        ]
        for command in commands:
            # --unset-all exits non-zero when nothing was configured
            subprocess.run(command, check=command[2] != "--unset-all", capture_output=True)
        logger.info("Configured git authentication", extra={'git_user': name})

    async def create_prompt(
        self,
        mode: "Mode",
        mode_context: ModeContext,
        data: FetchDataResult,
        context: GitHubContext,
    ) -> None:
        """Write the prompt file the agent step reads"""
        inputs = context.inputs
        if inputs.override_prompt:
            prompt = inputs.override_prompt
        else:
            prompt = mode.generate_prompt(mode_context, data) or self._default_prompt(
                mode_context, data
            )

        prompt_dir = os.path.join(self.config.RUNNER_TEMP, "claude-prompts")
        os.makedirs(prompt_dir, exist_ok=True)
        path = os.path.join(prompt_dir, "claude-prompt.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write(prompt)
        logger.info("Prompt written", extra={'path': path, 'mode': mode.name})

    def _default_prompt(self, mode_context: ModeContext, data: FetchDataResult) -> str:
        context = mode_context.github_context
        inputs = context.inputs
        entity = "Pull Request" if context.is_pr else "Issue"
        sections = [
            "You are an AI assistant designed to help with GitHub issues and pull requests.",
            "<formatted_context>\n"
            f"{entity} Title: {data.context_data.get('title', '')}\n"
            f"{entity} Author: {data.context_data.get('author', {}).get('login', '')}\n"
            f"Repository: {context.repository.full_name}\n"
            "</formatted_context>",
            f"<{entity.lower().replace(' ', '_')}_body>\n"
            f"{data.context_data.get('body') or 'No description provided'}\n"
            f"</{entity.lower().replace(' ', '_')}_body>",
            f"<comments>\n{_format_comments(data.comments) or 'No comments'}\n</comments>",
            f"<event_type>{context.event_name.value}</event_type>",
            f"<trigger_phrase>{inputs.trigger_phrase}</trigger_phrase>",
        ]
        if mode_context.comment_id is not None:
            sections.append(f"<claude_comment_id>{mode_context.comment_id}</claude_comment_id>")
        if mode_context.claude_branch:
            sections.append(f"<claude_branch>{mode_context.claude_branch}</claude_branch>")
        if mode_context.base_branch:
            sections.append(f"<base_branch>{mode_context.base_branch}</base_branch>")
        if inputs.direct_prompt:
            sections.append(f"<direct_prompt>\n{inputs.direct_prompt}\n</direct_prompt>")
        if inputs.custom_instructions:
            sections.append(f"CUSTOM INSTRUCTIONS:\n{inputs.custom_instructions}")
        return "\n\n".join(sections)

    async def prepare_mcp_config(
        self,
        context: GitHubContext,
        branch_info: BranchInfo,
        comment_id: Optional[int],
        allowed_tools: List[str],
        additional_mcp_config: str,
    ) -> str:
        """Build the tool server configuration JSON"""
        servers: Dict[str, Any] = {}
        if any(tool.startswith("mcp__github__") for tool in allowed_tools):
            servers["github"] = {
                'command': "docker",
                'args': [
                    "run", "-i", "--rm",
                    "-e", "GITHUB_PERSONAL_ACCESS_TOKEN",
                    GITHUB_MCP_SERVER_IMAGE,
                ],
                'env': {
                    'GITHUB_PERSONAL_ACCESS_TOKEN': self.config.GITHUB_TOKEN or "",
                },
            }

        config: Dict[str, Any] = {'mcpServers': servers}
        if additional_mcp_config.strip():
            try:
                extra = json.loads(additional_mcp_config)
            except json.JSONDecodeError as e:
                logger.warning("Ignoring invalid MCP_CONFIG", extra={'error': str(e)})
            else:
                if isinstance(extra, dict):
                    servers.update(extra.get('mcpServers') or {})
                    config.update({k: v for k, v in extra.items() if k != 'mcpServers'})

        logger.debug(
            "Prepared MCP config",
            extra={
                'servers': list(servers),
                'branch': branch_info.claude_branch or branch_info.current_branch,
                'comment_id': comment_id,
            }
        )
        return json.dumps(config, indent=2)
