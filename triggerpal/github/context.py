"""Normalization of GitHub Actions events into a single context record"""

import json
import logging
import os
import re
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from triggerpal.core.exceptions import InvalidModeError, UnsupportedEventError
from triggerpal.core.types.events import (
    ENTITY_EVENTS,
    EventInputs,
    EventName,
    GitHubContext,
    RepositoryContext,
)
from triggerpal.modes.registry import DEFAULT_MODE, VALID_MODES, is_valid_mode

logger = logging.getLogger(__name__)

_LIST_SEPARATOR = re.compile(r",|[\n\r]+")
_INLINE_COMMENT = re.compile(r"#.+$")


def parse_multiline_input(s: str) -> List[str]:
    """Split a comma or newline separated list, dropping ``#`` comments"""
    tokens = (_INLINE_COMMENT.sub("", token).strip() for token in _LIST_SEPARATOR.split(s or ""))
    return [token for token in tokens if token]


def parse_additional_permissions(s: str) -> Dict[str, str]:
    """Parse ``key: value`` lines; lines missing either side are ignored"""
    permissions: Dict[str, str] = {}
    if not s or not s.strip():
        return permissions

    for line in s.strip().split("\n"):
        line = line.strip()
        if not line:
            continue
        key, _, value = line.partition(":")
        key, value = key.strip(), value.strip()
        if key and value:
            permissions[key] = value
    return permissions


def load_event_payload(path: Optional[str]) -> Dict[str, Any]:
    """Read the event JSON the runner wrote to ``GITHUB_EVENT_PATH``"""
    if not path or not os.path.exists(path):
        logger.warning("No event payload found", extra={'event_path': path})
        return {}
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _issue_entity(payload: Dict[str, Any]) -> Tuple[int, bool]:
    return payload["issue"]["number"], False


def _issue_comment_entity(payload: Dict[str, Any]) -> Tuple[int, bool]:
    issue = payload["issue"]
    return issue["number"], bool(issue.get("pull_request"))


def _pull_request_entity(payload: Dict[str, Any]) -> Tuple[int, bool]:
    return payload["pull_request"]["number"], True


def _no_entity(payload: Dict[str, Any]) -> Tuple[int, bool]:
    return 0, False


# One extractor per event shape; anything missing here is unsupported
ENTITY_EXTRACTORS: Dict[EventName, Callable[[Dict[str, Any]], Tuple[int, bool]]] = {
    EventName.ISSUES: _issue_entity,
    EventName.ISSUE_COMMENT: _issue_comment_entity,
    EventName.PULL_REQUEST: _pull_request_entity,
    EventName.PULL_REQUEST_REVIEW: _pull_request_entity,
    EventName.PULL_REQUEST_REVIEW_COMMENT: _pull_request_entity,
    EventName.WORKFLOW_DISPATCH: _no_entity,
    EventName.SCHEDULE: _no_entity,
}


class GitHubEventNormalizer:
    """Builds a GitHubContext from the runner environment and event payload"""

    def __init__(
        self,
        environ: Mapping[str, str],
        payload: Dict[str, Any],
        event_name: Optional[str] = None,
    ):
        self.environ = environ
        self.payload = payload
        self.event_name = event_name if event_name is not None else environ.get("GITHUB_EVENT_NAME", "")

    def validate_mode(self) -> str:
        """Validate and return the configured mode name"""
        mode = self.environ.get("MODE") or DEFAULT_MODE
        if not is_valid_mode(mode):
            raise InvalidModeError(mode, VALID_MODES)
        return mode

    def validate_event_type(self) -> EventName:
        """Validate and return event type"""
        try:
            return EventName(self.event_name)
        except ValueError:
            raise UnsupportedEventError(self.event_name) from None

    def standardize_event(self) -> GitHubContext:
        """Convert to the canonical context"""
        inputs = self._extract_inputs()
        event_name = self.validate_event_type()
        entity_number, is_pr = ENTITY_EXTRACTORS[event_name](self.payload)

        context = GitHubContext(
            run_id=self.environ.get("GITHUB_RUN_ID", ""),
            event_name=event_name,
            event_action=self.payload.get("action"),
            repository=self._extract_repository_context(),
            actor=self._extract_actor(),
            payload=self.payload,
            entity_number=entity_number,
            is_pr=is_pr,
            inputs=inputs,
        )
        logger.debug(
            "Parsed GitHub context",
            extra={
                'event_name': event_name.value,
                'event_action': context.event_action,
                'repository': context.repository.full_name,
                'entity_number': entity_number,
                'is_pr': is_pr,
                'mode': inputs.mode,
            }
        )
        return context

    def _extract_repository_context(self) -> RepositoryContext:
        """Extract repository information"""
        full_name = self.environ.get("GITHUB_REPOSITORY")
        if full_name and "/" in full_name:
            owner, repo = full_name.split("/", 1)
            return RepositoryContext(owner=owner, repo=repo)

        repo = self.payload.get("repository") or {}
        return RepositoryContext(
            owner=(repo.get("owner") or {}).get("login", ""),
            repo=repo.get("name", ""),
        )

    def _extract_actor(self) -> str:
        actor = self.environ.get("GITHUB_ACTOR")
        if actor:
            return actor
        return (self.payload.get("sender") or {}).get("login", "")

    def _extract_inputs(self) -> EventInputs:
        """Extract the action inputs block"""
        env = self.environ
        return EventInputs(
            mode=self.validate_mode(),
            trigger_phrase=env.get("TRIGGER_PHRASE", "@claude"),
            assignee_trigger=env.get("ASSIGNEE_TRIGGER", ""),
            label_trigger=env.get("LABEL_TRIGGER", ""),
            allowed_tools=tuple(parse_multiline_input(env.get("ALLOWED_TOOLS", ""))),
            disallowed_tools=tuple(parse_multiline_input(env.get("DISALLOWED_TOOLS", ""))),
            custom_instructions=env.get("CUSTOM_INSTRUCTIONS", ""),
            direct_prompt=env.get("DIRECT_PROMPT", ""),
            override_prompt=env.get("OVERRIDE_PROMPT", ""),
            base_branch=env.get("BASE_BRANCH") or None,
            branch_prefix=env.get("BRANCH_PREFIX", "claude/"),
            use_sticky_comment=env.get("USE_STICKY_COMMENT") == "true",
            additional_permissions=MappingProxyType(
                parse_additional_permissions(env.get("ADDITIONAL_PERMISSIONS", ""))
            ),
            use_commit_signing=env.get("USE_COMMIT_SIGNING") == "true",
        )


def parse_github_context(
    environ: Optional[Mapping[str, str]] = None,
    payload: Optional[Dict[str, Any]] = None,
    event_name: Optional[str] = None,
) -> GitHubContext:
    """Parse the triggering event into a GitHubContext.

    Args:
        environ: Environment to read inputs from; defaults to ``os.environ``
        payload: Event body; defaults to the JSON file at ``GITHUB_EVENT_PATH``
        event_name: Event kind; defaults to ``GITHUB_EVENT_NAME``

    Raises:
        InvalidModeError: ``MODE`` is set to an unknown mode name
        UnsupportedEventError: the event kind is not handled
    """
    environ = os.environ if environ is None else environ
    if payload is None:
        payload = load_event_payload(environ.get("GITHUB_EVENT_PATH"))
    return GitHubEventNormalizer(environ, payload, event_name).standardize_event()


def is_issues_event(context: GitHubContext) -> bool:
    return context.event_name == EventName.ISSUES


def is_issue_comment_event(context: GitHubContext) -> bool:
    return context.event_name == EventName.ISSUE_COMMENT


def is_pull_request_event(context: GitHubContext) -> bool:
    return context.event_name == EventName.PULL_REQUEST


def is_pull_request_review_event(context: GitHubContext) -> bool:
    return context.event_name == EventName.PULL_REQUEST_REVIEW


def is_pull_request_review_comment_event(context: GitHubContext) -> bool:
    return context.event_name == EventName.PULL_REQUEST_REVIEW_COMMENT


def is_issues_assigned_event(context: GitHubContext) -> bool:
    return is_issues_event(context) and context.event_action == "assigned"


def is_workflow_dispatch_event(context: GitHubContext) -> bool:
    return context.event_name == EventName.WORKFLOW_DISPATCH


def is_schedule_event(context: GitHubContext) -> bool:
    return context.event_name == EventName.SCHEDULE


def is_entity_context(context: GitHubContext) -> bool:
    """True when the event concerns a specific issue or pull request"""
    return context.event_name in ENTITY_EVENTS
