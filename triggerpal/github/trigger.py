"""Trigger detection: did a human ask the agent to engage?

Every check is a pure function of the context. Missing payload fields count as
"no trigger" rather than errors, since webhook bodies are loosely typed.
"""

import logging
import re
from typing import Any, Dict, Optional

from triggerpal.core.types.events import GitHubContext
from triggerpal.github.context import (
    is_issue_comment_event,
    is_issues_assigned_event,
    is_issues_event,
    is_pull_request_event,
    is_pull_request_review_comment_event,
    is_pull_request_review_event,
)

logger = logging.getLogger(__name__)

REVIEW_TRIGGER_ACTIONS = {"submitted", "edited"}


def _section(payload: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def contains_trigger_phrase(text: Optional[str], trigger_phrase: str) -> bool:
    """Check for the phrase as a standalone mention.

    The phrase must not follow a letter or digit and must be followed by
    whitespace, ``.,!?;:`` or the end of the text.
    """
    if not text or not trigger_phrase or not isinstance(text, str):
        return False
    pattern = r"(?:^|[^A-Za-z0-9])" + re.escape(trigger_phrase) + r"(?=[\s.,!?;:]|$)"
    return re.search(pattern, text) is not None


def check_direct_prompt_trigger(context: GitHubContext) -> bool:
    if context.inputs.direct_prompt:
        logger.info("Direct prompt provided, triggering action")
        return True
    return False


def check_assignee_trigger(context: GitHubContext) -> bool:
    if not is_issues_assigned_event(context):
        return False

    trigger_user = context.inputs.assignee_trigger
    if trigger_user.startswith("@"):
        trigger_user = trigger_user[1:]
    if not trigger_user:
        return False

    assignee = _section(context.payload, "assignee").get("login") or ""
    if assignee == trigger_user:
        logger.info("Issue assigned to trigger user", extra={'assignee': assignee})
        return True
    return False


def check_label_trigger(context: GitHubContext) -> bool:
    if not (is_issues_event(context) and context.event_action == "labeled"):
        return False

    label_trigger = context.inputs.label_trigger
    if not label_trigger:
        return False

    label_name = _section(context.payload, "label").get("name") or ""
    if label_name == label_trigger:
        logger.info("Issue labeled with trigger label", extra={'label': label_name})
        return True
    return False


def check_direct_entity_trigger(context: GitHubContext) -> bool:
    """Pull request events engage without a mention in modes that opt in"""
    return is_pull_request_event(context)


def check_mention_trigger(context: GitHubContext) -> bool:
    """Look for the trigger phrase in the text the event carries"""
    phrase = context.inputs.trigger_phrase
    payload = context.payload

    if is_issues_event(context) and context.event_action == "opened":
        issue = _section(payload, "issue")
        return (
            contains_trigger_phrase(issue.get("body"), phrase)
            or contains_trigger_phrase(issue.get("title"), phrase)
        )

    if is_pull_request_event(context):
        pull_request = _section(payload, "pull_request")
        return (
            contains_trigger_phrase(pull_request.get("body"), phrase)
            or contains_trigger_phrase(pull_request.get("title"), phrase)
        )

    if is_pull_request_review_event(context) and context.event_action in REVIEW_TRIGGER_ACTIONS:
        return contains_trigger_phrase(_section(payload, "review").get("body"), phrase)

    if is_issue_comment_event(context) or is_pull_request_review_comment_event(context):
        return contains_trigger_phrase(_section(payload, "comment").get("body"), phrase)

    return False


def check_contains_trigger(context: GitHubContext) -> bool:
    """Composite check used by mention-driven modes"""
    triggered = (
        check_direct_prompt_trigger(context)
        or check_assignee_trigger(context)
        or check_label_trigger(context)
        or check_mention_trigger(context)
    )
    logger.debug(
        "Trigger check complete",
        extra={
            'event_name': context.event_name.value,
            'event_action': context.event_action,
            'triggered': triggered,
        }
    )
    return triggered
