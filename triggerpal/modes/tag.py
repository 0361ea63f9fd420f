"""Tag mode: the agent engages when mentioned, assigned or labeled"""

from typing import List, Optional

from triggerpal.core.types.events import GitHubContext
from triggerpal.core.types.modes import ModeContext, ModeData, ModeResult
from triggerpal.github.context import is_entity_context
from triggerpal.github.trigger import check_contains_trigger
from triggerpal.modes.base import Mode
from triggerpal.modes.collaborators import ModeOptions


class TagMode(Mode):
    """Traditional implementation mode.

    Triggers on trigger-phrase mentions, assignment to the trigger user, the
    trigger label, or a direct prompt, and only for issue or pull request events.
    """

    name = "tag"
    description = "Traditional implementation mode triggered by @claude mentions"

    def should_trigger(self, context: GitHubContext) -> bool:
        if not is_entity_context(context):
            return False
        return check_contains_trigger(context)

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
        return []

    def get_disallowed_tools(self) -> List[str]:
        return []

    def should_create_tracking_comment(self) -> bool:
        return True

    async def prepare(self, options: ModeOptions) -> ModeResult:
        return await self._prepare_entity(options)


tag_mode = TagMode()
