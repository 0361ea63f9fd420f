"""Mode contract shared by all execution modes"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from triggerpal.core.exceptions import ModeError
from triggerpal.core.types.events import GitHubContext
from triggerpal.core.types.modes import (
    FetchDataResult,
    ModeContext,
    ModeData,
    ModeResult,
)
from triggerpal.github.context import is_entity_context
from triggerpal.modes.collaborators import ModeOptions

logger = logging.getLogger(__name__)

# Tools every mode gets before its own and the user's additions
BASE_ALLOWED_TOOLS = [
    "Edit",
    "MultiEdit",
    "Glob",
    "Grep",
    "LS",
    "Read",
    "Write",
]
BASE_DISALLOWED_TOOLS = ["WebSearch", "WebFetch"]


class Mode(ABC):
    """Base class for execution modes.

    A mode decides whether an event engages the agent, which tools it may use,
    and what context the prompt is built from.
    """

    name: str
    description: str

    @abstractmethod
    def should_trigger(self, context: GitHubContext) -> bool:
        """Decide whether this event should engage the agent"""
        pass

    @abstractmethod
    def prepare_context(
        self, context: GitHubContext, data: Optional[ModeData] = None
    ) -> ModeContext:
        """Build the mode-prepared context"""
        pass

    @abstractmethod
    def get_allowed_tools(self) -> List[str]:
        pass

    @abstractmethod
    def get_disallowed_tools(self) -> List[str]:
        pass

    @abstractmethod
    def should_create_tracking_comment(self) -> bool:
        pass

    @abstractmethod
    async def prepare(self, options: ModeOptions) -> ModeResult:
        """Run the side-effecting preparation for a triggered event"""
        pass

    def generate_prompt(
        self, mode_context: ModeContext, data: FetchDataResult
    ) -> Optional[str]:
        """Mode-specific prompt; None lets the prompt builder use its default"""
        return None

    def resolve_tools(self, context: GitHubContext) -> Tuple[List[str], List[str]]:
        """Allowed and disallowed tools for the run, base tools first"""
        allowed = [
            *BASE_ALLOWED_TOOLS,
            *self.get_allowed_tools(),
            *context.inputs.allowed_tools,
        ]
        disallowed = [
            *BASE_DISALLOWED_TOOLS,
            *self.get_disallowed_tools(),
            *context.inputs.disallowed_tools,
        ]
        return allowed, disallowed

    async def _prepare_entity(self, options: ModeOptions) -> ModeResult:
        """Comment, fetch, branch, git auth, prompt, tools, tool server; in that order"""
        context = options.context
        collaborators = options.collaborators
        outputs = options.outputs

        if not is_entity_context(context):
            raise ModeError(f"{self.name.capitalize()} mode requires entity context")

        comment_id = None
        comment_user = None
        if self.should_create_tracking_comment():
            comment = await collaborators.create_initial_comment(context)
            comment_id = comment.id
            comment_user = comment.user
            outputs.set_output("claude_comment_id", str(comment_id))

        github_data = await collaborators.fetch_github_data(context)
        branch_info = await collaborators.setup_branch(github_data, context)

        if not context.inputs.use_commit_signing:
            try:
                await collaborators.configure_git_auth(context, comment_user)
            except Exception as e:
                logger.error(
                    "Failed to configure git authentication",
                    extra={'error': str(e), 'error_type': type(e).__name__}
                )
                raise

        mode_context = self.prepare_context(
            context,
            ModeData(
                comment_id=comment_id,
                base_branch=branch_info.base_branch,
                claude_branch=branch_info.claude_branch,
            ),
        )
        await collaborators.create_prompt(self, mode_context, github_data, context)

        allowed_tools, disallowed_tools = self.resolve_tools(context)
        outputs.export_variable("INPUT_ALLOWED_TOOLS", ",".join(allowed_tools))
        outputs.export_variable("INPUT_DISALLOWED_TOOLS", ",".join(disallowed_tools))

        mcp_config = await collaborators.prepare_mcp_config(
            context,
            branch_info,
            comment_id,
            [*self.get_allowed_tools(), *context.inputs.allowed_tools],
            options.additional_mcp_config,
        )
        outputs.set_output("mcp_config", mcp_config)

        logger.info(
            "Mode preparation complete",
            extra={
                'mode': self.name,
                'comment_id': comment_id,
                'base_branch': branch_info.base_branch,
                'claude_branch': branch_info.claude_branch,
            }
        )
        return ModeResult(
            comment_id=comment_id,
            branch_info=branch_info,
            mcp_config=mcp_config,
        )
