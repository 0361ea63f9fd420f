"""Boundary between modes and the services that act on GitHub"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from triggerpal.actions import ActionOutputs
from triggerpal.core.types.events import GitHubContext
from triggerpal.core.types.modes import (
    BranchInfo,
    CommentData,
    FetchDataResult,
    ModeContext,
)

if TYPE_CHECKING:
    from triggerpal.modes.base import Mode


class ActionCollaborators(ABC):
    """Side-effecting operations a mode orchestrates during prepare()"""

    @abstractmethod
    async def create_initial_comment(self, context: GitHubContext) -> CommentData:
        """Create the tracking comment"""
        pass

    @abstractmethod
    async def fetch_github_data(self, context: GitHubContext) -> FetchDataResult:
        """Fetch issue or pull request data"""
        pass

    @abstractmethod
    async def setup_branch(
        self, data: FetchDataResult, context: GitHubContext
    ) -> BranchInfo:
        """Resolve or create the working branch"""
        pass

    @abstractmethod
    async def configure_git_auth(
        self, context: GitHubContext, comment_user: Optional[str]
    ) -> None:
        """Configure the git identity used for commits"""
        pass

    @abstractmethod
    async def create_prompt(
        self,
        mode: "Mode",
        mode_context: ModeContext,
        data: FetchDataResult,
        context: GitHubContext,
    ) -> None:
        """Build the agent prompt"""
        pass

    @abstractmethod
    async def prepare_mcp_config(
        self,
        context: GitHubContext,
        branch_info: BranchInfo,
        comment_id: Optional[int],
        allowed_tools: List[str],
        additional_mcp_config: str,
    ) -> str:
        """Build the tool server configuration"""
        pass


@dataclass
class ModeOptions:
    """Everything a mode needs to prepare a run"""
    context: GitHubContext
    collaborators: ActionCollaborators
    outputs: ActionOutputs
    additional_mcp_config: str = ""
