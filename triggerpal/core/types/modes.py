"""Records passed between modes and their collaborators"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from triggerpal.core.types.events import GitHubContext


@dataclass(frozen=True)
class ModeData:
    """Run-time data available once the tracking comment and branch exist"""
    comment_id: Optional[int] = None
    base_branch: Optional[str] = None
    claude_branch: Optional[str] = None


@dataclass(frozen=True)
class ModeContext:
    """Reduced, mode-specific context handed to prompt construction"""
    mode: str
    github_context: GitHubContext
    comment_id: Optional[int] = None
    base_branch: Optional[str] = None
    claude_branch: Optional[str] = None


@dataclass(frozen=True)
class CommentData:
    """Tracking comment created for the run"""
    id: int
    user: Optional[str] = None
    user_id: Optional[int] = None


@dataclass(frozen=True)
class BranchInfo:
    """Branches resolved for the run"""
    base_branch: str
    current_branch: str
    claude_branch: Optional[str] = None


@dataclass
class FetchDataResult:
    """Issue or pull request data fetched from GitHub"""
    context_data: Dict[str, Any]
    comments: List[Dict[str, Any]] = field(default_factory=list)
    changed_files: List[Dict[str, Any]] = field(default_factory=list)
    review_data: Optional[List[Dict[str, Any]]] = None
    image_url_map: Dict[str, str] = field(default_factory=dict)
    trigger_display_name: Optional[str] = None


@dataclass(frozen=True)
class ModeResult:
    """Identifiers the workflow needs after preparation"""
    comment_id: Optional[int]
    branch_info: BranchInfo
    mcp_config: str
