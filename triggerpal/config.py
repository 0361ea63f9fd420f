"""Configuration management for triggerpal"""

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional


@dataclass
class Config:
    """Runner settings provided by GitHub Actions."""
    # Event
    GITHUB_EVENT_NAME: Optional[str] = None
    GITHUB_EVENT_PATH: Optional[str] = None
    GITHUB_REPOSITORY: Optional[str] = None
    GITHUB_RUN_ID: Optional[str] = None
    GITHUB_ACTOR: Optional[str] = None

    # Authentication
    GITHUB_TOKEN: Optional[str] = None
    GITHUB_SERVER_URL: str = "https://github.com"

    # Workflow file commands
    GITHUB_OUTPUT: Optional[str] = None
    GITHUB_ENV: Optional[str] = None
    RUNNER_TEMP: str = "/tmp"

    # Tool server
    MCP_CONFIG: str = ""

    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build a config from the process environment"""
        environ = os.environ if environ is None else environ
        values = {
            f.name: environ[f.name]
            for f in fields(cls)
            if environ.get(f.name) not in (None, "")
        }
        return cls(**values)
