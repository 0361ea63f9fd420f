"""GitHub Actions workflow commands: step outputs and exported variables"""

import logging
import os
import uuid
from typing import Dict, MutableMapping, Optional

logger = logging.getLogger(__name__)


class ActionOutputs:
    """Writes step outputs and environment variables through the runner files"""

    def __init__(
        self,
        output_path: Optional[str] = None,
        env_path: Optional[str] = None,
        environ: Optional[MutableMapping[str, str]] = None,
    ):
        self.output_path = output_path
        self.env_path = env_path
        self.environ = os.environ if environ is None else environ
        self.outputs: Dict[str, str] = {}
        self.variables: Dict[str, str] = {}

    def set_output(self, name: str, value: str) -> None:
        """Set a step output"""
        self.outputs[name] = value
        self._append_command("GITHUB_OUTPUT", self.output_path, name, value)

    def export_variable(self, name: str, value: str) -> None:
        """Export a variable to this process and to later workflow steps"""
        self.variables[name] = value
        self.environ[name] = value
        self._append_command("GITHUB_ENV", self.env_path, name, value)

    def _append_command(
        self, file_var: str, path: Optional[str], name: str, value: str
    ) -> None:
        if not path:
            logger.warning(
                f"{file_var} is not set, value not written",
                extra={'output_name': name}
            )
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
