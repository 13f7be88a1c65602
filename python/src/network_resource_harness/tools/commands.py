"""Command lines for the configuration engine on master and agent."""

from __future__ import annotations

import re
from typing import List, Optional

from ..config import EngineSettings


class CommandBuilder:
    """Build engine invocations, optionally inside the agent's network namespace."""

    def __init__(self, engine: Optional[EngineSettings] = None) -> None:
        self._engine = engine or EngineSettings()

    @property
    def manifest_path(self) -> str:
        return self._engine.manifest_path

    def namespace_wrap(self, command: str) -> str:
        if self._engine.agent_namespace:
            return f"sudo ip netns exec {self._engine.agent_namespace} {command}"
        return command

    def agent_command(self) -> str:
        return self.namespace_wrap(f"{self._engine.binpath}agent -t")

    def resource_command(self, resource_type: str, title: Optional[str] = None) -> str:
        command = f"{self._engine.binpath}resource {resource_type}"
        if title is not None:
            command += f" '{title}'"
        return self.namespace_wrap(command)

    def resource_absent_command(self, resource_type: str, title: str) -> str:
        return self.namespace_wrap(f"{self._engine.binpath}resource {resource_type} '{title}' ensure=absent")


def parse_resource_titles(output_text: str, resource_type: str) -> List[str]:
    """Titles of every ``resource_type { 'title':`` block in a listing."""

    pattern = re.compile(rf"^\s*{re.escape(resource_type)}\s*{{\s*'([^']*)'\s*:", re.MULTILINE)
    return pattern.findall(output_text)
