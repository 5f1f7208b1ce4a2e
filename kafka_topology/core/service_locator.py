"""
Service Locator

Finds the directory hosting a service's sources among the immediate children
of the project root.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .exceptions import ConfigurationError


def normalize_name(name: str) -> str:
    """Lower-case name with hyphens read as spaces"""
    return name.replace("-", " ").lower()


class ServiceLocator:
    """Resolves service identifiers to directories under a project root"""

    def __init__(self, project_root: Path):
        self.logger = logging.getLogger(__name__)
        self.project_root = Path(project_root)

    def list_children(self) -> List[Path]:
        """Immediate children of the project root, sorted by name"""
        try:
            return sorted(self.project_root.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise ConfigurationError(f"Cannot list project root {self.project_root}: {e}") from e

    def locate(self, service_id: str) -> Optional[Path]:
        """First child whose relative path contains service_id, or None"""
        target = normalize_name(service_id)
        for child in self.list_children():
            relative = child.relative_to(self.project_root).as_posix()
            if target in normalize_name(relative):
                self.logger.debug(f"Service '{service_id}' located at {child}")
                return child
        return None
