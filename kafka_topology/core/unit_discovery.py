"""
Topic-Unit Discovery

Locates the topic-handling directories of a service and turns the source
files inside them into code unit references.

Directory discovery is shared by every project layout. Unit enumeration
differs between layout generations and is provided by LayoutStrategy
implementations:

- FlatLayout: sources sit directly in the topic directory
- NestedLayout: sources sit in the topic directory or one level below it
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Type

from .exceptions import DiscoveryError

DEFAULT_TOPIC_MARKER = "kafka"
DEFAULT_INTERFACE_MARKER = "spi"
DEFAULT_NAMESPACE_ANCHOR = "com"
SOURCE_SUFFIX = ".java"


def list_directory(directory: Path) -> List[Path]:
    """Sorted entries of directory; empty or unreadable directories are errors"""
    try:
        entries = sorted(Path(directory).iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise DiscoveryError(f"Cannot list directory {directory}: {e}") from e
    if not entries:
        raise DiscoveryError(f"Directory has no entries: {directory}")
    return entries


# =============================================================================
# Directory discovery
# =============================================================================

class TopicUnitDiscoverer:
    """Depth-first search for topic-handling directories"""

    def __init__(
        self,
        project_root: Path,
        topic_marker: str = DEFAULT_TOPIC_MARKER,
        interface_marker: str = DEFAULT_INTERFACE_MARKER,
    ):
        self.logger = logging.getLogger(__name__)
        self.project_root = Path(project_root)
        self.topic_marker = topic_marker.lower()
        self.interface_marker = interface_marker.lower()

    def is_topic_directory(self, directory: Path) -> bool:
        path = self._relative(directory).lower()
        return self.topic_marker in path and self.interface_marker not in path

    def discover(self, source_root: Path) -> Set[Path]:
        """All topic-handling directories below source_root"""
        found: Set[Path] = set()
        self._visit(Path(source_root), found)
        self.logger.info(f"Found {len(found)} topic directories under {source_root}")
        return found

    def _visit(self, directory: Path, found: Set[Path]) -> None:
        if self.is_topic_directory(directory):
            found.add(directory)
            return
        for entry in list_directory(directory):
            if entry.is_dir():
                self._visit(entry, found)

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.project_root).as_posix()
        except ValueError:
            return path.as_posix()


# =============================================================================
# Layout strategies
# =============================================================================

class LayoutStrategy(ABC):
    """Converts topic directories into code unit references"""

    name = ""

    def __init__(self, namespace_anchor: str = DEFAULT_NAMESPACE_ANCHOR):
        self.logger = logging.getLogger(__name__)
        self.namespace_anchor = namespace_anchor

    @abstractmethod
    def enumerate_units(self, directories: Iterable[Path]) -> Set[str]:
        """Code unit references for the sources in directories"""

    def unit_reference(self, path: Path) -> Optional[str]:
        """Qualified unit name from the namespace anchor to the file stem"""
        path = Path(path)
        if path.suffix != SOURCE_SUFFIX:
            self.logger.debug(f"Skipping non-source file {path}")
            return None
        parts = list(path.with_suffix('').parts)
        anchors = [i for i, part in enumerate(parts) if part == self.namespace_anchor]
        if not anchors:
            self.logger.debug(f"No '{self.namespace_anchor}' segment in {path}")
            return None
        return '.'.join(parts[anchors[-1]:])

    def _entries(self, directory: Path) -> List[Path]:
        """Sorted entries of directory; an empty directory holds no units"""
        try:
            return sorted(Path(directory).iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DiscoveryError(f"Cannot list directory {directory}: {e}") from e

    def _add_file(self, path: Path, units: Set[str]) -> None:
        unit = self.unit_reference(path)
        if unit is not None:
            units.add(unit)


class FlatLayout(LayoutStrategy):
    """Sources directly inside each topic directory"""

    name = "flat"

    def enumerate_units(self, directories: Iterable[Path]) -> Set[str]:
        units: Set[str] = set()
        for directory in directories:
            for entry in self._entries(directory):
                if entry.is_file():
                    self._add_file(entry, units)
        return units


class NestedLayout(LayoutStrategy):
    """Sources inside each topic directory or one sub-directory below it"""

    name = "nested"

    def enumerate_units(self, directories: Iterable[Path]) -> Set[str]:
        units: Set[str] = set()
        for directory in directories:
            for entry in self._entries(directory):
                if entry.is_dir():
                    for nested in self._entries(entry):
                        if nested.is_file():
                            self._add_file(nested, units)
                else:
                    self._add_file(entry, units)
        return units


LAYOUTS: Dict[str, Type[LayoutStrategy]] = {
    FlatLayout.name: FlatLayout,
    NestedLayout.name: NestedLayout,
}


def get_layout(name: str, namespace_anchor: str = DEFAULT_NAMESPACE_ANCHOR) -> LayoutStrategy:
    """Instantiate the layout strategy registered under name"""
    try:
        layout_cls = LAYOUTS[name]
    except KeyError:
        raise ValueError(f"Unknown layout '{name}', expected one of: {', '.join(sorted(LAYOUTS))}")
    return layout_cls(namespace_anchor=namespace_anchor)
