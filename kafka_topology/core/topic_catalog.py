"""
Topic Catalog

The canonical topic names that seed the relation set. Topics come from one
of three places:

- the String constants of the naming class (fields whose name contains
  "TOPIC" and whose initializer is a string literal)
- a YAML or JSON file holding a list of names, optionally under "topics"
- an explicit list of names
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Tuple

import yaml

from .exceptions import ConfigurationError
from .java_index import JavaSourceIndex, TypeDefinition

logger = logging.getLogger(__name__)

DEFAULT_NAMING_CLASS = "KafkaTopicNaming"
DEFAULT_FIELD_MARKER = "TOPIC"


class TopicCatalog:
    """Ordered, de-duplicated, read-only collection of topic names"""

    def __init__(self, topics: Iterable[str] = ()):
        self._topics: Tuple[str, ...] = tuple(dict.fromkeys(topics))

    @classmethod
    def from_names(cls, names: Iterable[str]) -> 'TopicCatalog':
        return cls(str(name) for name in names)

    @classmethod
    def from_definition(cls, definition: TypeDefinition,
                        field_marker: str = DEFAULT_FIELD_MARKER) -> 'TopicCatalog':
        """Values of the String constants of definition named after field_marker"""
        topics = []
        for declared in definition.fields:
            if declared.simple_type != "String" or field_marker not in declared.name:
                continue
            if declared.value is None:
                logger.debug(f"Skipping {definition.name}.{declared.name}: not a string literal")
                continue
            topics.append(declared.value)
        return cls(topics)

    @classmethod
    def from_index(cls, index: JavaSourceIndex, naming_class: str = DEFAULT_NAMING_CLASS,
                   field_marker: str = DEFAULT_FIELD_MARKER) -> 'TopicCatalog':
        """Catalog from the naming class found in the source index"""
        definition = index.get(naming_class)
        if definition is None:
            candidates = index.find_by_simple_name(naming_class.rsplit('.', 1)[-1])
            if not candidates:
                raise ConfigurationError(f"Naming class '{naming_class}' not found in indexed sources")
            if len(candidates) > 1:
                logger.warning(
                    f"{len(candidates)} definitions of {naming_class}, using {candidates[0].qualified_name}"
                )
            definition = candidates[0]
        catalog = cls.from_definition(definition, field_marker)
        logger.info(f"Loaded {len(catalog)} topics from {definition.qualified_name}")
        return catalog

    @classmethod
    def from_file(cls, path: Path) -> 'TopicCatalog':
        """Catalog from a YAML/JSON list of topic names"""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot load topic catalog {path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("topics")
        if not isinstance(data, list):
            raise ConfigurationError(f"Topic catalog {path} must contain a list of topic names")
        catalog = cls.from_names(data)
        logger.info(f"Loaded {len(catalog)} topics from {path}")
        return catalog

    def __iter__(self) -> Iterator[str]:
        return iter(self._topics)

    def __len__(self) -> int:
        return len(self._topics)

    def __contains__(self, topic: str) -> bool:
        return topic in self._topics

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TopicCatalog):
            return self._topics == other._topics
        return NotImplemented

    def __repr__(self) -> str:
        return f"TopicCatalog({list(self._topics)!r})"


def load_catalog(index: JavaSourceIndex, catalog_file: Optional[Path] = None,
                 naming_class: str = DEFAULT_NAMING_CLASS,
                 field_marker: str = DEFAULT_FIELD_MARKER) -> TopicCatalog:
    """Catalog file when given, otherwise the naming class constants"""
    if catalog_file is not None:
        return TopicCatalog.from_file(catalog_file)
    return TopicCatalog.from_index(index, naming_class, field_marker)
