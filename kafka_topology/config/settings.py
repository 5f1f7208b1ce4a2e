"""
Application Settings

Run configuration for topology extraction, from the environment or a YAML
file.
"""

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from kafka_topology.core.exceptions import ConfigurationError
from kafka_topology.core.graph_exporter import default_output_name
from kafka_topology.core.unit_discovery import LAYOUTS

TRUE_VALUES = {"1", "true", "yes", "on"}


def _split_services(value: str) -> List[str]:
    return [s.strip() for s in value.split(",") if s.strip()]


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


@dataclass
class Settings:
    """Settings of one extraction run."""

    project_root: Path = Path(".")
    services: List[str] = field(default_factory=list)

    # Source layout
    layout: str = "nested"
    source_subdir: str = "src/main/java"
    topic_dir_marker: str = "kafka"
    interface_dir_marker: str = "spi"
    namespace_anchor: str = "com"

    # Topic catalog
    naming_class: str = "KafkaTopicNaming"
    topic_field_marker: str = "TOPIC"
    catalog_file: Optional[Path] = None

    # Capability types
    producer_type: str = "KafkaProducer"
    consumer_type: str = "KafkaConsumer"

    # Output
    label_edges: bool = False
    output_dir: Path = Path(".")
    export_json: bool = False

    def __post_init__(self):
        self.project_root = Path(self.project_root)
        self.output_dir = Path(self.output_dir)
        if self.catalog_file is not None:
            self.catalog_file = Path(self.catalog_file)
        if isinstance(self.services, str):
            self.services = _split_services(self.services)
        self.label_edges = _as_bool(self.label_edges)
        self.export_json = _as_bool(self.export_json)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from TOPOLOGY_* environment variables."""
        catalog_file = os.getenv("TOPOLOGY_CATALOG_FILE")
        return cls(
            project_root=Path(os.getenv("TOPOLOGY_PROJECT_ROOT", ".")),
            services=_split_services(os.getenv("TOPOLOGY_SERVICES", "")),
            layout=os.getenv("TOPOLOGY_LAYOUT", "nested"),
            naming_class=os.getenv("TOPOLOGY_NAMING_CLASS", "KafkaTopicNaming"),
            catalog_file=Path(catalog_file) if catalog_file else None,
            label_edges=_as_bool(os.getenv("TOPOLOGY_LABEL_EDGES", "false")),
            output_dir=Path(os.getenv("TOPOLOGY_OUTPUT_DIR", ".")),
            export_json=_as_bool(os.getenv("TOPOLOGY_EXPORT_JSON", "false")),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML file, optionally nested under 'topology'."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot load settings from {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {path} must contain a mapping")
        return cls.from_dict(data.get("topology", data))

    def override(self, **changes: Any) -> "Settings":
        """Copy with every non-None change applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def validate(self) -> "Settings":
        if not self.project_root.is_dir():
            raise ConfigurationError(f"Project root is not a directory: {self.project_root}")
        if not self.services:
            raise ConfigurationError("No services to analyze")
        if self.layout not in LAYOUTS:
            raise ConfigurationError(
                f"Unknown layout '{self.layout}', expected one of: {', '.join(sorted(LAYOUTS))}"
            )
        return self

    @property
    def output_path(self) -> Path:
        return self.output_dir / default_output_name(self.label_edges)
