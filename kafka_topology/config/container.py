"""
Dependency Injection Container

Wires the extraction pipeline from Settings and caches its components.
"""

from dataclasses import dataclass, field
from typing import Optional

from kafka_topology.core.graph_exporter import TopologyExporter
from kafka_topology.core.java_index import JavaSourceIndex
from kafka_topology.core.relation_assembler import RelationAssembler
from kafka_topology.core.relation_model import TopologyModel
from kafka_topology.core.role_classifier import RoleClassifier
from kafka_topology.core.service_locator import ServiceLocator
from kafka_topology.core.topic_catalog import TopicCatalog, load_catalog
from kafka_topology.core.unit_discovery import LayoutStrategy, TopicUnitDiscoverer, get_layout

from .settings import Settings


@dataclass
class Container:
    """
    Dependency injection container.

    The source index and topic catalog are built once and shared by every
    component of the run.
    """
    settings: Settings

    _index: Optional[JavaSourceIndex] = field(default=None, repr=False)
    _catalog: Optional[TopicCatalog] = field(default=None, repr=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Container":
        """Create container from validated settings."""
        return cls(settings=settings.validate())

    def source_index(self) -> JavaSourceIndex:
        """Get the Java source index singleton."""
        if self._index is None:
            self._index = JavaSourceIndex.build(self.settings.project_root)
        return self._index

    def topic_catalog(self) -> TopicCatalog:
        """Get the topic catalog singleton."""
        if self._catalog is None:
            self._catalog = load_catalog(
                self.source_index(),
                catalog_file=self.settings.catalog_file,
                naming_class=self.settings.naming_class,
                field_marker=self.settings.topic_field_marker,
            )
        return self._catalog

    def service_locator(self) -> ServiceLocator:
        return ServiceLocator(self.settings.project_root)

    def discoverer(self) -> TopicUnitDiscoverer:
        return TopicUnitDiscoverer(
            self.settings.project_root,
            topic_marker=self.settings.topic_dir_marker,
            interface_marker=self.settings.interface_dir_marker,
        )

    def layout(self) -> LayoutStrategy:
        return get_layout(self.settings.layout, namespace_anchor=self.settings.namespace_anchor)

    def role_classifier(self) -> RoleClassifier:
        return RoleClassifier(
            self.source_index(),
            producer_type=self.settings.producer_type,
            consumer_type=self.settings.consumer_type,
        )

    def relation_assembler(self) -> RelationAssembler:
        return RelationAssembler(
            catalog=self.topic_catalog(),
            services=self.settings.services,
            locator=self.service_locator(),
            discoverer=self.discoverer(),
            layout=self.layout(),
            classifier=self.role_classifier(),
            source_subdir=self.settings.source_subdir,
        )

    def exporter(self) -> TopologyExporter:
        return TopologyExporter(output_dir=self.settings.output_dir)

    def build_topology(self) -> TopologyModel:
        """Run the full extraction."""
        return self.relation_assembler().assemble()
