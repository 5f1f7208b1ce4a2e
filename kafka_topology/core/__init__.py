"""
Kafka Topology Core Module

Static reconstruction of the Kafka messaging topology of a multi-service
Java project.

Model:
    Relation: {topic, producers, consumers}
    TopologyModel: one Relation per catalog topic, in catalog order
    Output: service -> service digraph (DOT), labeled by topic on request

Usage:
    from kafka_topology.core import JavaSourceIndex, TopicCatalog, RelationAssembler

    index = JavaSourceIndex.build(project_root)
    catalog = TopicCatalog.from_index(index)
    assembler = RelationAssembler(catalog, services, locator, discoverer, layout,
                                  RoleClassifier(index))
    model = assembler.assemble()
    TopologyExporter().export_to_dot(model, label_edges=True)
"""

# Relation Model - Data structures
from .relation_model import (
    KafkaRole,
    Relation,
    TopologyModel,
)

# Exceptions
from .exceptions import (
    TopologyError,
    ConfigurationError,
    DiscoveryError,
    UnresolvedUnitError,
    ExportError,
)

# Structural metadata
from .java_index import (
    FieldDeclaration,
    TypeDefinition,
    JavaSourceIndex,
    parse_java_source,
)

# Extraction pipeline
from .topic_catalog import TopicCatalog, load_catalog
from .service_locator import ServiceLocator
from .unit_discovery import (
    TopicUnitDiscoverer,
    LayoutStrategy,
    FlatLayout,
    NestedLayout,
    get_layout,
)
from .role_classifier import RoleClassifier
from .topic_matcher import matches, split_words
from .relation_assembler import RelationAssembler

# Export
from .graph_exporter import TopologyExporter

__all__ = [
    # Model
    "KafkaRole",
    "Relation",
    "TopologyModel",
    # Exceptions
    "TopologyError",
    "ConfigurationError",
    "DiscoveryError",
    "UnresolvedUnitError",
    "ExportError",
    # Index
    "FieldDeclaration",
    "TypeDefinition",
    "JavaSourceIndex",
    "parse_java_source",
    # Pipeline
    "TopicCatalog",
    "load_catalog",
    "ServiceLocator",
    "TopicUnitDiscoverer",
    "LayoutStrategy",
    "FlatLayout",
    "NestedLayout",
    "get_layout",
    "RoleClassifier",
    "matches",
    "split_words",
    "RelationAssembler",
    # Export
    "TopologyExporter",
]
