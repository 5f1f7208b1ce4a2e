"""
Kafka Topology

Reconstructs the producer -> topic -> consumer topology of services sharing
a Kafka broker from their Java sources, and renders it as a Graphviz digraph.
"""

from .core import (
    KafkaRole,
    Relation,
    TopologyModel,
    TopologyError,
    RelationAssembler,
    TopologyExporter,
)
from .config import Container, Settings

__all__ = [
    "KafkaRole",
    "Relation",
    "TopologyModel",
    "TopologyError",
    "RelationAssembler",
    "TopologyExporter",
    "Container",
    "Settings",
]

__version__ = "1.0.0"
