"""
Topology Exporter

Exports TopologyModel instances to:
- DOT/GraphViz (service -> service digraph, optionally labeled by topic)
- JSON (relations plus export metadata)
- NetworkX (direct DiGraph object)

DOT output, per relation in catalog order:
- producers and consumers:  one "producer -> consumer;" line per pair
- only one side populated:  one "service;" vertex line per member
- neither:                  nothing
"""

import io
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

import networkx as nx

from .exceptions import ExportError
from .relation_model import TopologyModel

LABELED_OUTPUT = "graph_with_labels.dot"
UNLABELED_OUTPUT = "graph_no_labels.dot"


def default_output_name(label_edges: bool) -> str:
    return LABELED_OUTPUT if label_edges else UNLABELED_OUTPUT


def escape_label(text: str) -> str:
    """Quote-safe content for a DOT double-quoted string"""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def vertex_id(service: str) -> str:
    """DOT identifier for a service: whitespace and hyphens removed"""
    return "".join(service.split()).replace("-", "")


class TopologyExporter:
    """
    Exports TopologyModel instances to various formats
    """

    def __init__(self, output_dir: Optional[Path] = None):
        self.logger = logging.getLogger(__name__)
        self.output_dir = Path(output_dir) if output_dir is not None else Path(".")

    def write_dot(self, model: TopologyModel, output: TextIO, label_edges: bool = False) -> None:
        """Stream the DOT description of model into output"""
        output.write("digraph {\n")

        for relation in model:
            producers = sorted(relation.producers)
            consumers = sorted(relation.consumers)

            if relation.is_full():
                label = f'[label="{escape_label(relation.topic)}"]' if label_edges else ""
                for producer in producers:
                    for consumer in consumers:
                        output.write(f"{vertex_id(producer)} -> {vertex_id(consumer)}{label};\n")
            elif not relation.is_empty():
                for service in producers or consumers:
                    output.write(f"{vertex_id(service)};\n")

        output.write("}\n")

    def to_dot(self, model: TopologyModel, label_edges: bool = False) -> str:
        buffer = io.StringIO()
        self.write_dot(model, buffer, label_edges)
        return buffer.getvalue()

    def export_to_dot(self, model: TopologyModel, filepath: Optional[str] = None,
                      label_edges: bool = False) -> str:
        """Write the DOT description, overwriting any previous output"""
        path = Path(filepath) if filepath else self.output_dir / default_output_name(label_edges)
        self.logger.info(f"Exporting to DOT: {path}")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                self.write_dot(model, f, label_edges)
        except OSError as e:
            self.logger.error(f"Failed to write {path}: {e}")
            raise ExportError(f"Cannot write DOT output {path}: {e}") from e

        return str(path)

    def export_to_json(self, model: TopologyModel, filepath: str, indent: int = 2) -> str:
        """Export TopologyModel to JSON file"""
        path = Path(filepath)
        self.logger.info(f"Exporting to JSON: {path}")

        data = model.to_dict()
        data['statistics'] = model.get_statistics()
        data['_export'] = {
            'format': 'json',
            'exported_at': datetime.now(timezone.utc).isoformat(),
        }

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=indent, default=str)
        except OSError as e:
            self.logger.error(f"Failed to write {path}: {e}")
            raise ExportError(f"Cannot write JSON output {path}: {e}") from e

        return str(path)

    def to_networkx(self, model: TopologyModel) -> nx.DiGraph:
        """Service digraph; edges carry the topics linking both services"""
        G = nx.DiGraph()

        for service in sorted(model.get_services()):
            G.add_node(
                service,
                label=vertex_id(service),
                produces=model.get_topics_produced_by(service),
                consumes=model.get_topics_consumed_by(service),
            )

        for relation in model:
            for producer in relation.producers:
                for consumer in relation.consumers:
                    if G.has_edge(producer, consumer):
                        G[producer][consumer]['topics'].append(relation.topic)
                    else:
                        G.add_edge(producer, consumer, topics=[relation.topic])

        return G

    def get_graph_statistics(self, model: TopologyModel) -> Dict[str, Any]:
        G = self.to_networkx(model)
        return {
            'services': G.number_of_nodes(),
            'dependencies': G.number_of_edges(),
            'isolated_services': sorted(nx.isolates(G)),
            'is_acyclic': nx.is_directed_acyclic_graph(G),
            'self_loops': sorted(u for u, _ in nx.selfloop_edges(G)),
        }
