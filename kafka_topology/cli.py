"""
CLI to extract the Kafka topology of a multi-service project into a DOT file.

Example usage:
    kafka-topology /path/to/project --services "device management" "event sources"
    kafka-topology /path/to/project --services inbound-processing --labels --json
    kafka-topology --config topology.yaml --output-dir output/
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from kafka_topology.config import Container, Settings
from kafka_topology.core import TopologyError, TopologyModel
from kafka_topology.core.unit_discovery import LAYOUTS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract Kafka producer/consumer topology between services",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "project_root",
        nargs="?",
        type=Path,
        help="Root directory of the multi-service project",
    )
    parser.add_argument(
        "--services",
        nargs="+",
        help="Service identifiers to analyze",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to settings YAML file (defaults to TOPOLOGY_* environment variables)",
    )
    parser.add_argument(
        "--layout",
        choices=sorted(LAYOUTS),
        help="Project layout generation used to enumerate units",
    )
    parser.add_argument(
        "--naming-class",
        help="Class whose TOPIC constants form the topic catalog",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        help="YAML/JSON file listing topic names (overrides the naming class)",
    )
    parser.add_argument(
        "--labels",
        action="store_true",
        default=None,
        help="Label edges with topic names",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for generated files",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=None,
        help="Also export the relations as JSON",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    base = Settings.from_yaml(args.config) if args.config else Settings.from_env()
    return base.override(
        project_root=args.project_root,
        services=args.services,
        layout=args.layout,
        naming_class=args.naming_class,
        catalog_file=args.catalog,
        label_edges=args.labels,
        output_dir=args.output_dir,
        export_json=args.json,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for topology extraction CLI."""
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format='%(levelname)s: %(message)s')

    try:
        container = Container.from_settings(load_settings(args))
        settings = container.settings

        print(f"Analyzing {len(settings.services)} services in {settings.project_root}...")
        model = container.build_topology()
        print_relations(model)

        exporter = container.exporter()
        dot_path = exporter.export_to_dot(model, str(settings.output_path), label_edges=settings.label_edges)
        print(f"Topology written to {dot_path}")

        if settings.export_json:
            json_path = exporter.export_to_json(model, str(settings.output_path.with_suffix(".json")))
            print(f"Relations written to {json_path}")

        print_statistics(model, exporter.get_graph_statistics(model))

    except TopologyError as e:
        print(f"Topology extraction failed: {e}", file=sys.stderr)
        return 1

    return 0


def print_relations(model: TopologyModel) -> None:
    """Print one line per relation."""
    for line in model.summary_lines():
        print(line)


def print_statistics(model: TopologyModel, graph_stats: Dict[str, Any]) -> None:
    """Print formatted extraction statistics."""
    stats = model.get_statistics()
    print("-" * 30)
    print("Relations:")
    print(f"  Topics:          {stats['num_topics']}")
    print(f"  Full relations:  {stats['num_full_relations']}")
    print(f"  Orphan topics:   {stats['num_orphan_topics']}")
    print("-" * 30)
    print("Service Graph:")
    print(f"  Services:        {graph_stats['services']}")
    print(f"  Dependencies:    {graph_stats['dependencies']}")
    print(f"  Isolated:        {len(graph_stats['isolated_services'])}")
    print(f"  Acyclic:         {graph_stats['is_acyclic']}")
    print("-" * 30)


if __name__ == "__main__":
    sys.exit(main())
