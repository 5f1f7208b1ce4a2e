#!/usr/bin/env python3
"""
CLI script to extract the Kafka producer/consumer topology of a project.

Usage:
    python bin/extract_topology.py /path/to/project --services "device management" "event sources"
    python bin/extract_topology.py /path/to/project --services inbound-processing --labels
    python bin/extract_topology.py --config topology.yaml
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from kafka_topology.cli import main


if __name__ == "__main__":
    sys.exit(main())
