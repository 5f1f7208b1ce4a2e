"""
Test Configuration and Fixtures
================================

Shared pytest fixtures for testing the kafka-topology project.

Usage:
    pytest tests/                    # Run all tests
    pytest tests/ -v                 # Verbose output
    pytest tests/ -k "matcher"       # Run only matcher tests
"""

import pytest
import tempfile
from pathlib import Path
from typing import Iterable, Optional

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))


# =============================================================================
# Java Source Helpers
# =============================================================================

def java_class(
    package: str,
    name: str,
    fields: Iterable[str] = (),
    extends: Optional[str] = None,
    imports: Iterable[str] = (),
) -> str:
    """Render a minimal Java class declaration"""
    lines = [f"package {package};", ""]
    lines.extend(f"import {imp};" for imp in imports)
    lines.append("")
    header = f"public class {name}"
    if extends:
        header += f" extends {extends}"
    lines.append(header + " {")
    lines.extend(f"    {declaration};" for declaration in fields)
    lines.append("")
    lines.append(f"    public void start() {{")
    lines.append(f"        System.out.println(\"starting {name}\");")
    lines.append("    }")
    lines.append("}")
    return "\n".join(lines) + "\n"


def producer_class(package: str, name: str) -> str:
    return java_class(
        package, name,
        fields=["private KafkaProducer<String, byte[]> producer"],
        imports=["org.apache.kafka.clients.producer.KafkaProducer"],
    )


def consumer_class(package: str, name: str) -> str:
    return java_class(
        package, name,
        fields=["private KafkaConsumer<String, byte[]> consumer"],
        imports=["org.apache.kafka.clients.consumer.KafkaConsumer"],
    )


def naming_class(topics: dict) -> str:
    """KafkaTopicNaming with one TOPIC constant per entry"""
    fields = [f'public static final String {field} = "{value}"' for field, value in topics.items()]
    return java_class("com.acme.common", "KafkaTopicNaming", fields=fields)


class JavaProjectBuilder:
    """Writes a multi-service Java source tree below a root directory"""

    SOURCE_SUBDIR = "src/main/java"

    def __init__(self, root: Path):
        self.root = root

    def add_file(self, relative: str, content: str = "") -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def add_source(self, service: str, package: str, name: str, content: str) -> Path:
        relative = f"{service}/{self.SOURCE_SUBDIR}/{package.replace('.', '/')}/{name}.java"
        return self.add_file(relative, content)

    def add_dir(self, relative: str) -> Path:
        path = self.root / relative
        path.mkdir(parents=True, exist_ok=True)
        return path


# =============================================================================
# File Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory for test outputs"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def java_project(temp_dir) -> JavaProjectBuilder:
    """Empty project tree builder rooted at a temporary 'project' directory"""
    root = temp_dir / "project"
    root.mkdir()
    return JavaProjectBuilder(root)


@pytest.fixture
def orders_project(java_project) -> JavaProjectBuilder:
    """
    Two services exchanging messages on the "orders" topic.

    - order-service: OrdersProducer (KafkaProducer field)
    - payment-service: OrdersConsumer (KafkaConsumer field)
    - shared: KafkaTopicNaming declaring "orders" and "payments"
    """
    java_project.add_source(
        "order-service", "com.acme.orders.kafka", "OrdersProducer",
        producer_class("com.acme.orders.kafka", "OrdersProducer"),
    )
    java_project.add_source(
        "payment-service", "com.acme.payments.kafka", "OrdersConsumer",
        consumer_class("com.acme.payments.kafka", "OrdersConsumer"),
    )
    java_project.add_source(
        "shared", "com.acme.common", "KafkaTopicNaming",
        naming_class({"ORDERS_TOPIC": "orders", "PAYMENTS_TOPIC": "payments"}),
    )
    return java_project


# =============================================================================
# Environment Fixtures
# =============================================================================

ENV_VARS = [
    "TOPOLOGY_PROJECT_ROOT",
    "TOPOLOGY_SERVICES",
    "TOPOLOGY_LAYOUT",
    "TOPOLOGY_NAMING_CLASS",
    "TOPOLOGY_CATALOG_FILE",
    "TOPOLOGY_LABEL_EDGES",
    "TOPOLOGY_OUTPUT_DIR",
    "TOPOLOGY_EXPORT_JSON",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Environment without TOPOLOGY_* variables"""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
