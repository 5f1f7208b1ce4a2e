"""
Unit Tests for kafka_topology/core/unit_discovery.py

Tests for:
    - TopicUnitDiscoverer: marker matching, exclusion, depth-first search
    - FlatLayout / NestedLayout: unit enumeration per layout generation
    - LayoutStrategy.unit_reference: namespace anchor handling
"""

from pathlib import Path

import pytest

from kafka_topology.core.exceptions import DiscoveryError
from kafka_topology.core.unit_discovery import (
    FlatLayout,
    NestedLayout,
    TopicUnitDiscoverer,
    get_layout,
    list_directory,
)

from conftest import JavaProjectBuilder


SOURCE_ROOT = "svc/src/main/java"


# =============================================================================
# Directory Discovery Tests
# =============================================================================

class TestTopicUnitDiscoverer:
    """Tests for locating topic-handling directories."""

    def test_finds_marker_directory(self, java_project):
        java_project.add_file(f"{SOURCE_ROOT}/com/acme/orders/kafka/OrdersProducer.java")
        java_project.add_file(f"{SOURCE_ROOT}/com/acme/orders/rest/OrdersResource.java")

        discoverer = TopicUnitDiscoverer(java_project.root)
        found = discoverer.discover(java_project.root / SOURCE_ROOT)

        assert found == {java_project.root / SOURCE_ROOT / "com/acme/orders/kafka"}

    def test_search_stops_at_first_match(self, java_project):
        java_project.add_file(f"{SOURCE_ROOT}/com/acme/kafka/inbound/kafka/DeepConsumer.java")

        found = TopicUnitDiscoverer(java_project.root).discover(java_project.root / SOURCE_ROOT)

        assert found == {java_project.root / SOURCE_ROOT / "com/acme/kafka"}

    def test_multiple_directories(self, java_project):
        java_project.add_file(f"{SOURCE_ROOT}/com/acme/orders/kafka/OrdersProducer.java")
        java_project.add_file(f"{SOURCE_ROOT}/com/acme/billing/kafka/BillingConsumer.java")

        found = TopicUnitDiscoverer(java_project.root).discover(java_project.root / SOURCE_ROOT)

        assert len(found) == 2

    def test_interface_directories_excluded(self, java_project):
        java_project.add_file(f"{SOURCE_ROOT}/com/acme/spi/kafka/IOrdersProducer.java")

        found = TopicUnitDiscoverer(java_project.root).discover(java_project.root / SOURCE_ROOT)

        assert found == set()

    def test_marker_case_insensitive(self, java_project):
        java_project.add_file(f"{SOURCE_ROOT}/com/acme/Kafka/OrdersProducer.java")

        found = TopicUnitDiscoverer(java_project.root).discover(java_project.root / SOURCE_ROOT)

        assert found == {java_project.root / SOURCE_ROOT / "com/acme/Kafka"}

    def test_marker_ignored_above_project_root(self, temp_dir):
        project = JavaProjectBuilder(temp_dir / "kafka-home" / "project")
        project.add_file(f"{SOURCE_ROOT}/com/acme/orders/OrdersService.java")

        found = TopicUnitDiscoverer(project.root).discover(project.root / SOURCE_ROOT)

        assert found == set()

    def test_empty_directory_raises(self, java_project):
        java_project.add_file(f"{SOURCE_ROOT}/com/acme/orders/kafka/OrdersProducer.java")
        java_project.add_dir(f"{SOURCE_ROOT}/com/acme/empty")

        with pytest.raises(DiscoveryError):
            TopicUnitDiscoverer(java_project.root).discover(java_project.root / SOURCE_ROOT)

    def test_missing_source_root_raises(self, java_project):
        with pytest.raises(DiscoveryError):
            TopicUnitDiscoverer(java_project.root).discover(java_project.root / SOURCE_ROOT)

    def test_list_directory_sorted(self, java_project):
        java_project.add_file("b.txt")
        java_project.add_file("a.txt")
        assert [p.name for p in list_directory(java_project.root)] == ["a.txt", "b.txt"]


# =============================================================================
# Layout Tests
# =============================================================================

@pytest.fixture
def topic_dir(java_project) -> Path:
    """kafka directory with two sources, a nested package and a non-source file"""
    base = f"{SOURCE_ROOT}/com/acme/kafka"
    java_project.add_file(f"{base}/OrdersProducer.java")
    java_project.add_file(f"{base}/OrdersConsumer.java")
    java_project.add_file(f"{base}/README.md")
    java_project.add_file(f"{base}/inbound/DeviceEventConsumer.java")
    java_project.add_file(f"{base}/inbound/deep/TooDeepConsumer.java")
    java_project.add_dir(f"{base}/outbound")
    return java_project.root / base


class TestFlatLayout:

    def test_direct_sources_only(self, topic_dir):
        units = FlatLayout().enumerate_units([topic_dir])
        assert units == {"com.acme.kafka.OrdersProducer", "com.acme.kafka.OrdersConsumer"}


class TestNestedLayout:

    def test_sources_one_level_below(self, topic_dir):
        units = NestedLayout().enumerate_units([topic_dir])
        assert units == {
            "com.acme.kafka.OrdersProducer",
            "com.acme.kafka.OrdersConsumer",
            "com.acme.kafka.inbound.DeviceEventConsumer",
        }

    def test_no_directories(self):
        assert NestedLayout().enumerate_units([]) == set()


class TestEmptyTopicDirectory:
    """An empty topic directory next to a populated one holds no units."""

    @pytest.fixture
    def directories(self, java_project):
        java_project.add_file(f"{SOURCE_ROOT}/com/acme/kafka/OrdersProducer.java")
        empty = java_project.add_dir(f"{SOURCE_ROOT}/com/acme/kafkaold")
        return [empty, java_project.root / SOURCE_ROOT / "com/acme/kafka"]

    @pytest.mark.parametrize("layout", [FlatLayout, NestedLayout])
    def test_empty_directory_skipped(self, layout, directories):
        assert layout().enumerate_units(directories) == {"com.acme.kafka.OrdersProducer"}

    def test_missing_directory_raises(self, java_project):
        with pytest.raises(DiscoveryError):
            FlatLayout().enumerate_units([java_project.root / "missing"])


class TestUnitReference:
    """Tests for deriving qualified unit names from paths."""

    def test_from_last_anchor_segment(self):
        path = Path("/work/com/checkout/svc/src/main/java/com/acme/kafka/OrdersProducer.java")
        assert FlatLayout().unit_reference(path) == "com.acme.kafka.OrdersProducer"

    def test_anchor_must_be_whole_segment(self):
        path = Path("/work/src/main/java/com/acme/community/kafka/OrdersProducer.java")
        assert FlatLayout().unit_reference(path) == "com.acme.community.kafka.OrdersProducer"

    def test_non_source_file(self):
        assert FlatLayout().unit_reference(Path("/src/com/acme/kafka/notes.txt")) is None

    def test_missing_anchor(self):
        assert FlatLayout().unit_reference(Path("/src/org/acme/kafka/OrdersProducer.java")) is None

    def test_custom_anchor(self):
        layout = FlatLayout(namespace_anchor="org")
        path = Path("/src/main/java/org/acme/kafka/OrdersProducer.java")
        assert layout.unit_reference(path) == "org.acme.kafka.OrdersProducer"


class TestGetLayout:

    @pytest.mark.parametrize("name,expected", [
        ("flat", FlatLayout),
        ("nested", NestedLayout),
    ])
    def test_known_layouts(self, name, expected):
        layout = get_layout(name)
        assert isinstance(layout, expected)
        assert layout.name == name

    def test_unknown_layout(self):
        with pytest.raises(ValueError):
            get_layout("modular")
