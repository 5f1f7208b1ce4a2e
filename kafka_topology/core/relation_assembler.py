"""
Relation Assembler

Orchestrates topology extraction for a set of services:

    catalog -> for each service:
        locate directory -> discover topic directories -> enumerate units
        -> classify units -> match unit names against topics
    -> merge the service's partial model into the run model

Each service is analyzed into its own partial model which is merged only
once the service completes, so a failing service contributes nothing and
the remaining services are still processed.
"""

import logging
from pathlib import Path
from typing import Iterable, List

from .exceptions import ConfigurationError, UnresolvedUnitError
from .relation_model import KafkaRole, TopologyModel
from .role_classifier import RoleClassifier
from .service_locator import ServiceLocator
from .topic_catalog import TopicCatalog
from .topic_matcher import matches
from .unit_discovery import LayoutStrategy, TopicUnitDiscoverer

DEFAULT_SOURCE_SUBDIR = "src/main/java"


class RelationAssembler:
    """Builds the TopologyModel of a project"""

    def __init__(
        self,
        catalog: TopicCatalog,
        services: Iterable[str],
        locator: ServiceLocator,
        discoverer: TopicUnitDiscoverer,
        layout: LayoutStrategy,
        classifier: RoleClassifier,
        source_subdir: str = DEFAULT_SOURCE_SUBDIR,
    ):
        self.logger = logging.getLogger(__name__)
        self.catalog = catalog
        self.services: List[str] = list(services)
        self.locator = locator
        self.discoverer = discoverer
        self.layout = layout
        self.classifier = classifier
        self.source_subdir = source_subdir

    def assemble(self) -> TopologyModel:
        """Relations of every service that could be analyzed"""
        model = TopologyModel.from_topics(self.catalog)
        self.logger.info(f"Assembling relations for {len(self.services)} services over {len(model)} topics")

        for service in self.services:
            try:
                partial = self.analyze_service(service)
            except ConfigurationError:
                raise
            except Exception as e:
                self.logger.error(f"Failed to analyze service '{service}': {e}")
                self.logger.exception(f"Exception details for {service}:")
                continue
            model.merge(partial)

        model.metadata = {
            'services': list(self.services),
            'layout': self.layout.name,
        }
        return model

    def analyze_service(self, service: str) -> TopologyModel:
        """Partial model holding only the given service's relations"""
        partial = TopologyModel.from_topics(self.catalog)

        directory = self.locator.locate(service)
        if directory is None:
            self.logger.warning(f"No directory found for service '{service}'")
            return partial

        source_root = Path(directory) / self.source_subdir
        topic_directories = self.discoverer.discover(source_root)
        units = self.layout.enumerate_units(topic_directories)
        self.logger.info(f"Service '{service}': {len(units)} units in {len(topic_directories)} topic directories")

        for unit in sorted(units):
            try:
                role = self.classifier.classify(unit)
            except UnresolvedUnitError as e:
                self.logger.warning(f"Skipping unit of service '{service}': {e}")
                continue
            if role is KafkaRole.NEITHER:
                self.logger.debug(f"{unit} is neither producer nor consumer")
                continue
            self._record(partial, unit, role, service)

        return partial

    def _record(self, model: TopologyModel, unit: str, role: KafkaRole, service: str) -> None:
        for relation in model:
            if matches(relation.topic, unit, role.suffix):
                self.logger.debug(f"{unit} -> {role.value} of '{relation.topic}'")
                relation.add(role, service)
