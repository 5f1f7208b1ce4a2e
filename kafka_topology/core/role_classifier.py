"""
Role Classifier

Classifies a code unit as Kafka producer or consumer from the types of its
declared fields. When the unit itself declares no producer/consumer field,
its superclass chain is inspected until a match is found or the chain leaves
the indexed sources.
"""

import logging
from typing import Optional, Set

from .java_index import JavaSourceIndex, TypeDefinition
from .relation_model import KafkaRole

DEFAULT_PRODUCER_TYPE = "KafkaProducer"
DEFAULT_CONSUMER_TYPE = "KafkaConsumer"


class RoleClassifier:
    """
    Determines the KafkaRole of indexed code units.

    Capability types given as simple names are compared with the simple name
    of each field type; fully qualified capability types are compared with
    the field type as resolved through the declaring unit's imports.
    """

    def __init__(
        self,
        index: JavaSourceIndex,
        producer_type: str = DEFAULT_PRODUCER_TYPE,
        consumer_type: str = DEFAULT_CONSUMER_TYPE,
    ):
        self.logger = logging.getLogger(__name__)
        self.index = index
        self.producer_type = producer_type
        self.consumer_type = consumer_type

    def classify(self, unit: str) -> KafkaRole:
        """Role of the unit; raises UnresolvedUnitError for unknown units"""
        definition = self.index.resolve(unit)
        visited: Set[str] = set()

        current: Optional[TypeDefinition] = definition
        while current is not None and current.qualified_name not in visited:
            visited.add(current.qualified_name)
            role = self._declared_role(current)
            if role is not KafkaRole.NEITHER:
                if current is not definition:
                    self.logger.debug(f"{unit} inherits {role.value} role from {current.qualified_name}")
                return role
            current = self.index.superclass_of(current)

        return KafkaRole.NEITHER

    def is_producer(self, unit: str) -> bool:
        return self.classify(unit) is KafkaRole.PRODUCER

    def is_consumer(self, unit: str) -> bool:
        return self.classify(unit) is KafkaRole.CONSUMER

    def _declared_role(self, definition: TypeDefinition) -> KafkaRole:
        field_types = [f.type_name for f in definition.fields]
        if any(self._is_type(definition, t, self.producer_type) for t in field_types):
            return KafkaRole.PRODUCER
        if any(self._is_type(definition, t, self.consumer_type) for t in field_types):
            return KafkaRole.CONSUMER
        return KafkaRole.NEITHER

    def _is_type(self, definition: TypeDefinition, type_name: str, capability: str) -> bool:
        if '.' not in capability:
            return type_name.rsplit('.', 1)[-1] == capability
        return capability in self.index.qualify(definition, type_name)
