"""
Relation Model

Data structures for the reconstructed messaging topology:

- KafkaRole: what a code unit does with a topic (producer|consumer|neither)
- Relation: {topic, producers, consumers} for one canonical topic
- TopologyModel: ordered container of relations, one per topic

Relations are created empty from the topic catalog and only ever grow
through idempotent set adds. Partial models built per service are merged
into the run model with set union.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Set


# =============================================================================
# Enumerations
# =============================================================================

class KafkaRole(str, Enum):
    """Role of a code unit in the pub-sub system"""
    PRODUCER = "producer"
    CONSUMER = "consumer"
    NEITHER = "neither"

    @property
    def suffix(self) -> str:
        """Class-name suffix carried by units of this role"""
        return self.value.capitalize()


# =============================================================================
# Relation
# =============================================================================

@dataclass
class Relation:
    """Producers and consumers of one topic"""
    topic: str
    producers: Set[str] = field(default_factory=set)
    consumers: Set[str] = field(default_factory=set)

    def add_producer(self, service: str) -> None:
        self.producers.add(service)

    def add_consumer(self, service: str) -> None:
        self.consumers.add(service)

    def add(self, role: KafkaRole, service: str) -> None:
        """Record service under the set selected by role"""
        if role is KafkaRole.PRODUCER:
            self.add_producer(service)
        elif role is KafkaRole.CONSUMER:
            self.add_consumer(service)
        else:
            raise ValueError(f"Cannot add service with role {role.value!r}")

    def is_empty(self) -> bool:
        return not self.producers and not self.consumers

    def is_full(self) -> bool:
        return bool(self.producers) and bool(self.consumers)

    def to_dict(self) -> Dict:
        return {
            'topic': self.topic,
            'producers': sorted(self.producers),
            'consumers': sorted(self.consumers),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Relation':
        return cls(
            topic=data['topic'],
            producers=set(data.get('producers', [])),
            consumers=set(data.get('consumers', [])),
        )


# =============================================================================
# Topology Model
# =============================================================================

class TopologyModel:
    """Relations of a run, keyed by topic, in catalog order"""

    def __init__(self):
        self._relations: Dict[str, Relation] = {}
        self.metadata: Dict = {}

    @classmethod
    def from_topics(cls, topics: Iterable[str]) -> 'TopologyModel':
        """Create one empty relation per distinct topic"""
        model = cls()
        for topic in topics:
            if topic not in model._relations:
                model._relations[topic] = Relation(topic=topic)
        return model

    def copy_empty(self) -> 'TopologyModel':
        return TopologyModel.from_topics(self.topics)

    # Container protocol
    def __iter__(self) -> Iterator[Relation]:
        return iter(self._relations.values())

    def __len__(self) -> int:
        return len(self._relations)

    def __contains__(self, topic: str) -> bool:
        return topic in self._relations

    @property
    def topics(self) -> List[str]:
        return list(self._relations)

    def get(self, topic: str) -> Optional[Relation]:
        return self._relations.get(topic)

    # Mutation
    def merge(self, other: 'TopologyModel') -> None:
        """Union the producers and consumers of other into this model"""
        for relation in other:
            self.merge_relation(relation)

    def merge_relation(self, relation: Relation) -> None:
        target = self._relations.get(relation.topic)
        if target is None:
            target = self._relations[relation.topic] = Relation(topic=relation.topic)
        target.producers |= relation.producers
        target.consumers |= relation.consumers

    # Query methods
    def get_orphan_topics(self) -> List[str]:
        return [r.topic for r in self if r.is_empty()]

    def get_services(self) -> Set[str]:
        services = set()
        for relation in self:
            services |= relation.producers | relation.consumers
        return services

    def get_topics_produced_by(self, service: str) -> List[str]:
        return [r.topic for r in self if service in r.producers]

    def get_topics_consumed_by(self, service: str) -> List[str]:
        return [r.topic for r in self if service in r.consumers]

    def summary_lines(self) -> List[str]:
        """One diagnostic line per relation"""
        lines = []
        for relation in self:
            consumers = "".join(f" {c} " for c in sorted(relation.consumers))
            producers = "".join(f" {p} " for p in sorted(relation.producers))
            lines.append(f"Consumers: {consumers}---  Topic: {relation.topic} --- Producers:{producers}")
        return lines

    # Serialization
    def to_dict(self) -> Dict:
        return {
            'metadata': self.metadata,
            'relations': [r.to_dict() for r in self],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'TopologyModel':
        model = cls()
        model.metadata = dict(data.get('metadata', {}))
        for item in data.get('relations', []):
            model.merge_relation(Relation.from_dict(item))
        return model

    def get_statistics(self) -> Dict:
        return {
            'num_topics': len(self),
            'num_services': len(self.get_services()),
            'num_orphan_topics': len(self.get_orphan_topics()),
            'num_full_relations': sum(1 for r in self if r.is_full()),
            'num_producer_links': sum(len(r.producers) for r in self),
            'num_consumer_links': sum(len(r.consumers) for r in self),
        }

    def __repr__(self) -> str:
        stats = self.get_statistics()
        return (f"TopologyModel(topics={stats['num_topics']}, "
                f"services={stats['num_services']}, full={stats['num_full_relations']})")
