"""
Topic Matcher

Heuristic deciding whether a code unit name refers to a canonical topic.

The words of the unit's class name between the messaging package marker and
its role suffix are compared against the topic name; at least three out of
four words must occur in the topic:

    matches("devicemanagement", "com.acme.kafka.DeviceManagementConsumer", "Consumer")
    -> words ["Device", "Management"], 2/2 hits -> True
"""

import logging
from typing import List

logger = logging.getLogger(__name__)

KAFKA_MARKER = "kafka"
MATCH_THRESHOLD = 3 / 4


def split_words(text: str) -> List[str]:
    """Split text before each upper-case character.

    A leading lower-case run becomes the first segment; an empty string has
    no segments.
    """
    segments: List[str] = []
    current = ""
    for char in text:
        if char.isupper() and current:
            segments.append(current)
            current = char
        else:
            current += char
    if current:
        segments.append(current)
    return segments


def meaningful_portion(unit_name: str, suffix: str, marker: str = KAFKA_MARKER) -> str:
    """Part of unit_name after the marker and before the last suffix.

    Raises ValueError when the name lacks the marker or the suffix does not
    follow it.
    """
    marker_at = unit_name.find(marker)
    if marker_at < 0:
        raise ValueError(f"Unit name {unit_name!r} has no {marker!r} marker")
    # skip the separator following the marker
    start = marker_at + len(marker) + 1
    end = unit_name.rfind(suffix)
    if end < start:
        raise ValueError(f"Unit name {unit_name!r} has no {suffix!r} after {marker!r}")
    return unit_name[start:end]


def matches(topic: str, unit_name: str, suffix: str) -> bool:
    """Check whether unit_name corresponds to topic for the given role suffix"""
    if suffix not in unit_name:
        return False

    try:
        portion = meaningful_portion(unit_name, suffix)
    except ValueError as e:
        logger.debug(f"Rejecting unit name: {e}")
        return False

    segments = split_words(portion)
    if not segments:
        return False

    hits = sum(1 for segment in segments if segment.lower() in topic)
    return hits / len(segments) >= MATCH_THRESHOLD
