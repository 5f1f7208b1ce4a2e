"""
Exceptions raised by the topology extraction engine.

- ConfigurationError: the run cannot start or continue (fatal)
- DiscoveryError: one service's sources cannot be scanned (service skipped)
- UnresolvedUnitError: a code unit has no indexed definition (unit skipped)
- ExportError: the output file cannot be written
"""


class TopologyError(Exception):
    """Base class for all topology extraction errors"""


class ConfigurationError(TopologyError):
    """Project root, settings or topic catalog are unusable"""


class DiscoveryError(TopologyError):
    """A directory under a service's sources could not be listed"""


class UnresolvedUnitError(TopologyError, LookupError):
    """A code unit reference does not resolve to a parsed definition"""

    def __init__(self, unit: str):
        super().__init__(f"No definition indexed for unit: {unit}")
        self.unit = unit


class ExportError(TopologyError):
    """The topology could not be written to its destination"""
