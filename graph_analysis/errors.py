"""
Exceptions raised by the analysis engine.
"""


class GraphAnalysisError(Exception):
    """Base exception for the graph analysis package."""


class ConfigurationError(GraphAnalysisError):
    """Raised when settings are invalid (bad regex, malformed tags, ...)."""


class UnknownAlgorithmError(ConfigurationError):
    """Raised when an algorithm name is not part of the registry."""

    def __init__(self, name: str):
        super().__init__(f"Unknown analysis algorithm: {name!r}")
        self.name = name
