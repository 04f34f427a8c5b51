"""
Configuration for the graph analysis engine.

Settings are loaded from the YAML configuration file and frozen for the
duration of an analysis session.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Pattern, Tuple

import yaml

from .algorithms.models import Subtype
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DECIMALS = 4
MD_EXTENSION = ".md"

DEFAULT_ALGS_TO_SHOW = (
    Subtype.ADAMIC_ADAR,
    Subtype.JACCARD,
    Subtype.CO_CITATIONS,
    Subtype.LABEL_PROPAGATION,
    Subtype.BETWEENNESS_CENTRALITY,
)


@dataclass(frozen=True)
class GraphAnalysisSettings:
    """Immutable settings consumed by the graph builder and the algorithms."""
    vault_path: Path = Path("vault")

    # Graph inclusion filters
    all_file_extensions: bool = True
    add_unresolved: bool = True
    exclusion_regex: str = ""
    exclusion_tags: Tuple[str, ...] = ()

    # Algorithms
    co_tags: bool = True
    default_subtype: Subtype = Subtype.CO_CITATIONS
    algs_to_show: Tuple[Subtype, ...] = DEFAULT_ALGS_TO_SHOW
    algorithm_renames: Dict[str, str] = field(default_factory=dict)
    label_propagation_iterations: int = 10
    louvain_resolution: float = 10.0
    louvain_seed: Optional[int] = None

    # Display
    no_zero: bool = True
    no_infinity: bool = True
    exclude_linked: bool = False

    debug_mode: bool = False

    def __post_init__(self):
        for tag in self.exclusion_tags:
            if not tag.startswith("#"):
                raise ConfigurationError(f"Every exclusion tag must start with '#': {tag!r}")
        if self.label_propagation_iterations < 0:
            raise ConfigurationError("label_propagation_iterations must be >= 0")

    def compile_exclusion_regex(self) -> Optional[Pattern]:
        """Compile the exclusion regex, or return None when it is empty."""
        if not self.exclusion_regex:
            return None
        try:
            return re.compile(self.exclusion_regex, re.IGNORECASE)
        except re.error as e:
            raise ConfigurationError(
                f"{self.exclusion_regex} is not a valid regular expression: {e}"
            ) from e

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "GraphAnalysisSettings":
        """Build settings from the parsed YAML configuration."""
        vault_config = config.get("vault", {}) or {}
        graph_config = config.get("graph", {}) or {}
        analysis_config = config.get("analysis", {}) or {}
        display_config = config.get("display", {}) or {}
        debug_config = config.get("debug", {}) or {}

        exclusion_tags = graph_config.get("exclusion_tags", []) or []
        if isinstance(exclusion_tags, str):
            exclusion_tags = [t.strip() for t in exclusion_tags.split(",") if t.strip()]

        algs_to_show = analysis_config.get("algs_to_show")
        if algs_to_show is None:
            algs = DEFAULT_ALGS_TO_SHOW
        else:
            algs = tuple(_parse_subtype(name) for name in algs_to_show)

        return cls(
            vault_path=Path(vault_config.get("path", "vault")),
            all_file_extensions=graph_config.get("all_file_extensions", True),
            add_unresolved=graph_config.get("add_unresolved", True),
            exclusion_regex=graph_config.get("exclusion_regex", "") or "",
            exclusion_tags=tuple(exclusion_tags),
            co_tags=analysis_config.get("co_tags", True),
            default_subtype=_parse_subtype(
                analysis_config.get("default_subtype", Subtype.CO_CITATIONS.value)
            ),
            algs_to_show=algs,
            algorithm_renames=dict(analysis_config.get("algorithm_renames", {}) or {}),
            label_propagation_iterations=int(
                analysis_config.get("label_propagation_iterations", 10)
            ),
            louvain_resolution=float(analysis_config.get("louvain_resolution", 10.0)),
            louvain_seed=analysis_config.get("louvain_seed"),
            no_zero=display_config.get("no_zero", True),
            no_infinity=display_config.get("no_infinity", True),
            exclude_linked=display_config.get("exclude_linked", False),
            debug_mode=debug_config.get("enabled", False),
        )


def _parse_subtype(name: str) -> Subtype:
    try:
        return Subtype(name)
    except ValueError:
        raise ConfigurationError(f"Unknown analysis algorithm in configuration: {name!r}") from None


def load_config(config_path: str = "config/config.yaml") -> Dict[str, Any]:
    """Load the raw configuration dictionary from a YAML file."""
    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}
    logger.debug(f"Loaded configuration from {config_path}")
    return config
