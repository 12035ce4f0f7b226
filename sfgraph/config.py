"""Solver configuration and YAML loading."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


@dataclass
class SolverConfig:
    """Tuning parameters for a GRASP run over one or more instances."""

    # RCL greediness: 0.0 always takes the cheapest pair, 1.0 picks uniformly
    alpha: float = 1.0

    # Number of construction + local-search rounds per instance
    iterations: int = 10

    # Master seed; None draws from system entropy
    seed: Optional[int] = None

    # File suffix of benchmark instances when scanning a directory
    suffix: str = ".stp"

    def validate(self) -> "SolverConfig":
        """Check value ranges.

        Raises:
            ValueError: If any field is out of range.
        """
        if not 0.0 <= float(self.alpha) <= 1.0:
            raise ValueError(f"alpha must be within [0, 1], got {self.alpha}")
        if int(self.iterations) < 1:
            raise ValueError(f"iterations must be >= 1, got {self.iterations}")
        if self.seed is not None and int(self.seed) < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")
        if not self.suffix:
            raise ValueError("suffix must not be empty")
        return self

    def merged(self, **overrides: Any) -> "SolverConfig":
        """Return a copy with every non-None override applied."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **updates).validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def config_from_dict(data: Dict[str, Any]) -> SolverConfig:
    """Build a validated config from a plain mapping.

    Raises:
        ValueError: On unknown keys.
    """
    known = {f.name for f in fields(SolverConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(
            f"Unknown solver config keys: {', '.join(unknown)}. "
            f"Valid keys are: {', '.join(sorted(known))}"
        )
    return SolverConfig(**data).validate()


def load_config(path: Union[str, Path]) -> SolverConfig:
    """Load a :class:`SolverConfig` from a YAML file.

    An empty document yields the defaults.

    Raises:
        ValueError: If the YAML is malformed, not a mapping, or holds unknown keys.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from None
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The solver config YAML must map to a dictionary at top-level.")
    return config_from_dict(data)


# Global default configuration
DEFAULT_CONFIG = SolverConfig()
