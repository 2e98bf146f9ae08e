"""
Solver configuration.

Defaults live on SolverConfig. load_config() reads a .env file (if any)
and TSP_ORACLE_* environment variables on top of them; command-line
flags are applied last by the CLI.
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from tsporacle.errors import InvalidInputError

ENV_PREFIX = "TSP_ORACLE_"
STRATEGIES = ("adaptive", "exhaustive")
OPTIONAL_FIELDS = ("max_starts", "timeout")
INT_FIELDS = ("max_starts", "two_opt_iterations", "max_rounds", "neighbor_count", "max_points")


@dataclass(frozen=True)
class SolverConfig:
    strategy: str = "adaptive"
    max_starts: Optional[int] = 5
    two_opt_iterations: int = 1000
    initial_ratio: float = 0.90
    step: float = 0.07
    max_rounds: int = 200
    neighbor_count: int = 10
    progress_interval: float = 0.5
    timeout: Optional[float] = None
    max_points: int = 200

    def validate(self) -> "SolverConfig":
        if self.strategy not in STRATEGIES:
            raise InvalidInputError(f"Unknown strategy {self.strategy!r}, expected one of {STRATEGIES}")
        if self.max_starts is not None and self.max_starts < 1:
            raise InvalidInputError("max_starts must be at least 1")
        if not 0.0 < self.initial_ratio <= 1.0:
            raise InvalidInputError("initial_ratio must be in (0, 1]")
        if not 0.0 < self.step < 1.0:
            raise InvalidInputError("step must be in (0, 1)")
        if self.max_rounds < 1:
            raise InvalidInputError("max_rounds must be at least 1")
        if self.two_opt_iterations < 0:
            raise InvalidInputError("two_opt_iterations must not be negative")
        if self.neighbor_count < 0:
            raise InvalidInputError("neighbor_count must not be negative")
        if self.progress_interval < 0:
            raise InvalidInputError("progress_interval must not be negative")
        if self.timeout is not None and self.timeout <= 0:
            raise InvalidInputError("timeout must be positive")
        if self.max_points < 2:
            raise InvalidInputError("max_points must be at least 2")
        return self

    def with_overrides(self, **overrides) -> "SolverConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes).validate()


def _parse(raw: str, default, name: str):
    if raw.strip().lower() in ("", "none"):
        if name in OPTIONAL_FIELDS:
            return None
        raise InvalidInputError(f"{ENV_PREFIX}{name.upper()} requires a value, got {raw!r}")
    if isinstance(default, str):
        return raw
    try:
        if name in INT_FIELDS:
            return int(raw)
        return float(raw)
    except ValueError as e:
        raise InvalidInputError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}") from e


def load_config(env_file: Optional[str] = None) -> SolverConfig:
    """
    Build a SolverConfig from the environment.

    Args:
        env_file: Optional path to a .env file; ./.env is used when it exists

    Returns:
        Validated SolverConfig
    """
    env_path = Path(env_file) if env_file else Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    defaults = SolverConfig()
    values = {}
    for f in fields(SolverConfig):
        raw = os.environ.get(ENV_PREFIX + f.name.upper())
        if raw is not None:
            values[f.name] = _parse(raw, getattr(defaults, f.name), f.name)
    return replace(defaults, **values).validate()
