"""Per-run configuration for the Pocket Lisp evaluator."""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict

import yaml


@dataclass(frozen=True)
class PLispOptions:
    """
    Options read by the evaluator on every step of one evaluation run.

    Attributes:
        max_native_frames: Maximum number of host frames shown in a native error trace
        trace_execution: Emit a step-by-step execution trace
    """
    max_native_frames: int = 20
    trace_execution: bool = False

    def __post_init__(self) -> None:
        if self.max_native_frames < 0:
            raise ValueError(f"max_native_frames cannot be negative: {self.max_native_frames}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PLispOptions':
        """
        Build options from a mapping, rejecting unknown keys.

        Args:
            data: Mapping of option names to values

        Returns:
            PLispOptions with defaults for missing keys

        Raises:
            ValueError: If the mapping has unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown options: {', '.join(unknown)}")

        max_native_frames = data.get('max_native_frames', cls.max_native_frames)
        if isinstance(max_native_frames, bool) or not isinstance(max_native_frames, int):
            raise ValueError(f"max_native_frames must be an integer, got {max_native_frames!r}")

        trace_execution = data.get('trace_execution', cls.trace_execution)
        if not isinstance(trace_execution, bool):
            raise ValueError(f"trace_execution must be true or false, got {trace_execution!r}")

        return cls(max_native_frames=max_native_frames, trace_execution=trace_execution)

    @classmethod
    def load_from_file(cls, config_path: str) -> 'PLispOptions':
        """Load options from a YAML file."""
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if data is None:
            return cls()

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")

        return cls.from_dict(data)

    def replace(self, **changes: Any) -> 'PLispOptions':
        """Return a copy with the given options changed; None values are ignored."""
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        current.update({k: v for k, v in changes.items() if v is not None})
        return PLispOptions.from_dict(current)
