"""Translator configuration."""

from __future__ import annotations

from dataclasses import dataclass

from tracedimple.errors import ConfigError


@dataclass(frozen=True)
class TranslatorConfig:
    """Fixed names and constants baked into the emitted Dimple code."""

    graph_name: str = "myGraph"
    num_iterations: int = 10000
    belief_name: str = "belief"
    dispatcher_name: str = "random"
    condition_value: int = 1
    evidence_factor: str = "Identity"
    multiplexer_factor: str = "Multiplexer"
    alias_factor: str = "Equality"

    def __post_init__(self) -> None:
        for field_name in (
            "graph_name",
            "belief_name",
            "dispatcher_name",
            "evidence_factor",
            "multiplexer_factor",
            "alias_factor",
        ):
            value = getattr(self, field_name)
            if not value or not isinstance(value, str):
                raise ConfigError(f"TranslatorConfig.{field_name} must be a non-empty string.")
        if not isinstance(self.num_iterations, int) or isinstance(self.num_iterations, bool):
            raise ConfigError("TranslatorConfig.num_iterations must be an integer.")
        if self.num_iterations <= 0:
            raise ConfigError(
                f"TranslatorConfig.num_iterations must be positive: {self.num_iterations}"
            )
