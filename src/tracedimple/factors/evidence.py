"""Evidence statements: hard conditioning and soft factor weighting."""

from __future__ import annotations

import logging
from typing import Optional

from tracedimple.config import TranslatorConfig
from tracedimple.errors import SchemaError
from tracedimple.target.statements import AddFactor, SetFixedValue, TargetStatement

logger = logging.getLogger(__name__)


class EvidenceBuilder:
    """Turn ``condition`` and ``factor`` evidence into Dimple statements.

    ``condition(v)`` fixes ``v`` to the configured value; ``factor(v)`` attaches
    the configured pass-through factor with ``v`` as its only edge.
    """

    def __init__(self, config: TranslatorConfig | None = None) -> None:
        self.config = config or TranslatorConfig()

    def build(
        self,
        kind: str,
        variable: str,
        declared_type: Optional[str] = None,
    ) -> list[TargetStatement]:
        if kind == "condition":
            # Dimple has no booleans, so a Bit is fixed to 1
            if declared_type is not None and declared_type != "Bit":
                logger.warning(
                    f"condition({variable}) fixes a {declared_type} variable to "
                    f"{self.config.condition_value}"
                )
            return [SetFixedValue(name=variable, value=str(self.config.condition_value))]
        if kind == "factor":
            return [AddFactor(constructor=self.config.evidence_factor, output=variable)]
        raise SchemaError(f"Unknown evidence kind: {kind}")
