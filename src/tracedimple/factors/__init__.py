"""Primitive registry and factor/evidence builders."""

from tracedimple.factors.builder import FactorBuilder
from tracedimple.factors.descriptor import TARGET_TYPES, FactorDescriptor
from tracedimple.factors.evidence import EvidenceBuilder
from tracedimple.factors.registry import PrimitiveRegistry, Producer, default_registry

__all__ = [
    "FactorBuilder",
    "FactorDescriptor",
    "TARGET_TYPES",
    "EvidenceBuilder",
    "PrimitiveRegistry",
    "Producer",
    "default_registry",
]
