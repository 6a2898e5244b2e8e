"""Translate traced probabilistic programs into Dimple factor graphs."""

from tracedimple.config import TranslatorConfig
from tracedimple.errors import (
    ConfigError,
    MalformedLiteralAssignmentError,
    RegistryError,
    SchemaError,
    TranslationBaseError,
    UnknownPrimitiveError,
    UnsupportedNodeError,
)
from tracedimple.factors import FactorBuilder, FactorDescriptor, EvidenceBuilder, PrimitiveRegistry, default_registry
from tracedimple.target import CodeEmitter, JavaFormatter, render_source_file
from tracedimple.translator import Translator, translate

__all__ = [
    "TranslatorConfig",
    "ConfigError",
    "MalformedLiteralAssignmentError",
    "RegistryError",
    "SchemaError",
    "TranslationBaseError",
    "UnknownPrimitiveError",
    "UnsupportedNodeError",
    "FactorBuilder",
    "FactorDescriptor",
    "EvidenceBuilder",
    "PrimitiveRegistry",
    "default_registry",
    "CodeEmitter",
    "JavaFormatter",
    "render_source_file",
    "Translator",
    "translate",
]
