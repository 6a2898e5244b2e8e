"""Custom exceptions for the trace-to-Dimple translator."""

from __future__ import annotations


class TranslationBaseError(Exception):
    """Base exception for translation failures."""


class ConfigError(TranslationBaseError):
    """Raised when a translator configuration is invalid."""


class SchemaError(TranslationBaseError):
    """Raised when an IR node or payload is malformed."""


class RegistryError(TranslationBaseError):
    """Raised when primitive registry operations fail."""


class UnknownPrimitiveError(TranslationBaseError):
    """Raised when no descriptor producer exists for a primitive."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Can't yet translate function \"{name}\" to Dimple.")


class UnsupportedNodeError(TranslationBaseError):
    """Raised when the translator meets an IR node it has no case for."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Haven't implemented translation for node of type {kind}")


class MalformedLiteralAssignmentError(TranslationBaseError):
    """Raised when a literal initializer has no emission strategy."""

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        message = f"Cannot emit literal assignment for variable {name}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
