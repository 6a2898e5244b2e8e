"""Registry mapping primitive names to descriptor producers."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from tracedimple.errors import RegistryError, UnknownPrimitiveError
from tracedimple.factors.descriptor import FactorDescriptor

logger = logging.getLogger(__name__)

Producer = Callable[[FactorDescriptor], None]

ERP_PREFIX = "wrapped_"


class PrimitiveRegistry:
    """Statically registered producers with memoized, lock-guarded resolution.

    Tracers name ERPs ``wrapped_<erp>``; a name that is not registered
    itself resolves to the producer registered under the bare ERP name.
    """

    def __init__(self, producers: Optional[dict[str, Producer]] = None) -> None:
        self._producers: dict[str, Producer] = {}
        self._resolved: dict[str, Producer] = {}
        self._lock = threading.Lock()
        for name, producer in (producers or {}).items():
            self.register(name, producer)

    def register(self, name: str, producer: Producer, *, replace: bool = False) -> None:
        if not name:
            raise RegistryError("Primitive name must be non-empty.")
        if not callable(producer):
            raise RegistryError(f"Producer for {name} must be callable.")
        with self._lock:
            if name in self._producers and not replace:
                raise RegistryError(f"Primitive already registered: {name}")
            self._producers[name] = producer
            self._resolved.pop(name, None)
            self._resolved.pop(f"{ERP_PREFIX}{name}", None)

    def primitive(self, name: str) -> Callable[[Producer], Producer]:
        """Decorator form of ``register``."""

        def decorator(producer: Producer) -> Producer:
            self.register(name, producer)
            return producer

        return decorator

    def names(self) -> list[str]:
        return sorted(self._producers)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            self.resolve(name)
        except UnknownPrimitiveError:
            return False
        return True

    def resolve(self, name: str) -> Producer:
        producer = self._resolved.get(name)
        if producer is not None:
            logger.debug(f"Primitive cache hit: {name}")
            return producer
        with self._lock:
            producer = self._resolved.get(name)
            if producer is None:
                producer = self._lookup(name)
                self._resolved[name] = producer
                logger.debug(f"Resolved primitive: {name}")
        return producer

    def describe(self, descriptor: FactorDescriptor) -> FactorDescriptor:
        """Run the producer for ``descriptor.primitive`` and apply defaults."""

        producer = self.resolve(descriptor.primitive)
        producer(descriptor)
        descriptor.finalize()
        return descriptor

    def preload(self) -> None:
        """Resolve every registered name up front."""

        for name in self.names():
            self.resolve(name)
        logger.info(f"Preloaded {len(self._resolved)} primitives")

    def _lookup(self, name: str) -> Producer:
        producer = self._producers.get(name)
        if producer is not None:
            return producer
        if name.startswith(ERP_PREFIX):
            producer = self._producers.get(name[len(ERP_PREFIX):])
            if producer is not None:
                return producer
        raise UnknownPrimitiveError(name)


def default_registry() -> PrimitiveRegistry:
    """Fresh registry holding the built-in producers."""

    from tracedimple.factors.builtins import BUILTIN_PRODUCERS

    return PrimitiveRegistry(BUILTIN_PRODUCERS)
