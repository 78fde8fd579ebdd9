from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from filederive.errors import MissingSchemeError, UnknownBackendError
from filederive.templates import scheme_of

if TYPE_CHECKING:
    from filederive.config import Settings
    from filederive.storage.base import Location

_registry: dict[str, type[Location]] = {}
_registry_lock = threading.Lock()


def register_location(scheme: str, location_cls: type[Location]) -> None:
    with _registry_lock:
        _registry[scheme.lower()] = location_cls


def registered_schemes() -> list[str]:
    with _registry_lock:
        return sorted(_registry)


def location_class_for(scheme: str) -> type[Location]:
    with _registry_lock:
        location_cls = _registry.get(scheme.lower())
    if location_cls is None:
        raise UnknownBackendError(scheme)
    return location_cls


def from_uri(uri: str, settings: Settings | None = None) -> Location:
    scheme = scheme_of(uri)
    if scheme is None:
        raise MissingSchemeError(uri)
    return location_class_for(scheme)(uri, settings=settings)


__all__ = ["from_uri", "location_class_for", "register_location", "registered_schemes"]
