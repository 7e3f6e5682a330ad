"""Minimal inversion-of-control container.

This package provides a small container storing named parameters, lazily built
services and aliases, resolving references between them on demand and
detecting circular dependencies.

Exports:
- `Container`: registry and resolver (`set`, `get`, `has`, `unset`, `raw`, `build`).
- `Definition`: fluent description of a service (type, arguments, method calls, tags).
- `Param`: registers a value literally, even if it looks like a service or an alias.
- `Reference`: explicit reference to another entry, equivalent to ``"@id"``.
- `Concat`: string parameter composed from literals and references.
- `ServiceProvider`: protocol for modules registering entries via ``register(container)``.
- `ResolutionError`, `NotFoundError`, `CircularDependencyError`: resolution failures.
"""

from ._container import Container, EntryKind, ServiceProvider
from ._definition import Concat, Definition, MethodCall, Param, Reference
from ._errors import CircularDependencyError, NotFoundError, ResolutionError


__all__ = [
    "CircularDependencyError",
    "Concat",
    "Container",
    "Definition",
    "EntryKind",
    "MethodCall",
    "NotFoundError",
    "Param",
    "Reference",
    "ResolutionError",
    "ServiceProvider",
]
