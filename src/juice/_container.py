from __future__ import annotations

import importlib
import inspect
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from ._definition import Concat, Definition, MethodCall, Param, Reference
from ._errors import CircularDependencyError, NotFoundError, ResolutionError


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    Factory = Callable[["Container"], Any]
    Buildable = Factory | Definition | Concat


class EntryKind(Enum):
    LITERAL = "literal"
    DEFINITION = "definition"
    ALIAS = "alias"


@runtime_checkable
class ServiceProvider(Protocol):
    def register(self, container: Container) -> None: ...


def classify(value: Any) -> tuple[EntryKind, Any]:
    """Decide how a registered value is stored.

    Returns the entry kind and the form kept for it: the unwrapped literal, the
    buildable itself, or the alias target id.
    """
    if isinstance(value, Param):
        return EntryKind.LITERAL, value.value

    if callable(value) or isinstance(value, (Definition, Concat)):
        return EntryKind.DEFINITION, value

    if isinstance(value, Reference):
        return EntryKind.ALIAS, value.id

    if isinstance(value, str) and value.startswith("@"):
        return EntryKind.ALIAS, value[1:]

    return EntryKind.LITERAL, value


class Container:
    """Minimal IoC container.

    - parameters: plain values, returned as registered
    - services: callables taking the container, or `Definition` objects,
      built on first `get` and cached
    - aliases: ``"@other"`` strings (or `Reference`), resolved to `other` on every `get`
    - references: ``"@id"`` strings inside definition arguments are resolved first.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})
        self._definitions: dict[str, Buildable] = {}
        self._aliases: dict[str, str] = {}
        self._resolving: list[str] = []
        self._instantiator = Instantiator(self)

    def set(self, id: str, value: Any) -> None:
        """Register a parameter, a service or an alias, replacing any previous entry.

        Example:
          container.set("port", 11211)
          container.set("cache", Definition.create("memcache.Client", ["@servers"]))
          container.set("db", lambda c: connect(c.get("dsn")))
          container.set("default_cache", "@cache")

        """
        kind, entry = classify(value)

        # Classification replaces, so a cached instance of an old definition goes too
        self.unset(id)

        if kind is EntryKind.ALIAS:
            self._aliases[id] = entry
        elif kind is EntryKind.DEFINITION:
            self._definitions[id] = entry
        else:
            self._values[id] = entry

    def get(self, id: str) -> Any:
        """Resolve `id` to its value, building and caching services on first use.

        Raises `NotFoundError` for unknown ids and `CircularDependencyError` when
        `id` is requested again while it is still being resolved.
        """
        if id in self._resolving:
            chain = [*self._resolving, id]
            logger.debug("Circular dependency while resolving %r", id)
            raise CircularDependencyError(chain)

        self._resolving.append(id)
        try:
            return self._resolve(id)
        finally:
            self._resolving.pop()

    def _resolve(self, id: str) -> Any:
        if id in self._aliases:
            target = self._aliases[id]
            logger.debug("Resolving alias %r -> %r", id, target)
            return self.get(target)

        if id in self._values:
            return self._values[id]

        if id in self._definitions:
            logger.debug("Building service %r", id)
            instance = self.build(self._definitions[id])
            self._values[id] = instance
            return instance

        raise NotFoundError(id)

    def has(self, id: str) -> bool:
        return id in self._values or id in self._definitions or id in self._aliases

    def unset(self, id: str) -> None:
        self._values.pop(id, None)
        self._definitions.pop(id, None)
        self._aliases.pop(id, None)

    def raw(self, id: str) -> Any:
        """Return the registered form of `id` without building anything.

        Definitions win over their cached instances, so a built service still
        reports its callable or `Definition`. Aliases report the target id.
        """
        if id in self._definitions:
            return self._definitions[id]

        if id in self._values:
            return self._values[id]

        if id in self._aliases:
            return self._aliases[id]

        raise NotFoundError(id)

    def build(self, definition: Buildable) -> Any:
        """Build a new instance from a callable, a `Definition` or a `Concat`.

        Callables receive the container when they accept a positional argument
        and are called without arguments otherwise. Nothing is cached; use `get`
        for memoized services.
        """
        if callable(definition):
            return definition(*self._factory_args(definition))

        if isinstance(definition, Definition):
            return self._instantiator.instantiate(definition)

        if isinstance(definition, Concat):
            return "".join(str(part) for part in self.resolve_value(list(definition.parts)))

        msg = f"Cannot build {type(definition).__name__}: expected a callable, Definition or Concat"
        raise TypeError(msg)

    def _factory_args(self, factory: Callable[..., Any]) -> tuple[Any, ...]:
        try:
            inspect.signature(factory).bind(self)
        except TypeError:
            return ()
        except ValueError:
            # no introspectable signature, e.g. some builtins
            return (self,)
        return (self,)

    def resolve_value(self, value: Any) -> Any:
        """Replace references in `value` with the entries they point to.

        Walks lists, tuples and dict values at any depth. ``"@id"`` strings and
        `Reference` objects become ``get(id)``; everything else is kept as is.
        """
        if isinstance(value, Reference):
            return self.get(value.id)

        if isinstance(value, str):
            return self.get(value[1:]) if value.startswith("@") else value

        if isinstance(value, list):
            return [self.resolve_value(item) for item in value]

        if type(value) is tuple:
            return tuple(self.resolve_value(item) for item in value)

        if isinstance(value, dict):
            return {key: self.resolve_value(item) for key, item in value.items()}

        return value

    def register(self, *providers: ServiceProvider) -> Container:
        """Let each provider add its entries, in order."""
        for provider in providers:
            logger.debug("Registering provider %s", type(provider).__name__)
            provider.register(self)
        return self

    def find_tagged(self, name: str) -> dict[str, dict[str, Any]]:
        """Map the id of every definition tagged `name` to the tag attributes."""
        return {
            id: definition.tags[name]
            for id, definition in self._definitions.items()
            if isinstance(definition, Definition) and definition.has_tag(name)
        }

    def keys(self) -> list[str]:
        return list(dict.fromkeys([*self._values, *self._definitions, *self._aliases]))

    def __getitem__(self, id: str) -> Any:
        return self.get(id)

    def __setitem__(self, id: str, value: Any) -> None:
        self.set(id, value)

    def __delitem__(self, id: str) -> None:
        self.unset(id)

    def __contains__(self, id: object) -> bool:
        return isinstance(id, str) and self.has(id)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())


class Instantiator:
    def __init__(self, resolver: Container) -> None:
        self._resolver = resolver

    def instantiate(self, definition: Definition) -> object:
        cls = self._load_type(self._resolver.resolve_value(definition.type))

        args = self._resolver.resolve_value(definition.arguments)
        kwargs = self._resolver.resolve_value(definition.keyword_arguments)
        instance = cls(*args, **kwargs)

        for call in definition.method_calls:
            self._invoke(instance, call)

        return instance

    def _invoke(self, instance: object, call: MethodCall) -> None:
        try:
            method = getattr(instance, call.name)
        except AttributeError as e:
            msg = f"{type(instance).__name__} has no method {call.name!r}"
            raise ResolutionError(msg) from e

        args = self._resolver.resolve_value(call.args)
        kwargs = self._resolver.resolve_value(call.kwargs)
        method(*args, **kwargs)

    def _load_type(self, target: Any) -> Callable[..., object]:
        if isinstance(target, str):
            return _import_string(target)

        if not callable(target):
            msg = f"Definition type must be a class, a callable or an import path, got {target!r}"
            raise TypeError(msg)

        return target


def _import_string(path: str) -> Any:
    """Import ``"pkg.mod.Class"`` or ``"pkg.mod:Outer.Inner"``; bare names come from builtins."""
    module_name, sep, qualname = path.partition(":")
    if not sep:
        module_name, _, qualname = path.rpartition(".")
        module_name = module_name or "builtins"

    try:
        obj: Any = importlib.import_module(module_name)
        for attr in qualname.split("."):
            obj = getattr(obj, attr)
    except (ImportError, AttributeError) as e:
        msg = f"Cannot import type {path!r}: {e}"
        raise ResolutionError(msg) from e

    return obj
