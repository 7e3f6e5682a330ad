from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass
class MethodCall:
    name: str
    args: list[Any] = field(default_factory=list)
    kwargs: dict[str, Any] = field(default_factory=dict)


class Definition:
    """Describes how to construct and post-configure one service.

    - `type`: class object, dotted import path (``"pkg.mod.Class"`` or
      ``"pkg.mod:Outer.Inner"``) or a reference to either.
    - `arguments` / `keyword_arguments`: constructor arguments.
    - `method_calls`: methods invoked on the new instance, in order.
    - `tags`: inert metadata, see `Container.find_tagged`.

    Every mutator returns the definition itself:

      Definition.create("memcache.Client").add_method_call("add_server", ["localhost", 11211])

    """

    def __init__(self, type: Any = None, args: Sequence[Any] = (), **kwargs: Any) -> None:
        self.type = type
        self.arguments: list[Any] = []
        self.keyword_arguments: dict[str, Any] = {}
        self.method_calls: list[MethodCall] = []
        self.tags: dict[str, dict[str, Any]] = {}
        self.add_arguments(args, **kwargs)

    @classmethod
    def create(cls, type: Any, args: Sequence[Any] = (), **kwargs: Any) -> Definition:
        return cls(type, args, **kwargs)

    def set_type(self, type: Any) -> Definition:
        self.type = type
        return self

    def add_arguments(self, args: Sequence[Any] = (), **kwargs: Any) -> Definition:
        """Merge constructor arguments by position and by name.

        Positions present in `args` overwrite existing ones, positions past the
        current end are appended, and existing positions not covered are kept.
        """
        for index, value in enumerate(args):
            if index < len(self.arguments):
                self.arguments[index] = value
            else:
                self.arguments.append(value)
        self.keyword_arguments.update(kwargs)
        return self

    def set_argument(self, index: int | str, value: Any) -> Definition:
        """Overwrite one constructor argument.

        An `int` addresses a positional argument; `len(arguments)` appends and any
        other out-of-range or negative index raises `IndexError`. A `str`
        addresses a keyword argument.
        """
        if isinstance(index, str):
            self.keyword_arguments[index] = value
            return self

        if index < 0 or index > len(self.arguments):
            msg = f"Argument index {index} out of range for {len(self.arguments)} argument(s)"
            raise IndexError(msg)

        if index == len(self.arguments):
            self.arguments.append(value)
        else:
            self.arguments[index] = value
        return self

    def add_method_call(self, method: str, args: Sequence[Any] = (), **kwargs: Any) -> Definition:
        self.method_calls.append(MethodCall(method, list(args), dict(kwargs)))
        return self

    def tag(self, name: str, attributes: dict[str, Any] | None = None) -> Definition:
        self.tags[name] = dict(attributes or {})
        return self

    def has_tag(self, name: str) -> bool:
        return name in self.tags

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(type={self.type!r}, arguments={self.arguments!r}, "
            f"keyword_arguments={self.keyword_arguments!r}, method_calls={self.method_calls!r}, "
            f"tags={self.tags!r})"
        )


@dataclass(frozen=True)
class Param:
    """Registers `value` as a plain parameter.

    Use it for values the container would otherwise interpret: callables,
    definitions, or strings starting with ``@``.

      container.set("finder", Param(str.find))

    """

    value: Any


@dataclass(frozen=True)
class Reference:
    """Explicit reference to another entry, same as the string ``"@" + id``.

    Unlike the string form it cannot be confused with a literal string.
    """

    id: str

    def __str__(self) -> str:
        return f"@{self.id}"


class Concat:
    """A string parameter composed from literal parts and references.

      container.set("session_path", Concat("tcp://", "@host", ":", "@port"))

    Built lazily like a service, then cached.
    """

    def __init__(self, *parts: Any) -> None:
        self.parts = parts

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self.parts!r}"
