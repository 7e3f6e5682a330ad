from __future__ import annotations

from collections.abc import Sequence


class ResolutionError(RuntimeError):
    pass


class NotFoundError(ResolutionError, KeyError):
    """Raised when an id is not registered as a value, definition or alias."""

    def __init__(self, id: str) -> None:
        self.id = id
        super().__init__(f'Identifier "{id}" is not defined.')

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])


class CircularDependencyError(ResolutionError):
    """Raised when an id is requested again while it is still being resolved.

    The message is the resolution chain, e.g. ``a -> b -> a``.
    """

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__(" -> ".join(self.chain))
