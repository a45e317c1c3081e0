"""The capabilities a storage type must supply to back a modular type."""

from __future__ import annotations
from typing import Any, Callable
from typing_extensions import Protocol, runtime_checkable


#: Builds a storage integer from an unbounded ``int``, e.g. ``int`` itself.
Storage = Callable[[int], Any]


@runtime_checkable
class Integral(Protocol):
    """A ``Protocol`` for integers which can back a :py:class:`modular.Mod`.

    Besides the operators below, ``%`` and ``//`` must use floor division
    semantics (as Python's ``int`` does) and ``int(x)`` must be lossless.
    Binary operators must accept a plain ``int`` as the right operand."""
    def __add__(self, other : Any) -> Any: ...
    def __mul__(self, other : Any) -> Any: ...
    def __neg__(self) -> Any: ...
    def __abs__(self) -> Any: ...
    def __mod__(self, other : Any) -> Any: ...
    def __floordiv__(self, other : Any) -> Any: ...
    def __lt__(self, other : Any) -> bool: ...
    def __index__(self) -> int: ...
    def __int__(self) -> int: ...


def signum(x : Integral) -> int:
    """``-1``, ``0`` or ``1`` according to the sign of ``x``."""
    n = int(x)
    return (n > 0) - (n < 0)


def check_storage(storage : Storage, modulus : int) -> Integral:
    """Convert ``modulus`` to the storage type, failing with ``ValueError``
    when the storage cannot hold it losslessly."""
    bound = storage(modulus)
    if not isinstance(bound, Integral):
        raise ValueError(f'{storage!r} does not produce integral values (got {bound!r}).')
    if int(bound) != modulus:
        raise ValueError(f'{modulus!r} is not representable by {storage!r} (became {bound!r}).')
    return bound
