from __future__ import annotations
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from .diagnostics import log
from .exceptions import ModulusMismatchError
from .integral import Storage
from .intmod import Mod, mod_val

I = TypeVar('I')
A = TypeVar('A')


class SomeMod(Generic[I]):
    """A modular value whose modulus is only known at runtime.

    ``SomeMod`` pairs a :py:class:`modular.Mod` value with its modulus, so the
    modulus can be recovered (``x.modulus()``) without knowing it statically.
    Two ``SomeMod``s are only equal when both their moduli and values agree;
    ordering and arithmetic raise ``ModulusMismatchError`` unless the moduli agree.
    Plain ``int`` operands are reduced by the modulus of the other operand.
    """
    __value : Mod[I]

    def __init__(self, value : Mod[I]) -> None:
        if not isinstance(value, Mod):
            raise TypeError(f'`SomeMod` expects a modular value, but got {value!r}')
        self.__value = value

    def __repr__(self) -> str:
        return f'SomeMod({self.__value!s}, {self.modulus()!r})'

    def __str__(self) -> str:
        return str(self.__value)

    def modulus(self) -> int:
        """Modulus of the wrapped value."""
        return type(self.__value).modulus()

    def value(self) -> Mod[I]:
        """The wrapped modular value."""
        return self.__value

    def __int__(self) -> int:
        return int(self.__value)

    def __hash__(self) -> int:
        return hash((self.modulus(), int(self.__value)))

    def __eq__(self, other : Any) -> bool:
        if isinstance(other, SomeMod):
            return self.modulus() == other.modulus() and int(self) == int(other)
        else:
            return False

    # some private functions useful when defining operators

    def __operand(self, op : str, other : Any) -> Optional[Mod[I]]:
        cls = type(self.__value)
        if isinstance(other, SomeMod):
            if other.modulus() != self.modulus():
                raise ModulusMismatchError(f'Operator `{op}` cannot be called on modular values of unequal moduli {self!r} and {other!r}.')
            return cls.convert(other.__value)
        elif isinstance(other, int) and not isinstance(other, bool):
            return cls(other)
        else:
            return None

    def __binop(self, op : str, fn : Callable[[Mod[I], Mod[I]], A], other : Any) -> Union[A, Any]:
        o = self.__operand(op, other)
        if o is None:
            return NotImplemented
        return fn(self.__value, o)

    def __rbinop(self, op : str, fn : Callable[[Mod[I], Mod[I]], A], other : Any) -> Union[A, Any]:
        return self.__binop(op, lambda s, o: fn(o, s), other)

    # ordering

    def __lt__(self, other : SomeMod[I]) -> bool:
        return self.__binop("<", lambda s, o: s < o, other)
    def __le__(self, other : SomeMod[I]) -> bool:
        return self.__binop("<=", lambda s, o: s <= o, other)
    def __gt__(self, other : SomeMod[I]) -> bool:
        return self.__binop(">", lambda s, o: s > o, other)
    def __ge__(self, other : SomeMod[I]) -> bool:
        return self.__binop(">=", lambda s, o: s >= o, other)

    # arithmetic

    def __pos__(self) -> SomeMod[I]:
        return self
    def __neg__(self) -> SomeMod[I]:
        return SomeMod(-self.__value)
    def __add__(self, other : Union[SomeMod[I], int]) -> SomeMod[I]:
        return self.__binop("+", lambda s, o: SomeMod(s + o), other)
    def __radd__(self, other : int) -> SomeMod[I]:
        return self.__rbinop("+", lambda o, s: SomeMod(o + s), other)
    def __sub__(self, other : Union[SomeMod[I], int]) -> SomeMod[I]:
        return self.__binop("-", lambda s, o: SomeMod(s - o), other)
    def __rsub__(self, other : int) -> SomeMod[I]:
        return self.__rbinop("-", lambda o, s: SomeMod(o - s), other)
    def __mul__(self, other : Union[SomeMod[I], int]) -> SomeMod[I]:
        return self.__binop("*", lambda s, o: SomeMod(s * o), other)
    def __rmul__(self, other : int) -> SomeMod[I]:
        return self.__rbinop("*", lambda o, s: SomeMod(o * s), other)
    def __truediv__(self, other : Union[SomeMod[I], int]) -> SomeMod[I]:
        return self.__binop("/", lambda s, o: SomeMod(s / o), other)
    def __floordiv__(self, other : Union[SomeMod[I], int]) -> SomeMod[I]:
        return self.__binop("//", lambda s, o: SomeMod(s // o), other)
    def __mod__(self, other : Union[SomeMod[I], int]) -> SomeMod[I]:
        return self.__binop("%", lambda s, o: SomeMod(s % o), other)

    def inverse(self) -> SomeMod[I]:
        """See :py:meth:`modular.Mod.inverse`."""
        return SomeMod(self.__value.inverse())


def some_mod_val(value : Any, n : Any, storage : Storage = int) -> Optional[SomeMod[Any]]:
    """Convert an integral ``value`` into a modular value with the runtime modulus ``n``.

    Returns ``None`` if ``n`` is not a strictly positive integer."""
    if not isinstance(n, int) or isinstance(n, bool) or n <= 0:
        log(f'rejected runtime modulus {n!r}')
        return None
    return SomeMod(mod_val(value, n, storage))
