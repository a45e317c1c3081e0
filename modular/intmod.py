from __future__ import annotations
import re
from fractions import Fraction
from math import gcd
from typing import Any, ClassVar, Dict, Generic, Iterator, List, Optional, Tuple, Type, TypeVar, Union, cast
from typing_extensions import Self

from .diagnostics import log
from .exceptions import ModulusError, NotInvertibleError
from .integral import Integral, Storage, check_storage, signum

I = TypeVar('I')
M = TypeVar('M', bound='Mod[Any]')


class Mod(Generic[I]):
    """An integer modulo ``n``, stored in an integral type ``I``.

    Each modulus is its own class, created by subclassing with the ``modulus``
    (and optionally ``storage``) class keywords::

        class Z7(Mod[int], modulus=7): pass

        Z7(10) * Z7(11) == Z7(5)
        Z7(-10) * 11 == Z7(2)

    ``Z7(value)`` reduces ``value`` into ``[0, 7)`` using floor division, so
    negative numbers wrap as expected. Arithmetic between values of the same
    class (or with a plain ``int``, which is reduced first) re-reduces its
    result. Values of different modular classes never mix: mypy rejects
    ``Z7(1) + Z5(1)`` and at runtime it raises ``TypeError``.

    ``storage`` converts an unbounded ``int`` to the storage type and defaults
    to ``int``. Any :py:class:`modular.integral.Integral` works, e.g.
    ``storage=BV.storage(8)`` for 8-bit words; intermediate results are
    computed in the storage type, so it must be wide enough to hold them.
    """
    __modulus : ClassVar[Optional[int]] = None
    __storage : ClassVar[Storage] = int
    __bound_raw : ClassVar[Any] = None
    __raw : I

    def __init_subclass__(cls, *, modulus : Optional[int] = None, storage : Optional[Storage] = None, **kwargs : Any) -> None:
        super().__init_subclass__(**kwargs)
        if modulus is None:
            if storage is not None:
                raise ModulusError(f'{cls.__name__} was given a storage type but no modulus.')
            return
        if not isinstance(modulus, int) or isinstance(modulus, bool) or modulus <= 0:
            raise ModulusError(f'`Mod` expects `modulus` to be a strictly positive integer, but was given {modulus!r}.')
        if storage is None:
            storage = cls.__storage
        try:
            bound = check_storage(storage, modulus)
        except ValueError as err:
            raise ModulusError(str(err)) from err
        cls.__modulus = modulus
        cls.__storage = storage
        cls.__bound_raw = bound

    def __init__(self, value : Union[I, int]) -> None:
        """Reduce ``value`` (an ``int`` or a value of the storage type) into the canonical range."""
        self.__raw = type(self).__reduce_raw(value)

    # construction

    @classmethod
    def __params(cls) -> Tuple[int, Storage, Any]:
        if cls.__modulus is None:
            raise TypeError(f'{cls.__name__} is not a modular type; subclass it with a `modulus=` class keyword.')
        return cls.__modulus, cls.__storage, cls.__bound_raw

    @classmethod
    def __from_raw(cls, raw : Any) -> Self:
        obj = cls.__new__(cls)
        obj.__raw = raw
        return obj

    @classmethod
    def __reduce_raw(cls, value : Any) -> Any:
        n, storage, bound = cls.__params()
        if isinstance(value, Mod):
            if type(value) is cls:
                return value.__raw
            raise TypeError(f'Cannot reinterpret {value!r} as a value modulo {n!r}.')
        if isinstance(value, int):
            return storage(value % n)
        if isinstance(value, type(bound)):
            return value % bound
        raise TypeError(f'`{cls.__name__}` expects an integer or a value of its storage type, but got {value!r}')

    @classmethod
    def __bound(cls) -> Self:
        """The modulus itself, *unreduced*. Breaks the invariant of the type;
        only for computing bounds within this module."""
        return cls.__from_raw(cls.__params()[2])

    @classmethod
    def reduce(cls, value : Union[I, int]) -> Self:
        """Wrap an ``int`` or a value of the storage type into ``cls``."""
        return cls(value)

    @classmethod
    def convert(cls, value : Any) -> Self:
        """Wrap an integer of any integral representation into ``cls``, reducing
        in the representation of ``value`` before converting to the storage type
        (e.g. a 16-bit ``BV`` into a class stored in 8-bit ``BV``s)."""
        n, storage, _ = cls.__params()
        if isinstance(value, Mod):
            value = value.__raw
        if not isinstance(value, Integral):
            raise TypeError(f'`{cls.__name__}.convert` expects an integral value, but got {value!r}')
        return cls.__from_raw(storage(int(value % n)))

    @classmethod
    def parse(cls, text : str) -> Self:
        """Read a decimal integer (digits with an optional leading ``-``, as
        ``str`` renders them) and reduce it; out of range literals wrap."""
        digits = text.strip()
        if re.fullmatch(r'-?[0-9]+', digits) is None:
            raise ValueError(f'`{cls.__name__}.parse` expects a decimal integer, but got {text!r}')
        return cls(int(digits))

    @classmethod
    def modulus(cls) -> int:
        """Modulus of the modular type."""
        return cls.__params()[0]

    # accessors and conversions

    def value(self) -> I:
        """The stored integer, in ``[0, modulus)``."""
        return self.__raw

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.__raw!r})'

    def __str__(self) -> str:
        return str(self.__raw)

    def __int__(self) -> int:
        return int(cast(Integral, self.__raw))

    def __index__(self) -> int:
        return int(self)

    def __bool__(self) -> bool:
        return int(self) != 0

    def __hash__(self) -> int:
        return hash((type(self), int(self)))

    def to_rational(self) -> Fraction:
        return Fraction(int(self), 1)

    # some private functions useful when defining operators

    def __operand(self, other : Any) -> Optional[Any]:
        if type(other) is type(self):
            return other.__raw
        elif isinstance(other, int) and not isinstance(other, Mod):
            return type(self).__reduce_raw(other)
        else:
            return None

    def __normalized(self, raw : Any) -> Self:
        cls = type(self)
        return cls.__from_raw(raw % cls.__params()[2])

    # equality and ordering

    def __eq__(self, other : Any) -> bool:
        """Returns ``True`` if ``other`` is a value of the same modular type with the same value."""
        if type(other) is type(self):
            return int(self) == int(other)
        else:
            return False

    def __lt__(self, other : Self) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return int(self) < int(other)

    def __le__(self, other : Self) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return int(self) <= int(other)

    def __gt__(self, other : Self) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return int(self) > int(other)

    def __ge__(self, other : Self) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return int(self) >= int(other)

    # ring operations

    def __pos__(self) -> Self:
        return self

    def __neg__(self) -> Self:
        return self.__normalized(-cast(Integral, self.__raw))

    def __abs__(self) -> Self:
        return self.__normalized(abs(cast(Integral, self.__raw)))

    def signum(self) -> Self:
        """``0`` for zero, ``1`` for everything else."""
        return type(self)(signum(cast(Integral, self.__raw)))

    def __add__(self, other : Union[Self, int]) -> Self:
        o = self.__operand(other)
        if o is None:
            return NotImplemented
        return self.__normalized(cast(Integral, self.__raw) + o)

    def __radd__(self, other : int) -> Self:
        o = self.__operand(other)
        if o is None:
            return NotImplemented
        return self.__normalized(cast(Integral, o) + self.__raw)

    def __sub__(self, other : Union[Self, int]) -> Self:
        o = self.__operand(other)
        if o is None:
            return NotImplemented
        return self + -type(self).__from_raw(o)

    def __rsub__(self, other : int) -> Self:
        o = self.__operand(other)
        if o is None:
            return NotImplemented
        return type(self).__from_raw(o) + -self

    def __mul__(self, other : Union[Self, int]) -> Self:
        o = self.__operand(other)
        if o is None:
            return NotImplemented
        return self.__normalized(cast(Integral, self.__raw) * o)

    def __rmul__(self, other : int) -> Self:
        o = self.__operand(other)
        if o is None:
            return NotImplemented
        return self.__normalized(cast(Integral, o) * self.__raw)

    # inverse and division

    def is_invertible(self) -> bool:
        """``True`` iff ``self`` is coprime to the modulus."""
        return gcd(int(self), type(self).modulus()) == 1

    def inverse(self) -> Self:
        """The multiplicative inverse of ``self``.

        Only values coprime to the modulus have one; for the others
        ``NotInvertibleError`` is raised."""
        cls = type(self)
        n = cls.modulus()
        if n == 1:
            return self
        coefficients = _inv_step(n, int(self))
        if coefficients is None:
            log(f'{self} has no inverse modulo {n}')
            raise NotInvertibleError(self, n)
        return cls(coefficients[1])

    def __truediv__(self, other : Union[Self, int]) -> Self:
        o = self.__operand(other)
        if o is None:
            return NotImplemented
        return self * type(self).__from_raw(o).inverse()

    def __rtruediv__(self, other : int) -> Self:
        o = self.__operand(other)
        if o is None:
            return NotImplemented
        return type(self).__from_raw(o) * self.inverse()

    def __floordiv__(self, other : Union[Self, int]) -> Self:
        """Same as ``/``: multiplication by the inverse of ``other``."""
        return self.__truediv__(other)

    def __rfloordiv__(self, other : int) -> Self:
        return self.__rtruediv__(other)

    def __mod__(self, other : Union[Self, int]) -> Self:
        """The remainder of modular division, which is always zero."""
        if self.__operand(other) is None:
            return NotImplemented
        return type(self)(0)

    def __rmod__(self, other : int) -> Self:
        if self.__operand(other) is None:
            return NotImplemented
        return type(self)(0)

    def __divmod__(self, other : Union[Self, int]) -> Tuple[Self, Self]:
        q = self.__truediv__(other)
        if q is NotImplemented:
            return NotImplemented
        return q, type(self)(0)

    # bounds and enumeration

    @classmethod
    def min_value(cls) -> Self:
        return cls(0)

    @classmethod
    def max_value(cls) -> Self:
        return cls.__bound().pred()

    @classmethod
    def to_enum(cls, i : int) -> Self:
        return cls(i)

    def from_enum(self) -> int:
        return int(self)

    def succ(self) -> Self:
        """The next value, wrapping from the maximum to zero."""
        return type(self).to_enum(self.from_enum() + 1)

    def pred(self) -> Self:
        """The previous value, wrapping from zero to the maximum."""
        return type(self).to_enum(self.from_enum() - 1)

    @classmethod
    def residues(cls) -> ModRange[Self]:
        """All values of ``cls`` in ascending order."""
        return cls.min_value().enum_from()

    def enum_from(self) -> ModRange[Self]:
        """``self``, ``self.succ()``, ... up to and including the maximum value."""
        return self.enum_from_to(type(self).max_value())

    def enum_from_then(self, then : Self) -> ModRange[Self]:
        """``self``, ``then``, ... in steps of ``then - self`` (as integers), up to
        the maximum value when ``then >= self``, else down to the minimum value."""
        cls = type(self)
        bound = cls.max_value() if then.from_enum() >= self.from_enum() else cls.min_value()
        return self.enum_from_then_to(then, bound)

    def enum_from_to(self, last : Self) -> ModRange[Self]:
        return ModRange(type(self), self.from_enum(), last.from_enum(), 1)

    def enum_from_then_to(self, then : Self, last : Self) -> ModRange[Self]:
        return ModRange(type(self), self.from_enum(), last.from_enum(), then.from_enum() - self.from_enum())


def _inv_step(a : int, b : int) -> Optional[Tuple[int, int]]:
    """The backwards extended Euclidean algorithm.

    Returns ``(x, y)`` with ``x * a + y * b == 1``, or ``None`` when
    ``gcd(a, b) != 1``. Equivalent to the recursion::

        inv_step(_, 0) = no inverse
        inv_step(_, 1) = (0, 1)
        inv_step(a, b) = (y, x - y * q)
            where (q, r) = divmod(a, b)
                  (x, y) = inv_step(b, r)

    with the descent unrolled into a loop and the quotients kept for unwinding.
    """
    quotients : List[int] = []
    while b != 0 and b != 1:
        q, r = divmod(a, b)
        quotients.append(q)
        a, b = b, r
    if b == 0:
        return None
    x, y = 0, 1
    for q in reversed(quotients):
        x, y = y, x - y * q
    return x, y


class ModRange(Generic[M]):
    """A finite run of values of a modular type with a constant integer step,
    inclusive of both ends. Like ``range``, it can be iterated any number of times."""
    __cls : Type[M]
    __range : range

    def __init__(self, cls : Type[M], first : int, last : int, step : int) -> None:
        if step == 0:
            raise ValueError(f'Cannot enumerate {cls.__name__} values from {first!r} with a step of zero.')
        self.__cls = cls
        self.__range = range(first, last + (1 if step > 0 else -1), step)

    def __repr__(self) -> str:
        r = self.__range
        return f'ModRange({self.__cls.__name__}, {r.start!r}, {r.stop!r}, {r.step!r})'

    def __iter__(self) -> Iterator[M]:
        return (self.__cls(i) for i in self.__range)

    def __reversed__(self) -> Iterator[M]:
        return (self.__cls(i) for i in reversed(self.__range))

    def __len__(self) -> int:
        return len(self.__range)

    def __contains__(self, value : Any) -> bool:
        return type(value) is self.__cls and int(value) in self.__range


# Every class handed out by `mod_type`, keyed on `(n, storage)`. Entries are
# never dropped, so live values of one modulus always share a class.
__types : Dict[Tuple[int, Storage], Type[Mod[Any]]] = {}


def mod_type(n : int, storage : Storage = int) -> Type[Mod[Any]]:
    """The modular type for modulus ``n`` and the given storage, created on
    first use. Repeated calls with the same arguments return the same class."""
    key = (n, storage)
    cls = __types.get(key)
    if cls is None:
        name = f'Z{n}'
        minted : Type[Mod[Any]] = type(name, (Mod,), {'__module__': __name__}, modulus=n, storage=storage)
        # if another thread got here first, its class wins
        cls = __types.setdefault(key, minted)
        if cls is minted:
            log(f'new modular type {name} (modulus {n}, storage {storage!r})')
    return cls


def mod_val(value : Any, n : int, storage : Storage = int) -> Mod[Any]:
    """``value`` modulo a modulus ``n`` which is only known at runtime."""
    return mod_type(n, storage)(value)


def to_mod(value : Any, cls : Type[M]) -> M:
    """Wrap ``value`` into the modular type ``cls``, reducing as appropriate."""
    return cls.reduce(value)


def un_mod(x : Mod[I]) -> I:
    """Extract the underlying integral value from a modular value."""
    return x.value()


def inv(k : M) -> M:
    """The modular inverse. Only numbers coprime to the modulus have one;
    ``NotInvertibleError`` is raised for the others."""
    return k.inverse()
