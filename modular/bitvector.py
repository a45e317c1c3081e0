from __future__ import annotations
from functools import lru_cache, partial
from typing import Any, Optional, Tuple, Union
from BitVector import BitVector #type: ignore

from .integral import Storage


class BV:
    """A fixed-width unsigned integer, usable as the storage of a modular type.

    ``BV(size : int, value : int)`` will create a ``BV`` of width ``size`` holding
    the unsigned integer ``value`` (N.B., ``0 <= value <= 2 ** size - 1``
    must evaluate to ``True`` or an error will be raised).

    N.B., the ``size`` and ``value`` arguments can be passed positionally or by name:

    ``BV(8,0xff) == BV(size=8, value=0xff) == BV(value=0xff, size=8)``

    ``BV(bv : BitVector)`` will create an equivalent ``BV`` to the given ``BitVector`` value.

    Arithmetic wraps around modulo ``2 ** size`` like a machine word: ``-BV(8,1) == BV(8,255)``.
    Division and remainder are unsigned floor division. A plain ``int`` operand
    is accepted wherever a ``BV`` of the same size is.
    """
    __size  : int
    __value : int

    def __init__(self, size : Union[int, BitVector], value : Optional[int] = None) -> None:
        """Initialize a ``BV`` from a ``BitVector`` or from size and value nonnegative integers."""
        if value is not None:
            if not isinstance(size, int) or size < 0:
                raise ValueError(f'`size` parameter to BV must be a nonnegative integer but was given {size!r}.')
            self.__size = size
            if not isinstance(value, int):
                raise ValueError(f'{value!r} is not an integer value to initialize a bit vector of size {self.__size!r} with.')
            self.__value = value
        elif not isinstance(size, BitVector):
            raise ValueError(f'BV can only be created from a single value when that value is a BitVector, but got {size!r}')
        else:
            self.__size = len(size)
            self.__value = int(size)
        if self.__value < 0 or self.__value.bit_length() > self.__size:
            raise ValueError(f'{self.__value!r} is not representable as an unsigned integer with {self.__size!r} bits.')

    @staticmethod
    def from_int(size : int, value : int) -> BV:
        """The ``BV`` of width ``size`` congruent to ``value`` modulo ``2 ** size``
        (i.e., ``value`` truncated to its low ``size`` bits, two's complement for
        negative ``value``)."""
        if not isinstance(size, int) or size < 0:
            raise ValueError(f'`size` parameter to BV must be a nonnegative integer but was given {size!r}.')
        return BV(size, int(value) % (1 << size))

    @staticmethod
    @lru_cache(maxsize=None)
    def storage(size : int) -> Storage:
        """A storage converter producing ``size``-bit ``BV``s, e.g.
        ``class W7(Mod[BV], modulus=7, storage=BV.storage(8))``."""
        if not isinstance(size, int) or size < 0:
            raise ValueError(f'`size` parameter to BV must be a nonnegative integer but was given {size!r}.')
        return partial(BV.from_int, size)

    def to_bitvector(self) -> BitVector:
        """The equivalent ``BitVector`` value."""
        return BitVector(intVal = self.__value, size = self.__size)

    def hex(self) -> str:
        """Return the (padded) hexadecimal string for the unsigned integer this ``BV`` represents.

        Note: padding is determined by ``self.size()``, rounding up a single digit
        for widths not evenly divisible by 4."""
        hex_str_width = 2 + (self.__size // 4) + (0 if (self.__size % 4 == 0) else 1)
        return format(self.__value, f'#0{hex_str_width!r}x')

    def __repr__(self) -> str:
        return f"BV({self.__size!r}, {self.hex()})"

    def __str__(self) -> str:
        return str(self.__value)

    def size(self) -> int:
        """Size of the ``BV`` (i.e., the available "bit width")."""
        return self.__size

    def value(self) -> int:
        """The unsigned integer interpretation of the ``self``."""
        return self.__value

    def __eq__(self, other : Any) -> bool:
        """Returns ``True`` if ``other`` is also a ``BV`` of the same size and value, else returns ``False``."""
        if isinstance(other, BV):
            return self.__size == other.__size and self.__value == other.__value
        else:
            return False

    def __hash__(self) -> int:
        return hash((self.__size, self.__value))

    def __index__(self) -> int:
        """Equivalent to ``self.value()``."""
        return self.__value

    def __int__(self) -> int:
        """Equivalent to ``self.value()``."""
        return self.__value

    def __len__(self) -> int:
        """Equivalent to ``self.size()``."""
        return self.__size

    def __bool__(self) -> bool:
        return self.__value != 0

    # some private functions useful when defining operators

    def __operand(self, op : str, other : Any) -> int:
        if isinstance(other, BV):
            if self.__size != other.__size:
                raise ValueError(self.__unequal_len_op_error_msg(op, other))
            return other.__value
        elif isinstance(other, int) and not isinstance(other, bool):
            return other
        else:
            raise ValueError(f'Operator `{op}` cannot be called on {self!r} and {other!r}.')

    def __wrap(self, value : int) -> BV:
        return BV.from_int(self.__size, value)

    def __unequal_len_op_error_msg(self, op : str, other : BV) -> str:
        return f'Operator `{op}` cannot be called on BV of unequal length {self!r} and {other!r}.'

    # arithmetic, modulo 2 ** size

    def __pos__(self) -> BV:
        return self

    def __neg__(self) -> BV:
        return self.__wrap(-self.__value)

    def __abs__(self) -> BV:
        """Unsigned, so always ``self``."""
        return self

    def __add__(self, other : Union[int, BV]) -> BV:
        return self.__wrap(self.__value + self.__operand("+", other))

    def __radd__(self, other : int) -> BV:
        return self.__wrap(self.__operand("+", other) + self.__value)

    def __sub__(self, other : Union[int, BV]) -> BV:
        return self.__wrap(self.__value - self.__operand("-", other))

    def __rsub__(self, other : int) -> BV:
        return self.__wrap(self.__operand("-", other) - self.__value)

    def __mul__(self, other : Union[int, BV]) -> BV:
        return self.__wrap(self.__value * self.__operand("*", other))

    def __rmul__(self, other : int) -> BV:
        return self.__wrap(self.__operand("*", other) * self.__value)

    def __floordiv__(self, other : Union[int, BV]) -> BV:
        """Unsigned floor division; ``ZeroDivisionError`` when ``other`` is zero."""
        return self.__wrap(self.__value // self.__operand("//", other))

    def __mod__(self, other : Union[int, BV]) -> BV:
        """Unsigned remainder; ``ZeroDivisionError`` when ``other`` is zero.

        An ``int`` divisor is used as is, even when it does not fit in ``self.size()``
        bits (the remainder of a nonnegative ``self`` always does)."""
        return self.__wrap(self.__value % self.__operand("%", other))

    def __divmod__(self, other : Union[int, BV]) -> Tuple[BV, BV]:
        d = self.__operand("divmod", other)
        q, r = divmod(self.__value, d)
        return self.__wrap(q), self.__wrap(r)

    # ordering, on the unsigned interpretation

    def __lt__(self, other : Union[int, BV]) -> bool:
        return self.__value < self.__operand("<", other)

    def __le__(self, other : Union[int, BV]) -> bool:
        return self.__value <= self.__operand("<=", other)

    def __gt__(self, other : Union[int, BV]) -> bool:
        return self.__value > self.__operand(">", other)

    def __ge__(self, other : Union[int, BV]) -> bool:
        return self.__value >= self.__operand(">=", other)
