"""Errors raised by modular types."""

from typing import Any


class ModularError(ValueError):
    pass


class ModulusError(ModularError):
    """A modulus which cannot parameterize a modular type."""
    pass


class ModulusMismatchError(ModularError):
    """An operation between values whose runtime moduli differ."""
    pass


class NotInvertibleError(ModularError, ZeroDivisionError):
    """Raised when inverting (or dividing by) a value which shares a factor
    with its modulus.

    ``value`` and ``modulus`` are the offending value and modulus, as plain integers.
    """
    value : int
    modulus : int

    def __init__(self, value : Any, modulus : int) -> None:
        self.value = int(value)
        self.modulus = modulus
        super().__init__(f'divide by {self.value!r} (mod {modulus!r}), non-coprime to modulus')
