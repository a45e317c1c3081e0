"""Integers modulo a fixed bound. See :py:class:`modular.Mod` to get started."""

from .bitvector import BV
from .diagnostics import logging
from .exceptions import ModularError, ModulusError, ModulusMismatchError, NotInvertibleError
from .integral import Integral, Storage
from .intmod import Mod, ModRange, inv, mod_type, mod_val, to_mod, un_mod
from .somemod import SomeMod, some_mod_val

__all__ = ['bitvector', 'config', 'diagnostics', 'exceptions', 'integral', 'intmod', 'somemod']
