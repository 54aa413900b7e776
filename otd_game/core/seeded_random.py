"""Portable seeded random number generator used for question selection.

The daily question must be the same on every device for a given date, so the
shuffle cannot depend on :mod:`random` (Mersenne Twister) or on any other
platform default. This module implements Marsaglia's *xorwow* generator with
the seeding, bounded-draw and shuffle rules of the Kotlin standard library
(``kotlin.random.Random(seed: Int)`` and ``MutableList.shuffle``), which is what
the mobile clients use. All arithmetic is carried out on 32-bit two's
complement integers.

Seeding for an ``int`` seed ``s``::

    x = s, y = s >> 31, z = 0, w = 0, v = ~s
    addend = (s << 10) ^ (y >>> 4)
    discard the first 64 outputs

Each step::

    t = x ^ (x >>> 2)
    x, y, z, w = y, z, w, v
    t = t ^ (t << 1) ^ v ^ (v << 4)
    v = t
    addend += 362437
    output = t + addend
"""

from __future__ import annotations

from typing import MutableSequence, TypeVar

T = TypeVar("T")

_MASK_32 = 0xFFFFFFFF
_ADDEND_STEP = 362437
_WARM_UP_DRAWS = 64


def _to_int32(value: int) -> int:
    value &= _MASK_32
    return value - 0x1_0000_0000 if value & 0x8000_0000 else value


def _ushr(value: int, bits: int) -> int:
    return (value & _MASK_32) >> bits


class XorWowRandom:
    """Deterministic 32-bit xorwow generator."""

    def __init__(self, seed: int) -> None:
        seed = _to_int32(seed)
        high = seed >> 31
        self._x = seed
        self._y = high
        self._z = 0
        self._w = 0
        self._v = _to_int32(~seed)
        self._addend = _to_int32((seed << 10) ^ _ushr(high, 4))
        if not (self._x | self._y | self._z | self._w | self._v):
            raise ValueError("Initial state must have at least one non-zero element.")
        for _ in range(_WARM_UP_DRAWS):
            self.next_int()

    def next_int(self) -> int:
        """Return the next signed 32-bit value."""
        t = self._x
        t = _to_int32(t ^ _ushr(t, 2))
        self._x = self._y
        self._y = self._z
        self._z = self._w
        v0 = self._v
        self._w = v0
        t = _to_int32((t ^ (t << 1)) ^ v0 ^ (v0 << 4))
        self._v = t
        self._addend = _to_int32(self._addend + _ADDEND_STEP)
        return _to_int32(t + self._addend)

    def next_bits(self, bit_count: int) -> int:
        """Return ``bit_count`` random bits taken from the top of the next value."""
        value = self.next_int()
        if bit_count == 0:
            return 0
        return _ushr(value, 32 - bit_count)

    def next_below(self, until: int) -> int:
        """Return a value in ``[0, until)``."""
        if until <= 0:
            raise ValueError(f"Upper bound must be positive, got {until}")
        if until & -until == until:
            return self.next_bits(until.bit_length() - 1)
        while True:
            bits = _ushr(self.next_int(), 1)
            value = bits % until
            # reject draws from the incomplete last block of the 31-bit range
            if _to_int32(bits - value + (until - 1)) >= 0:
                return value

    def shuffle(self, items: MutableSequence[T]) -> None:
        """Shuffle ``items`` in place (Fisher-Yates, last index down to 1)."""
        for i in range(len(items) - 1, 0, -1):
            j = self.next_below(i + 1)
            items[i], items[j] = items[j], items[i]
