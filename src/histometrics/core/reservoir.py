from __future__ import annotations

import hashlib
import math
import secrets
import threading
from abc import ABC, abstractmethod

from ..contracts.error import BadInputError
from .snapshot import Number, Snapshot

DEFAULT_RESERVOIR_SIZE = 1024

_WORD_BITS = 64


class _IndexStream:
    """Uniform slot indices for reservoir replacement.

    With a seed the draws come from keyed blake2b in counter mode, so two
    reservoirs built with the same seed keep the same samples. Without one
    they come from the OS via :class:`secrets.SystemRandom`.
    """

    __slots__ = ("_key", "_counter", "_system")

    def __init__(self, seed: int | None = None) -> None:
        self._counter = 0
        if seed is None:
            self._key: bytes | None = None
            self._system: secrets.SystemRandom | None = secrets.SystemRandom()
        else:
            self._key = hashlib.blake2b(str(seed).encode("utf-8"), digest_size=32).digest()
            self._system = None

    def _next_word(self) -> int:
        if self._key is None:
            raise RuntimeError("Seeded draws require a key")
        self._counter += 1
        block = hashlib.blake2b(
            self._counter.to_bytes(8, "big"), key=self._key, digest_size=_WORD_BITS // 8
        ).digest()
        return int.from_bytes(block, "big")

    def below(self, stop: int) -> int:
        """Return an integer in ``[0, stop)``."""

        if stop <= 0:
            raise ValueError("Upper bound must be positive")
        if self._system is not None:
            return self._system.randrange(stop)
        # rejection keeps the modulo unbiased
        limit = (1 << _WORD_BITS) - (1 << _WORD_BITS) % stop
        while True:
            word = self._next_word()
            if word < limit:
                return word % stop


def check_observation(value: object) -> Number:
    """Return ``value`` if it can be ordered with other samples, else raise."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise BadInputError(
            f"histogram observations must be int or float, got {type(value).__name__}"
        )
    if isinstance(value, float) and math.isnan(value):
        raise BadInputError("histogram observations must not be NaN")
    return value


class Reservoir(ABC):
    """Bounded store of observations that can produce a :class:`Snapshot`."""

    __slots__ = ()

    @abstractmethod
    def update(self, value: Number) -> None:
        """Record one observation."""

    @abstractmethod
    def snapshot(self) -> Snapshot:
        """Return a sorted copy of the samples currently held."""

    @abstractmethod
    def size(self) -> int:
        """Number of samples currently held."""


def _check_capacity(size: int) -> int:
    if isinstance(size, bool) or not isinstance(size, int):
        raise BadInputError(f"reservoir size must be an integer, got {size!r}")
    if size < 1:
        raise BadInputError("reservoir size must be >= 1")
    return size


class UniformReservoir(Reservoir):
    """Fixed-size reservoir with uniform random replacement (Algorithm R).

    Every value seen so far has the same ``capacity / count`` chance of being
    in the sample. The lock covers only the count bump, the slot choice and
    the slot write, so :meth:`snapshot` never sees a half-applied update and
    sorting happens on a private copy.
    """

    __slots__ = ("capacity", "_buf", "_count", "_rng", "_lock")

    def __init__(self, size: int = DEFAULT_RESERVOIR_SIZE, seed: int | None = None) -> None:
        self.capacity = _check_capacity(size)
        self._buf: list[Number] = []
        self._count = 0
        self._rng = _IndexStream(seed)
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"UniformReservoir(capacity={self.capacity}, count={self._count})"

    @property
    def count(self) -> int:
        """Total number of observations offered, sampled or not."""

        return self._count

    def update(self, value: Number) -> None:
        value = check_observation(value)
        with self._lock:
            self._count += 1
            if len(self._buf) < self.capacity:
                self._buf.append(value)
                return
            j = self._rng.below(self._count)
            if j < self.capacity:
                self._buf[j] = value

    def size(self) -> int:
        with self._lock:
            return len(self._buf)

    def snapshot(self) -> Snapshot:
        with self._lock:
            values = list(self._buf)
        return Snapshot(values)


class SlidingWindowReservoir(Reservoir):
    """Keeps the most recent ``size`` observations in a ring buffer."""

    __slots__ = ("capacity", "_buf", "_count", "_lock")

    def __init__(self, size: int) -> None:
        self.capacity = _check_capacity(size)
        self._buf: list[Number] = []
        self._count = 0
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"SlidingWindowReservoir(capacity={self.capacity}, count={self._count})"

    @property
    def count(self) -> int:
        return self._count

    def update(self, value: Number) -> None:
        value = check_observation(value)
        with self._lock:
            if len(self._buf) < self.capacity:
                self._buf.append(value)
            else:
                self._buf[self._count % self.capacity] = value
            self._count += 1

    def size(self) -> int:
        with self._lock:
            return len(self._buf)

    def snapshot(self) -> Snapshot:
        with self._lock:
            values = list(self._buf)
        return Snapshot(values)


__all__ = [
    "DEFAULT_RESERVOIR_SIZE",
    "Reservoir",
    "check_observation",
    "SlidingWindowReservoir",
    "UniformReservoir",
]
