"""Lazily resolved neuron inputs."""

from __future__ import annotations

import numbers
import weakref
from typing import Any, Optional


class Input:
    """An input slot that is unset, a literal scalar, or a reference.

    A reference keeps only a weak link to its source (any object exposing a
    ``y`` attribute, normally a :class:`~ffann.core.neuron.Neuron`) and reads
    the source's current ``y`` on every :meth:`get`, so downstream neurons
    always see the latest upstream output.
    """

    __slots__ = ("_signal", "_source")

    def __init__(self, value: Any = None) -> None:
        self._signal: Optional[float] = None
        self._source: Optional[weakref.ReferenceType] = None
        if value is None:
            return
        if isinstance(value, Input):
            self._signal = value._signal
            self._source = value._source
        elif isinstance(value, bool):
            raise TypeError("Input expects a real number, not a bool")
        elif isinstance(value, numbers.Real):
            self._signal = float(value)
        elif hasattr(value, "y"):
            self._source = weakref.ref(value)
        else:
            raise TypeError(
                f"Input expects None, a real number or an object with a 'y' output, "
                f"got {type(value).__name__}"
            )

    @classmethod
    def unset(cls) -> "Input":
        return cls()

    @classmethod
    def literal(cls, value: float) -> "Input":
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise TypeError(f"Literal inputs must be real numbers, got {type(value).__name__}")
        return cls(value)

    @classmethod
    def reference(cls, source: Any) -> "Input":
        if not hasattr(source, "y"):
            raise TypeError(f"Cannot reference {type(source).__name__}: it has no 'y' output")
        return cls(source)

    @classmethod
    def coerce(cls, value: Any) -> "Input":
        """Return ``value`` unchanged if it already is an :class:`Input`."""

        if isinstance(value, Input):
            return value
        return cls(value)

    @property
    def is_set(self) -> bool:
        return self._signal is not None or self._source is not None

    @property
    def is_reference(self) -> bool:
        return self._source is not None

    def get(self) -> Optional[float]:
        """Return the current value, or ``None`` when the slot is unset."""

        if self._source is not None:
            source = self._source()
            if source is None:
                raise ReferenceError("Referenced input source no longer exists")
            return float(source.y)
        return self._signal

    def __repr__(self) -> str:
        if self._source is not None:
            return f"Input(reference={self._source()!r})"
        if self._signal is not None:
            return f"Input({self._signal!r})"
        return "Input()"


__all__ = ["Input"]
