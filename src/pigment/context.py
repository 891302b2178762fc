"""Answer accumulator shared by the questions of one prompt session."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping


class AnswerContext:
    """Append-only mapping of answers, in the order they were settled.

    Later questions' ``default``/``skip`` callbacks and conditional
    factories read earlier answers through :meth:`read`.
    """

    def __init__(self) -> None:
        self._answers: dict[str, Any] = {}
        self._view = MappingProxyType(self._answers)
        self._closed = False

    def set(self, key: str, value: Any) -> None:
        if self._closed:
            raise RuntimeError("Answer context is closed")
        if key in self._answers:
            raise KeyError(f"Answer for {key!r} is already set")
        self._answers[key] = value

    def read(self) -> Mapping[str, Any]:
        return self._view

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def to_dict(self) -> dict[str, Any]:
        return dict(self._answers)

    def __contains__(self, key: object) -> bool:
        return key in self._answers
