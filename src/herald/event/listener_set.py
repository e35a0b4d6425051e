"""
ListenerSet: ordered, unique-membership listener collection.

Membership is by identity, never by value: two distinct callables that
compare equal are separate members, and unhashable callables are accepted.
Bound methods are the one exception. A fresh bound-method object is created
on every attribute access, so `obj.handler` is keyed by its underlying
object and function and stays one member however often it is re-bound.
Iteration follows insertion order.
"""

from __future__ import annotations

import inspect
from typing import Hashable, Iterable, Iterator

from herald.event.types import Listener


def listener_key(listener: Listener) -> Hashable:
    """
    Identity key used for membership.

    >>> class Audit:
    ...     def record(self, payload): ...
    >>> audit = Audit()
    >>> listener_key(audit.record) == listener_key(audit.record)
    True
    """
    if inspect.ismethod(listener):
        return (id(listener.__self__), id(listener.__func__))
    return id(listener)


class ListenerSet:
    """
    Insertion-ordered set of listeners.

    Members are stored alongside their identity key, which keeps them alive
    for as long as they are registered, so keys are never reused while a
    member is present.

    Examples
    --------
    >>> listeners = ListenerSet()
    >>> listeners.add(print)
    True
    >>> listeners.add(print)
    False
    >>> len(listeners)
    1
    """

    __slots__ = ("_members",)

    def __init__(self, listeners: Iterable[Listener] = ()) -> None:
        self._members: dict[Hashable, Listener] = {}
        for listener in listeners:
            self.add(listener)

    def add(self, listener: Listener) -> bool:
        """Add `listener`; returns False if it was already a member."""
        key = listener_key(listener)
        if key in self._members:
            return False
        self._members[key] = listener
        return True

    def discard(self, listener: Listener) -> bool:
        """Remove `listener` if present; returns True if it was removed."""
        return self._members.pop(listener_key(listener), None) is not None

    def clear(self) -> int:
        """Remove every listener; returns how many were removed."""
        removed = len(self._members)
        self._members.clear()
        return removed

    def snapshot(self) -> tuple[Listener, ...]:
        """Current members, in insertion order, decoupled from later changes."""
        return tuple(self._members.values())

    def __contains__(self, listener: object) -> bool:
        return listener_key(listener) in self._members  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Listener]:
        return iter(list(self._members.values()))

    def __len__(self) -> int:
        return len(self._members)

    def __bool__(self) -> bool:
        return bool(self._members)

    def __repr__(self) -> str:
        return f"ListenerSet({list(self._members.values())!r})"
