"""
Candidate values for slug generation.

A candidate spec is an ordered list of entries. Each entry is one of:

- ``Literal``: a fixed value used as-is.
- ``Ref``: the name of an attribute or zero-argument method on the instance.
- ``Thunk``: a zero-argument callable evaluated on demand.
- ``Compound``: several entries joined with a space into a single candidate.

``Ref`` and ``Thunk`` may produce a list, whose items are spliced in at their
position as further entries. Nothing is evaluated until the resolver asks
for the next candidate.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Tuple, Union


@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class Ref:
    name: str


@dataclass(frozen=True)
class Thunk:
    func: Callable[[], Any]


@dataclass(frozen=True)
class Compound:
    parts: Tuple["Entry", ...]


Entry = Union[Literal, Ref, Thunk, Compound]
_ENTRY_TYPES = (Literal, Ref, Thunk, Compound)


def as_entry(value) -> Entry:
    """Coerce a declared value into an entry.

    Lists and tuples become a ``Compound``, callables a ``Thunk``, and anything
    else a ``Literal``.
    """
    if isinstance(value, _ENTRY_TYPES):
        return value
    if isinstance(value, (list, tuple)):
        return Compound(tuple(as_entry(part) for part in value))
    if callable(value):
        return Thunk(value)
    return Literal(value)


def as_spec(value) -> Tuple[Entry, ...]:
    """Coerce the value of a candidate source into a tuple of entries."""
    if isinstance(value, (list, tuple)):
        return tuple(as_entry(item) for item in value)
    return (as_entry(value),)


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class Candidates:
    """Lazy, ordered sequence of raw candidate values for one instance.

    Iterating yields one raw value per entry, in declared order, skipping
    entries that resolve to nothing. An entry is only resolved when the
    previous candidate has been consumed.
    """

    def __init__(self, instance, spec):
        self.instance = instance
        self.spec = as_spec(spec)

    def __iter__(self) -> Iterator[Any]:
        for entry in self.spec:
            yield from self._expand(entry)

    def _expand(self, entry: Entry) -> Iterator[Any]:
        if isinstance(entry, Literal):
            if not _is_blank(entry.value):
                yield entry.value
        elif isinstance(entry, Ref):
            yield from self._splice(self._lookup(entry.name))
        elif isinstance(entry, Thunk):
            yield from self._splice(entry.func())
        elif isinstance(entry, Compound):
            parts = [self._join_value(part) for part in entry.parts]
            joined = " ".join(str(part) for part in parts if not _is_blank(part))
            if joined:
                yield joined
        else:
            raise TypeError(f"Unknown candidate entry: {entry!r}")

    def _splice(self, value) -> Iterator[Any]:
        if isinstance(value, (list, tuple)):
            for item in value:
                yield from self._expand(as_entry(item))
        elif not _is_blank(value):
            yield value

    def _lookup(self, name: str):
        value = getattr(self.instance, name)
        if callable(value):
            value = value()
        return value

    def _join_value(self, part: Entry):
        # Inside a compound every part contributes to one joined string.
        if isinstance(part, Literal):
            return part.value
        if isinstance(part, Ref):
            value = self._lookup(part.name)
        elif isinstance(part, Thunk):
            value = part.func()
        else:
            value = [self._join_value(p) for p in part.parts]
        if isinstance(value, (list, tuple)):
            values = [self._join_value(as_entry(item)) for item in value]
            return " ".join(str(v) for v in values if not _is_blank(v))
        return value
