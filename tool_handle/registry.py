"""String-keyed capability registries (decoders, handlers, security schemes).

A Registry is built during context composition and frozen before it is
shared. Invocations only read from it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Generic, TypeVar, Union

import structlog

logger = structlog.get_logger()

T = TypeVar("T")

RegistryUpdate = Union[Iterable[T], Mapping[str, T]]


class Registry(Mapping[str, T], Generic[T]):
    """Read-only mapping from a discriminant string to a capability."""

    def __init__(self, entries: Mapping[str, T] | None = None, *, frozen: bool = False) -> None:
        self._entries: dict[str, T] = dict(entries or {})
        self._frozen = frozen

    def register(self, name: str, implementation: T) -> None:
        """Register implementation under name, replacing any previous entry.

        Raises RuntimeError if the registry is frozen.
        """
        if self._frozen:
            raise RuntimeError(f"Cannot register '{name}': registry is frozen")
        if name in self._entries:
            logger.debug("registry_entry_replaced", name=name)
        self._entries[name] = implementation

    def lookup(self, name: str) -> T | None:
        """Get an implementation by name. Returns None if not found."""
        return self._entries.get(name)

    def freeze(self) -> Registry[T]:
        """Return a frozen copy of this registry."""
        return Registry(self._entries, frozen=True)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def names(self) -> list[str]:
        return list(self._entries)

    def __getitem__(self, name: str) -> T:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Registry({self.names()!r}, frozen={self._frozen})"


def merge_registry(
    existing: Mapping[str, T] | None,
    update: RegistryUpdate[T] | None,
    key: Callable[[T], str],
) -> Registry[T] | None:
    """Merge update into existing, returning a new frozen registry.

    - update is None: existing is kept.
    - update is a sequence of records: each record is registered under
      key(record) on top of a copy of existing; later records win.
    - update is a mapping: shallow merge over existing, update wins per key,
      or adopted as-is when nothing exists yet.

    Neither existing nor update is mutated.
    """
    if update is None:
        if existing is None or isinstance(existing, Registry) and existing.frozen:
            return existing
        return Registry(existing, frozen=True)

    if isinstance(update, Mapping):
        merged = Registry(existing)
        for name, implementation in update.items():
            merged.register(name, implementation)
        return merged.freeze()

    merged = Registry(existing)
    for record in update:
        merged.register(key(record), record)
    return merged.freeze()
