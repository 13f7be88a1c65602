"""Immutable property tables used for manifests and expectations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, Optional


def stringify(value: Any) -> str:
    """Render a property value the way the engine prints it."""

    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class PropertyMap(Mapping):
    """Read-only mapping of property name to string value.

    Phase changes derive a new map instead of editing a shared fixture, so the
    present and absent phases of one scenario never see each other's edits.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping[str, Any] | Iterable[tuple]] = None, **values: Any) -> None:
        merged: Dict[str, str] = {}
        for key, value in dict(data or {}, **values).items():
            merged[str(key)] = stringify(value)
        self._data = merged

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"PropertyMap({self._data!r})"

    def with_values(self, values: Optional[Mapping[str, Any]] = None, **extra: Any) -> PropertyMap:
        """Return a copy with ``values`` added or replaced; existing keys keep their position."""

        return PropertyMap({**self._data, **dict(values or {}, **extra)})

    def without(self, *keys: str) -> PropertyMap:
        """Return a copy without ``keys``; missing keys are ignored."""

        dropped = set(keys)
        return PropertyMap({key: value for key, value in self._data.items() if key not in dropped})

    def with_ensure(self, state: Any) -> PropertyMap:
        return self.with_values(ensure=getattr(state, "value", state))

    def to_dict(self) -> Dict[str, str]:
        return dict(self._data)
