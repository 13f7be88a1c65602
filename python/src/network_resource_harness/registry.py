"""Name-to-callable registries resolved before any scenario runs."""

from typing import Callable, Dict, Generic, Iterable, Iterator, List, Type, TypeVar

from .errors import UnknownEntryError, UnknownNormalizerError
from .logging import build_logger

T = TypeVar("T")


class Registry(Generic[T]):
    """Maps identifiers to registered values, failing fast on unknown names."""

    def __init__(self, kind: str, error_class: Type[UnknownEntryError] = UnknownEntryError) -> None:
        self._kind = kind
        self._error_class = error_class
        self._entries: Dict[str, T] = {}
        self._logger = build_logger("Registry", kind=kind)

    def register(self, name: str, value: T) -> T:
        if name in self._entries:
            raise ValueError(f"{self._kind} '{name}' is already registered")
        self._entries[name] = value
        self._logger.debug("registry_entry_added", name=name)
        return value

    def entry(self, name: str) -> Callable[[T], T]:
        """Decorator form of :meth:`register`."""

        def decorator(value: T) -> T:
            return self.register(name, value)

        return decorator

    def get(self, name: str) -> T:
        if name not in self._entries:
            raise self._error_class([name], self._entries)
        return self._entries[name]

    def resolve(self, names: Iterable[str]) -> List[T]:
        """Resolve every name up front; unknown names are reported together."""

        requested = list(names)
        unknown = [name for name in requested if name not in self._entries]
        if unknown:
            self._logger.error("registry_resolve_failed", unknown=unknown)
            raise self._error_class(unknown, self._entries)
        return [self._entries[name] for name in requested]

    def names(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


NORMALIZERS: Registry[Callable[[str], str]] = Registry("normalizer", UnknownNormalizerError)


@NORMALIZERS.entry("lowercase")
def _lowercase(value: str) -> str:
    return value.lower()


@NORMALIZERS.entry("asn_asplain")
def asn_to_asplain(value: str) -> str:
    """Convert a BGP AS number to asplain notation ('1.1' -> '65537')."""

    text = value.strip()
    if "." in text:
        high, _, low = text.partition(".")
        if not (high.isdigit() and low.isdigit()):
            raise ValueError(f"invalid asdot AS number: {value!r}")
        high_value, low_value = int(high), int(low)
        if high_value > 0xFFFF or low_value > 0xFFFF:
            raise ValueError(f"asdot AS number out of range: {value!r}")
        return str(high_value * 65536 + low_value)
    if not text.isdigit():
        raise ValueError(f"invalid AS number: {value!r}")
    number = int(text)
    if number > 0xFFFFFFFF:
        raise ValueError(f"AS number out of range: {value!r}")
    return str(number)
