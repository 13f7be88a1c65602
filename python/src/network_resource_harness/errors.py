"""Exception hierarchy for the resource harness."""

from typing import Iterable, Optional, Sequence


class HarnessError(Exception):
    """Base class for every error raised by the harness."""


class SchemaError(HarnessError, ValueError):
    """Raised when an identity schema is declared inconsistently."""


class IdentityError(HarnessError):
    """Raised when a resource identity cannot be composed from title and properties."""

    def __init__(
        self,
        message: str,
        *,
        missing: Optional[Sequence[str]] = None,
        extra: Optional[Sequence[str]] = None,
    ) -> None:
        super().__init__(message)
        self.missing = tuple(missing or ())
        self.extra = tuple(extra or ())


class UnknownEntryError(HarnessError, KeyError):
    """Raised when identifiers cannot be resolved from a registry."""

    kind = "entry"

    def __init__(self, unknown: Iterable[str], known: Iterable[str]) -> None:
        self.unknown = tuple(unknown)
        self.known = tuple(sorted(known))
        super().__init__(
            f"Unknown {self.kind}(s) {', '.join(self.unknown)}; registered: {', '.join(self.known) or 'none'}"
        )

    def __str__(self) -> str:
        return self.args[0]


class UnknownNormalizerError(UnknownEntryError, ValueError):
    kind = "normalizer"


class UnknownScenarioError(UnknownEntryError):
    kind = "scenario"
