"""Identity schemas and composed resource identities."""

from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from ..errors import IdentityError, SchemaError
from ..registry import NORMALIZERS


class Precedence(str, Enum):
    """Source that wins when title and properties disagree on a field."""

    TITLE = "title"
    PROPERTIES = "properties"


class IdentityField(BaseModel):
    """One canonical identity field of a resource type."""

    name: str = Field(..., min_length=1)
    default: Optional[str] = Field(default=None, description="Used when neither title nor properties supply the field.")
    normalizer: Optional[str] = Field(default=None, description="Name of a registered value normalizer.")

    model_config = {"frozen": True}

    @field_validator("normalizer")
    @classmethod
    def _known_normalizer(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            NORMALIZERS.get(value)
        return value

    def normalize(self, value: str) -> str:
        if self.normalizer is None:
            return value
        try:
            return NORMALIZERS.get(self.normalizer)(value)
        except ValueError as exc:
            raise IdentityError(f"Invalid value for identity field '{self.name}': {exc}") from exc


class IdentitySchema(BaseModel):
    """Canonical, ordered identity fields of a resource type."""

    resource_type: str = Field(..., min_length=1)
    fields: List[IdentityField] = Field(..., min_length=1)
    title_token_counts: Optional[List[int]] = Field(
        default=None,
        description="Accepted numbers of title tokens; any count up to the field count when omitted.",
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _consistent(self) -> "IdentitySchema":
        names = [field.name for field in self.fields]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise SchemaError(f"Duplicate identity fields for {self.resource_type}: {', '.join(duplicates)}")
        for count in self.title_token_counts or []:
            if not 1 <= count <= len(self.fields):
                raise SchemaError(f"Title token count {count} outside 1..{len(self.fields)} for {self.resource_type}")
        return self

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(field.name for field in self.fields)

    def accepts_token_count(self, count: int) -> bool:
        if self.title_token_counts is None:
            return 1 <= count <= len(self.fields)
        return count in self.title_token_counts


class ResourceIdentity(BaseModel):
    """Fully resolved identity; immutable once composed."""

    resource_type: str = Field(...)
    names: Tuple[str, ...] = Field(..., description="Canonical field names in order.")
    values: Tuple[str, ...] = Field(..., description="Field values aligned with names.")
    from_title: FrozenSet[str] = Field(default_factory=frozenset, description="Fields supplied by the title.")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _aligned(self) -> "ResourceIdentity":
        if len(self.names) != len(self.values):
            raise ValueError("identity names and values must have the same length")
        return self

    @property
    def title(self) -> str:
        return " ".join(self.values)

    def as_dict(self) -> Dict[str, str]:
        return dict(zip(self.names, self.values))

    def __getitem__(self, name: str) -> str:
        return self.as_dict()[name]
