"""Declarative description of one title-pattern scenario."""

from enum import Enum
from typing import Any, Callable, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from .identity import Precedence
from .properties import PropertyMap


class EnsureState(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class Scenario(BaseModel):
    """Inputs for one apply -> verify -> remove -> verify cycle."""

    scenario_id: str = Field(..., description="Registry identifier.")
    description: str = Field(default="")
    resource_type: str = Field(...)
    title_pattern: str = Field(..., description="Title written into the manifest.")
    identity_properties: PropertyMap = Field(
        default_factory=PropertyMap,
        description="Identity fields supplied as manifest parameters rather than through the title.",
    )
    manifest_properties: PropertyMap = Field(
        default_factory=PropertyMap,
        description="Non-identity parameters rendered into the present manifest.",
    )
    expected: PropertyMap = Field(
        default_factory=PropertyMap,
        description="Pairs the introspection output must show while present and must not show once absent.",
    )
    absent_expected: PropertyMap = Field(
        default_factory=lambda: PropertyMap(ensure="absent"),
        description="Pairs the introspection output must show once the resource is removed.",
    )
    precedence: Optional[Precedence] = Field(default=None, description="Overrides the run-wide precedence.")
    present_exit_codes: Optional[Tuple[int, ...]] = Field(default=None)
    absent_exit_codes: Optional[Tuple[int, ...]] = Field(default=None)

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    @field_validator("identity_properties", "manifest_properties", "expected", "absent_expected", mode="before")
    @classmethod
    def _as_property_map(cls, value: Any) -> PropertyMap:
        if isinstance(value, PropertyMap):
            return value
        return PropertyMap(value or {})


ScenarioFactory = Callable[[str], Scenario]
"""Builds a scenario for a platform name (e.g. ``nexus``, ``ios_xr``)."""
