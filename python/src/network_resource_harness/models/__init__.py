"""Data models shared by the codec, renderer, matcher and driver."""

from .identity import IdentityField, IdentitySchema, Precedence, ResourceIdentity
from .properties import PropertyMap, stringify
from .results import CommandResult, EngineExitCode, ExpectationResult, ScenarioReport, StepResult
from .scenario import EnsureState, Scenario, ScenarioFactory

__all__ = [
    "CommandResult",
    "EngineExitCode",
    "EnsureState",
    "ExpectationResult",
    "IdentityField",
    "IdentitySchema",
    "Precedence",
    "PropertyMap",
    "ResourceIdentity",
    "Scenario",
    "ScenarioFactory",
    "ScenarioReport",
    "StepResult",
    "stringify",
]
