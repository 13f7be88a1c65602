"""Acceptance harness for declarative network-switch resources."""

from .errors import HarnessError, IdentityError, SchemaError, UnknownScenarioError
from .models import EnsureState, ExpectationResult, Precedence, PropertyMap, ResourceIdentity
from .tools import ExpectationMatcher, IdentityCodec, ManifestRenderer

__all__ = [
    "EnsureState",
    "ExpectationMatcher",
    "ExpectationResult",
    "HarnessError",
    "IdentityCodec",
    "IdentityError",
    "ManifestRenderer",
    "Precedence",
    "PropertyMap",
    "ResourceIdentity",
    "SchemaError",
    "UnknownScenarioError",
]

__version__ = "0.1.0"
