"""Identity, manifest, expectation and command tooling."""

from ..models import EngineExitCode
from .commands import CommandBuilder, parse_resource_titles
from .expectation import ExpectationMatcher, parse_introspection, pair_pattern
from .identity_codec import IdentityCodec
from .manifest import ManifestRenderer, quote, wrap_node, write_command

__all__ = [
    "CommandBuilder",
    "EngineExitCode",
    "ExpectationMatcher",
    "IdentityCodec",
    "ManifestRenderer",
    "pair_pattern",
    "parse_introspection",
    "parse_resource_titles",
    "quote",
    "wrap_node",
    "write_command",
]
