"""Render declarative manifest blocks for the configuration engine."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Tuple

from ..logging import build_logger
from ..models import EnsureState, ResourceIdentity, stringify
from .identity_codec import IdentityCodec

_INDENT = "  "


def quote(value: Any) -> str:
    """Single-quote a value, escaping backslashes and quotes."""

    text = stringify(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{text}'"


class ManifestRenderer:
    """Turn identities and property tables into resource declarations."""

    def __init__(self, codec: IdentityCodec, key_width: int = 0) -> None:
        self._codec = codec
        self._key_width = key_width
        self._logger = build_logger("ManifestRenderer", resource_type=codec.schema.resource_type)

    def render(
        self,
        resource_type: str,
        identity: ResourceIdentity,
        ensure: EnsureState | str,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Block titled with the fully qualified identity.

        Removal blocks carry only ``ensure => absent``.
        """

        state = EnsureState(ensure)
        title = self._codec.render(identity)
        assignments: List[Tuple[str, Any]] = []
        if state is EnsureState.PRESENT:
            assignments.extend(self._filtered(properties))
        return self._block(resource_type, title, state, assignments)

    def render_with_pattern(
        self,
        resource_type: str,
        title_pattern: str,
        identity: ResourceIdentity,
        ensure: EnsureState | str,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Block titled with the raw title pattern.

        Identity fields the pattern did not supply are emitted first so the
        engine can still resolve the resource, including on removal.
        """

        state = EnsureState(ensure)
        uncovered = self._codec.uncovered_fields(identity)
        assignments: List[Tuple[str, Any]] = list(uncovered.items())
        if state is EnsureState.PRESENT:
            assignments.extend((key, value) for key, value in self._filtered(properties) if key not in uncovered)
        return self._block(resource_type, title_pattern, state, assignments)

    def _filtered(self, properties: Optional[Mapping[str, Any]]) -> Iterable[Tuple[str, Any]]:
        for key, value in (properties or {}).items():
            if key == "ensure" or value is None:
                continue
            yield key, value

    def _block(self, resource_type: str, title: str, state: EnsureState, assignments: List[Tuple[str, Any]]) -> str:
        lines = [f"{resource_type} {{ {quote(title)}:", self._line("ensure", state.value, quoted=False)]
        lines.extend(self._line(key, value) for key, value in assignments)
        lines.append("}")
        self._logger.debug("manifest_rendered", title=title, ensure=state.value, assignments=len(assignments))
        return "\n".join(lines) + "\n"

    def _line(self, key: str, value: Any, quoted: bool = True) -> str:
        rendered = quote(value) if quoted else stringify(value)
        return f"{_INDENT}{key.ljust(self._key_width)} => {rendered},"


def wrap_node(body: str, node: str = "default") -> str:
    """Wrap resource blocks in a node definition."""

    indented = "\n".join(f"{_INDENT}{line}" if line else line for line in body.rstrip("\n").splitlines())
    return f"node {quote(node)} {{\n{indented}\n}}\n"


def write_command(manifest: str, path: str) -> str:
    """Shell heredoc that installs ``manifest`` at ``path`` on the master."""

    body = manifest.rstrip("\n")
    return f"cat <<EOF >{path}\n{body}\nEOF"
