"""Compose and decompose resource identities from title patterns."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..errors import IdentityError
from ..logging import build_logger
from ..models import IdentityField, IdentitySchema, Precedence, ResourceIdentity, stringify


class IdentityCodec:
    """Merge positional title tokens with explicit properties for one resource type.

    Title tokens fill the schema's fields left to right. Fields the title does
    not cover come from the properties, then from the field default. When both
    sources name a field, ``precedence`` decides which value is kept.
    """

    def __init__(self, schema: IdentitySchema, precedence: Precedence = Precedence.TITLE) -> None:
        self._schema = schema
        self._precedence = Precedence(precedence)
        self._logger = build_logger("IdentityCodec", resource_type=schema.resource_type)

    @property
    def schema(self) -> IdentitySchema:
        return self._schema

    def compose(
        self,
        title_pattern: str,
        properties: Optional[Mapping[str, Any]] = None,
        precedence: Optional[Precedence] = None,
    ) -> ResourceIdentity:
        properties = properties or {}
        precedence = Precedence(precedence or self._precedence)
        tokens = title_pattern.split()
        names = self._schema.names

        if not tokens:
            raise IdentityError(f"Empty title for {self._schema.resource_type}")
        if len(tokens) > len(names):
            extra = tokens[len(names):]
            raise IdentityError(
                f"Title '{title_pattern}' has {len(tokens)} tokens but {self._schema.resource_type} "
                f"has only {len(names)} identity fields ({', '.join(names)}); extra: {', '.join(extra)}",
                extra=extra,
            )
        if not self._schema.accepts_token_count(len(tokens)):
            raise IdentityError(
                f"Title '{title_pattern}' matches no title pattern of {self._schema.resource_type} "
                f"(accepted token counts: {', '.join(str(c) for c in self._schema.title_token_counts or [])})"
            )

        title_values = dict(zip(names, tokens))
        values: List[str] = []
        from_title = set()
        missing: List[str] = []
        for field in self._schema.fields:
            name = field.name
            in_title = name in title_values
            in_props = name in properties and properties[name] is not None
            if in_title and in_props:
                if precedence is Precedence.TITLE:
                    value = field.normalize(title_values[name])
                    discarded = stringify(properties[name])
                    from_title.add(name)
                else:
                    value = field.normalize(stringify(properties[name]))
                    discarded = title_values[name]
                if self._normalized_or_raw(field, discarded) != value:
                    self._logger.warning(
                        "identity_field_conflict",
                        field=name,
                        kept=value,
                        discarded=discarded,
                        precedence=precedence.value,
                    )
                values.append(value)
            elif in_title:
                values.append(field.normalize(title_values[name]))
                from_title.add(name)
            elif in_props:
                values.append(field.normalize(stringify(properties[name])))
            elif field.default is not None:
                values.append(field.normalize(field.default))
            else:
                missing.append(name)

        if missing:
            raise IdentityError(
                f"Identity of {self._schema.resource_type} '{title_pattern}' is missing "
                f"field(s) {', '.join(missing)}: supply them in the title or the properties",
                missing=missing,
            )

        identity = ResourceIdentity(
            resource_type=self._schema.resource_type,
            names=names,
            values=tuple(values),
            from_title=frozenset(from_title),
        )
        self._logger.debug("identity_composed", title_pattern=title_pattern, title=identity.title)
        return identity

    def render(self, identity: ResourceIdentity) -> str:
        """Fully qualified title: every field value in canonical order."""

        if identity.names != self._schema.names:
            raise IdentityError(
                f"Identity fields {', '.join(identity.names)} do not match "
                f"{self._schema.resource_type} fields {', '.join(self._schema.names)}"
            )
        return identity.title

    def parse(self, title: str) -> ResourceIdentity:
        """Inverse of :meth:`render`; the title must carry every field."""

        tokens = title.split()
        if len(tokens) != len(self._schema.names):
            raise IdentityError(
                f"Fully qualified title for {self._schema.resource_type} needs "
                f"{len(self._schema.names)} tokens, got {len(tokens)}: '{title}'"
            )
        values = tuple(field.normalize(token) for field, token in zip(self._schema.fields, tokens))
        return ResourceIdentity(
            resource_type=self._schema.resource_type,
            names=self._schema.names,
            values=values,
            from_title=frozenset(self._schema.names),
        )

    def uncovered_fields(self, identity: ResourceIdentity) -> Dict[str, str]:
        """Identity fields that did not come from the title, in canonical order."""

        return {name: value for name, value in zip(identity.names, identity.values) if name not in identity.from_title}

    @staticmethod
    def _normalized_or_raw(field: IdentityField, value: str) -> str:
        try:
            return field.normalize(value)
        except IdentityError:
            return value
