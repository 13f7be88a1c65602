"""Catalog of resource types exercised by the harness."""

from typing import Dict, Tuple

from ..errors import UnknownEntryError
from ..models import IdentitySchema, ScenarioFactory
from ..registry import Registry
from . import bgp, pim_grouplist

CATALOG: Dict[str, Tuple[IdentitySchema, Registry[ScenarioFactory]]] = {
    bgp.RESOURCE_TYPE: (bgp.SCHEMA, bgp.SCENARIOS),
    pim_grouplist.RESOURCE_TYPE: (pim_grouplist.SCHEMA, pim_grouplist.SCENARIOS),
}


def lookup(resource_type: str) -> Tuple[IdentitySchema, Registry[ScenarioFactory]]:
    if resource_type not in CATALOG:
        raise UnknownEntryError([resource_type], CATALOG)
    return CATALOG[resource_type]


__all__ = ["CATALOG", "bgp", "lookup", "pim_grouplist"]
