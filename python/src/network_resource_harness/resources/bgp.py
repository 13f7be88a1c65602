"""``cisco_bgp`` router process: identity schema, defaults and title-pattern scenarios."""

from typing import Dict

from ..errors import UnknownScenarioError
from ..models import IdentityField, IdentitySchema, Precedence, PropertyMap, Scenario, ScenarioFactory
from ..registry import Registry

RESOURCE_TYPE = "cisco_bgp"
ASN = "2"
ASN_ASDOT = "1.1"
ASN_ASPLAIN = "65537"
VRF1 = "blue"
# A title that matches no identity field; explicit parameters must carry the identity.
NAME_TITLE = "raleigh"

SCHEMA = IdentitySchema(
    resource_type=RESOURCE_TYPE,
    fields=[
        IdentityField(name="asn", normalizer="asn_asplain"),
        IdentityField(name="vrf", default="default"),
    ],
)

_COMMON_DEFAULTS: Dict[str, str] = {
    "ensure": "present",
    "fast_external_fallover": "true",
    "enforce_first_as": "true",
    "bestpath_always_compare_med": "false",
    "bestpath_aspath_multipath_relax": "false",
    "bestpath_compare_routerid": "false",
    "bestpath_cost_community_ignore": "false",
    "bestpath_med_confed": "false",
    "bestpath_med_missing_as_worst": "false",
    "graceful_restart": "false",
    "graceful_restart_timers_restart": "120",
    "graceful_restart_timers_stalepath_time": "300",
    "timer_bgp_keepalive": "60",
    "timer_bgp_holdtime": "180",
}

_NXOS_DEFAULTS: Dict[str, str] = {
    "bestpath_med_non_deterministic": "false",
    "disable_policy_batching": "false",
    "event_history_cli": "size_small",
    "event_history_detail": "false",
    "event_history_events": "size_small",
    "event_history_periodic": "size_small",
    "flush_routes": "false",
    "graceful_restart": "true",
    "graceful_restart_helper": "false",
    "isolate": "false",
    "log_neighbor_changes": "false",
    "maxas_limit": "false",
    "neighbor_down_fib_accelerate": "false",
    "shutdown": "false",
    "suppress_fib_pending": "false",
    "timer_bestpath_limit": "300",
    "timer_bestpath_limit_always": "false",
}

_XR_DEFAULTS: Dict[str, str] = {"nsr": "false"}

DEFAULT_VRF_ONLY = (
    "enforce_first_as",
    "event_history_cli",
    "event_history_detail",
    "event_history_events",
    "event_history_periodic",
    "disable_policy_batching",
)

XR_DEFAULT_VRF_ONLY = (
    "bestpath_med_confed",
    "graceful_restart",
    "graceful_restart_timers_restart",
    "graceful_restart_timers_stalepath_time",
    "nsr",
)


def default_vrf_expectations(platform: str) -> PropertyMap:
    """Default property values of a freshly created process in the default VRF."""

    extra = _XR_DEFAULTS if platform == "ios_xr" else _NXOS_DEFAULTS
    return PropertyMap(_COMMON_DEFAULTS).with_values(extra)


def vrf_expectations(platform: str) -> PropertyMap:
    """Defaults for a non-default VRF, without the properties that only exist in the default VRF."""

    expected = default_vrf_expectations(platform).without(*DEFAULT_VRF_ONLY)
    if platform == "ios_xr":
        expected = expected.without(*XR_DEFAULT_VRF_ONLY)
    return expected


SCENARIOS: Registry[ScenarioFactory] = Registry("scenario", UnknownScenarioError)


def _scenario(
    number: int,
    platform: str,
    title: str,
    description: str,
    vrf_scope: bool,
    precedence: Precedence = Precedence.TITLE,
    **identity: str,
) -> Scenario:
    return Scenario(
        scenario_id=f"title_pattern{number}",
        description=description,
        resource_type=RESOURCE_TYPE,
        title_pattern=title,
        identity_properties=identity,
        expected=vrf_expectations(platform) if vrf_scope else default_vrf_expectations(platform),
        precedence=precedence,
    )


@SCENARIOS.entry("title_pattern1")
def title_pattern1(platform: str) -> Scenario:
    return _scenario(1, platform, ASN, "asn only, vrf defaulted", vrf_scope=False)


@SCENARIOS.entry("title_pattern2")
def title_pattern2(platform: str) -> Scenario:
    return _scenario(2, platform, f"{ASN} default", "asn and vrf in title", vrf_scope=False)


@SCENARIOS.entry("title_pattern3")
def title_pattern3(platform: str) -> Scenario:
    return _scenario(
        3, platform, NAME_TITLE, "name title, asn and vrf as parameters", vrf_scope=False,
        precedence=Precedence.PROPERTIES, asn=ASN, vrf="default",
    )


@SCENARIOS.entry("title_pattern4")
def title_pattern4(platform: str) -> Scenario:
    return _scenario(4, platform, ASN, "asn in title, vrf as parameter", vrf_scope=False, vrf="default")


@SCENARIOS.entry("title_pattern5")
def title_pattern5(platform: str) -> Scenario:
    return _scenario(
        5, platform, NAME_TITLE, "name title, asn as parameter, vrf defaulted", vrf_scope=False,
        precedence=Precedence.PROPERTIES, asn=ASN,
    )


@SCENARIOS.entry("title_pattern6")
def title_pattern6(platform: str) -> Scenario:
    return _scenario(6, platform, f"{ASN} {VRF1}", "asn and vrf in title", vrf_scope=True)


@SCENARIOS.entry("title_pattern7")
def title_pattern7(platform: str) -> Scenario:
    return _scenario(7, platform, ASN, "asn in title, vrf as parameter", vrf_scope=True, vrf=VRF1)


@SCENARIOS.entry("title_pattern8")
def title_pattern8(platform: str) -> Scenario:
    return _scenario(
        8, platform, NAME_TITLE, "name title, asn and vrf as parameters", vrf_scope=True,
        precedence=Precedence.PROPERTIES, asn=ASN, vrf=VRF1,
    )


@SCENARIOS.entry("title_pattern9")
def title_pattern9(platform: str) -> Scenario:
    return _scenario(9, platform, f"{ASN_ASDOT} {VRF1}", "asdot asn and vrf in title", vrf_scope=True)


@SCENARIOS.entry("title_pattern10")
def title_pattern10(platform: str) -> Scenario:
    return _scenario(10, platform, ASN_ASDOT, "asdot asn in title, vrf as parameter", vrf_scope=True, vrf=VRF1)


@SCENARIOS.entry("title_pattern11")
def title_pattern11(platform: str) -> Scenario:
    return _scenario(
        11, platform, NAME_TITLE, "name title, asdot asn and vrf as parameters", vrf_scope=True,
        precedence=Precedence.PROPERTIES, asn=ASN_ASDOT, vrf=VRF1,
    )
