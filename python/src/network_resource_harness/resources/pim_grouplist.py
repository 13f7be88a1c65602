"""``cisco_pim_grouplist``: RP address group lists keyed by afi, vrf, rp address and group."""

from ..errors import UnknownScenarioError
from ..models import IdentityField, IdentitySchema, Precedence, PropertyMap, Scenario, ScenarioFactory
from ..registry import Registry

RESOURCE_TYPE = "cisco_pim_grouplist"

SCHEMA = IdentitySchema(
    resource_type=RESOURCE_TYPE,
    fields=[
        IdentityField(name="afi", normalizer="lowercase"),
        IdentityField(name="vrf"),
        IdentityField(name="rp_addr"),
        IdentityField(name="group"),
    ],
    title_token_counts=[1, 2, 4],
)

PRESENT = PropertyMap(ensure="present")

SCENARIOS: Registry[ScenarioFactory] = Registry("scenario", UnknownScenarioError)


@SCENARIOS.entry("title_pattern_name")
def title_pattern_name(platform: str) -> Scenario:
    return Scenario(
        scenario_id="title_pattern_name",
        description="3.1 Title Patterns",
        resource_type=RESOURCE_TYPE,
        title_pattern="newyork",
        identity_properties={"afi": "ipv4", "vrf": "red", "rp_addr": "22.22.22.22", "group": "224.0.0.0/8"},
        expected=PRESENT,
        precedence=Precedence.PROPERTIES,
    )


@SCENARIOS.entry("title_pattern_afi")
def title_pattern_afi(platform: str) -> Scenario:
    return Scenario(
        scenario_id="title_pattern_afi",
        description="3.2 Title Patterns",
        resource_type=RESOURCE_TYPE,
        title_pattern="ipv4",
        identity_properties={"vrf": "red", "rp_addr": "33.33.33.33", "group": "225.0.0.0/8"},
        expected=PRESENT,
    )


@SCENARIOS.entry("title_pattern_afi_vrf")
def title_pattern_afi_vrf(platform: str) -> Scenario:
    return Scenario(
        scenario_id="title_pattern_afi_vrf",
        description="3.3 Title Patterns",
        resource_type=RESOURCE_TYPE,
        title_pattern="ipv4 red",
        identity_properties={"rp_addr": "44.44.44.44", "group": "226.0.0.0/8"},
        expected=PRESENT,
    )


@SCENARIOS.entry("title_pattern_full")
def title_pattern_full(platform: str) -> Scenario:
    return Scenario(
        scenario_id="title_pattern_full",
        description="3.4 Title Patterns",
        resource_type=RESOURCE_TYPE,
        title_pattern="ipv4 default 55.55.55.55 227.0.0.0/8",
        expected=PRESENT,
    )
