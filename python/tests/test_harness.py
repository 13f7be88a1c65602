"""Scenario driver tests against a scripted transport."""

from typing import Dict, List, Optional, Tuple

import pytest

from network_resource_harness.config import EngineSettings, Settings
from network_resource_harness.errors import UnknownScenarioError
from network_resource_harness.harness import ScenarioHarness, build_harness
from network_resource_harness.models import CommandResult, Precedence, Scenario
from network_resource_harness.resources import bgp, pim_grouplist


class ScriptedDevice:
    """Minimal stand-in for master and agent: remembers the last manifest and resource state."""

    def __init__(
        self, present_output: str, apply_exit_code: int = 2, listing: str = "", removal_exit_code: int = 0
    ) -> None:
        self.present_output = present_output
        self.apply_exit_code = apply_exit_code
        self.removal_exit_code = removal_exit_code
        self.listing = listing
        self.present = False
        self.manifest = ""
        self.calls: List[Tuple[str, str]] = []

    def __call__(self, host: str, command: str) -> CommandResult:
        self.calls.append((host, command))
        if command.startswith("cat <<EOF"):
            self.manifest = command
            return CommandResult(exit_code=0)
        if command.endswith("agent -t"):
            self.present = "ensure => present" in self.manifest
            return CommandResult(exit_code=self.apply_exit_code)
        if command.endswith("ensure=absent"):
            return CommandResult(exit_code=self.removal_exit_code)
        if "resource" in command and "'" not in command:
            return CommandResult(exit_code=0, stdout=self.listing)
        if self.present:
            return CommandResult(exit_code=0, stdout=self.present_output)
        title = command.split("'")[1]
        return CommandResult(exit_code=0, stdout=f"resource {{ '{title}':\n  ensure => 'absent',\n}}\n")

    def commands_on(self, host: str) -> List[str]:
        return [command for called_host, command in self.calls if called_host == host]


def _render_output(resource_type: str, title: str, properties: Dict[str, str]) -> str:
    lines = [f"{resource_type} {{ '{title}':"]
    lines.extend(f"  {key:<40} => '{value}'," for key, value in properties.items())
    lines.append("}")
    return "\n".join(lines) + "\n"


@pytest.fixture()
def settings() -> Settings:
    return Settings(engine=EngineSettings(binpath="/opt/puppet ", manifest_path="/tmp/site.pp"))


def _pim_output() -> str:
    return _render_output("cisco_pim_grouplist", "ipv4 red 44.44.44.44 226.0.0.0/8", {"ensure": "present"})


def test_pim_scenario_passes_every_step(settings: Settings) -> None:
    device = ScriptedDevice(_pim_output())
    harness = ScenarioHarness(device, pim_grouplist.SCHEMA, settings)

    report = harness.run(pim_grouplist.SCENARIOS.get("title_pattern_afi_vrf")("nexus"))

    assert report.passed, report.failures()
    assert [step.step for step in report.steps] == [
        "compose_identity",
        "apply_present",
        "verify_present",
        "apply_absent",
        "verify_absent",
        "verify_absent_state",
    ]
    master_commands = device.commands_on("master")
    assert master_commands[0].startswith("cat <<EOF >/tmp/site.pp\nnode 'default' {")
    assert "cisco_pim_grouplist { 'ipv4 red':" in master_commands[0]
    assert "rp_addr => '44.44.44.44'," in master_commands[0]
    assert "ensure => absent," in master_commands[1]
    assert "rp_addr => '44.44.44.44'," in master_commands[1]
    assert "/opt/puppet resource cisco_pim_grouplist 'ipv4 red 44.44.44.44 226.0.0.0/8'" in device.commands_on("agent")


def test_bgp_scenario_checks_defaults(settings: Settings) -> None:
    expected = bgp.vrf_expectations("nexus")
    device = ScriptedDevice(_render_output("cisco_bgp", "65537 blue", dict(expected)))
    harness = ScenarioHarness(device, bgp.SCHEMA, settings)

    report = harness.run(bgp.SCENARIOS.get("title_pattern11")("nexus"))

    assert report.passed, report.failures()
    assert "cisco_bgp { 'raleigh':" in device.commands_on("master")[0]
    assert "asn => '65537'," in device.commands_on("master")[0]
    assert "/opt/puppet resource cisco_bgp '65537 blue'" in device.commands_on("agent")


def test_unexpected_exit_code_stops_scenario(settings: Settings) -> None:
    device = ScriptedDevice(_pim_output(), apply_exit_code=0)
    harness = ScenarioHarness(device, pim_grouplist.SCHEMA, settings)

    report = harness.run(pim_grouplist.SCENARIOS.get("title_pattern_afi_vrf")("nexus"))

    assert report.status == "failed"
    assert [step.step for step in report.steps] == ["compose_identity", "apply_present"]
    assert report.steps[-1].details["exit_code"] == 0
    assert report.steps[-1].details["acceptable"] == [2]


def test_scenario_exit_codes_override_policy(settings: Settings) -> None:
    device = ScriptedDevice(_pim_output(), apply_exit_code=0)
    harness = ScenarioHarness(device, pim_grouplist.SCHEMA, settings)
    scenario = pim_grouplist.SCENARIOS.get("title_pattern_afi_vrf")("nexus").model_copy(
        update={"present_exit_codes": (0, 2), "absent_exit_codes": (0, 2)}
    )

    assert harness.run(scenario).passed


def test_mismatch_is_reported_as_failed_step(settings: Settings) -> None:
    output = _render_output("cisco_bgp", "2 default", {"ensure": "present", "graceful_restart": "false"})
    device = ScriptedDevice(output)
    harness = ScenarioHarness(device, bgp.SCHEMA, settings)

    report = harness.run(bgp.SCENARIOS.get("title_pattern1")("nexus"))

    failed = report.failures()
    assert [step.step for step in failed] == ["verify_present"]
    assert "graceful_restart" in failed[0].details["mismatched"]
    assert failed[0].details["observed"]["graceful_restart"] == "false"


def test_identity_error_aborts_scenario(settings: Settings) -> None:
    device = ScriptedDevice(_pim_output())
    harness = ScenarioHarness(device, pim_grouplist.SCHEMA, settings)
    scenario = Scenario(
        scenario_id="broken",
        resource_type="cisco_pim_grouplist",
        title_pattern="ipv4",
        identity_properties={"vrf": "red"},
    )

    report = harness.run(scenario)

    assert report.status == "failed"
    assert len(report.steps) == 1
    assert report.steps[0].details["missing"] == ["rp_addr", "group"]
    assert device.calls == []


def test_unknown_scenarios_fail_before_running(settings: Settings) -> None:
    device = ScriptedDevice(_pim_output())
    harness = ScenarioHarness(device, pim_grouplist.SCHEMA, settings)

    with pytest.raises(UnknownScenarioError):
        harness.run_registered(pim_grouplist.SCENARIOS, ["title_pattern_afi_vrf", "title_pattern_bogus"])
    assert device.calls == []


def test_run_registered_runs_in_order(settings: Settings) -> None:
    device = ScriptedDevice(_pim_output())
    harness = ScenarioHarness(device, pim_grouplist.SCHEMA, settings)

    reports = harness.run_registered(pim_grouplist.SCENARIOS, ["title_pattern_full", "title_pattern_afi_vrf"])

    assert [report.scenario for report in reports] == ["title_pattern_full", "title_pattern_afi_vrf"]
    # the scripted output only describes 'ipv4 red 44.44.44.44 226.0.0.0/8'; presence is all it checks
    assert all(report.passed for report in reports)


def test_cleanup_removes_listed_resources(settings: Settings) -> None:
    listing = _render_output("cisco_pim_grouplist", "ipv4 default 1.1.1.1 224.0.0.0/8", {"ensure": "present"})
    device = ScriptedDevice(_pim_output(), listing=listing)
    harness = ScenarioHarness(device, pim_grouplist.SCHEMA, settings)

    result = harness.cleanup()

    assert result.success
    assert result.details == {"removed": ["ipv4 default 1.1.1.1 224.0.0.0/8"]}
    assert device.commands_on("agent")[-1] == (
        "/opt/puppet resource cisco_pim_grouplist 'ipv4 default 1.1.1.1 224.0.0.0/8' ensure=absent"
    )


def test_namespace_applies_to_agent_commands() -> None:
    settings = Settings(engine=EngineSettings(binpath="/opt/puppet ", agent_namespace="management"))
    device = ScriptedDevice(_pim_output())
    harness = ScenarioHarness(device, pim_grouplist.SCHEMA, settings)

    harness.run(pim_grouplist.SCENARIOS.get("title_pattern_full")("nexus"))

    assert all(command.startswith("sudo ip netns exec management ") for command in device.commands_on("agent"))
    assert not any(command.startswith("sudo") for command in device.commands_on("master"))


def test_precedence_from_settings_applies_when_scenario_is_silent() -> None:
    settings = Settings()
    settings.policies.title_precedence = Precedence.PROPERTIES
    harness = ScenarioHarness(ScriptedDevice(""), pim_grouplist.SCHEMA, settings)

    identity = harness.codec.compose("ipv4", {"afi": "ipv6", "vrf": "red", "rp_addr": "1.1.1.1", "group": "224.0.0.0/8"})

    assert identity["afi"] == "ipv6"


def test_build_harness_uses_catalog(settings: Settings) -> None:
    harness, scenarios = build_harness(ScriptedDevice(""), "cisco_bgp", settings, configure=False)

    assert harness.codec.schema is bgp.SCHEMA
    assert "title_pattern9" in scenarios


class UnreachableDevice(ScriptedDevice):
    """Transport that fails for every command matching ``fail_on``."""

    def __init__(self, fail_on: str, listing: str = "") -> None:
        super().__init__(_pim_output(), listing=listing)
        self.fail_on = fail_on

    def __call__(self, host: str, command: str) -> CommandResult:
        if self.fail_on in command:
            raise ConnectionError("ssh down")
        return super().__call__(host, command)


def test_transport_error_while_applying_fails_step(settings: Settings) -> None:
    harness = ScenarioHarness(UnreachableDevice("agent -t"), pim_grouplist.SCHEMA, settings)

    report = harness.run(pim_grouplist.SCENARIOS.get("title_pattern_afi_vrf")("nexus"))

    assert report.status == "failed"
    assert [step.step for step in report.steps] == ["compose_identity", "apply_present"]
    assert report.steps[-1].details == {"message": "transport error", "error": "ssh down"}


def test_transport_error_while_verifying_fails_step(settings: Settings) -> None:
    harness = ScenarioHarness(UnreachableDevice("resource cisco_pim_grouplist"), pim_grouplist.SCHEMA, settings)

    report = harness.run(pim_grouplist.SCENARIOS.get("title_pattern_afi_vrf")("nexus"))

    assert [step.step for step in report.failures()] == ["verify_present"]
    assert report.failures()[0].details["error"] == "ssh down"


def test_transport_error_during_cleanup_fails_step(settings: Settings) -> None:
    listing = _render_output("cisco_pim_grouplist", "ipv4 default 1.1.1.1 224.0.0.0/8", {"ensure": "present"})
    harness = ScenarioHarness(UnreachableDevice("ensure=absent", listing=listing), pim_grouplist.SCHEMA, settings)

    result = harness.cleanup()

    assert not result.success
    assert result.details == {"message": "transport error", "error": "ssh down", "removed": []}


def test_cleanup_listing_transport_error(settings: Settings) -> None:
    harness = ScenarioHarness(UnreachableDevice("resource"), pim_grouplist.SCHEMA, settings)

    result = harness.cleanup()

    assert not result.success
    assert result.details["message"] == "transport error"


def test_cleanup_uses_setup_exit_codes_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    listing = _render_output("cisco_pim_grouplist", "ipv4 default 1.1.1.1 224.0.0.0/8", {"ensure": "present"})
    engine = EngineSettings(binpath="/opt/puppet ")

    lenient = ScenarioHarness(
        ScriptedDevice(_pim_output(), listing=listing, removal_exit_code=2), pim_grouplist.SCHEMA, Settings(engine=engine)
    )
    assert lenient.cleanup().success

    monkeypatch.setenv("NETWORK_RESOURCE_HARNESS_POLICIES__SETUP_EXIT_CODES", "[0]")
    strict = ScenarioHarness(
        ScriptedDevice(_pim_output(), listing=listing, removal_exit_code=2), pim_grouplist.SCHEMA, Settings(engine=engine)
    )
    result = strict.cleanup()

    assert not result.success
    assert result.details["message"] == "resource removal failed"
    assert result.details["exit_code"] == 2
