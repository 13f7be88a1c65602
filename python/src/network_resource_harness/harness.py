"""Sequential apply/verify/remove/verify driver for title-pattern scenarios."""

from __future__ import annotations

from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from .config import Settings, load_settings
from .errors import IdentityError
from .logging import build_logger, configure_logging
from .models import (
    CommandResult,
    EnsureState,
    IdentitySchema,
    ResourceIdentity,
    Scenario,
    ScenarioFactory,
    ScenarioReport,
    StepResult,
)
from .registry import Registry
from .resources import lookup
from .tools.commands import CommandBuilder, parse_resource_titles
from .tools.expectation import ExpectationMatcher
from .tools.identity_codec import IdentityCodec
from .tools.manifest import ManifestRenderer, wrap_node, write_command

Runner = Callable[[str, str], CommandResult]
"""Runs ``command`` on the named host (``master`` or ``agent``)."""

MASTER = "master"
AGENT = "agent"


class ScenarioHarness:
    """Drive one resource type through its scenarios with an injected transport."""

    def __init__(
        self,
        runner: Runner,
        schema: IdentitySchema,
        settings: Optional[Settings] = None,
        matcher: Optional[ExpectationMatcher] = None,
    ) -> None:
        self._runner = runner
        self._schema = schema
        self._settings = settings or load_settings()
        self._codec = IdentityCodec(schema, self._settings.policies.title_precedence)
        self._renderer = ManifestRenderer(self._codec)
        self._commands = CommandBuilder(self._settings.engine)
        self._matcher = matcher or ExpectationMatcher()
        self._logger = build_logger("ScenarioHarness", resource_type=schema.resource_type)

    @property
    def codec(self) -> IdentityCodec:
        return self._codec

    @property
    def commands(self) -> CommandBuilder:
        return self._commands

    def _execute(self, host: str, command: str) -> CommandResult:
        self._logger.debug("command_dispatch", host=host, command=command)
        return self._runner(host, command)

    def apply_manifest(self, step: str, manifest: str, acceptable_exit_codes: Sequence[int]) -> StepResult:
        """Install ``manifest`` on the master and run the agent once."""

        try:
            written = self._execute(MASTER, write_command(wrap_node(manifest), self._commands.manifest_path))
            if written.exit_code != 0:
                return self._failed(step, "manifest write failed", exit_code=written.exit_code, stderr=written.stderr)
            applied = self._execute(AGENT, self._commands.agent_command())
        except Exception as exc:
            self._logger.error("transport_failed", step=step, error=str(exc))
            return self._failed(step, "transport error", error=str(exc))

        if applied.exit_code not in acceptable_exit_codes:
            return self._failed(
                step,
                "unexpected agent exit code",
                exit_code=applied.exit_code,
                acceptable=list(acceptable_exit_codes),
                stderr=applied.stderr,
            )
        self._logger.info("manifest_applied", step=step, exit_code=applied.exit_code)
        return StepResult(step=step, success=True, details={"exit_code": applied.exit_code})

    def verify(self, step: str, identity: ResourceIdentity, expected: Mapping[str, str], expect_present: bool) -> StepResult:
        """Introspect the resource and match ``expected`` against the output."""

        command = self._commands.resource_command(self._schema.resource_type, self._codec.render(identity))
        try:
            output = self._execute(AGENT, command)
        except Exception as exc:
            self._logger.error("transport_failed", step=step, error=str(exc))
            return self._failed(step, "transport error", error=str(exc))
        if output.exit_code != 0:
            return self._failed(step, "introspection failed", exit_code=output.exit_code, stderr=output.stderr)

        result = self._matcher.matches(output.stdout, expected, expect_present)
        self._logger.info("resource_verified", step=step, passed=result.passed, title=identity.title)
        return StepResult(step=step, success=result.passed, details=result.model_dump())

    def cleanup(self, acceptable_exit_codes: Optional[Sequence[int]] = None) -> StepResult:
        """Remove every existing instance of the resource type from the agent."""

        step = "cleanup"
        acceptable = list(acceptable_exit_codes or self._settings.policies.setup_exit_codes)
        resource_type = self._schema.resource_type
        removed: List[str] = []
        try:
            listing = self._execute(AGENT, self._commands.resource_command(resource_type))
            if listing.exit_code != 0:
                return self._failed(step, "resource listing failed", exit_code=listing.exit_code)
            for title in parse_resource_titles(listing.stdout, resource_type):
                outcome = self._execute(AGENT, self._commands.resource_absent_command(resource_type, title))
                if outcome.exit_code not in acceptable:
                    return self._failed(step, "resource removal failed", title=title, exit_code=outcome.exit_code)
                removed.append(title)
        except Exception as exc:
            self._logger.error("transport_failed", step=step, error=str(exc))
            return self._failed(step, "transport error", error=str(exc), removed=removed)
        self._logger.info("resource_cleanup", removed=removed)
        return StepResult(step=step, success=True, details={"removed": removed})

    def run(self, scenario: Scenario) -> ScenarioReport:
        steps: List[StepResult] = []
        policies = self._settings.policies
        present_codes = scenario.present_exit_codes or tuple(policies.apply_exit_codes)
        absent_codes = scenario.absent_exit_codes or tuple(policies.apply_exit_codes)
        self._logger.info("scenario_started", scenario=scenario.scenario_id, title_pattern=scenario.title_pattern)

        try:
            identity = self._codec.compose(scenario.title_pattern, scenario.identity_properties, scenario.precedence)
        except IdentityError as exc:
            self._logger.error("identity_compose_failed", scenario=scenario.scenario_id, error=str(exc))
            steps.append(self._failed("compose_identity", str(exc), missing=list(exc.missing), extra=list(exc.extra)))
            return self._report(scenario, steps)
        steps.append(StepResult(step="compose_identity", success=True, details={"title": identity.title}))

        def render(state: EnsureState) -> str:
            return self._renderer.render_with_pattern(
                scenario.resource_type, scenario.title_pattern, identity, state, scenario.manifest_properties
            )

        sequence = [
            lambda: self.apply_manifest("apply_present", render(EnsureState.PRESENT), present_codes),
            lambda: self.verify("verify_present", identity, scenario.expected, True),
            lambda: self.apply_manifest("apply_absent", render(EnsureState.ABSENT), absent_codes),
            lambda: self.verify("verify_absent", identity, scenario.expected, False),
        ]
        if scenario.absent_expected:
            sequence.append(lambda: self.verify("verify_absent_state", identity, scenario.absent_expected, True))

        for action in sequence:
            result = action()
            steps.append(result)
            if not result.success:
                break
        return self._report(scenario, steps)

    def run_registered(
        self, registry: Registry[ScenarioFactory], names: Optional[Iterable[str]] = None, platform: str = "nexus"
    ) -> List[ScenarioReport]:
        """Resolve every name first, then run the scenarios in order."""

        requested = list(names) if names is not None else registry.names()
        factories = registry.resolve(requested)
        return [self.run(factory(platform)) for factory in factories]

    def _report(self, scenario: Scenario, steps: List[StepResult]) -> ScenarioReport:
        status = "passed" if all(step.success for step in steps) else "failed"
        self._logger.info("scenario_finished", scenario=scenario.scenario_id, status=status)
        return ScenarioReport(scenario=scenario.scenario_id, description=scenario.description, status=status, steps=steps)

    def _failed(self, step: str, message: str, **details: object) -> StepResult:
        self._logger.warning("step_failed", step=step, message=message, **details)
        return StepResult(step=step, success=False, details={"message": message, **details})


def build_harness(
    runner: Runner,
    resource_type: str,
    settings: Optional[Settings] = None,
    *,
    configure: bool = True,
) -> Tuple[ScenarioHarness, Registry[ScenarioFactory]]:
    """Look up a catalogued resource type and return its harness and scenario registry."""

    resolved_settings = settings or load_settings()
    if configure:
        configure_logging(resolved_settings.log_level, resolved_settings.log_renderer)
    schema, scenarios = lookup(resource_type)
    return ScenarioHarness(runner, schema, resolved_settings), scenarios
