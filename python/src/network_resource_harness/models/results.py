"""Outcome models produced by the matcher and the scenario driver."""

from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class ExpectationResult(BaseModel):
    """Pass/fail verdict of one introspection check."""

    passed: bool = Field(..., description="True when every expectation held.")
    expect_present: bool = Field(..., description="Whether the pairs were expected to appear.")
    mismatched: Tuple[str, ...] = Field(default=(), description="Keys whose expectation failed.")
    expected: Dict[str, str] = Field(default_factory=dict, description="Expected value of each failing key.")
    observed: Dict[str, str] = Field(
        default_factory=dict,
        description="Value printed by the tool for failing keys, where one was found.",
    )

    model_config = {"frozen": True}

    def __bool__(self) -> bool:
        return self.passed

    def summary(self) -> str:
        if self.passed:
            return "all expectations met"
        verb = "missing" if self.expect_present else "unexpectedly present"
        parts = []
        for key in self.mismatched:
            detail = f"{key} => '{self.expected.get(key, '')}'"
            if self.expect_present and key in self.observed:
                detail += f" (found '{self.observed[key]}')"
            parts.append(detail)
        return f"{verb}: " + ", ".join(parts)


class EngineExitCode(IntEnum):
    """Exit codes of an agent run with detailed exit codes enabled."""

    NO_CHANGES = 0
    ERRORS = 1
    CHANGES = 2
    FAILURES = 4
    CHANGES_AND_FAILURES = 6


class CommandResult(BaseModel):
    """What the transport returns for one remote command."""

    exit_code: int = Field(...)
    stdout: str = Field(default="")
    stderr: str = Field(default="")


class StepResult(BaseModel):
    """Result for a single scenario step."""

    step: str = Field(...)
    success: bool = Field(...)
    details: Optional[Dict[str, Any]] = Field(default=None)


class ScenarioReport(BaseModel):
    """Aggregated scenario execution report."""

    scenario: str = Field(...)
    description: str = Field(default="")
    status: str = Field(..., description="'passed' or 'failed'.")
    steps: List[StepResult] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status == "passed"

    def failures(self) -> List[StepResult]:
        return [step for step in self.steps if not step.success]
