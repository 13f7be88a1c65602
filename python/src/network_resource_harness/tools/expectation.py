"""Match introspection output against expected key/value tables."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping

from ..logging import build_logger
from ..models import ExpectationResult, stringify

WILDCARD = "*"
_WILDCARD_TOKEN = r"[^',\s]*"
_ASSIGNMENT = re.compile(r"^[ \t]*([\w:]+)[ \t]*=>[ \t]*(.*?),?[ \t]*$", re.MULTILINE)


def pair_pattern(key: str, value: Any) -> re.Pattern[str]:
    """Compile ``key => 'value'``: the value is either fully quoted or an unquoted token.

    Whitespace after ``=>`` is consumed completely, so an empty or partial value
    cannot match by stopping in front of the real one.
    """

    value_re = _WILDCARD_TOKEN.join(re.escape(part) for part in stringify(value).split(WILDCARD))
    return re.compile(
        rf"(?<!\w){re.escape(key)}[ \t]*=>[ \t]*(?![ \t])(?:'{value_re}'|{value_re}(?=[,\s]|$))",
        re.MULTILINE,
    )


def hash_to_patterns(expected: Mapping[str, Any]) -> Dict[str, re.Pattern[str]]:
    return {key: pair_pattern(key, value) for key, value in expected.items()}


def parse_introspection(output_text: str) -> Dict[str, str]:
    """Extract ``key => value`` assignments; the last occurrence of a key wins."""

    parsed: Dict[str, str] = {}
    for match in _ASSIGNMENT.finditer(output_text):
        value = match.group(2).strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        parsed[match.group(1)] = value
    return parsed


class ExpectationMatcher:
    """Decide whether expected pairs appear in, or are absent from, tool output."""

    def __init__(self) -> None:
        self._logger = build_logger("ExpectationMatcher")

    def matches(self, output_text: str, expected: Mapping[str, Any], expect_present: bool = True) -> ExpectationResult:
        mismatched: List[str] = []
        for key, pattern in hash_to_patterns(expected).items():
            found = pattern.search(output_text) is not None
            if found != expect_present:
                mismatched.append(key)

        observed: Dict[str, str] = {}
        if mismatched:
            parsed = parse_introspection(output_text)
            observed = {key: parsed[key] for key in mismatched if key in parsed}
            self._logger.info(
                "expectation_mismatch",
                expect_present=expect_present,
                keys=mismatched,
            )

        return ExpectationResult(
            passed=not mismatched,
            expect_present=expect_present,
            mismatched=tuple(mismatched),
            expected={key: stringify(expected[key]) for key in mismatched},
            observed=observed,
        )
