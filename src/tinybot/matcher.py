"""Filter compilation and matching of events against filters.

A filter is a mapping of field name to expected value::

    {"text": "cool"}                      # exact match
    {"text": re.compile(r"n(.*)e")}       # regex search, groups captured
    {"file": True}                        # field must be present
    {"file.name": "Slack for iOS"}        # nested field
    {"filename": "great.jpg", "channel": "#random"}

``user`` and ``channel`` values that are names rather than ids are
translated through the Directory when the filter is evaluated.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from .directory import Directory
from .types import (
    NO_MATCH,
    ExactMatch,
    FilterValue,
    MatchResult,
    PatternMatch,
    PresenceCheck,
    Unsatisfiable,
)

Filter = dict[str, FilterValue]


def compile_value(value: Any) -> FilterValue:
    """Translate a plain Python filter value into its tagged variant."""
    if isinstance(value, (ExactMatch, PatternMatch, PresenceCheck, Unsatisfiable)):
        return value
    if value is True:
        return PresenceCheck()
    if value is False:
        return Unsatisfiable()
    if isinstance(value, re.Pattern):
        return PatternMatch(value)
    return ExactMatch(value)


def compile_filter(raw: Mapping[str, Any]) -> Filter:
    """Compile a filter mapping, preserving declaration order."""
    return {field: compile_value(value) for field, value in raw.items()}


def is_present(value: Any) -> bool:
    """Whether a resolved field value counts as present.

    ``None``, ``False`` and empty strings/collections are absent; numbers
    (including 0) are present.
    """
    if value is None or value is False:
        return False
    if isinstance(value, (str, bytes, list, tuple, dict, set)):
        return len(value) > 0
    return True


def resolve_field(
    event: Mapping[str, Any], field: str, *, self_id: str | None = None
) -> Any:
    """Extract the value a filter field refers to, or None."""
    if field == "filename":
        file = event.get("file")
        return file.get("name") if isinstance(file, Mapping) else None

    if field == "self":
        if "self" in event:
            return event["self"]
        if self_id is not None and event.get("user") == self_id:
            return True
        return None

    if "." in field:
        value: Any = event
        for part in field.split("."):
            if not isinstance(value, Mapping) or part not in value:
                return None
            value = value[part]
        return value

    return event.get(field)


class Matcher:
    """Evaluates compiled filters against events, using a Directory for names."""

    def __init__(self, directory: Directory | None = None) -> None:
        self.directory = directory or Directory()

    def _translate(self, field: str, expected: FilterValue) -> FilterValue | None:
        """Swap user/channel names for ids. None means the name is unknown."""
        if not isinstance(expected, ExactMatch) or not isinstance(expected.value, str):
            return expected

        value = expected.value
        if field == "user" and not self.directory.looks_like_user_id(value):
            resolved = self.directory.resolve_user(value)
        elif field == "channel" and not self.directory.looks_like_channel_id(value):
            resolved = self.directory.resolve_channel(value)
        else:
            return expected

        return ExactMatch(resolved) if resolved is not None else None

    def match(self, event: Mapping[str, Any], filters: Filter) -> MatchResult:
        captures: list[str] = []

        for field, expected in filters.items():
            if isinstance(expected, Unsatisfiable):
                return NO_MATCH

            actual = resolve_field(event, field, self_id=self.directory.self_id)
            if not is_present(actual):
                return NO_MATCH

            translated = self._translate(field, expected)
            if translated is None:
                return NO_MATCH

            if isinstance(translated, PresenceCheck):
                continue

            if isinstance(translated, PatternMatch):
                if not isinstance(actual, str):
                    return NO_MATCH
                found = translated.pattern.search(actual)
                if found is None:
                    return NO_MATCH
                captures.extend(found.groups(""))
                continue

            if actual != translated.value:
                return NO_MATCH

        return MatchResult.hit(tuple(captures))
