"""Name-based priority rules."""

import re
import unicodedata
from dataclasses import dataclass


@dataclass(frozen=True)
class PriorityRule:
    pattern: re.Pattern[str]
    priority: int

    @classmethod
    def from_pair(cls, pattern: str, priority: int) -> "PriorityRule":
        return cls(pattern=re.compile(pattern), priority=priority)

    def matches(self, name: str) -> bool:
        return self.pattern.search(name) is not None


def resolve_priority(name: str, rules: list[PriorityRule], default: int = 0) -> int:
    """Return the priority of the last matching rule, or the default.

    Rules are cumulative: every rule is tested and a later match overrides an
    earlier one.
    """
    priority = default
    for rule in rules:
        if rule.matches(name):
            priority = rule.priority
    return priority


def name_sort_key(name: str) -> str:
    """Case- and accent-insensitive collation key."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()
