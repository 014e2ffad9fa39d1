"""Rules, rulesets that enable them by name or tag, and event sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from runtimeguard.indexed_vector import IndexedVector

# Version of the rules and filter fields supported by this engine.
ENGINE_VERSION = 13

# Checksum of the list of fields supported by this engine version.
FIELDS_CHECKSUM = "94290ff98e5affc85b2287b09a3f4054918f14e90db1ac4bfd6d5ce4e910329c"


@dataclass
class Rule:
    """A rule loaded in the engine; ``id`` must be unique across all rules."""

    id: int = 0
    source: str = ""
    name: str = ""
    description: str = ""
    output: str = ""
    tags: set[str] = field(default_factory=set)
    exception_fields: set[str] = field(default_factory=set)
    priority: int = 0


@dataclass(frozen=True)
class Condition:
    """A rule's filtering condition and the event types it can match."""

    predicate: Callable[[Any], bool]
    evttypes: frozenset[int] = frozenset()

    def __call__(self, event: Any) -> bool:
        return bool(self.predicate(event))


@dataclass
class _Entry:
    rule: Rule
    condition: Callable[[Any], bool]


class FilterRuleset:
    """Holds rules and, per ruleset id, which of them are enabled."""

    def __init__(self) -> None:
        self._entries: IndexedVector[_Entry] = IndexedVector()
        self._enabled: dict[int, set[str]] = {}
        self._compiled: dict[int, tuple[_Entry, ...]] | None = None

    def add(self, rule: Rule, condition: Callable[[Any], bool]) -> None:
        """Add a rule without enabling it in any ruleset."""
        self._entries.insert(_Entry(rule, condition), rule.name)
        self._compiled = None

    def clear(self) -> None:
        """Remove all rules and disable everything in every ruleset."""
        self._entries.clear()
        self._enabled.clear()
        self._compiled = None

    def on_loading_complete(self) -> None:
        """Precompute the enabled rules of every ruleset for fast matching."""
        self._compiled = {
            ruleset_id: self._enabled_entries(ruleset_id) for ruleset_id in self._enabled
        }

    def run(self, event: Any, ruleset_id: int = 0) -> Rule | None:
        """Return the first enabled rule whose condition matches, or None."""
        if self._compiled is not None and ruleset_id in self._compiled:
            entries = self._compiled[ruleset_id]
        else:
            entries = self._enabled_entries(ruleset_id)
        for entry in entries:
            if entry.condition(event):
                return entry.rule
        return None

    def enabled_count(self, ruleset_id: int = 0) -> int:
        """Number of rules enabled in a ruleset."""
        return len(self._enabled_entries(ruleset_id))

    def enabled_evttypes(self, ruleset_id: int = 0) -> set[int]:
        """Union of the event types of all rules enabled in a ruleset."""
        result: set[int] = set()
        for entry in self._enabled_entries(ruleset_id):
            result.update(getattr(entry.condition, "evttypes", ()))
        return result

    def enable(self, substring: str, match_exact: bool, ruleset_id: int = 0) -> None:
        """Enable rules whose name matches ``substring``; empty matches all."""
        self._set_by_name(substring, match_exact, ruleset_id, True)

    def disable(self, substring: str, match_exact: bool, ruleset_id: int = 0) -> None:
        """Disable rules whose name matches ``substring``; empty matches all."""
        self._set_by_name(substring, match_exact, ruleset_id, False)

    def enable_tags(self, tags: Iterable[str], ruleset_id: int = 0) -> None:
        """Enable rules carrying any of ``tags``."""
        self._set_by_tags(tags, ruleset_id, True)

    def disable_tags(self, tags: Iterable[str], ruleset_id: int = 0) -> None:
        """Disable rules carrying any of ``tags``."""
        self._set_by_tags(tags, ruleset_id, False)

    def _enabled_entries(self, ruleset_id: int) -> tuple[_Entry, ...]:
        names = self._enabled.get(ruleset_id, set())
        return tuple(entry for entry in self._entries if entry.rule.name in names)

    def _set_by_name(self, substring: str, match_exact: bool, ruleset_id: int, on: bool) -> None:
        def matches(name: str) -> bool:
            if not substring:
                return True
            return name == substring if match_exact else substring in name

        self._apply(matches, ruleset_id, on)

    def _set_by_tags(self, tags: Iterable[str], ruleset_id: int, on: bool) -> None:
        wanted = set(tags)
        self._apply(
            lambda name: bool(self._entries.at(name).rule.tags & wanted), ruleset_id, on
        )

    def _apply(self, matches: Callable[[str], bool], ruleset_id: int, on: bool) -> None:
        enabled = self._enabled.setdefault(ruleset_id, set())
        for entry in self._entries:
            name = entry.rule.name
            if matches(name):
                if on:
                    enabled.add(name)
                else:
                    enabled.discard(name)
        self._compiled = None


class FilterRulesetFactory:
    """Creates fresh, independent rulesets."""

    def __init__(self, ruleset_class: type[FilterRuleset] = FilterRuleset) -> None:
        self._ruleset_class = ruleset_class

    def new_ruleset(self) -> FilterRuleset:
        return self._ruleset_class()


@dataclass
class Source:
    """A data source: its ruleset and the factories that serve it."""

    name: str
    ruleset: FilterRuleset | None = None
    ruleset_factory: FilterRulesetFactory | None = None
    filter_factory: Any = None
    formatter_factory: Any = None

    def is_field_defined(self, field: str) -> bool:
        """True if the source's filter factory knows the given field."""
        return bool(self.filter_factory.new_filtercheck(field))