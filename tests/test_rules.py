import pytest

from runtimeguard.rules import (
    Condition,
    FilterRuleset,
    FilterRulesetFactory,
    Rule,
    Source,
)

EXACT = True
SUBSTRING = False
DEFAULT_RULESET = 0
NON_DEFAULT_RULESET = 3
OTHER_NON_DEFAULT_RULESET = 2
TAGS = {"some_tag", "some_other_tag"}


def make_condition(evttypes=()):
    return Condition(lambda evt: evt.get("type") == "open", frozenset(evttypes))


@pytest.fixture
def ruleset():
    r = FilterRuleset()
    r.add(Rule(name="one_rule", source="syscall", tags=set(TAGS)), make_condition())
    return r


@pytest.mark.parametrize(
    "name, match_exact, ruleset_id",
    [
        ("one_rule", EXACT, DEFAULT_RULESET),
        ("one_rule", EXACT, NON_DEFAULT_RULESET),
        ("one_rule", SUBSTRING, DEFAULT_RULESET),
        ("one_", SUBSTRING, DEFAULT_RULESET),
        ("_rule", SUBSTRING, DEFAULT_RULESET),
        ("ne_ru", SUBSTRING, DEFAULT_RULESET),
        ("ne_ru", SUBSTRING, NON_DEFAULT_RULESET),
    ],
)
def test_enable_disable_by_name(ruleset, name, match_exact, ruleset_id):
    ruleset.enable(name, match_exact, ruleset_id)
    assert ruleset.enabled_count(ruleset_id) == 1
    others = {DEFAULT_RULESET, NON_DEFAULT_RULESET, OTHER_NON_DEFAULT_RULESET} - {ruleset_id}
    assert all(ruleset.enabled_count(o) == 0 for o in others)
    ruleset.disable(name, match_exact, ruleset_id)
    assert ruleset.enabled_count(ruleset_id) == 0


@pytest.mark.parametrize("name, match_exact", [("some_other_rule", EXACT), ("one_", EXACT)])
def test_no_enable_without_match(ruleset, name, match_exact):
    ruleset.enable(name, match_exact, DEFAULT_RULESET)
    assert ruleset.enabled_count(DEFAULT_RULESET) == 0


@pytest.mark.parametrize("ruleset_id", [DEFAULT_RULESET, NON_DEFAULT_RULESET])
@pytest.mark.parametrize("want", [{"some_tag"}, {"some_tag", "some_different_tag"}])
def test_enable_disable_by_tags(ruleset, ruleset_id, want):
    ruleset.enable_tags(want, ruleset_id)
    assert ruleset.enabled_count(ruleset_id) == 1
    assert ruleset.enabled_count(OTHER_NON_DEFAULT_RULESET) == 0
    ruleset.disable_tags(want, ruleset_id)
    assert ruleset.enabled_count(ruleset_id) == 0


def test_different_tags_do_not_enable(ruleset):
    ruleset.enable_tags({"some_different_tag"}, DEFAULT_RULESET)
    assert ruleset.enabled_count(DEFAULT_RULESET) == 0
    assert ruleset.enabled_count(NON_DEFAULT_RULESET) == 0


def test_incremental_tags():
    r = FilterRuleset()
    r.add(Rule(name="one_rule", tags={"rule1_tag"}), make_condition())
    r.add(Rule(name="two_rule", tags={"rule2_tag"}), make_condition())
    r.enable_tags({"rule1_tag"}, DEFAULT_RULESET)
    assert r.enabled_count(DEFAULT_RULESET) == 1
    r.enable_tags({"rule2_tag"}, DEFAULT_RULESET)
    assert r.enabled_count(DEFAULT_RULESET) == 2
    r.disable_tags({"rule2_tag"}, DEFAULT_RULESET)
    assert r.enabled_count(DEFAULT_RULESET) == 1
    r.disable_tags({"rule1_tag"}, DEFAULT_RULESET)
    assert r.enabled_count(DEFAULT_RULESET) == 0


def test_empty_substring_enables_all():
    r = FilterRuleset()
    for name in ("a_rule", "b_rule", "c_rule"):
        r.add(Rule(name=name), make_condition())
    r.enable("", EXACT, DEFAULT_RULESET)
    assert r.enabled_count(DEFAULT_RULESET) == len(["a_rule", "b_rule", "c_rule"])


def test_run_returns_first_enabled_match(ruleset):
    event = {"type": "open"}
    assert ruleset.run(event, DEFAULT_RULESET) is None
    ruleset.enable("one_rule", EXACT, DEFAULT_RULESET)
    match = ruleset.run(event, DEFAULT_RULESET)
    assert match.name == "one_rule"
    assert ruleset.run({"type": "close"}, DEFAULT_RULESET) is None


def test_run_after_loading_complete_tracks_later_changes(ruleset):
    ruleset.enable("one_rule", EXACT, DEFAULT_RULESET)
    ruleset.on_loading_complete()
    assert ruleset.run({"type": "open"}, DEFAULT_RULESET).name == "one_rule"
    ruleset.disable("one_rule", EXACT, DEFAULT_RULESET)
    assert ruleset.run({"type": "open"}, DEFAULT_RULESET) is None


def test_enabled_evttypes_is_union_of_enabled_rules():
    r = FilterRuleset()
    r.add(Rule(name="first"), make_condition({1, 2}))
    r.add(Rule(name="second"), make_condition({2, 3}))
    r.add(Rule(name="third"), make_condition({9}))
    r.enable("first", EXACT, DEFAULT_RULESET)
    r.enable("second", EXACT, DEFAULT_RULESET)
    assert r.enabled_evttypes(DEFAULT_RULESET) == {1, 2} | {2, 3}


def test_clear_removes_rules_and_enabling(ruleset):
    ruleset.enable("one_rule", EXACT, DEFAULT_RULESET)
    ruleset.clear()
    assert ruleset.enabled_count(DEFAULT_RULESET) == 0
    assert ruleset.run({"type": "open"}, DEFAULT_RULESET) is None


def test_factory_creates_independent_rulesets():
    factory = FilterRulesetFactory()
    a = factory.new_ruleset()
    b = factory.new_ruleset()
    a.add(Rule(name="one_rule"), make_condition())
    a.enable("one_rule", EXACT, DEFAULT_RULESET)
    assert a.enabled_count(DEFAULT_RULESET) == 1
    assert b.enabled_count(DEFAULT_RULESET) == 0


class _FilterFactory:
    known = {"proc.name", "evt.type"}

    def new_filtercheck(self, field):
        return object() if field in self.known else None


def test_source_is_field_defined():
    source = Source(name="syscall", filter_factory=_FilterFactory())
    assert source.is_field_defined("proc.name") is True
    assert source.is_field_defined("no.such.field") is False