"""
Tests for selector resolution and attribute-rule matching.
"""

import pytest

from uiauto_objrepo.config import StoreConfig
from uiauto_objrepo.exceptions import NoSelectorAvailable
from uiauto_objrepo.model import AttributeRule, ElementDescriptor, MatchCondition, StrategyKind
from uiauto_objrepo.records import parse_record
from uiauto_objrepo.resolver import fallback_chain, group_rules, matches_attributes, resolve
from uiauto_objrepo.store import ElementStore

CSS = StrategyKind.CSS
XPATH = StrategyKind.XPATH
BASIC = StrategyKind.BASIC
IMAGE = StrategyKind.IMAGE


class TestResolve:
    """Tests for resolve."""

    def test_selected_strategy_wins(self, make_record):
        """A selected strategy is returned even when CSS exists."""
        d = parse_record(make_record(selectors=[("CSS", "a.b"), ("XPATH", "//a")], method="XPATH"))
        assert resolve(d) == (XPATH, "//a")

    @pytest.mark.parametrize(
        "selectors, expected",
        [
            ([("BASIC", "b"), ("XPATH", "x"), ("CSS", "c")], (CSS, "c")),
            ([("BASIC", "b"), ("XPATH", "x")], (XPATH, "x")),
            ([("IMAGE", "img.png"), ("BASIC", "b")], (BASIC, "b")),
            ([("IMAGE", "img.png")], (IMAGE, "img.png")),
        ],
    )
    def test_default_order(self, make_record, selectors, expected):
        """Without a selected strategy: CSS, XPATH, BASIC, then the rest."""
        d = parse_record(make_record(selectors=selectors))
        assert resolve(d) == expected

    def test_result_fields(self, make_record):
        d = parse_record(make_record(selectors=[("CSS", "nav")]))
        result = resolve(d)
        assert result.kind is CSS
        assert result.expression == "nav"

    def test_custom_priority(self, make_record):
        d = parse_record(make_record(selectors=[("CSS", "c"), ("XPATH", "x")]))
        assert resolve(d, priority=(XPATH, CSS)) == (XPATH, "x")

    def test_store_uses_configured_priority(self, make_record):
        store = ElementStore.load(
            [make_record(name="e", selectors=[("CSS", "c"), ("BASIC", "b")])],
            config=StoreConfig(strategy_priority=(BASIC,)),
        )
        assert store.resolve("e") == (BASIC, "b")

    def test_store_accepts_priority_names(self, make_record):
        """Priority given as plain names still resolves to StrategyKind members."""
        store = ElementStore.load(
            [make_record(name="e", selectors=[("CSS", "c"), ("XPATH", "x")])],
            config=StoreConfig(strategy_priority=("XPATH", "CSS")),
        )
        result = store.resolve("e")
        assert result == (XPATH, "x")
        assert result.kind is XPATH

    def test_lowercase_priority_override(self, make_record):
        store = ElementStore.load(
            [make_record(name="e", selectors=[("CSS", "c"), ("XPATH", "x")])],
            config=StoreConfig().with_overrides(strategy_priority=["xpath"]),
        )
        assert store.resolve("e") == (XPATH, "x")

    def test_no_selectors_raises(self):
        """Descriptors built by hand without selectors cannot resolve."""
        d = ElementDescriptor(id="1", name="empty", selectors={})
        with pytest.raises(NoSelectorAvailable) as exc_info:
            resolve(d)
        assert exc_info.value.element == "empty"


class TestFallbackChain:
    """Tests for fallback_chain."""

    def test_selected_first_then_default_order(self, make_record):
        d = parse_record(
            make_record(
                selectors=[("IMAGE", "i"), ("BASIC", "b"), ("XPATH", "x"), ("CSS", "c")],
                method="BASIC",
            )
        )
        assert [s.kind for s in fallback_chain(d)] == [BASIC, CSS, XPATH, IMAGE]

    def test_chain_head_matches_resolve(self, sample_records):
        for raw in sample_records:
            d = parse_record(raw)
            assert fallback_chain(d)[0] == resolve(d)


def _descriptor(rules):
    return ElementDescriptor(id="1", name="e", selectors={CSS: "a"}, attribute_rules=tuple(rules))


def _rule(name, value, condition=MatchCondition.EQUALS, enabled=True):
    return AttributeRule(attribute_name=name, match_condition=condition, expected_value=value, enabled=enabled)


class TestMatchesAttributes:
    """Tests for matches_attributes."""

    def test_no_rules_matches(self):
        assert matches_attributes(_descriptor([]), {"id": "x"}) is True

    def test_equals_is_exact(self):
        d = _descriptor([_rule("id", "login")])
        assert matches_attributes(d, {"id": "login"})
        assert not matches_attributes(d, {"id": "login-btn"})

    def test_contains_is_substring(self):
        d = _descriptor([_rule("class", "btn", MatchCondition.CONTAINS)])
        assert matches_attributes(d, {"class": "btn btn-primary"})
        assert not matches_attributes(d, {"class": "link"})

    def test_missing_attribute_fails(self):
        d = _descriptor([_rule("id", "x")])
        assert not matches_attributes(d, {})

    def test_independent_rules_are_anded(self):
        d = _descriptor([_rule("tag", "a"), _rule("href", "/home")])
        assert matches_attributes(d, {"tag": "a", "href": "/home"})
        assert not matches_attributes(d, {"tag": "a", "href": "/about"})

    def test_or_group_succeeds_if_any(self):
        d = _descriptor(
            [
                _rule("tag", "input"),
                _rule("type", "search", MatchCondition.OR),
                _rule("placeholder", "Search", MatchCondition.OR),
            ]
        )
        assert matches_attributes(d, {"tag": "input", "type": "search"})
        assert matches_attributes(d, {"tag": "input", "placeholder": "Search"})
        assert not matches_attributes(d, {"tag": "input", "type": "text", "placeholder": "Find"})
        assert not matches_attributes(d, {"tag": "div", "type": "search"})

    def test_or_groups_split_by_other_rules(self):
        """Non-contiguous or rules form separate groups."""
        rules = [
            _rule("a", "1", MatchCondition.OR),
            _rule("b", "2", MatchCondition.OR),
            _rule("c", "3"),
            _rule("d", "4", MatchCondition.OR),
        ]
        groups = group_rules(rules)
        assert [[r.attribute_name for r in g] for g in groups] == [["a", "b"], ["c"], ["d"]]

    def test_and_rules_use_equality(self):
        d = _descriptor([_rule("name", "q", MatchCondition.AND), _rule("type", "text", MatchCondition.AND)])
        assert matches_attributes(d, {"name": "q", "type": "text"})
        assert not matches_attributes(d, {"name": "q", "type": "search"})

    def test_disabled_rule_is_ignored(self, make_rule):
        """Turning off the only failing rule flips the result."""
        failing = [make_rule("tag", "nav"), make_rule("class", "sidebar", condition="contains")]
        candidate = {"tag": "nav", "class": "navbar"}
        enabled = parse_record({"name": "n", "id": "1", "selectorCollection": [{"key": "CSS", "value": "nav"}],
                                "webElementProperties": failing})
        assert matches_attributes(enabled, candidate) is False

        failing[1]["isSelected"] = "false"
        disabled = parse_record({"name": "n", "id": "1", "selectorCollection": [{"key": "CSS", "value": "nav"}],
                                 "webElementProperties": failing})
        assert matches_attributes(disabled, candidate) is True

    def test_disabled_rule_does_not_join_or_group(self):
        """A disabled or rule neither satisfies nor splits a group."""
        d = _descriptor(
            [
                _rule("type", "search", MatchCondition.OR),
                _rule("role", "searchbox", MatchCondition.OR, enabled=False),
                _rule("placeholder", "Search", MatchCondition.OR),
            ]
        )
        assert not matches_attributes(d, {"role": "searchbox"})
        assert matches_attributes(d, {"placeholder": "Search"})

    @pytest.mark.parametrize(
        "condition, expected, actual, result",
        [
            (MatchCondition.NOT_EQUAL, "a", "b", True),
            (MatchCondition.NOT_EQUAL, "a", "a", False),
            (MatchCondition.NOT_CONTAINS, "x", "abc", True),
            (MatchCondition.STARTS_WITH, "btn-", "btn-ok", True),
            (MatchCondition.ENDS_WITH, "-ok", "btn-ok", True),
            (MatchCondition.MATCHES_REGEX, r"^user-\d+$", "user-42", True),
            (MatchCondition.NOT_MATCH_REGEX, r"^user-\d+$", "user-42", False),
        ],
    )
    def test_extra_comparators(self, condition, expected, actual, result):
        d = _descriptor([_rule("id", expected, condition)])
        assert matches_attributes(d, {"id": actual}) is result

    def test_negated_rule_on_missing_attribute(self):
        d = _descriptor([_rule("disabled", "true", MatchCondition.NOT_EQUAL)])
        assert matches_attributes(d, {})

    def test_attribute_names_case_insensitive_fallback(self):
        d = _descriptor([_rule("aria-label", "Close")])
        assert matches_attributes(d, {"ARIA-LABEL": "Close"})


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
