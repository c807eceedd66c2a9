# uiauto_objrepo/resolver.py
"""
@file resolver.py
@brief Selector selection and attribute-rule matching for element descriptors.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Mapping, NamedTuple, Optional, Sequence

from .exceptions import NoSelectorAvailable
from .model import (DEFAULT_STRATEGY_PRIORITY, AttributeRule, ElementDescriptor,
                    MatchCondition, StrategyKind)
from .utils.logging import get_logger

logger = get_logger(__name__)


class ResolvedSelector(NamedTuple):
    kind: StrategyKind
    expression: str


def _ordered_kinds(
    descriptor: ElementDescriptor,
    priority: Sequence[StrategyKind],
) -> List[StrategyKind]:
    kinds: List[StrategyKind] = [k for k in priority if k in descriptor.selectors]
    # Remaining keys keep declaration order.
    kinds.extend(k for k in descriptor.selectors if k not in kinds)
    return kinds


def fallback_chain(
    descriptor: ElementDescriptor,
    priority: Sequence[StrategyKind] = DEFAULT_STRATEGY_PRIORITY,
) -> List[ResolvedSelector]:
    """
    All selectors of a descriptor in the order they should be tried.

    The selected strategy (if any) comes first, followed by the priority
    order, followed by any remaining keys in declaration order.
    """
    kinds = _ordered_kinds(descriptor, priority)
    selected = descriptor.selected_strategy
    if selected is not None:
        kinds.remove(selected)
        kinds.insert(0, selected)
    return [ResolvedSelector(k, descriptor.selectors[k]) for k in kinds]


def resolve(
    descriptor: ElementDescriptor,
    priority: Sequence[StrategyKind] = DEFAULT_STRATEGY_PRIORITY,
) -> ResolvedSelector:
    """
    Return the selector an execution engine should hand to its DOM query layer.

    @param descriptor Loaded element descriptor
    @param priority Strategy order used when no strategy is selected
    @return (kind, expression)
    @throws NoSelectorAvailable if the descriptor has no selectors
    """
    if not descriptor.selectors:
        raise NoSelectorAvailable(descriptor.path)

    selected = descriptor.selected_strategy
    if selected is not None:
        chosen = ResolvedSelector(selected, descriptor.selectors[selected])
        logger.debug(f"resolve {descriptor.path}: selected strategy {selected.value}")
        return chosen

    kind = _ordered_kinds(descriptor, priority)[0]
    logger.debug(f"resolve {descriptor.path}: default order picked {kind.value}")
    return ResolvedSelector(kind, descriptor.selectors[kind])


def _compare(rule: AttributeRule, actual: Optional[str]) -> bool:
    cond = rule.match_condition
    if actual is None:
        return cond.negated
    expected = rule.expected_value
    if cond in (MatchCondition.EQUALS, MatchCondition.OR, MatchCondition.AND):
        return actual == expected
    if cond is MatchCondition.CONTAINS:
        return expected in actual
    if cond is MatchCondition.NOT_EQUAL:
        return actual != expected
    if cond is MatchCondition.NOT_CONTAINS:
        return expected not in actual
    if cond is MatchCondition.STARTS_WITH:
        return actual.startswith(expected)
    if cond is MatchCondition.ENDS_WITH:
        return actual.endswith(expected)
    if cond is MatchCondition.MATCHES_REGEX:
        return re.search(expected, actual) is not None
    if cond is MatchCondition.NOT_MATCH_REGEX:
        return re.search(expected, actual) is None
    raise ValueError(f"Unsupported match condition: {cond}")


def group_rules(rules: Iterable[AttributeRule]) -> List[List[AttributeRule]]:
    """
    Split enabled rules into flat, left-to-right groups.

    Contiguous ``or`` rules form one group; every other rule stands alone.
    Groups are AND-linked.
    """
    groups: List[List[AttributeRule]] = []
    for rule in rules:
        if not rule.enabled:
            continue
        if (
            rule.match_condition is MatchCondition.OR
            and groups
            and groups[-1][-1].match_condition is MatchCondition.OR
        ):
            groups[-1].append(rule)
        else:
            groups.append([rule])
    return groups


def _lookup(candidate: Mapping[str, object], name: str) -> Optional[str]:
    if name in candidate:
        value = candidate[name]
    else:
        # HTML attribute names are case-insensitive.
        lowered = name.lower()
        matches = [v for k, v in candidate.items() if str(k).lower() == lowered]
        if not matches:
            return None
        value = matches[0]
    return None if value is None else str(value)


def matches_attributes(
    descriptor: ElementDescriptor,
    candidate_attributes: Mapping[str, object],
) -> bool:
    """
    Evaluate a descriptor's attribute rules against a candidate element.

    Disabled rules are skipped entirely. A descriptor with no enabled rules
    matches any candidate.
    """
    for group in group_rules(descriptor.attribute_rules):
        results = [_compare(r, _lookup(candidate_attributes, r.attribute_name)) for r in group]
        if group[0].match_condition is MatchCondition.OR:
            ok = any(results)
        else:
            ok = all(results)
        if not ok:
            logger.debug(
                f"matches_attributes {descriptor.path}: failed on "
                f"{[r.attribute_name for r in group]}"
            )
            return False
    return True
