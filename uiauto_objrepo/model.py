# uiauto_objrepo/model.py
"""
@file model.py
@brief Immutable element descriptor types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class StrategyKind(str, Enum):
    """Locator technique used to query the DOM."""
    BASIC = "BASIC"
    CSS = "CSS"
    XPATH = "XPATH"
    IMAGE = "IMAGE"

    @classmethod
    def parse(cls, value: str) -> StrategyKind:
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().upper())


class MatchCondition(str, Enum):
    EQUALS = "equals"
    CONTAINS = "contains"
    OR = "or"
    AND = "and"
    NOT_EQUAL = "not equal"
    NOT_CONTAINS = "not contains"
    STARTS_WITH = "starts with"
    ENDS_WITH = "ends with"
    MATCHES_REGEX = "matches regex"
    NOT_MATCH_REGEX = "not match regex"

    @classmethod
    def parse(cls, value: str) -> MatchCondition:
        if isinstance(value, cls):
            return value
        return cls(" ".join(str(value).split()).lower())

    @property
    def negated(self) -> bool:
        return self in (
            MatchCondition.NOT_EQUAL,
            MatchCondition.NOT_CONTAINS,
            MatchCondition.NOT_MATCH_REGEX,
        )


DEFAULT_STRATEGY_PRIORITY: Tuple[StrategyKind, ...] = (
    StrategyKind.CSS,
    StrategyKind.XPATH,
    StrategyKind.BASIC,
)


@dataclass(frozen=True)
class AttributeRule:
    attribute_name: str
    match_condition: MatchCondition
    expected_value: str
    enabled: bool = True
    rule_type: str = "Main"


@dataclass(frozen=True)
class ElementDescriptor:
    """
    A single element's identification and locator data.

    ``selectors`` keeps declaration order and is exposed read-only.
    ``selected_strategy`` is None when the default strategy order applies,
    otherwise it is always a key of ``selectors``.
    """
    id: str
    name: str
    selectors: Mapping[StrategyKind, str] = field(hash=False)
    selected_strategy: Optional[StrategyKind] = None
    attribute_rules: Tuple[AttributeRule, ...] = ()
    description: Optional[str] = None
    scope: str = ""
    tag: str = ""
    use_relative_image_path: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "selectors", MappingProxyType(dict(self.selectors)))
        object.__setattr__(self, "attribute_rules", tuple(self.attribute_rules))

    @property
    def path(self) -> str:
        return f"{self.scope}/{self.name}" if self.scope else self.name

    @property
    def enabled_rules(self) -> Tuple[AttributeRule, ...]:
        return tuple(r for r in self.attribute_rules if r.enabled)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "scope": self.scope,
            "description": self.description,
            "tag": self.tag,
            "selectors": {k.value: v for k, v in self.selectors.items()},
            "selected_strategy": self.selected_strategy.value if self.selected_strategy else None,
            "use_relative_image_path": self.use_relative_image_path,
            "attribute_rules": [
                {
                    "attribute_name": r.attribute_name,
                    "match_condition": r.match_condition.value,
                    "expected_value": r.expected_value,
                    "enabled": r.enabled,
                    "type": r.rule_type,
                }
                for r in self.attribute_rules
            ],
        }
