# uiauto_objrepo/records.py
"""
@file records.py
@brief Parses raw element records into validated ElementDescriptor objects.

A raw record is a loosely typed mapping, as produced by the authoring tool's
XML files (see sources.py) or any other collaborator. Unknown keys are ignored.
"""

from __future__ import annotations

import json
import os
import re
from typing import Any, Dict, List, Mapping, Optional, Set

from jsonschema import Draft202012Validator

from .exceptions import MalformedRecord
from .model import AttributeRule, ElementDescriptor, MatchCondition, StrategyKind
from .utils.logging import get_logger

logger = get_logger(__name__)

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "element_record.schema.json")

_TRUE = {"true"}
_FALSE = {"false"}

_validator: Optional[Draft202012Validator] = None


def _load_schema(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _get_validator() -> Draft202012Validator:
    global _validator
    if _validator is None:
        _validator = Draft202012Validator(_load_schema(SCHEMA_PATH))
    return _validator


def record_ref(raw: Any, position: int) -> str:
    """Human readable reference for error messages: id if present, else position."""
    if isinstance(raw, Mapping):
        rid = raw.get("elementGuidId") or raw.get("id")
        if isinstance(rid, str) and rid.strip():
            return f"#{position} (id={rid.strip()})"
        name = raw.get("name")
        if isinstance(name, str) and name.strip():
            return f"#{position} (name={name.strip()})"
    return f"#{position}"


def _as_list(value: Any) -> Any:
    # A single XML child may come through as a bare mapping.
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [value]
    if isinstance(value, tuple):
        return list(value)
    return value


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _flag(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if not text:
        return default
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _normalize(raw: Mapping[str, Any]) -> Dict[str, Any]:
    data = dict(raw)
    for key in ("selectorCollection", "webElementProperties"):
        if key in data:
            data[key] = _as_list(data[key])
    return data


def _check_structure(data: Dict[str, Any], ref: str) -> None:
    errors = sorted(_get_validator().iter_errors(data), key=lambda e: list(e.path))
    if errors:
        first = errors[0]
        where = ".".join(str(p) for p in first.path) or None
        raise MalformedRecord(ref, f"invalid structure: {first.message}", field=where)


def _parse_selectors(data: Dict[str, Any], ref: str) -> Dict[StrategyKind, str]:
    selectors: Dict[StrategyKind, str] = {}
    seen: Set[StrategyKind] = set()
    for i, entry in enumerate(data.get("selectorCollection") or []):
        where = f"selectorCollection[{i}]"
        try:
            kind = StrategyKind.parse(entry["key"])
        except ValueError:
            raise MalformedRecord(
                ref,
                f"unknown strategy kind '{entry['key']}'. Allowed: {[k.value for k in StrategyKind]}",
                field=where,
            ) from None
        if kind in seen:
            raise MalformedRecord(ref, f"duplicate selector key '{kind.value}'", field=where)
        seen.add(kind)
        expression = _text(entry.get("value"))
        if expression:
            selectors[kind] = expression
    return selectors


def _parse_rules(data: Dict[str, Any], ref: str) -> List[AttributeRule]:
    rules: List[AttributeRule] = []
    for i, entry in enumerate(data.get("webElementProperties") or []):
        where = f"webElementProperties[{i}]"
        attr = _text(entry.get("name"))
        if not attr:
            raise MalformedRecord(ref, "attribute rule without a name", field=where)
        condition_raw = entry.get("matchCondition") or MatchCondition.EQUALS.value
        try:
            condition = MatchCondition.parse(condition_raw)
        except ValueError:
            raise MalformedRecord(
                ref,
                f"unknown match condition '{condition_raw}'. Allowed: {[c.value for c in MatchCondition]}",
                field=where,
            ) from None
        try:
            enabled = _flag(entry.get("isSelected"), default=True)
        except ValueError as e:
            raise MalformedRecord(ref, str(e), field=f"{where}.isSelected") from None
        value = entry.get("value")
        if condition in (MatchCondition.MATCHES_REGEX, MatchCondition.NOT_MATCH_REGEX):
            try:
                re.compile("" if value is None else str(value))
            except re.error as e:
                raise MalformedRecord(ref, f"invalid regular expression: {e}", field=f"{where}.value") from None
        rules.append(
            AttributeRule(
                attribute_name=attr,
                match_condition=condition,
                expected_value="" if value is None else str(value),
                enabled=enabled,
                rule_type=_text(entry.get("type")) or "Main",
            )
        )
    return rules


def parse_record(raw: Any, position: int = 0, default_scope: str = "") -> ElementDescriptor:
    """
    Build one ElementDescriptor from a raw record.

    @param raw Mapping with the persisted record fields
    @param position Index of the record in its batch, used in error messages
    @param default_scope Scope applied when the record carries none
    @return Fully validated, immutable descriptor
    @throws MalformedRecord naming the record and the violated rule
    """
    ref = record_ref(raw, position)
    if not isinstance(raw, Mapping):
        raise MalformedRecord(ref, f"record must be a mapping, got: {type(raw).__name__}")

    data = _normalize(raw)
    _check_structure(data, ref)

    element_id = _text(data.get("elementGuidId") or data.get("id"))
    if not element_id:
        raise MalformedRecord(ref, "missing required field", field="elementGuidId")
    name = _text(data.get("name"))
    if not name:
        raise MalformedRecord(ref, "missing required field", field="name")

    selectors = _parse_selectors(data, ref)
    if not selectors:
        raise MalformedRecord(ref, "selectorCollection has no usable selector", field="selectorCollection")

    selected: Optional[StrategyKind] = None
    method = _text(data.get("selectorMethod"))
    if method:
        try:
            selected = StrategyKind.parse(method)
        except ValueError:
            raise MalformedRecord(ref, f"unknown strategy kind '{method}'", field="selectorMethod") from None
        if selected not in selectors:
            raise MalformedRecord(
                ref,
                f"selectorMethod '{selected.value}' is not in selectorCollection "
                f"{[k.value for k in selectors]}",
                field="selectorMethod",
            )

    flag_key = "useRalativeImagePath" if "useRalativeImagePath" in data else "useRelativeImagePath"
    try:
        relative_image = _flag(data.get(flag_key), default=False)
    except ValueError as e:
        raise MalformedRecord(ref, str(e), field=flag_key) from None

    descriptor = ElementDescriptor(
        id=element_id,
        name=name,
        selectors=selectors,
        selected_strategy=selected,
        attribute_rules=tuple(_parse_rules(data, ref)),
        description=_text(data.get("description")) or None,
        scope=_text(data.get("scope")).strip("/") or default_scope,
        tag=_text(data.get("tag")),
        use_relative_image_path=relative_image,
    )
    logger.debug(f"Parsed record {ref} -> {descriptor.path}")
    return descriptor
