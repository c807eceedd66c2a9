"""
Shared fixtures for object repository tests.
"""

import copy
from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"

NAVIGATION_MENU = {
    "description": "Main navigation menu on the home page",
    "name": "navigation_menu",
    "tag": "",
    "elementGuidId": "23456789-2345-2345-2345-234567890123",
    "selectorCollection": [
        {"key": "BASIC", "value": "//nav[contains(@class, 'navbar')]"},
        {"key": "CSS", "value": "nav.navbar"},
        {"key": "XPATH", "value": "//header//nav"},
    ],
    "selectorMethod": "CSS",
    "useRalativeImagePath": "false",
    "webElementProperties": [
        {"isSelected": "true", "matchCondition": "equals", "name": "tag", "type": "Main", "value": "nav"},
        {"isSelected": "true", "matchCondition": "contains", "name": "class", "type": "Main", "value": "navbar"},
    ],
}

SEARCH_BOX = {
    "description": "Search box on the home page",
    "name": "search_box",
    "tag": "",
    "elementGuidId": "34567890-3456-3456-3456-345678901234",
    "selectorCollection": [
        {"key": "BASIC", "value": "//input[@type='search' or @placeholder='Search']"},
        {"key": "CSS", "value": "input.search-input"},
        {"key": "XPATH", "value": "//input[contains(@class, 'search') or @placeholder='Search']"},
    ],
    "selectorMethod": "BASIC",
    "useRalativeImagePath": "false",
    "webElementProperties": [
        {"isSelected": "true", "matchCondition": "equals", "name": "tag", "type": "Main", "value": "input"},
        {"isSelected": "true", "matchCondition": "or", "name": "type", "type": "Main", "value": "search"},
        {"isSelected": "true", "matchCondition": "or", "name": "placeholder", "type": "Main", "value": "Search"},
    ],
}


@pytest.fixture
def repo_dir() -> Path:
    """Folder holding the sample .rs element files."""
    return DATA_DIR / "Object Repository"


@pytest.fixture
def sample_records():
    """The two sample records as raw mappings."""
    return [copy.deepcopy(NAVIGATION_MENU), copy.deepcopy(SEARCH_BOX)]


@pytest.fixture
def make_record():
    """Factory for minimal valid raw records."""
    counter = {"value": 0}

    def _make(name="element", selectors=None, method="", rules=None, **extra):
        counter["value"] += 1
        if selectors is None:
            selectors = [("CSS", f"#{name}")]
        record = {
            "name": name,
            "elementGuidId": extra.pop("elementGuidId", f"guid-{counter['value']}"),
            "selectorCollection": [{"key": k, "value": v} for k, v in selectors],
            "selectorMethod": method,
        }
        if rules is not None:
            record["webElementProperties"] = rules
        record.update(extra)
        return record

    return _make


@pytest.fixture
def make_rule():
    """Factory for raw webElementProperties entries."""

    def _rule(name, value, condition="equals", selected=True):
        return {
            "isSelected": "true" if selected else "false",
            "matchCondition": condition,
            "name": name,
            "type": "Main",
            "value": value,
        }

    return _rule
