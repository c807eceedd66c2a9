# uiauto_objrepo/__init__.py
"""
UIAuto ObjRepo - web element object repository.

This package provides:
- Store: validated, immutable collection of element descriptors
- Resolver: selector selection with fallback order, attribute-rule matching
- Sources: readers for authoring-tool XML records and YAML object maps
- Exceptions: load and lookup error types
"""

from uiauto_objrepo.model import (
    ElementDescriptor,
    AttributeRule,
    StrategyKind,
    MatchCondition,
    DEFAULT_STRATEGY_PRIORITY,
)
from uiauto_objrepo.config import StoreConfig, load_config
from uiauto_objrepo.store import ElementStore
from uiauto_objrepo.resolver import ResolvedSelector, resolve, fallback_chain, matches_attributes
from uiauto_objrepo.records import parse_record
from uiauto_objrepo.sources import XmlDirectorySource, YamlRecordSource, parse_record_xml
from uiauto_objrepo.interfaces import IRecordSource
from uiauto_objrepo.exceptions import (
    ObjectRepoError,
    ConfigError,
    MalformedRecord,
    NotFound,
    NoSelectorAvailable,
    LoadIssue,
)

__all__ = [
    "ElementDescriptor",
    "AttributeRule",
    "StrategyKind",
    "MatchCondition",
    "DEFAULT_STRATEGY_PRIORITY",
    "StoreConfig",
    "load_config",
    "ElementStore",
    "ResolvedSelector",
    "resolve",
    "fallback_chain",
    "matches_attributes",
    "parse_record",
    "XmlDirectorySource",
    "YamlRecordSource",
    "parse_record_xml",
    "IRecordSource",
    "ObjectRepoError",
    "ConfigError",
    "MalformedRecord",
    "NotFound",
    "NoSelectorAvailable",
    "LoadIssue",
]

__version__ = "1.0.0"
