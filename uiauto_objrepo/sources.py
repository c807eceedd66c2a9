# uiauto_objrepo/sources.py
"""
@file sources.py
@brief Record sources: authoring-tool XML files and YAML object maps.
"""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

import yaml

from .exceptions import MalformedRecord
from .interfaces import IRecordSource
from .utils.logging import get_logger

logger = get_logger(__name__)

ROOT_TAG = "WebElementEntity"
RECORD_SUFFIX = ".rs"


def _child_text(node: ET.Element) -> str:
    return (node.text or "").strip()


def _entry_pairs(node: ET.Element) -> List[Dict[str, str]]:
    pairs = []
    for entry in node.findall("entry"):
        key = entry.find("key")
        value = entry.find("value")
        pairs.append(
            {
                "key": _child_text(key) if key is not None else "",
                "value": _child_text(value) if value is not None else "",
            }
        )
    return pairs


def parse_record_xml(text: Union[str, bytes], source: Optional[str] = None) -> Dict[str, Any]:
    """
    Parse one ``<WebElementEntity>`` document into a raw record.

    Leaf elements become string fields. ``selectorCollection`` becomes a
    list of ``{key, value}`` pairs and each ``webElementProperties`` element
    one entry of a list. Other nested elements are ignored.
    """
    ref = source or "<xml>"
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise MalformedRecord(ref, f"invalid XML: {e}") from e
    if root.tag != ROOT_TAG:
        raise MalformedRecord(ref, f"root element must be <{ROOT_TAG}>, got <{root.tag}>")

    record: Dict[str, Any] = {}
    properties: List[Dict[str, str]] = []
    for child in root:
        if child.tag == "selectorCollection":
            record["selectorCollection"] = _entry_pairs(child)
        elif child.tag == "webElementProperties":
            properties.append({prop.tag: _child_text(prop) for prop in child})
        elif len(child) == 0:
            record[child.tag] = _child_text(child)
    if properties:
        record["webElementProperties"] = properties
    return record


class XmlDirectorySource(IRecordSource):
    """
    Reads ``*.rs`` element files below a repository folder.

    The folder path of each file relative to ``root`` becomes the record
    scope, e.g. ``Page_Home`` for ``<root>/Page_Home/search_box.rs``.
    """

    def __init__(self, root: str, suffix: str = RECORD_SUFFIX):
        super().__init__()
        self.root = Path(root).resolve()
        self.suffix = suffix

    def files(self) -> List[Path]:
        if not self.root.is_dir():
            raise FileNotFoundError(f"Object repository folder not found: {self.root}")
        return sorted(p for p in self.root.rglob(f"*{self.suffix}") if p.is_file())

    def _scope_for(self, path: Path) -> str:
        rel = path.parent.relative_to(self.root).as_posix()
        return "" if rel == "." else rel

    def iter_records(self, skip_unreadable: bool = False) -> Iterator[Dict[str, Any]]:
        for path in self.files():
            rel = path.relative_to(self.root).as_posix()
            try:
                try:
                    text = path.read_bytes()
                except OSError as e:
                    raise MalformedRecord(rel, f"cannot read file: {e}") from e
                record = parse_record_xml(text, source=rel)
            except MalformedRecord as e:
                if not skip_unreadable:
                    raise
                logger.warning(f"Skipping unreadable file {e}")
                self.read_issues.append(e.as_issue())
                continue
            record.setdefault("scope", self._scope_for(path))
            yield record


class YamlRecordSource(IRecordSource):
    """
    Reads records from a YAML object map.

    ``elements`` is either a list of records or a mapping of
    scope -> list of records.
    """

    def __init__(self, path: str):
        super().__init__()
        self.path = os.path.abspath(path)

    @staticmethod
    def _load_yaml(path: str) -> Dict[str, Any]:
        if not os.path.exists(path):
            raise MalformedRecord(path, "object map YAML not found")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise MalformedRecord(path, f"invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise MalformedRecord(path, "object map YAML must be a mapping at root")
        return data

    def iter_records(self, skip_unreadable: bool = False) -> Iterator[Dict[str, Any]]:
        data = self._load_yaml(self.path)
        elements = data.get("elements") or []
        if isinstance(elements, dict):
            for scope, records in elements.items():
                for record in records or []:
                    if isinstance(record, dict):
                        record = dict(record)
                        record.setdefault("scope", str(scope))
                    yield record
        elif isinstance(elements, list):
            yield from elements
        else:
            raise MalformedRecord(self.path, "'elements' must be a list or a mapping", field="elements")
