# uiauto_objrepo/store.py
"""
@file store.py
@brief In-memory, immutable collection of element descriptors.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .config import StoreConfig
from .exceptions import LoadIssue, MalformedRecord, NotFound
from .model import ElementDescriptor
from .records import parse_record, record_ref
from .resolver import ResolvedSelector, fallback_chain, matches_attributes, resolve
from .utils.logging import get_logger

logger = get_logger(__name__)

ElementRef = Union[ElementDescriptor, str]


class ElementStore:
    """
    Loads raw element records and exposes lookup and selector resolution.

    Instances are built only through ``ElementStore.load`` and never change
    afterwards, so a loaded store can be shared between threads as is.
    """

    def __init__(
        self,
        descriptors: Iterable[ElementDescriptor],
        config: Optional[StoreConfig] = None,
        issues: Iterable[LoadIssue] = (),
    ):
        self._config = config or StoreConfig()
        self._by_path: Dict[Tuple[str, str], ElementDescriptor] = {}
        self._by_id: Dict[str, ElementDescriptor] = {}
        self._scopes_by_name: Dict[str, List[str]] = {}
        for d in descriptors:
            self._by_path[(d.scope, d.name)] = d
            self._by_id[d.id] = d
            self._scopes_by_name.setdefault(d.name, []).append(d.scope)
        self._issues: Tuple[LoadIssue, ...] = tuple(issues)

    @classmethod
    def load(
        cls,
        records: Iterable[Any],
        config: Optional[StoreConfig] = None,
        default_scope: str = "",
        prior_issues: Iterable[LoadIssue] = (),
    ) -> ElementStore:
        """
        Parse a batch of raw records into a new store.

        @param records Raw record mappings, already read from storage
        @param config Error policy and strategy priority
        @param default_scope Scope for records that do not carry one
        @param prior_issues Issues already reported by the record source
        @return Loaded store
        @throws MalformedRecord on the first bad record when on_error == "abort"
        """
        config = config or StoreConfig()
        accepted: List[ElementDescriptor] = []
        issues: List[LoadIssue] = list(prior_issues)
        seen_paths: Dict[Tuple[str, str], str] = {}
        seen_ids: Dict[str, str] = {}

        for position, raw in enumerate(records):
            try:
                descriptor = parse_record(raw, position, default_scope=default_scope)
                key = (descriptor.scope, descriptor.name)
                if key in seen_paths:
                    raise MalformedRecord(
                        record_ref(raw, position),
                        f"duplicate name '{descriptor.name}' in scope '{descriptor.scope}' "
                        f"(first defined by record {seen_paths[key]})",
                        field="name",
                    )
                if descriptor.id in seen_ids:
                    raise MalformedRecord(
                        record_ref(raw, position),
                        f"duplicate id '{descriptor.id}' (first defined by record {seen_ids[descriptor.id]})",
                        field="elementGuidId",
                    )
            except MalformedRecord as e:
                if config.on_error == "abort":
                    logger.error(str(e))
                    raise
                logger.warning(f"Skipping {e}")
                issues.append(e.as_issue())
                continue

            seen_paths[key] = record_ref(raw, position)
            seen_ids[descriptor.id] = record_ref(raw, position)
            accepted.append(descriptor)

        logger.info(f"Loaded {len(accepted)} element(s), skipped {len(issues)}")
        return cls(accepted, config=config, issues=issues)

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def issues(self) -> Tuple[LoadIssue, ...]:
        """Records left out by a skip-and-report load."""
        return self._issues

    def __len__(self) -> int:
        return len(self._by_path)

    def __iter__(self) -> Iterator[ElementDescriptor]:
        return iter(self._by_path.values())

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            self.get(name)
        except NotFound:
            return False
        return True

    def get(self, name: str, scope: Optional[str] = None) -> ElementDescriptor:
        """
        Exact-name lookup.

        ``name`` may be a path such as ``Page_Home/search_box``. Without a
        scope the bare name must be unique across all scopes.
        """
        if scope is None and "/" in name:
            scope, _, name = name.strip("/").rpartition("/")
        if scope is not None:
            scope = scope.strip("/")
            found = self._by_path.get((scope, name))
            if found is None:
                raise NotFound(name, scope=scope)
            return found

        scopes = self._scopes_by_name.get(name, [])
        if not scopes:
            raise NotFound(name)
        if len(scopes) > 1:
            raise NotFound(name, candidates=sorted(self._by_path[(s, name)].path for s in scopes))
        return self._by_path[(scopes[0], name)]

    def get_by_id(self, element_id: str) -> ElementDescriptor:
        try:
            return self._by_id[element_id]
        except KeyError:
            raise NotFound(element_id) from None

    def list_elements(self) -> List[str]:
        return sorted(d.path for d in self)

    def scopes(self) -> List[str]:
        return sorted({scope for scope, _ in self._by_path})

    def _descriptor(self, ref: ElementRef) -> ElementDescriptor:
        return self.get(ref) if isinstance(ref, str) else ref

    def resolve(self, ref: ElementRef) -> ResolvedSelector:
        return resolve(self._descriptor(ref), self._config.strategy_priority)

    def fallback_chain(self, ref: ElementRef) -> List[ResolvedSelector]:
        return fallback_chain(self._descriptor(ref), self._config.strategy_priority)

    def matches_attributes(self, ref: ElementRef, candidate_attributes: Mapping[str, Any]) -> bool:
        return matches_attributes(self._descriptor(ref), candidate_attributes)

    def as_mapping(self) -> Mapping[str, ElementDescriptor]:
        """Read-only view keyed by element path."""
        return MappingProxyType({d.path: d for d in self})
