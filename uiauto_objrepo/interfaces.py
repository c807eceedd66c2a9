"""
@file interfaces.py
@brief Abstract base classes for record sources.

The element store never reads storage itself. A record source is the
collaborator that reads persisted records and hands raw mappings to
``ElementStore.load``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional

from .config import StoreConfig
from .exceptions import LoadIssue
from .store import ElementStore


class IRecordSource(ABC):
    """
    Abstract source of raw element records.

    Implementations decide where records live (XML files, YAML object
    maps, ...) and attach a ``scope`` to each record where the storage
    layout implies one.
    """

    def __init__(self) -> None:
        self.read_issues: List[LoadIssue] = []

    @abstractmethod
    def iter_records(self, skip_unreadable: bool = False) -> Iterator[Dict[str, Any]]:
        """
        Yield raw records in a deterministic order.

        Args:
            skip_unreadable: Record unreadable entries on ``read_issues``
                instead of raising

        Raises:
            MalformedRecord: if a persisted record cannot be read at all
        """
        pass

    def load(self, config: Optional[StoreConfig] = None) -> ElementStore:
        """
        Read every record and build an ElementStore from them.

        Args:
            config: Load configuration passed through to the store

        Returns:
            Loaded ElementStore
        """
        config = config or StoreConfig()
        self.read_issues = []
        records = list(self.iter_records(skip_unreadable=config.on_error == "skip"))
        return ElementStore.load(records, config=config, prior_issues=self.read_issues)
