# uiauto_objrepo/exceptions.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence


class ObjectRepoError(Exception):
    """Base exception for the object repository."""


class ConfigError(ObjectRepoError):
    """Raised when YAML configuration is invalid."""


@dataclass
class LoadIssue:
    record_ref: str
    violation: str
    field: Optional[str] = None


class MalformedRecord(ObjectRepoError):
    def __init__(
        self,
        record_ref: str,
        violation: str,
        field: Optional[str] = None,
    ):
        self.record_ref = record_ref
        self.violation = violation
        self.field = field
        super().__init__(self.__str__())

    def as_issue(self) -> LoadIssue:
        return LoadIssue(record_ref=self.record_ref, violation=self.violation, field=self.field)

    def __str__(self) -> str:
        base = f"MalformedRecord: record={self.record_ref}"
        if self.field:
            base += f" field='{self.field}'"
        return f"{base}: {self.violation}"


class NotFound(ObjectRepoError):
    def __init__(
        self,
        name: str,
        scope: Optional[str] = None,
        candidates: Optional[Sequence[str]] = None,
    ):
        self.name = name
        self.scope = scope
        self.candidates: List[str] = list(candidates or [])
        super().__init__(self.__str__())

    def __str__(self) -> str:
        base = f"NotFound: element='{self.name}'"
        if self.scope is not None:
            base += f" scope='{self.scope}'"
        if self.candidates:
            base += f" ambiguous between: {self.candidates}"
        return base


class NoSelectorAvailable(ObjectRepoError):
    def __init__(self, element: str):
        self.element = element
        super().__init__(self.__str__())

    def __str__(self) -> str:
        return f"NoSelectorAvailable: element='{self.element}' has no selectors"
