"""Object references embedded in activities.

Users and collection entries are stored server-side; activities point at
them with short reference strings that the API resolves during enrichment.
"""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Referenceable(Protocol):
    def ref(self) -> str: ...


@dataclass(frozen=True)
class UserReference:
    id: str

    def ref(self) -> str:
        return f"SU:{self.id}"


@dataclass(frozen=True)
class CollectionEntry:
    collection: str
    id: str

    def ref(self) -> str:
        return f"SO:{self.collection}:{self.id}"


def replace_references(value: Any) -> Any:
    """Return a copy of ``value`` with every referenceable object swapped for its ref string."""
    if isinstance(value, Referenceable):
        return value.ref()
    if isinstance(value, dict):
        return {key: replace_references(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [replace_references(item) for item in value]
    return value
