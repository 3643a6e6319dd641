"""Namespace-aware attribute records and per-node attribute maps."""

from dataclasses import dataclass, field
from typing import Callable, Iterator, Mapping

from .exceptions import InvalidAttributeError


def split_qualified_name(name: str) -> tuple[str, str]:
    """Split a qualified name into (prefix, local) at the first colon.

    Examples:
        >>> split_qualified_name("xlink:href")
        ('xlink', 'href')
        >>> split_qualified_name("fill")
        ('', 'fill')
        >>> split_qualified_name(":fill")
        ('', ':fill')
    """
    prefix, sep, local = name.partition(":")
    if not sep or not prefix:
        return "", name
    return prefix, local


@dataclass(frozen=True)
class AttributeRecord:
    """A single attribute with its namespace split."""

    name: str
    value: str
    prefix: str = field(default="", compare=False)
    local: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidAttributeError(
                f"Attribute name must be a non-empty string, got {self.name!r}"
            )
        if not isinstance(self.value, str):
            raise InvalidAttributeError(
                f"Attribute '{self.name}' must have a string value, got {self.value!r}"
            )
        prefix, local = split_qualified_name(self.name)
        object.__setattr__(self, "prefix", prefix)
        object.__setattr__(self, "local", local)

    @property
    def qualified_name(self) -> str:
        """Name rebuilt from prefix and local part."""
        return f"{self.prefix}:{self.local}" if self.prefix else self.local


class AttributeMap:
    """Ordered mapping from qualified attribute name to AttributeRecord."""

    def __init__(self) -> None:
        self._records: dict[str, AttributeRecord] = {}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "AttributeMap":
        """Build a map from flat name -> value pairs."""
        attrs = cls()
        for name, value in mapping.items():
            attrs.set(name, value)
        return attrs

    @classmethod
    def from_records(cls, records: Mapping[str, AttributeRecord]) -> "AttributeMap":
        """Build a map from prebuilt records keyed by name."""
        attrs = cls()
        for record in records.values():
            attrs.set_record(record)
        return attrs

    def set(self, name: str, value: str) -> AttributeRecord:
        """Insert or overwrite an attribute."""
        record = AttributeRecord(name, value)
        self._records[record.name] = record
        return record

    def set_record(self, record: AttributeRecord) -> None:
        """Insert or overwrite using a record as-is."""
        if not isinstance(record, AttributeRecord):
            raise InvalidAttributeError(
                f"Expected an AttributeRecord, got {type(record).__name__}"
            )
        self._records[record.name] = record

    def get(self, name: str) -> AttributeRecord | None:
        return self._records.get(name)

    def has(self, name: str, value: str | None = None) -> bool:
        """Check presence, or exact value equality when value is given."""
        record = self._records.get(name)
        if record is None:
            return False
        if value is not None:
            return record.value == value
        return True

    def remove(self, name: str) -> None:
        self._records.pop(name, None)

    def for_each(self, visit: Callable[[AttributeRecord], object]) -> None:
        # Snapshot so visitors may remove attributes while iterating.
        for record in list(self._records.values()):
            visit(record)

    def names(self) -> list[str]:
        return list(self._records)

    def to_dict(self) -> dict[str, str]:
        """Flat name -> value mapping in insertion order."""
        return {name: record.value for name, record in self._records.items()}

    def copy(self) -> "AttributeMap":
        # Records are frozen, sharing them is safe.
        attrs = AttributeMap()
        attrs._records = dict(self._records)
        return attrs

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[AttributeRecord]:
        return iter(list(self._records.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __repr__(self) -> str:
        return f"AttributeMap({self.to_dict()!r})"
