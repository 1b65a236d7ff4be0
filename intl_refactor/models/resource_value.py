"""Tagged value types stored in a resource file."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class PlainValue:
    """A single string value."""

    text: str

    def to_json(self) -> str:
        return self.text


@dataclass(frozen=True)
class PluralValue:
    """Singular and plural forms of a message."""

    one: str
    other: str

    def to_json(self) -> Dict[str, str]:
        return {"one": self.one, "other": self.other}


@dataclass(frozen=True)
class GenderValue:
    """Male, female and neutral forms of a message."""

    male: str
    female: str
    other: str

    def to_json(self) -> Dict[str, str]:
        return {"male": self.male, "female": self.female, "other": self.other}


ResourceValue = Union[PlainValue, PluralValue, GenderValue]


def value_from_json(data: Any) -> Optional[ResourceValue]:
    """
    Convert a decoded JSON value into a ResourceValue.

    Args:
        data: A string or a variant object from a resource file

    Returns:
        The matching ResourceValue, or None if the shape is not recognised
        (metadata objects, numbers, nested structures).
    """
    if isinstance(data, str):
        return PlainValue(data)
    if isinstance(data, dict):
        keys = set(data.keys())
        if keys == {"one", "other"} and all(isinstance(v, str) for v in data.values()):
            return PluralValue(one=data["one"], other=data["other"])
        if keys == {"male", "female", "other"} and all(isinstance(v, str) for v in data.values()):
            return GenderValue(male=data["male"], female=data["female"], other=data["other"])
    return None


def source_text(value: ResourceValue) -> str:
    """The text a value was derived from, used for reverse lookups."""
    if isinstance(value, PlainValue):
        return value.text
    return value.other
