from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

WILDCARD = "*"


@dataclass(frozen=True)
class MediaType:
    """
    Parsed media type, e.g. ``application/hal+json;charset=UTF-8``.
    Type and subtype are lowercased; parameter names too, values kept as-is.
    """

    type: str
    subtype: str
    parameters: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def parse(cls, value: str) -> "MediaType":
        if value is None:
            raise ValueError("Media type must not be None")
        raw = value.strip()
        if not raw:
            raise ValueError("Media type must not be empty")

        main, _, rest = raw.partition(";")
        main = main.strip().lower()
        if main == WILDCARD:
            main = "*/*"
        if "/" not in main:
            raise ValueError(f"Invalid media type: {value!r}")
        type_, subtype = (part.strip() for part in main.split("/", 1))
        if not type_ or not subtype:
            raise ValueError(f"Invalid media type: {value!r}")

        params: Dict[str, str] = {}
        for part in rest.split(";"):
            part = part.strip()
            if not part or "=" not in part:
                continue
            key, val = part.split("=", 1)
            params[key.strip().lower()] = val.strip().strip('"')

        return cls(type=type_, subtype=subtype, parameters=params)

    @classmethod
    def parse_optional(cls, value: Optional[str]) -> Optional["MediaType"]:
        """Lenient variant for response headers: garbage yields None."""
        if not value or not value.strip():
            return None
        try:
            return cls.parse(value)
        except ValueError:
            return None

    @property
    def suffix(self) -> Optional[str]:
        # structured syntax suffix: application/hal+json -> json
        if "+" not in self.subtype:
            return None
        return self.subtype.rsplit("+", 1)[1]

    @property
    def is_wildcard_type(self) -> bool:
        return self.type == WILDCARD

    @property
    def is_wildcard_subtype(self) -> bool:
        return self.subtype == WILDCARD or self.subtype.startswith("*+")

    @property
    def is_json(self) -> bool:
        if self.type != "application":
            return False
        return self.subtype == "json" or self.suffix == "json"

    def includes(self, other: "MediaType") -> bool:
        """True if this (possibly wildcard) type covers ``other``."""
        if self.is_wildcard_type:
            return True
        if self.type != other.type:
            return False
        if self.subtype == other.subtype or self.subtype == WILDCARD:
            return True
        # application/*+json includes application/hal+json
        if self.subtype.startswith("*+"):
            return other.suffix == self.subtype[2:]
        return False

    def is_compatible_with(self, other: Optional["MediaType"]) -> bool:
        if other is None:
            return False
        return self.includes(other) or other.includes(self)

    def __str__(self) -> str:
        base = f"{self.type}/{self.subtype}"
        if not self.parameters:
            return base
        params = ";".join(f"{k}={v}" for k, v in self.parameters.items())
        return f"{base};{params}"


APPLICATION_JSON = MediaType.parse("application/json")
HAL_JSON = MediaType.parse("application/hal+json")
HAL_FORMS_JSON = MediaType.parse("application/prs.hal-forms+json")
COLLECTION_JSON = MediaType.parse("application/vnd.collection+json")


__all__ = [
    "MediaType",
    "APPLICATION_JSON",
    "HAL_JSON",
    "HAL_FORMS_JSON",
    "COLLECTION_JSON",
]
