from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .core import hal
from .core.models import Link

M = TypeVar("M", bound=BaseModel)


class HALResource(BaseModel):
    """
    Base model for HAL documents fetched with ``to_object``/``to_entity``.
    _links/_embedded stay loosely typed because relations may hold
      - single link objects
      - arrays of link objects
      - single embedded resources or arrays of them
    Subclasses add the resource's own properties.
    """

    links: Dict[str, Any] = Field(default_factory=dict, alias="_links")
    embedded: Dict[str, Any] = Field(default_factory=dict, alias="_embedded")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def _document(self) -> Dict[str, Any]:
        return {"_links": self.links, "_embedded": self.embedded}

    def link(self, rel: str) -> Optional[Link]:
        raw = hal.find_link(self._document(), rel)
        if raw is None or not isinstance(raw.get("href"), str):
            return None
        return Link(rel=rel, **{k: raw.get(k) for k in ("href", "title", "name", "type")})

    def link_href(self, rel: str) -> Optional[str]:
        link = self.link(rel)
        return link.href if link else None

    def has_link(self, rel: str) -> bool:
        return self.link(rel) is not None

    def embedded_as(self, rel: str, model: Type[M]) -> Optional[M]:
        raw = hal.get_embedded(self._document(), rel)
        if not isinstance(raw, dict):
            return None
        try:
            return model.model_validate(raw)
        except ValidationError:
            return None

    def embedded_list(self, rel: str, model: Type[M]) -> List[M]:
        raw = hal.get_embedded(self._document(), rel)
        if isinstance(raw, dict):
            raw = [raw]
        if not isinstance(raw, list):
            return []
        return [model.model_validate(item) for item in raw if isinstance(item, dict)]


__all__ = ["HALResource"]
