from typing import Any, Dict, List, Optional


def get_link(payload: Dict[str, Any], relation: str) -> Optional[Dict[str, Any]]:
    """
    Safely retrieves a link object from the _links dictionary.
    HAL allows a relation to hold an array of links; the first one wins.
    """
    if not isinstance(payload, dict):
        return None
    links = payload.get("_links")
    if not isinstance(links, dict):
        return None
    link = links.get(relation)
    if isinstance(link, list):
        link = next((item for item in link if isinstance(item, dict)), None)
    return link if isinstance(link, dict) else None


def get_curies(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Returns the CURIE definitions declared under _links.curies.
    Example: [{'name': 'ex', 'href': 'http://example.org/rels/{rel}', 'templated': True}]
    """
    if not isinstance(payload, dict):
        return []
    links = payload.get("_links")
    if not isinstance(links, dict):
        return []
    curies = links.get("curies")
    if isinstance(curies, dict):
        curies = [curies]
    if not isinstance(curies, list):
        return []
    return [c for c in curies if isinstance(c, dict) and c.get("name")]


def find_link(payload: Dict[str, Any], relation: str) -> Optional[Dict[str, Any]]:
    """
    Like get_link, but falls back to curied relations.
    Example: find_link(doc, 'orders') also matches '_links.ex:orders'.
    """
    link = get_link(payload, relation)
    if link is not None or ":" in relation:
        return link
    for curie in get_curies(payload):
        link = get_link(payload, f"{curie['name']}:{relation}")
        if link is not None:
            return link
    return None


def get_link_href(payload: Dict[str, Any], relation: str) -> Optional[str]:
    """
    Extracts the 'href' (URL) from a specific link relation.
    Example: get_link_href(order, 'customer') -> '/customers/1'
    """
    link = get_link(payload, relation)
    return link.get("href") if link else None


def get_link_title(payload: Dict[str, Any], relation: str) -> Optional[str]:
    link = get_link(payload, relation)
    return link.get("title") if link else None


def get_embedded(payload: Dict[str, Any], relation: str) -> Any:
    """
    Extracts an embedded resource (or list of resources) from _embedded.
    """
    if not isinstance(payload, dict):
        return None
    embedded = payload.get("_embedded")
    if not isinstance(embedded, dict):
        return None
    return embedded.get(relation)


__all__ = [
    "get_link",
    "get_curies",
    "find_link",
    "get_link_href",
    "get_link_title",
    "get_embedded",
]
