"""
RFC 6570 URI template expansion.

Missing-value policy: variables in form-style query expressions (``{?x}``,
``{&x}``) are optional and simply dropped when unbound. Every other variable
(``{x}``, ``{+x}``, ``{/x}``, ``{.x}``, ``{;x}``, ``{#x}``) is required and
raises MissingParameterError when the parameter map has no value for it.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from uritemplate import URITemplate

from .errors import MissingParameterError

OPTIONAL_OPERATORS = frozenset({"?", "&"})


def _template(template: str) -> URITemplate:
    return URITemplate(template)


def is_templated(template: str) -> bool:
    return bool(_template(template).variables)


def variable_names(template: str) -> List[str]:
    """Variable names in order of first appearance."""
    names: List[str] = []
    for var in _template(template).variables:
        for name in var.variable_names:
            if name not in names:
                names.append(name)
    return names


def _operator(var: Any) -> str:
    # uritemplate 4.2 made the operator an Enum whose value is the symbol
    return getattr(var.operator, "value", var.operator)


def required_variable_names(template: str) -> List[str]:
    names: List[str] = []
    for var in _template(template).variables:
        if _operator(var) in OPTIONAL_OPERATORS:
            continue
        for name in var.variable_names:
            if name not in names:
                names.append(name)
    return names


def _coerce(value: Any) -> Any:
    # uritemplate only understands strings, lists and dicts
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_coerce(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): _coerce(v) for k, v in value.items()}
    return value


def _is_undefined(value: Any) -> bool:
    # RFC 6570: None, empty lists and empty associative arrays are undefined
    if value is None:
        return True
    if isinstance(value, (list, tuple, Mapping)):
        return len(value) == 0
    return False


def expand(template: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Expand ``template`` against ``params``.
    A template without variables is returned unchanged.
    """
    tpl = _template(template)
    if not tpl.variables:
        return template

    params = params or {}
    missing = [
        name
        for name in required_variable_names(template)
        if _is_undefined(params.get(name))
    ]
    if missing:
        raise MissingParameterError(template, missing, uri=template)

    values: Dict[str, Any] = {
        name: _coerce(value) for name, value in params.items() if value is not None
    }
    return tpl.expand(values)


__all__ = [
    "expand",
    "is_templated",
    "variable_names",
    "required_variable_names",
    "OPTIONAL_OPERATORS",
]
