from __future__ import annotations

import json
from typing import Any, Protocol, Union

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse

from .errors import InvalidPathExpressionError, PathNotFoundError


class PathEvaluator(Protocol):
    def evaluate(self, body: Union[str, bytes], expression: str) -> Any:
        ...


def is_path_expression(relation: str) -> bool:
    return relation.startswith("$")


class JsonPathEvaluator:
    """
    Evaluates JSONPath expressions (jsonpath-ng extended syntax) against a
    JSON document. A single match yields the value itself, several matches
    yield a list of values, no match raises PathNotFoundError.
    """

    def evaluate(self, body: Union[str, bytes], expression: str) -> Any:
        try:
            compiled = parse(expression)
        except (JSONPathError, ValueError) as exc:
            raise InvalidPathExpressionError(
                f"Invalid JSON path {expression!r}: {exc}", expression
            ) from exc

        try:
            document = json.loads(body) if body else None
        except ValueError as exc:
            raise PathNotFoundError(
                f"Cannot evaluate {expression!r}: response body is not JSON",
                expression,
            ) from exc

        matches = compiled.find(document)
        if not matches:
            raise PathNotFoundError(
                f"No value matches JSON path {expression!r}", expression
            )
        if len(matches) == 1:
            return matches[0].value
        return [m.value for m in matches]


__all__ = ["PathEvaluator", "JsonPathEvaluator", "is_path_expression"]
