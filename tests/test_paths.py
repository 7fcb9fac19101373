import json

import pytest
from traverson.core.errors import InvalidPathExpressionError, PathNotFoundError
from traverson.core.paths import JsonPathEvaluator, is_path_expression

DOC = json.dumps(
    {
        "_embedded": {
            "orders": [
                {"id": 1, "status": "open", "total": 10},
                {"id": 2, "status": "shipped", "total": 25},
            ]
        },
        "count": 2,
    }
)


def test_single_match_returns_value():
    assert JsonPathEvaluator().evaluate(DOC, "$.count") == 2
    assert JsonPathEvaluator().evaluate(DOC.encode(), "$._embedded.orders[1].id") == 2


def test_multiple_matches_return_list():
    assert JsonPathEvaluator().evaluate(DOC, "$._embedded.orders[*].id") == [1, 2]


def test_filter_expressions():
    result = JsonPathEvaluator().evaluate(
        DOC, "$._embedded.orders[?(@.status == 'shipped')].total"
    )
    assert result == 25


def test_no_match_and_bad_input():
    evaluator = JsonPathEvaluator()
    with pytest.raises(PathNotFoundError):
        evaluator.evaluate(DOC, "$.missing")
    with pytest.raises(PathNotFoundError):
        evaluator.evaluate("<html/>", "$.count")
    with pytest.raises(InvalidPathExpressionError):
        evaluator.evaluate(DOC, "$.[[")


def test_is_path_expression():
    assert is_path_expression("$._links.next.href")
    assert not is_path_expression("next")
