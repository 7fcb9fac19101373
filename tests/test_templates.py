import pytest
from traverson.core.errors import MissingParameterError
from traverson.core.templates import (
    expand,
    is_templated,
    required_variable_names,
    variable_names,
)


def test_simple_variable_substitution():
    assert expand("http://api.example/orders/{id}", {"id": 42}) == (
        "http://api.example/orders/42"
    )


def test_query_expansion_is_optional():
    template = "http://api.example/items{?page,size}"
    assert expand(template, {}) == "http://api.example/items"
    assert expand(template, {"page": 2}) == "http://api.example/items?page=2"
    assert expand(template, {"page": 2, "size": 10}) == (
        "http://api.example/items?page=2&size=10"
    )


def test_continuation_and_list_values():
    assert expand("/search?q=x{&tag}", {"tag": ["a", "b"]}) == "/search?q=x&tag=a,b"
    assert expand("/search?q=x{&tag*}", {"tag": ["a", "b"]}) == (
        "/search?q=x&tag=a&tag=b"
    )


def test_values_are_percent_encoded_and_booleans_lowercased():
    assert expand("/q{?term}", {"term": "a b"}) == "/q?term=a%20b"
    assert expand("/q{?open}", {"open": True}) == "/q?open=true"


def test_missing_required_variable_raises():
    with pytest.raises(MissingParameterError) as exc:
        expand("/orders/{id}/items/{item}", {"id": 1})

    assert exc.value.missing == ["item"]
    assert exc.value.template == "/orders/{id}/items/{item}"


def test_none_counts_as_missing():
    with pytest.raises(MissingParameterError):
        expand("/orders/{id}", {"id": None})


def test_resolved_uri_is_returned_unchanged():
    uri = "http://api.example/items?page=2"
    assert expand(uri) == uri
    assert expand(uri, {}) == uri
    assert expand(uri, {"unused": 1}) == uri


def test_variable_introspection():
    template = "/orders/{id}{?page,size}{&id}"
    assert is_templated(template)
    assert not is_templated("/orders/1")
    assert variable_names(template) == ["id", "page", "size"]
    assert required_variable_names(template) == ["id"]


def test_form_style_query_variables_are_never_required():
    assert required_variable_names("http://api.example/items{?page}") == []
    assert required_variable_names("/search?q=x{&tag,sort}") == []
    assert required_variable_names("/orders/{id}{?expand}") == ["id"]
    assert expand("http://api.example/items{?page}", {}) == "http://api.example/items"


def test_empty_list_or_dict_leaves_required_variable_unbound():
    with pytest.raises(MissingParameterError) as exc:
        expand("http://a/x/{id}", {"id": []})
    assert exc.value.missing == ["id"]

    with pytest.raises(MissingParameterError):
        expand("http://a/x/{+path}", {"path": {}})

    assert expand("http://a/x/{id}", {"id": ""}) == "http://a/x/"
