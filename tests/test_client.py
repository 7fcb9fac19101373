import base64

import httpx
import pytest
import respx
from httpx import Response
from traverson.core.client import HttpxTransport, RetryConfig
from traverson.core.errors import TransportError, TraversonHTTPError
from traverson.core.media import HAL_JSON

URL = "https://mock-api.com/orders"


def fast_retry(**kwargs):
    return RetryConfig(backoff_base_seconds=0, **kwargs)


@pytest.mark.asyncio
async def test_get_returns_raw_response():
    async with respx.mock:
        route = respx.get(URL).mock(
            return_value=Response(
                200,
                content=b'{"_links": {}}',
                headers={"Content-Type": "application/hal+json;charset=UTF-8"},
            )
        )

        async with HttpxTransport() as transport:
            resp = await transport.get(URL, {"accept": ["application/hal+json"]})

        assert route.called
        assert route.calls[0].request.headers["Accept"] == "application/hal+json"
        assert resp.status_code == 200
        assert resp.body == b'{"_links": {}}'
        assert resp.text == '{"_links": {}}'
        assert resp.content_type == HAL_JSON
        assert resp.content_type.parameters["charset"] == "UTF-8"
        assert resp.headers["content-type"] == ["application/hal+json;charset=UTF-8"]
        assert resp.url == URL


@pytest.mark.asyncio
async def test_multi_value_headers_are_sent():
    async with respx.mock:
        route = respx.get(URL).mock(return_value=Response(200, json={}))

        async with HttpxTransport() as transport:
            await transport.get(URL, {"x-tag": ["a", "b"]})

        assert route.calls[0].request.headers.get_list("x-tag") == ["a", "b"]


@pytest.mark.asyncio
async def test_auth_is_applied():
    async with respx.mock:
        route = respx.get(URL).mock(return_value=Response(200, json={}))

        async with HttpxTransport(auth=httpx.BasicAuth("apikey", "secret")) as transport:
            await transport.get(URL, {})

        expected = "Basic " + base64.b64encode(b"apikey:secret").decode()
        assert route.calls[0].request.headers["Authorization"] == expected


@pytest.mark.asyncio
async def test_404_raises_typed_error():
    async with respx.mock:
        respx.get(URL).mock(return_value=Response(404, json={"message": "Not found"}))

        async with HttpxTransport() as transport:
            with pytest.raises(TraversonHTTPError) as exc:
                await transport.get(URL, {})

        assert exc.value.status_code == 404
        assert exc.value.method == "GET"
        assert exc.value.url == URL
        assert "Not found" in str(exc.value)


@pytest.mark.asyncio
async def test_non_json_error_body_keeps_snippet():
    async with respx.mock:
        respx.get(URL).mock(return_value=Response(500, text="<h1>boom</h1>"))

        async with HttpxTransport(retry=fast_retry()) as transport:
            with pytest.raises(TraversonHTTPError) as exc:
                await transport.get(URL, {})

        assert exc.value.status_code == 500
        assert exc.value.response_text == "<h1>boom</h1>"


@pytest.mark.asyncio
async def test_retries_on_503_then_succeeds():
    async with respx.mock:
        route = respx.get(URL).mock(
            side_effect=[Response(503), Response(200, json={"ok": True})]
        )

        async with HttpxTransport(retry=fast_retry(max_retries=2)) as transport:
            resp = await transport.get(URL, {})

        assert resp.status_code == 200
        assert route.call_count == 2


@pytest.mark.asyncio
async def test_gives_up_after_max_retries():
    async with respx.mock:
        route = respx.get(URL).mock(return_value=Response(503))

        async with HttpxTransport(retry=fast_retry(max_retries=1)) as transport:
            with pytest.raises(TraversonHTTPError) as exc:
                await transport.get(URL, {})

        assert exc.value.status_code == 503
        assert route.call_count == 2


@pytest.mark.asyncio
async def test_429_only_retried_when_enabled():
    async with respx.mock:
        route = respx.get(URL).mock(
            side_effect=[Response(429), Response(200, json={})]
        )

        async with HttpxTransport(
            retry=fast_retry(max_retries=1, retry_on_429=True)
        ) as transport:
            resp = await transport.get(URL, {})

        assert resp.status_code == 200
        assert route.call_count == 2


@pytest.mark.asyncio
async def test_network_error_raises_transport_error_after_retries():
    async with respx.mock:
        route = respx.get(URL).mock(side_effect=httpx.ConnectError("refused"))

        async with HttpxTransport(retry=fast_retry(max_retries=2)) as transport:
            with pytest.raises(TransportError) as exc:
                await transport.get(URL, {})

        assert route.call_count == 3
        assert exc.value.uri == URL
        assert isinstance(exc.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_other_httpx_errors_are_not_retried():
    async with respx.mock:
        route = respx.get(URL).mock(side_effect=httpx.RemoteProtocolError("bad"))

        async with HttpxTransport(retry=fast_retry(max_retries=2)) as transport:
            with pytest.raises(TransportError):
                await transport.get(URL, {})

        assert route.call_count == 1


@pytest.mark.asyncio
async def test_injected_client_is_not_closed():
    http = httpx.AsyncClient()
    async with HttpxTransport(http=http):
        pass
    assert not http.is_closed
    await http.aclose()
