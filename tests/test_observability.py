import json
import logging

import pytest
import respx
from httpx import Response
from traverson.core.client import HttpxTransport
from traverson.core.logging import LogfmtFormatter, setup_logging
from traverson.core.observability import log_event
from traverson.core.traversal import Traverson

API = "http://api.example"


def test_log_event_drops_reserved_keys(caplog):
    with caplog.at_level(logging.INFO, logger="traverson.observability"):
        log_event("traversal.complete", hop=2, name="clobber", url="http://x")

    record = next(r for r in caplog.records if r.getMessage() == "traversal.complete")
    assert record.hop == 2
    assert record.url == "http://x"
    assert record.name == "traverson.observability"


def test_logfmt_formatter_renders_known_extras():
    record = logging.LogRecord(
        "traverson.core.traversal", logging.DEBUG, __file__, 1, "traversal.hop", None, None
    )
    record.hop = 0
    record.relation = "items"
    record.url = "http://api.example/items?page=2"
    record.content_type = "application/hal+json"

    line = LogfmtFormatter().format(record)

    assert line.startswith("level=debug logger=traverson.core.traversal event=traversal.hop")
    assert 'hop=0 relation=items url="http://api.example/items?page=2"' in line
    assert "content_type=application/hal+json" in line


def test_setup_logging_replaces_handlers():
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        setup_logging("debug")
        setup_logging("warning")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, LogfmtFormatter)
        assert root.level == logging.WARNING
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])


@pytest.mark.asyncio
@respx.mock
async def test_traversal_logs_hops_and_completion(caplog):
    respx.get(f"{API}/").mock(
        return_value=Response(
            200,
            content=json.dumps({"_links": {"items": {"href": f"{API}/items"}}}).encode(),
            headers={"Content-Type": "application/hal+json"},
        )
    )
    traverson = Traverson(f"{API}/", "application/hal+json", transport=HttpxTransport())

    with caplog.at_level(logging.DEBUG, logger="traverson.core.traversal"):
        await traverson.follow("items").as_link()

    hop = next(r for r in caplog.records if r.getMessage() == "traversal.hop")
    done = next(r for r in caplog.records if r.getMessage() == "traversal.complete")
    assert hop.relation == "items"
    assert hop.status == 200
    assert done.operation == "as_link"
    assert done.url == f"{API}/items"
