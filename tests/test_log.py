"""Tests for CLI log formatting."""

from __future__ import annotations

import io
import json
import logging

from linkdeps.log import configure_logging


def test_text_format_tags_levels():
    stream = io.StringIO()
    configure_logging("info", "text", stream)
    log = logging.getLogger("linkdeps.sync.driver")
    log.info("No changes")
    log.warning("careful")
    log.error("broken")
    log.debug("hidden")

    assert stream.getvalue().splitlines() == [
        "[link-deps] No changes",
        "[link-deps][WARN] careful",
        "[link-deps][ERROR] broken",
    ]


def test_json_format_one_object_per_line():
    stream = io.StringIO()
    configure_logging("warn", "json", stream)
    logging.getLogger("linkdeps.fingerprint").warning("odd record %s", "x")

    payload = json.loads(stream.getvalue().strip())
    assert payload == {
        "level": "warning",
        "logger": "linkdeps.fingerprint",
        "message": "odd record x",
    }


def test_reconfigure_replaces_handler():
    first, second = io.StringIO(), io.StringIO()
    configure_logging("info", "text", first)
    configure_logging("info", "text", second)
    logging.getLogger("linkdeps").info("once")
    assert first.getvalue() == ""
    assert second.getvalue() == "[link-deps] once\n"
