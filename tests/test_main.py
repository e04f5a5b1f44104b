"""Tests for command line parsing."""

import pytest

from seventv_links.main import parse_args


def test_defaults():
    args = parse_args([])
    assert args.query == ""
    assert args.debug is False


def test_query_and_debug():
    args = parse_args(["pepe", "--debug"])
    assert args.query == "pepe"
    assert args.debug is True


def test_version_exits():
    with pytest.raises(SystemExit):
        parse_args(["--version"])
