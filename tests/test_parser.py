"""Tests for 7TV emote link parsing."""

from seventv_links.chat.emotes.parser import DEFAULT_EMOTE_NAME, is_emote_url, parse_emote_url


def test_parse_animated_with_name():
    ref = parse_emote_url("https://cdn.7tv.app/emote/abc123/4x.gif?name=Pog")
    assert ref is not None
    assert ref.id == "abc123"
    assert ref.animated is True
    assert ref.display_name == "Pog"


def test_parse_static_webp():
    ref = parse_emote_url("https://cdn.7tv.app/emote/60ae958e229664e8/2x.webp")
    assert ref.id == "60ae958e229664e8"
    assert ref.animated is False


def test_parse_png():
    assert parse_emote_url("https://cdn.7tv.app/emote/ff00/1x.png").animated is False


def test_default_name_without_query():
    assert parse_emote_url("https://host/emote/abc123/4x.webp").display_name == DEFAULT_EMOTE_NAME


def test_encoded_name_is_decoded():
    ref = parse_emote_url("https://host/emote/abc123/1x.webp?name=peepo%20Happy")
    assert ref.display_name == "peepo Happy"


def test_unsupported_extension():
    assert parse_emote_url("https://host/emote/abc123/4x.avif") is None


def test_non_hex_id():
    assert parse_emote_url("https://host/emote/xyz/4x.webp") is None


def test_plain_link():
    assert parse_emote_url("https://example.com/page") is None


def test_empty_url():
    assert parse_emote_url("") is None


def test_emote_path_in_query_is_ignored():
    assert parse_emote_url("https://example.com/?next=/emote/abc123/4x.webp") is None


def test_unsplittable_url_uses_default_name():
    # Unbalanced IPv6 bracket makes urlsplit raise
    ref = parse_emote_url("https://[host/emote/abc123/4x.gif?name=Pog")
    assert ref is not None
    assert ref.animated is True
    assert ref.display_name == DEFAULT_EMOTE_NAME


def test_is_emote_url():
    assert is_emote_url("https://host/emote/abc123/4x.webp")
    assert not is_emote_url("https://example.com/page")
    assert not is_emote_url(None)
