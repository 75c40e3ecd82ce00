from models.playlist import DEFAULT_POSTER_URL
from utils.playlist_parser import (
    LineKind,
    classify_line,
    extract_attributes,
    parse_playlist,
)


def test_classify_line_kinds() -> None:
    assert classify_line('#EXTINF:-1,Title') == (LineKind.METADATA, '-1,Title')
    assert classify_line('  http://x/a.mp4  ') == (LineKind.PLAYABLE, 'http://x/a.mp4')
    assert classify_line('#EXTM3U').kind is LineKind.OTHER_DIRECTIVE
    assert classify_line('#EXTINF without colon').kind is LineKind.OTHER_DIRECTIVE
    assert classify_line('   ').kind is LineKind.BLANK
    assert classify_line('').kind is LineKind.BLANK


def test_extract_attributes_splits_on_last_comma() -> None:
    attributes, name = extract_attributes('-1 tvg-name="Tom, Jerry" group-title=\'Kids\',Episode 1')

    assert name == 'Episode 1'
    assert attributes.title_override == 'Tom, Jerry'
    assert attributes.group == 'Kids'


def test_extract_attributes_without_comma_is_all_display_name() -> None:
    attributes, name = extract_attributes('Just a name')

    assert name == 'Just a name'
    assert attributes.title_override is None
    assert dict(attributes.extra) == {}


def test_extract_attributes_last_duplicate_wins_and_keeps_unknown_keys() -> None:
    attributes, _ = extract_attributes('-1 tvg-logo="a.png" tvg-id="42" tvg-logo="b.png",Name')

    assert attributes.poster == 'b.png'
    assert dict(attributes.extra) == {'tvg-id': '42'}


def test_parse_attribute_override_and_poster() -> None:
    text = '#EXTINF:tvg-name="Override" tvg-logo="http://p.png",Display Name\nhttp://z'

    entries = parse_playlist(text)

    assert len(entries) == 1
    assert entries[0].title == 'Override'
    assert entries[0].poster_url == 'http://p.png'
    assert entries[0].media_url == 'http://z'


def test_parse_second_directive_discards_first() -> None:
    entries = parse_playlist('#EXTINF:,A\n#EXTINF:,B\nhttp://x')

    assert [(e.title, e.media_url) for e in entries] == [('B', 'http://x')]
    assert entries[0].ordinal == 1


def test_parse_skips_orphan_playable_line() -> None:
    entries = parse_playlist('http://orphan\n#EXTINF:,C\nhttp://y')

    assert [(e.title, e.media_url) for e in entries] == [('C', 'http://y')]


def test_parse_drops_unterminated_trailing_directive() -> None:
    entries = parse_playlist('#EXTINF:,One\nhttp://one\n#EXTINF:,Dangling\n')

    assert [e.title for e in entries] == ['One']


def test_parse_placeholder_title_uses_entry_ordinal() -> None:
    text = '#EXTINF:-1,\nhttp://a\n#EXTINF:-1,Named\nhttp://b\n#EXTINF:-1,\nhttp://c'

    entries = parse_playlist(text)

    assert [e.title for e in entries] == ['Video 1', 'Named', 'Video 3']
    assert [e.ordinal for e in entries] == [1, 2, 3]


def test_parse_ignores_other_directives_crlf_and_bom() -> None:
    text = '\ufeff#EXTM3U\r\n#EXTINF:-1,First\r\n#EXTVLCOPT:http-user-agent=x\r\n\r\nhttp://first\r\n'

    entries = parse_playlist(text)

    assert len(entries) == 1
    assert entries[0].title == 'First'
    assert entries[0].media_url == 'http://first'


def test_parse_defaults_and_ids() -> None:
    entries = parse_playlist('#EXTINF:-1,A\nhttp://a\n#EXTINF:-1,B\nhttp://b', source_index=2, id_prefix='x-')

    assert [e.id for e in entries] == ['x-1', 'x-2']
    assert all(e.source_index == 2 for e in entries)
    assert entries[0].poster_url == DEFAULT_POSTER_URL
    assert entries[0].group_label is None


def test_parse_is_idempotent_and_never_emits_incomplete_entries() -> None:
    text = 'junk\n#EXTINF:-1,A\n\n#EXTINF:-1 tvg-name="",\nhttp://b\n#EXTINF:-1,C\n# comment\nhttp://c\nhttp://stray'

    first = parse_playlist(text)
    second = parse_playlist(text)

    assert first == second
    assert [e.id for e in first] == ['vod-1', 'vod-2']
    for entry in first:
        assert entry.id and entry.title and entry.media_url


def test_parse_empty_document() -> None:
    assert parse_playlist('') == []
    assert parse_playlist('#EXTM3U\n') == []
