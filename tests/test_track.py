import pytest

from sonorpy.errors import ParseError, XmlMissingElementError
from sonorpy.track import Track, TrackInfo
from sonorpy.utils import find_root_node, parse_xml

DIDL = (
    '<DIDL-Lite xmlns:dc="http://purl.org/dc/elements/1.1/" '
    'xmlns:upnp="urn:schemas-upnp-org:metadata-1-0/upnp/" '
    'xmlns="urn:schemas-upnp-org:metadata-1-0/DIDL-Lite/">'
    '<item id="-1" parentID="-1">'
    '<res protocolInfo="http-get:*:audio/mpeg:*" duration="0:0:42">'
    "http://192.0.2.10/song.mp3</res>"
    "<dc:title>Song</dc:title>"
    "<dc:creator>Artist</dc:creator>"
    "<upnp:album>Album</upnp:album>"
    "</item></DIDL-Lite>"
)


def _item(xml):
    return find_root_node(parse_xml(xml), "item", "Track Metadata")


def test_from_xml_full():
    track = Track.from_xml(_item(DIDL))
    assert track.title == "Song"
    assert track.creator == "Artist"
    assert track.album == "Album"
    assert track.duration == 42
    assert track.uri == "http://192.0.2.10/song.mp3"


def test_str_full():
    assert str(Track.from_xml(_item(DIDL))) == "Song - Artist (Album)"


def test_minimal_track():
    track = Track.from_xml(_item("<item><title>Only</title><res>x-file:a</res></item>"))
    assert track.creator is None
    assert track.album is None
    assert track.duration is None
    assert track.uri == "x-file:a"
    assert str(track) == "Only"


def test_str_without_album():
    track = Track(title="T", uri="u", creator="C")
    assert str(track) == "T - C"


def test_empty_elements():
    track = Track.from_xml(_item("<item><title/><res/></item>"))
    assert track.title == ""
    assert track.uri == ""


def test_duration_attribute_name_ignores_case():
    track = Track.from_xml(
        _item('<item><title>a</title><res DURATION="0:0:7">u</res></item>')
    )
    assert track.duration == 7


def test_missing_title():
    with pytest.raises(XmlMissingElementError) as info:
        Track.from_xml(_item("<item><res>u</res></item>"))
    assert info.value.parent == "item"
    assert info.value.element == "title"


def test_missing_res():
    with pytest.raises(XmlMissingElementError) as info:
        Track.from_xml(_item("<item><title>a</title></item>"))
    assert info.value.element == "res"


def test_invalid_duration():
    with pytest.raises(ParseError):
        Track.from_xml(_item('<item><title>a</title><res duration="bad">u</res></item>'))


def test_track_info_fields():
    track = Track.from_xml(_item(DIDL))
    info = TrackInfo(track=track, metadata=DIDL, track_no=3, duration=42, elapsed=10)
    assert info.track is track
    assert info.metadata == DIDL
    assert info.track_no == 3
    assert (info.duration, info.elapsed) == (42, 10)