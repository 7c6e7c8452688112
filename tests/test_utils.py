import pytest

from sonorpy.errors import ParseError, XmlError, XmlMissingElementError
from sonorpy.utils import (
    extract,
    find_node_attribute,
    find_root_node,
    local_name,
    parse_bool,
    parse_xml,
    seconds_from_str,
    seconds_to_str,
    soap_args,
)


def test_soap_args_default_instance():
    assert soap_args(InstanceID=0) == "<InstanceID>0</InstanceID>"


def test_soap_args_keeps_order_and_values():
    rendered = soap_args(InstanceID=0, Channel="Master", DesiredVolume=17)
    root = parse_xml(f"<r>{rendered}</r>")
    assert [child.tag for child in root] == ["InstanceID", "Channel", "DesiredVolume"]
    assert [child.text for child in root] == ["0", "Master", "17"]


def test_soap_args_booleans_as_digits():
    root = parse_xml(f"<r>{soap_args(DesiredMute=True, Other=False)}</r>")
    assert parse_bool(root.find("DesiredMute").text) is True
    assert parse_bool(root.find("Other").text) is False


def test_soap_args_empty():
    assert soap_args() == ""


def test_extract_removes_key():
    mapping = {"CurrentVolume": "12", "Other": "x"}
    assert extract(mapping, "CurrentVolume") == "12"
    assert "CurrentVolume" not in mapping
    assert mapping == {"Other": "x"}


def test_extract_missing_key():
    with pytest.raises(XmlMissingElementError) as info:
        extract({}, "PlayMode")
    assert info.value.parent == "UPnP Response"
    assert info.value.element == "PlayMode"


def test_seconds_to_str_zero():
    assert seconds_to_str(0) == "00:00:00"


@pytest.mark.parametrize("seconds", [0, 1, 59, 60, 61, 3599, 3600, 86399, 360000])
def test_seconds_round_trip(seconds):
    assert seconds_from_str(seconds_to_str(seconds)) == seconds


@pytest.mark.parametrize("seconds", [1, 75, 4000])
def test_seconds_to_str_negative(seconds):
    assert seconds_to_str(-seconds) == "-" + seconds_to_str(seconds)


def test_seconds_from_str_short_form():
    assert seconds_from_str("0:0:0") == 0
    assert seconds_from_str("0:0:42") == 42


@pytest.mark.parametrize(
    "text",
    ["", "1:2", "a:b:c", "1:2:3:4", "-1:0:0", " 1:0:0", "NOT_IMPLEMENTED", "1:2:"],
)
def test_seconds_from_str_invalid(text):
    with pytest.raises(ParseError):
        seconds_from_str(text)


@pytest.mark.parametrize("text, expected", [("0", False), ("1", True), (" 1\n", True)])
def test_parse_bool(text, expected):
    assert parse_bool(text) is expected


@pytest.mark.parametrize("text", ["2", "true", "", "01"])
def test_parse_bool_invalid(text):
    with pytest.raises(ParseError) as info:
        parse_bool(text)
    assert str(info.value) == "bool was neither `0` nor `1`"


def test_local_name():
    assert local_name("{urn:example}item") == "item"
    assert local_name("plain") == "plain"


def test_parse_xml_invalid():
    with pytest.raises(XmlError):
        parse_xml("<unclosed>")


def test_find_node_attribute_case_insensitive():
    node = parse_xml('<ZoneGroup Coordinator="RINCON_EXAMPLE0001" ID="g1"/>')
    assert find_node_attribute(node, "coordinator") == "RINCON_EXAMPLE0001"
    assert find_node_attribute(node, "id") == "g1"


def test_find_node_attribute_missing():
    node = parse_xml("<ZoneGroup/>")
    with pytest.raises(XmlMissingElementError) as info:
        find_node_attribute(node, "Coordinator")
    assert info.value.parent == "ZoneGroup"
    assert info.value.element == "Coordinator"


def test_find_root_node_nested_and_case_insensitive():
    doc = parse_xml("<State><zonegroups><ZoneGroup/></zonegroups></State>")
    found = find_root_node(doc, "ZoneGroups", "Zone Group Topology")
    assert found.tag == "zonegroups"
    assert [child.tag for child in found] == ["ZoneGroup"]


def test_find_root_node_matches_root_and_namespace():
    doc = parse_xml('<DIDL-Lite xmlns="urn:example"><item id="1"/></DIDL-Lite>')
    assert local_name(find_root_node(doc, "didl-lite", "doc").tag) == "DIDL-Lite"
    assert find_root_node(doc, "item", "doc").get("id") == "1"


def test_find_root_node_missing():
    doc = parse_xml("<a><b/></a>")
    with pytest.raises(XmlMissingElementError) as info:
        find_root_node(doc, "item", "Track Metadata")
    assert info.value.parent == "Track Metadata"
    assert info.value.element == "item"