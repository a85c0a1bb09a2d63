# android2views/parser/xml_parser.py
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from lxml import etree

from ..errors import MalformedLayoutError

ANDROID_URI = "http://schemas.android.com/apk/res/android"

KNOWN_PREFIXES = {
    ANDROID_URI: "android",
    "http://schemas.android.com/apk/res-auto": "app",
    "http://schemas.android.com/tools": "tools",
}


@dataclass(frozen=True)
class LayoutNode:
    """
    One element of a source layout: tag, ordered attributes, ordered children.
    Attribute keys keep their prefix ("android:id", "app:srcCompat", "style", "layout").
    """
    tag: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    children: Tuple["LayoutNode", ...] = ()
    line: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))
        object.__setattr__(self, "children", tuple(self.children))


def _attr_key(el, qname: str) -> str:
    if not qname.startswith("{"):
        return qname
    uri, name = qname[1:].split("}", 1)
    prefix = KNOWN_PREFIXES.get(uri)
    if prefix is None:
        for p, u in (el.nsmap or {}).items():
            if u == uri and p:
                prefix = p
                break
    return f"{prefix}:{name}" if prefix else name


def _parse_node(el) -> LayoutNode:
    attrs = {_attr_key(el, k): v for k, v in el.attrib.items()}
    # comments / processing instructions have non-str tags
    children = [_parse_node(ch) for ch in el if isinstance(ch.tag, str)]
    return LayoutNode(tag=el.tag, attributes=attrs, children=tuple(children), line=el.sourceline)


def parse_layout_xml(xml_path) -> LayoutNode:
    """
    xml_path: res/layout/xxx.xml
    return: root LayoutNode
    """
    try:
        tree = etree.parse(str(xml_path))
    except etree.XMLSyntaxError as e:
        raise MalformedLayoutError(f"not well-formed XML: {e}", file=str(xml_path)) from e
    return _parse_node(tree.getroot())


def parse_layout_string(text: str) -> LayoutNode:
    try:
        root = etree.fromstring(text.encode("utf-8"))
    except etree.XMLSyntaxError as e:
        raise MalformedLayoutError(f"not well-formed XML: {e}") from e
    return _parse_node(root)
