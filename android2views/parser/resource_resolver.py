# android2views/parser/resource_resolver.py
import os
from typing import Dict, List, Optional

from lxml import etree

from ..errors import UnresolvedReferenceError
from ..log import get_logger

logger = get_logger(__name__)


class ResourceResolver:
    """
    Loads res/values/*.xml once; read-only afterwards, so one instance can be
    shared by every translation running in parallel.
    """

    def __init__(self, values_dir=None):
        self.colors: Dict[str, str] = {}
        self.strings: Dict[str, str] = {}
        self.dimens: Dict[str, str] = {}
        self.styles: Dict[str, Dict[str, str]] = {}
        self.style_parents: Dict[str, Optional[str]] = {}
        if values_dir and os.path.isdir(values_dir):
            self._load_values(values_dir)

    def _load_values(self, values_dir):
        for fn in sorted(os.listdir(values_dir)):
            if not fn.endswith(".xml"):
                continue
            path = os.path.join(values_dir, fn)
            try:
                root = etree.parse(path).getroot()
            except etree.XMLSyntaxError as e:
                logger.warning("skipping unreadable values file %s: %s", path, e)
                continue
            for child in root:
                if not isinstance(child.tag, str):
                    continue
                tag = child.tag
                name = child.get("name")
                if not name:
                    continue
                text = (child.text or "").strip()
                if tag == "color":
                    # #AARRGGBB / #RRGGBB
                    self.colors[name] = text
                elif tag == "string":
                    self.strings[name] = text
                elif tag == "dimen":
                    # "16dp" / "14sp"
                    self.dimens[name] = text
                elif tag == "style":
                    self._load_style(name, child)

    def _load_style(self, name: str, el):
        items = {}
        for item in el:
            if isinstance(item.tag, str) and item.tag == "item" and item.get("name"):
                items[item.get("name")] = (item.text or "").strip()
        self.styles[name] = items
        parent = el.get("parent")
        if parent is None and "." in name:
            # Implicit parent: "Title.Big" inherits "Title"
            parent = name.rsplit(".", 1)[0]
        self.style_parents[name] = _style_name(parent) if parent else None

    def resolve(self, val):
        """ @color/primary -> #RRGGBB / @dimen/margin -> '16dp' ... unknown stays literal """
        if not isinstance(val, str):
            return val
        if val.startswith("@color/"):
            return self.colors.get(val.split("/", 1)[1], val)
        if val.startswith("@string/"):
            return self.strings.get(val.split("/", 1)[1], val)
        if val.startswith("@dimen/"):
            return self.dimens.get(val.split("/", 1)[1], val)
        return val

    def resolve_style(self, reference: str) -> Dict[str, str]:
        """
        @style/Title -> flattened {attribute: value}, parents first, children override.
        Raises UnresolvedReferenceError if the style itself is unknown; unknown
        parents (framework styles such as TextAppearance.AppCompat) contribute nothing.
        """
        name = _style_name(reference)
        if name not in self.styles:
            raise UnresolvedReferenceError(f"unknown style '{reference}'")
        chain: List[str] = []
        current: Optional[str] = name
        while current and current in self.styles and current not in chain:
            chain.append(current)
            current = self.style_parents.get(current)
        if current and current not in self.styles:
            logger.debug("style %s: parent %s is not defined in the project", name, current)
        flattened: Dict[str, str] = {}
        for style in reversed(chain):
            flattened.update(self.styles[style])
        return flattened

    @staticmethod
    def parse_dimen_to_px(d):
        """ '16dp' / '14sp' / '24px' -> float. dp and sp are taken as px. """
        if not isinstance(d, str):
            return d
        s = d.strip().lower()
        for suf in ("dip", "dp", "sp", "px"):
            if s.endswith(suf):
                try:
                    return float(s[:-len(suf)])
                except ValueError:
                    return None
        try:
            return float(s)
        except ValueError:
            return None

    @staticmethod
    def android_color_to_flutter(c):
        """
        '#RRGGBB' or '#AARRGGBB' -> '0xAARRGGBB' for Color(0xAARRGGBB).
        """
        hexv = _hex_digits(c)
        if hexv is None:
            return None
        if len(hexv) == 6:
            return "0xFF" + hexv.upper()
        return "0x" + hexv.upper()

    @staticmethod
    def android_color_to_css(c):
        """
        '#RRGGBB' stays, '#AARRGGBB' -> '#RRGGBBAA' (CSS puts alpha last).
        """
        hexv = _hex_digits(c)
        if hexv is None:
            return None
        if len(hexv) == 6:
            return "#" + hexv.lower()
        return "#" + (hexv[2:] + hexv[:2]).lower()


def _style_name(reference: str) -> str:
    s = reference.strip()
    for prefix in ("@style/", "?attr/", "@android:style/"):
        if s.startswith(prefix):
            return s[len(prefix):]
    return s


def _hex_digits(c):
    if not isinstance(c, str):
        return None
    s = c.strip()
    if not s.startswith("#"):
        return None
    hexv = s[1:]
    if len(hexv) == 3:
        hexv = "".join(ch * 2 for ch in hexv)
    if len(hexv) in (6, 8):
        return hexv
    return None


def effective_attributes(node, resolver: Optional[ResourceResolver] = None, path: Optional[str] = None) -> Dict[str, str]:
    """
    Inline attributes overlaid with the ones contributed by `style`.
    Style values win over inline values of the same key.
    """
    attrs = dict(node.attributes)
    reference = attrs.get("style")
    if not reference:
        return attrs
    if resolver is None:
        raise UnresolvedReferenceError(f"style '{reference}' used without a values folder", path=path,
                                       line=node.line)
    try:
        attrs.update(resolver.resolve_style(reference))
    except UnresolvedReferenceError as e:
        e.path = e.path or path
        e.line = e.line or node.line
        raise e.with_context()
    return attrs
