# android2views/translator/web.py
"""
Android views -> HTML elements laid out with CSS.

LinearLayout becomes a flex box, FrameLayout a single-cell grid whose children
all sit in cell 1/1, RelativeLayout an absolutely positioned container.
"""
from types import MappingProxyType
from typing import Callable, Dict, Mapping

from lxml import etree

from ..parser.resource_resolver import ResourceResolver
from ..parser.xml_parser import LayoutNode
from ..utils import id_base, local_name
from .layout_rules import relative_alignment
from .rules import (
    AttributeReplacement as Attr,
    ChildArrangement,
    ElementReplacement as Element,
    Gravity,
    GravityValue,
    RuleTable,
    constant,
    horizontal_gravity,
    lookup,
    rename,
)

# ---------- property helpers ----------

CSS = "css:"


def css_of(el) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for decl in (el.get("style") or "").split(";"):
        if ":" in decl:
            k, v = decl.split(":", 1)
            out[k.strip()] = v.strip()
    return out


def set_css(el, prop: str, value: str) -> None:
    declarations = css_of(el)
    declarations[prop] = value
    el.set("style", "; ".join(f"{k}: {v}" for k, v in declarations.items()))


def add_class(el, name: str) -> None:
    classes = (el.get("class") or "").split()
    if name not in classes:
        classes.append(name)
    el.set("class", " ".join(classes))


def _px(value: str):
    if value in ("wrap_content", "match_parent", "fill_parent"):
        return None
    px = ResourceResolver.parse_dimen_to_px(value)
    if px is None:
        return None
    return f"{px:g}px"


def _dimen(prop: str):
    def convert(value, resolver):
        out = _px(resolver.resolve(value) if resolver is not None else value)
        return [(CSS + prop, out)] if out is not None else []
    return convert


def _color(prop: str):
    def convert(value, resolver):
        value = resolver.resolve(value) if resolver is not None else value
        css = ResourceResolver.android_color_to_css(value)
        if css is not None:
            return [(CSS + prop, css)]
        if prop == "background" and value.startswith("@drawable/"):
            return [(CSS + "background-image", f"url({drawable_url(value)})")]
        return []
    return convert


def drawable_url(value: str) -> str:
    """@drawable/logo -> images/logo.png; anything else passes through."""
    if value.startswith(("@drawable/", "@mipmap/")):
        return f"images/{id_base(value)}.png"
    return value


def _text_style(value, resolver):
    out = []
    flags = value.split("|")
    if "bold" in flags:
        out.append((CSS + "font-weight", "bold"))
    if "italic" in flags:
        out.append((CSS + "font-style", "italic"))
    return out


def _text_align(value, resolver):
    horizontal = horizontal_gravity(value)
    if horizontal is None:
        return []
    if horizontal is GravityValue.STRETCH:
        return [(CSS + "text-align", "justify")]
    return [(CSS + "text-align", horizontal.value)]


def _input_type(value, resolver):
    kinds = value.split("|")
    for android_type, html_type in (
        ("textPassword", "password"),
        ("numberPassword", "password"),
        ("textEmailAddress", "email"),
        ("phone", "tel"),
        ("number", "number"),
        ("numberDecimal", "number"),
    ):
        if android_type in kinds:
            return [("type", html_type)]
    if "textMultiLine" in kinds:
        return [("data-multiline", "true")]
    return []


def _checked(value, resolver):
    return [("checked", "checked")] if value == "true" else []


def _visibility(value, resolver):
    if value == "gone":
        return [(CSS + "display", "none")]
    if value == "invisible":
        return [(CSS + "visibility", "hidden")]
    return []


# ---------- rule table ----------

FLEX = ((CSS + "display", "flex"),)
GRID = ((CSS + "display", "grid"),)

ELEMENTS = (
    Element("View", "div"),
    Element("Space", "div"),
    Element("LinearLayout", "div", FLEX + ((CSS + "flex-direction", "row"),), ChildArrangement.LINEAR),
    Element("FrameLayout", "div", GRID, ChildArrangement.FRAME),
    Element("ConstraintLayout", "div", GRID, ChildArrangement.FRAME),
    Element("ScrollView", "div", GRID + ((CSS + "overflow-y", "auto"),), ChildArrangement.FRAME),
    Element("NestedScrollView", "div", GRID + ((CSS + "overflow-y", "auto"),), ChildArrangement.FRAME),
    Element("HorizontalScrollView", "div", GRID + ((CSS + "overflow-x", "auto"),), ChildArrangement.FRAME),
    Element("RelativeLayout", "div", ((CSS + "position", "relative"),), ChildArrangement.CUSTOM),
    Element("TextView", "p", ((CSS + "margin", "0"),)),
    Element("Button", "button", inherits=("TextView",)),
    Element("MaterialButton", "button", inherits=("Button",)),
    Element("EditText", "input", (("type", "text"),), inherits=("TextView",)),
    Element("TextInputEditText", "input", (("type", "text"),), inherits=("EditText",)),
    Element("ImageView", "img"),
    Element("ImageButton", "input", (("type", "image"),), inherits=("ImageView",)),
    Element("CheckBox", "input", (("type", "checkbox"),)),
    Element("Switch", "input", (("type", "checkbox"), ("role", "switch")), inherits=("CheckBox",)),
    Element("SwitchCompat", "input", (("type", "checkbox"), ("role", "switch")), inherits=("CheckBox",)),
    Element("ProgressBar", "progress"),
    Element("SeekBar", "input", (("type", "range"),), inherits=("ProgressBar",)),
    Element("include", "div"),
)

# unknown (vendor / custom) views keep their children, stacked
FALLBACK = Element("ViewGroup", "div", GRID, ChildArrangement.FRAME, inherits=("View",))

ANY = RuleTable.ANY

ATTRIBUTES = (
    # ===== every view =====
    Attr(ANY, "android:background", _color("background")),
    Attr(ANY, "android:padding", _dimen("padding")),
    Attr(ANY, "android:paddingTop", _dimen("padding-top")),
    Attr(ANY, "android:paddingBottom", _dimen("padding-bottom")),
    Attr(ANY, "android:paddingLeft", _dimen("padding-left")),
    Attr(ANY, "android:paddingStart", _dimen("padding-inline-start")),
    Attr(ANY, "android:paddingRight", _dimen("padding-right")),
    Attr(ANY, "android:paddingEnd", _dimen("padding-inline-end")),
    Attr(ANY, "android:layout_margin", _dimen("margin")),
    Attr(ANY, "android:layout_marginTop", _dimen("margin-top")),
    Attr(ANY, "android:layout_marginBottom", _dimen("margin-bottom")),
    Attr(ANY, "android:layout_marginLeft", _dimen("margin-left")),
    Attr(ANY, "android:layout_marginStart", _dimen("margin-inline-start")),
    Attr(ANY, "android:layout_marginRight", _dimen("margin-right")),
    Attr(ANY, "android:layout_marginEnd", _dimen("margin-inline-end")),
    Attr(ANY, "android:layout_width", _dimen("width")),
    Attr(ANY, "android:layout_height", _dimen("height")),
    Attr(ANY, "android:minWidth", _dimen("min-width")),
    Attr(ANY, "android:minHeight", _dimen("min-height")),
    Attr(ANY, "android:visibility", _visibility),
    Attr(ANY, "android:alpha", rename(CSS + "opacity")),
    Attr(ANY, "android:contentDescription", rename("aria-label")),
    Attr(ANY, "android:onClick", rename("data-onclick")),
    # ===== LinearLayout =====
    Attr("LinearLayout", "android:orientation",
         lookup(CSS + "flex-direction", {"vertical": "column", "horizontal": "row"})),
    # ===== TextView and descendants =====
    Attr("TextView", "android:text", rename("#text")),
    Attr("TextView", "android:textSize", _dimen("font-size")),
    Attr("TextView", "android:textColor", _color("color")),
    Attr("TextView", "android:textStyle", _text_style),
    Attr("TextView", "android:gravity", _text_align),
    Attr("TextView", "android:maxLines", constant((CSS + "overflow", "hidden"))),
    Attr("EditText", "android:text", rename("value")),
    Attr("EditText", "android:hint", rename("placeholder")),
    Attr("EditText", "android:inputType", _input_type),
    Attr("EditText", "android:enabled", lookup("disabled", {"false": "disabled"})),
    Attr("Button", "android:enabled", lookup("disabled", {"false": "disabled"})),
    # ===== images =====
    Attr("ImageView", "android:src", rename("src", drawable_url)),
    Attr("ImageView", "app:srcCompat", rename("src", drawable_url)),
    Attr("ImageView", "android:scaleType", lookup(CSS + "object-fit", {
        "centerCrop": "cover",
        "fitCenter": "contain",
        "centerInside": "contain",
        "fitXY": "fill",
        "center": "none",
    })),
    # ===== inputs =====
    Attr("CheckBox", "android:checked", _checked),
    Attr("ProgressBar", "android:max", rename("max")),
    Attr("ProgressBar", "android:progress", rename("value")),
    # ===== include =====
    Attr("include", "layout", rename("data-layout", id_base)),
)

WEB_RULES = RuleTable(ELEMENTS, ATTRIBUTES, FALLBACK)

# destination tag -> DOM interface used in generated TypeScript
ELEMENT_TYPES: Mapping[str, str] = MappingProxyType({
    "a": "HTMLAnchorElement",
    "audio": "HTMLAudioElement",
    "br": "HTMLBRElement",
    "button": "HTMLButtonElement",
    "canvas": "HTMLCanvasElement",
    "div": "HTMLDivElement",
    "form": "HTMLFormElement",
    "h1": "HTMLHeadingElement",
    "h2": "HTMLHeadingElement",
    "h3": "HTMLHeadingElement",
    "hr": "HTMLHRElement",
    "iframe": "HTMLIFrameElement",
    "img": "HTMLImageElement",
    "input": "HTMLInputElement",
    "label": "HTMLLabelElement",
    "li": "HTMLLIElement",
    "ol": "HTMLOListElement",
    "option": "HTMLOptionElement",
    "p": "HTMLParagraphElement",
    "picture": "HTMLPictureElement",
    "pre": "HTMLPreElement",
    "progress": "HTMLProgressElement",
    "select": "HTMLSelectElement",
    "span": "HTMLSpanElement",
    "table": "HTMLTableElement",
    "textarea": "HTMLTextAreaElement",
    "ul": "HTMLUListElement",
    "video": "HTMLVideoElement",
})
GENERIC_ELEMENT = "HTMLElement"

_POSITION = {
    GravityValue.START: "0",
    GravityValue.CENTER: "50%",
    GravityValue.END: None,
    GravityValue.STRETCH: "0",
}


class WebStrategy:
    name = "web"

    def __init__(self, rules: RuleTable = WEB_RULES, element_types: Mapping[str, str] = ELEMENT_TYPES):
        self.rules = rules
        self.element_types = element_types

    def type_lookup(self, tag: str) -> str:
        return self.element_types.get(tag, GENERIC_ELEMENT)

    def apply_property(self, dest, key: str, value: str) -> None:
        if key == "#text":
            dest.text = value
        elif key.startswith(CSS):
            set_css(dest, key[len(CSS):], value)
        elif key == "class":
            for name in value.split():
                add_class(dest, name)
        else:
            dest.set(key, value)

    def post_process(self, source: LayoutNode, dest) -> None:
        # keeps elements without a semantic replacement selectable from CSS
        add_class(dest, f"android-{local_name(source.tag)}")

    def mark_outlet(self, dest, outlet) -> None:
        dest.set("id", outlet.name)

    def place_linear(self, dest, vertical: bool, cross: GravityValue, grow: bool) -> None:
        set_css(dest, "align-self", cross.value)
        if grow:
            set_css(dest, "flex-grow", "1")

    def place_frame(self, dest, alignment: Gravity) -> None:
        set_css(dest, "grid-area", "1 / 1")
        set_css(dest, "justify-self", alignment.horizontal.value)
        set_css(dest, "align-self", alignment.vertical.value)

    def arrange_custom(self, source: LayoutNode, dest, attrs, convert_child: Callable, child_attrs: Callable) -> None:
        # ========== RelativeLayout ==========
        for i in range(len(source.children)):
            child_dest = convert_child(dest, i)
            alignment = relative_alignment(child_attrs(i))
            set_css(child_dest, "position", "absolute")
            transform = []
            for value, near, far, shift in (
                (alignment.horizontal, "left", "right", "translateX(-50%)"),
                (alignment.vertical, "top", "bottom", "translateY(-50%)"),
            ):
                if value is GravityValue.END:
                    set_css(child_dest, far, "0")
                    continue
                set_css(child_dest, near, _POSITION[value])
                if value is GravityValue.STRETCH:
                    set_css(child_dest, far, "0")
                elif value is GravityValue.CENTER:
                    transform.append(shift)
            if transform:
                set_css(child_dest, "transform", " ".join(transform))


def serialize_html(root) -> str:
    return etree.tostring(root, method="html", pretty_print=True, encoding="unicode", with_tail=False)
