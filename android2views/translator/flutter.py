# android2views/translator/flutter.py
"""
Android views -> Flutter widget tree.

Destination elements are widget constructors: the tag is the widget class, each
attribute a named Dart argument whose value is already a Dart expression.
Three attribute families are not arguments and are consumed by the Dart renderer:
  style.* / decoration.*  grouped into TextStyle(...) / InputDecoration(...)
  wrap.*                  Padding / SizedBox / ColoredBox / Visibility / Opacity / InkWell wrappers
  layout.*                placement inside the parent (Expanded, Align, Positioned.fill)
"""
from types import MappingProxyType
from typing import Callable, Mapping

from ..parser.layout_file import SubLayoutReference
from ..parser.resource_resolver import ResourceResolver
from ..parser.xml_parser import LayoutNode
from ..utils import class_name_for, dart_string, id_base
from .layout_rules import relative_alignment
from .rules import (
    AttributeReplacement as Attr,
    ChildArrangement,
    ElementReplacement as Element,
    Gravity,
    GravityValue,
    RuleTable,
    horizontal_gravity,
    lookup,
    rename,
)

LAYOUT = "layout."
WRAP = "wrap."


def _number(value, resolver):
    value = resolver.resolve(value) if resolver is not None else value
    if value in ("wrap_content", "match_parent", "fill_parent"):
        return None
    px = ResourceResolver.parse_dimen_to_px(value)
    return None if px is None else f"{px:.1f}"


def _dimen(key: str, template: str = "{}"):
    def convert(value, resolver):
        px = _number(value, resolver)
        return [(key, template.format(px))] if px is not None else []
    return convert


def _color(key: str):
    def convert(value, resolver):
        value = resolver.resolve(value) if resolver is not None else value
        hexv = ResourceResolver.android_color_to_flutter(value)
        return [(key, f"Color({hexv})")] if hexv else []
    return convert


def _string(key: str):
    def convert(value, resolver):
        value = resolver.resolve(value) if resolver is not None else value
        return [(key, dart_string(value))]
    return convert


def asset_image(value: str) -> str:
    """@drawable/logo -> AssetImage("images/logo.png")"""
    return f'AssetImage("images/{id_base(value)}.png")'


def _text_style(value, resolver):
    out = []
    flags = value.split("|")
    if "bold" in flags:
        out.append(("style.fontWeight", "FontWeight.bold"))
    if "italic" in flags:
        out.append(("style.fontStyle", "FontStyle.italic"))
    return out


def _text_align(value, resolver):
    horizontal = horizontal_gravity(value)
    if horizontal is None:
        return []
    align = {
        GravityValue.START: "TextAlign.start",
        GravityValue.CENTER: "TextAlign.center",
        GravityValue.END: "TextAlign.end",
        GravityValue.STRETCH: "TextAlign.justify",
    }[horizontal]
    return [("textAlign", align)]


def _input_type(value, resolver):
    kinds = value.split("|")
    if "textPassword" in kinds or "numberPassword" in kinds:
        return [("obscureText", "true")]
    if "number" in kinds or "numberDecimal" in kinds:
        return [("keyboardType", "TextInputType.number")]
    if "textEmailAddress" in kinds:
        return [("keyboardType", "TextInputType.emailAddress")]
    if "phone" in kinds:
        return [("keyboardType", "TextInputType.phone")]
    if "textMultiLine" in kinds:
        return [("maxLines", "null")]
    return []


def _handler(key: str):
    def convert(value, resolver):
        return [(key, f"() => {value}?.call()")]
    return convert


def _include(value, resolver):
    return [("child", f"{class_name_for(id_base(value))}.inflate().xmlRoot")]


# ---------- rule table ----------

ELEMENTS = (
    Element("View", "SizedBox"),
    Element("Space", "SizedBox"),
    Element("LinearLayout", "Flex", (("direction", "Axis.horizontal"),), ChildArrangement.LINEAR),
    Element("FrameLayout", "Stack", children=ChildArrangement.FRAME),
    Element("ConstraintLayout", "Stack", children=ChildArrangement.FRAME),
    Element("ScrollView", "SingleChildScrollView", children=ChildArrangement.FRAME),
    Element("NestedScrollView", "SingleChildScrollView", children=ChildArrangement.FRAME),
    Element("HorizontalScrollView", "SingleChildScrollView", (("scrollDirection", "Axis.horizontal"),),
            ChildArrangement.FRAME),
    Element("RelativeLayout", "Stack", children=ChildArrangement.CUSTOM),
    Element("TextView", "Text", (("#text", '""'),)),
    Element("Button", "ElevatedButton", (("onPressed", "null"), ("child", "const SizedBox()"))),
    Element("MaterialButton", "ElevatedButton", (("onPressed", "null"), ("child", "const SizedBox()")),
            inherits=("Button",)),
    Element("EditText", "TextField"),
    Element("TextInputEditText", "TextField", inherits=("EditText",)),
    Element("ImageView", "Image", (("image", "const AssetImage(\"images/placeholder.png\")"),)),
    Element("ImageButton", "IconButton", (("onPressed", "null"), ("icon", "const SizedBox()"))),
    Element("CheckBox", "Checkbox", (("value", "false"), ("onChanged", "null"))),
    Element("Switch", "Switch", (("value", "false"), ("onChanged", "null")), inherits=("CheckBox",)),
    Element("SwitchCompat", "Switch", (("value", "false"), ("onChanged", "null")), inherits=("CheckBox",)),
    Element("ProgressBar", "CircularProgressIndicator"),
    Element("SeekBar", "Slider", (("value", "0.0"), ("onChanged", "null"))),
    Element("include", "SizedBox"),
)

FALLBACK = Element("ViewGroup", "Stack", children=ChildArrangement.FRAME, inherits=("View",))

ANY = RuleTable.ANY

ATTRIBUTES = (
    # ===== every view: wrappers =====
    Attr(ANY, "android:padding", _dimen(WRAP + "padding", "EdgeInsets.all({})")),
    Attr(ANY, "android:layout_width", _dimen(WRAP + "width")),
    Attr(ANY, "android:layout_height", _dimen(WRAP + "height")),
    Attr(ANY, "android:background", _color(WRAP + "color")),
    Attr(ANY, "android:visibility", lookup(WRAP + "visible", {"gone": "false", "invisible": "false"})),
    Attr(ANY, "android:alpha", rename(WRAP + "opacity")),
    Attr(ANY, "android:onClick", _handler(WRAP + "onTap")),
    # ===== LinearLayout =====
    Attr("LinearLayout", "android:orientation",
         lookup("direction", {"vertical": "Axis.vertical", "horizontal": "Axis.horizontal"})),
    # ===== TextView =====
    Attr("TextView", "android:text", _string("#text")),
    Attr("TextView", "android:textSize", _dimen("style.fontSize")),
    Attr("TextView", "android:textColor", _color("style.color")),
    Attr("TextView", "android:textStyle", _text_style),
    Attr("TextView", "android:gravity", _text_align),
    Attr("TextView", "android:maxLines", rename("maxLines")),
    # ===== Button =====
    Attr("Button", "android:text", lambda value, resolver: [
        ("child", f"Text({dart_string(resolver.resolve(value) if resolver is not None else value)})")
    ]),
    Attr("Button", "android:onClick", _handler("onPressed")),
    # ===== EditText =====
    Attr("EditText", "android:hint", _string("decoration.hintText")),
    Attr("EditText", "android:inputType", _input_type),
    Attr("EditText", "android:enabled", lookup("enabled", {"false": "false"})),
    # ===== images =====
    Attr("ImageView", "android:src", lambda value, resolver: [("image", asset_image(value))]),
    Attr("ImageView", "app:srcCompat", lambda value, resolver: [("image", asset_image(value))]),
    Attr("ImageView", "android:scaleType", lookup("fit", {
        "centerCrop": "BoxFit.cover",
        "fitCenter": "BoxFit.contain",
        "centerInside": "BoxFit.scaleDown",
        "fitXY": "BoxFit.fill",
        "center": "BoxFit.none",
    })),
    Attr("ImageButton", "android:src", lambda value, resolver: [("icon", f"Image(image: {asset_image(value)})")]),
    Attr("ImageButton", "android:onClick", _handler("onPressed")),
    # ===== inputs =====
    Attr("CheckBox", "android:checked", lookup("value", {"true": "true"})),
    # ===== include =====
    Attr("include", "layout", _include),
)

FLUTTER_RULES = RuleTable(ELEMENTS, ATTRIBUTES, FALLBACK)

# destination tag -> static type of the widget held by a binding
WIDGET_TYPES: Mapping[str, str] = MappingProxyType({
    "Text": "Text",
    "ElevatedButton": "ElevatedButton",
    "IconButton": "IconButton",
    "TextField": "TextField",
    "Image": "Image",
    "Checkbox": "Checkbox",
    "Switch": "Switch",
    "Slider": "Slider",
    "CircularProgressIndicator": "CircularProgressIndicator",
    "Flex": "Flex",
    "Stack": "Stack",
    "SingleChildScrollView": "SingleChildScrollView",
    "SizedBox": "SizedBox",
})
GENERIC_WIDGET = "Widget"

_ALIGN = {
    GravityValue.START: "-1.0",
    GravityValue.CENTER: "0.0",
    GravityValue.END: "1.0",
    GravityValue.STRETCH: "0.0",
}


class FlutterStrategy:
    name = "flutter"

    def __init__(self, rules: RuleTable = FLUTTER_RULES, widget_types: Mapping[str, str] = WIDGET_TYPES):
        self.rules = rules
        self.widget_types = widget_types

    def type_lookup(self, tag: str) -> str:
        return self.widget_types.get(tag, GENERIC_WIDGET)

    def apply_property(self, dest, key: str, value: str) -> None:
        if key == "#text":
            dest.text = value
        else:
            dest.set(key, value)

    def post_process(self, source: LayoutNode, dest) -> None:
        pass

    def mark_outlet(self, dest, outlet) -> None:
        if isinstance(outlet, SubLayoutReference):
            # keep the included instance reachable: (header = HeaderXml.inflate()).xmlRoot
            dest.set("child", f"({outlet.name} = {outlet.layout_class}.inflate()).xmlRoot")
        else:
            dest.set("key", outlet.name)

    def place_linear(self, dest, vertical: bool, cross: GravityValue, grow: bool) -> None:
        dest.set(LAYOUT + "axis", "vertical" if vertical else "horizontal")
        dest.set(LAYOUT + "cross", cross.value)
        if grow:
            dest.set(LAYOUT + "expand", "true")

    def place_frame(self, dest, alignment: Gravity) -> None:
        parent = dest.getparent()
        if parent is not None and parent.tag != "Stack":
            # SingleChildScrollView: only the cross axis may stretch
            horizontal_scroll = parent.get("scrollDirection") == "Axis.horizontal"
            cross = alignment.vertical if horizontal_scroll else alignment.horizontal
            if cross is GravityValue.STRETCH:
                dest.set(LAYOUT + "fill", "height" if horizontal_scroll else "width")
            return
        dest.set(LAYOUT + "alignX", alignment.horizontal.value)
        dest.set(LAYOUT + "alignY", alignment.vertical.value)

    def arrange_custom(self, source: LayoutNode, dest, attrs, convert_child: Callable, child_attrs: Callable) -> None:
        # ========== RelativeLayout ==========
        for i in range(len(source.children)):
            child_dest = convert_child(dest, i)
            self.place_frame(child_dest, relative_alignment(child_attrs(i)))


# ---------- rendering ----------

_GROUPS = {"style": "TextStyle", "decoration": "InputDecoration"}
MULTI_CHILD = ("Flex", "Stack", "Column", "Row", "Wrap")


def _wrap_placement(el, body: str) -> str:
    axis = el.get(LAYOUT + "axis")
    if axis is not None:
        cross = GravityValue(el.get(LAYOUT + "cross"))
        # cross axis of a vertical Flex is horizontal
        if cross is GravityValue.STRETCH:
            side = "width" if axis == "vertical" else "height"
            body = f"SizedBox({side}: double.infinity, child: {body})"
        else:
            x, y = (_ALIGN[cross], "0.0") if axis == "vertical" else ("0.0", _ALIGN[cross])
            body = f"Align(alignment: Alignment({x}, {y}), child: {body})"
        if el.get(LAYOUT + "expand") == "true":
            body = f"Expanded(child: {body})"
        return body

    fill = el.get(LAYOUT + "fill")
    if fill is not None:
        return f"SizedBox({fill}: double.infinity, child: {body})"

    align_x = el.get(LAYOUT + "alignX")
    if align_x is not None:
        h, v = GravityValue(align_x), GravityValue(el.get(LAYOUT + "alignY"))
        if h is GravityValue.STRETCH and v is GravityValue.STRETCH:
            return f"Positioned.fill(child: {body})"
        if h is GravityValue.STRETCH:
            body = f"SizedBox(width: double.infinity, child: {body})"
        if v is GravityValue.STRETCH:
            body = f"SizedBox(height: double.infinity, child: {body})"
        return f"Align(alignment: Alignment({_ALIGN[h]}, {_ALIGN[v]}), child: {body})"
    return body


def _wrap_modifiers(el, body: str) -> str:
    """Padding innermost, then size, then decoration; visibility outermost."""
    padding = el.get(WRAP + "padding")
    if padding:
        body = f"Padding(padding: {padding}, child: {body})"
    width, height = el.get(WRAP + "width"), el.get(WRAP + "height")
    if width or height:
        sizes = ", ".join(f"{k}: {v}" for k, v in (("width", width), ("height", height)) if v)
        body = f"SizedBox({sizes}, child: {body})"
    color = el.get(WRAP + "color")
    if color:
        body = f"ColoredBox(color: {color}, child: {body})"
    opacity = el.get(WRAP + "opacity")
    if opacity:
        body = f"Opacity(opacity: {opacity}, child: {body})"
    on_tap = el.get(WRAP + "onTap")
    if on_tap:
        body = f"InkWell(onTap: {on_tap}, child: {body})"
    if el.get(WRAP + "visible") == "false":
        body = f"Visibility(visible: false, child: {body})"
    return body


def render_widget(el, indent_level: int = 0) -> str:
    """Destination element -> Dart constructor expression."""
    pad = "  " * (indent_level + 1)
    args = []
    if el.text is not None:
        args.append(el.text)
    groups = {}
    for key, value in el.attrib.items():
        if key.startswith((LAYOUT, WRAP)):
            continue
        group, _, field = key.partition(".")
        if field and group in _GROUPS:
            groups.setdefault(group, []).append(f"{field}: {value}")
            continue
        args.append(f"{key}: {value}")
    for group, fields in groups.items():
        args.append(f"{group}: {_GROUPS[group]}({', '.join(fields)})")

    children = [render_widget(ch, indent_level + 1) for ch in el]
    if children:
        if el.tag in MULTI_CHILD:
            joined = f",\n{pad}".join(children)
            args.append(f"children: [\n{pad}{joined},\n{'  ' * indent_level}]")
        elif len(children) == 1:
            args.append(f"child: {children[0]}")
        else:
            joined = f",\n{pad}".join(children)
            args.append(f"child: Stack(children: [\n{pad}{joined},\n{'  ' * indent_level}])")

    body = f"{el.tag}({', '.join(args)})"
    return _wrap_placement(el, _wrap_modifiers(el, body))
