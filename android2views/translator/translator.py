# android2views/translator/translator.py
"""
The generic walker. It knows how to traverse a source tree and apply a RuleTable;
everything target specific (how a property lands on a destination element, how
an aligned child is expressed) comes from the injected strategy.
"""
from dataclasses import dataclass
from typing import Callable, Collection, Mapping, Optional, Protocol

from lxml import etree

from ..errors import UnresolvedReferenceError
from ..log import get_logger
from ..parser.layout_file import TAB_ITEM, Outlet, Outlets, child_path, include_target
from ..parser.resource_resolver import ResourceResolver, effective_attributes
from ..parser.xml_parser import LayoutNode
from .layout_rules import fills_main_axis, frame_alignment, is_vertical, linear_cross_alignment
from .rules import ChildArrangement, Gravity, GravityValue, RuleTable

logger = get_logger(__name__)

ConvertChild = Callable[[etree._Element, int], etree._Element]


class LayoutStrategy(Protocol):
    """What a target platform supplies to the walker."""

    name: str
    rules: RuleTable

    def apply_property(self, dest: etree._Element, key: str, value: str) -> None: ...

    def post_process(self, source: LayoutNode, dest: etree._Element) -> None: ...

    def mark_outlet(self, dest: etree._Element, outlet: Outlet) -> None: ...

    def place_linear(self, dest: etree._Element, vertical: bool, cross: GravityValue, grow: bool) -> None: ...

    def place_frame(self, dest: etree._Element, alignment: Gravity) -> None: ...

    def arrange_custom(self, source: LayoutNode, dest: etree._Element, attrs: Mapping[str, str],
                       convert_child: ConvertChild, child_attrs: Callable[[int], Mapping[str, str]]) -> None: ...

    def type_lookup(self, tag: str) -> str: ...


@dataclass
class Translation:
    root: etree._Element
    outlets: Outlets


class LayoutTranslator:
    """
    One instance per (strategy, resolver); holds no per-file state, so it can be
    shared by worker threads.
    """

    def __init__(self, strategy: LayoutStrategy, resolver: Optional[ResourceResolver] = None,
                 known_layouts: Optional[Collection[str]] = None):
        self.strategy = strategy
        self.rules = strategy.rules
        self.resolver = resolver
        self.known_layouts = known_layouts

    def translate(self, root: LayoutNode) -> Translation:
        holder = etree.Element("translation")
        outlets = Outlets()
        dest = self.convert_element(holder, root, outlets, "/" + root.tag)
        return Translation(root=dest, outlets=outlets)

    def convert_element(self, parent: etree._Element, source: LayoutNode,
                        outlets: Optional[Outlets] = None, path: Optional[str] = None) -> etree._Element:
        path = path or "/" + source.tag
        attrs = effective_attributes(source, self.resolver, path)
        layout = include_target(source, attrs, path)
        if layout is not None and self.known_layouts is not None and layout not in self.known_layouts:
            raise UnresolvedReferenceError(f"<include> references unknown layout '{layout}'", path=path,
                                           line=source.line)

        rule = self.rules.lookup_element(source.tag)
        if not self.rules.knows(source.tag):
            logger.debug("%s: no rule for <%s>, using %s", path, source.tag, rule.destination)

        dest = etree.SubElement(parent, rule.destination)
        for key, value in rule.defaults:
            self.strategy.apply_property(dest, key, value)
        for key, value in attrs.items():
            attribute_rule = self.rules.lookup_attribute(source.tag, key)
            if attribute_rule is None:
                continue
            for dest_key, dest_value in attribute_rule(value, self.resolver):
                self.strategy.apply_property(dest, dest_key, dest_value)
        self.strategy.post_process(source, dest)

        # neither a TabItem nor anything under it is bound
        if source.tag == TAB_ITEM:
            outlets = None
        if outlets is not None:
            outlet = outlets.record(source, attrs, path)
            if outlet is not None:
                outlets.element_tags[outlet.name] = dest.tag
                self.strategy.mark_outlet(dest, outlet)

        self.arrange_children(rule.children, source, attrs, dest, outlets, path)
        return dest

    def arrange_children(self, arrangement: ChildArrangement, source: LayoutNode, attrs: Mapping[str, str],
                         dest: etree._Element, outlets: Optional[Outlets], path: str) -> None:
        if arrangement is ChildArrangement.NONE:
            return

        def convert_child(target: etree._Element, index: int) -> etree._Element:
            return self.convert_element(target, source.children[index], outlets, child_path(path, source, index))

        def child_attrs(index: int) -> Mapping[str, str]:
            return effective_attributes(source.children[index], self.resolver, child_path(path, source, index))

        # ========== LinearLayout ==========
        if arrangement is ChildArrangement.LINEAR:
            vertical = is_vertical(attrs)
            for i in range(len(source.children)):
                child_dest = convert_child(dest, i)
                a = child_attrs(i)
                self.strategy.place_linear(
                    child_dest, vertical, linear_cross_alignment(a, vertical), fills_main_axis(a, vertical)
                )
            return

        # ========== FrameLayout ==========
        if arrangement is ChildArrangement.FRAME:
            for i in range(len(source.children)):
                child_dest = convert_child(dest, i)
                self.strategy.place_frame(child_dest, frame_alignment(child_attrs(i)))
            return

        self.strategy.arrange_custom(source, dest, attrs, convert_child, child_attrs)
