# android2views/parser/layout_file.py
"""
Per-variant binding extraction and the merge of variants into one descriptor.

res/layout/screen.xml, res/layout-land/screen.xml and res/layout-night/screen.xml
are three parses of the logical layout "screen"; `combine` unifies them and marks
every binding that some variant lacks as optional.
"""
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

from ..errors import LayoutError, MalformedLayoutError, UnresolvedReferenceError
from ..log import get_logger
from ..utils import class_name_for, id_base, to_camel
from .resource_resolver import ResourceResolver, effective_attributes
from .xml_parser import LayoutNode, parse_layout_xml

logger = get_logger(__name__)

INCLUDE = "include"
# host-managed; neither it nor anything beneath it is bound
TAB_ITEM = "com.google.android.material.tabs.TabItem"
DEFAULT_VARIANT = ""


@dataclass(frozen=True)
class Binding:
    """A view with an android:id, exposed by name to generated code."""
    name: str
    type: str
    resource_id: str
    optional: bool = False


@dataclass(frozen=True)
class SubLayoutReference:
    """An <include> with an android:id."""
    name: str
    resource_id: str
    layout: str
    layout_class: str
    optional: bool = False


@dataclass(frozen=True)
class Action:
    """android:onClick="openSignup" -> handler hook named openSignup."""
    name: str
    source: str
    optional: bool = False


Outlet = Union[Binding, SubLayoutReference]


@dataclass
class Outlets:
    """
    Accumulator for one walk over one file. Created by the caller, filled by
    `record`, returned to the caller; never shared between files.
    """
    bindings: Dict[str, Binding] = field(default_factory=dict)
    sublayouts: Dict[str, SubLayoutReference] = field(default_factory=dict)
    actions: Dict[str, Action] = field(default_factory=dict)
    # every <include>d layout, with or without an id
    includes: List[str] = field(default_factory=list)
    # binding / sublayout name -> destination tag; filled by the translator only
    element_tags: Dict[str, str] = field(default_factory=dict)

    def record(self, node: LayoutNode, attrs: Mapping[str, str], path: Optional[str] = None) -> Optional[Outlet]:
        handler = attrs.get("android:onClick")
        if handler and handler not in self.actions:
            self.actions[handler] = Action(name=handler, source=node.tag)

        layout = include_target(node, attrs, path)
        if layout is not None and layout not in self.includes:
            self.includes.append(layout)
        raw = attrs.get("android:id")
        if not raw:
            return None
        resource_id = id_base(raw)
        name = to_camel(resource_id)
        if not name:
            raise MalformedLayoutError(f"android:id '{raw}' yields an empty name", path=path, line=node.line)
        if name in self.bindings or name in self.sublayouts:
            raise MalformedLayoutError(f"duplicate identifier '{name}' (from '{raw}')", path=path, line=node.line)

        if layout is not None:
            outlet = SubLayoutReference(
                name=name,
                resource_id=resource_id,
                layout=layout,
                layout_class=class_name_for(layout),
            )
            self.sublayouts[name] = outlet
        else:
            outlet = Binding(name=name, type=node.tag, resource_id=resource_id)
            self.bindings[name] = outlet
        return outlet


def include_target(node: LayoutNode, attrs: Mapping[str, str], path: Optional[str] = None) -> Optional[str]:
    """<include layout="@layout/header"/> -> "header"; None for anything that is not an include."""
    if node.tag != INCLUDE:
        return None
    layout = attrs.get("layout")
    if not layout:
        raise MalformedLayoutError("<include> without a layout attribute", path=path, line=node.line)
    return layout.split("/")[-1]


def child_path(parent_path: str, parent: LayoutNode, index: int) -> str:
    """/LinearLayout + second TextView -> /LinearLayout/TextView[2]"""
    child = parent.children[index]
    position = sum(1 for sibling in parent.children[:index] if sibling.tag == child.tag) + 1
    return f"{parent_path}/{child.tag}[{position}]"


def extract_bindings(root: LayoutNode, resolver: Optional[ResourceResolver] = None) -> Outlets:
    outlets = Outlets()

    def walk(node: LayoutNode, path: str):
        if node.tag == TAB_ITEM:
            return
        outlets.record(node, effective_attributes(node, resolver, path), path)
        for i in range(len(node.children)):
            walk(node.children[i], child_path(path, node, i))

    walk(root, "/" + root.tag)
    return outlets


@dataclass(frozen=True)
class LayoutDescriptor:
    """
    Everything generated code needs to know about one logical layout.
    Read-only once built; `combine` makes new ones.
    """
    name: str
    variants: FrozenSet[str] = frozenset()
    files: FrozenSet[str] = frozenset()
    bindings: Mapping[str, Binding] = field(default_factory=dict)
    sublayouts: Mapping[str, SubLayoutReference] = field(default_factory=dict)
    actions: Mapping[str, Action] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "variants", frozenset(self.variants))
        object.__setattr__(self, "files", frozenset(self.files))
        for attr in ("bindings", "sublayouts", "actions"):
            object.__setattr__(self, attr, MappingProxyType(dict(getattr(self, attr))))

    @property
    def class_name(self) -> str:
        return class_name_for(self.name)


def variant_of(folder_name: str) -> str:
    """layout -> "", layout-land -> "land", layout-sw600dp-land -> "sw600dp-land" """
    if folder_name == "layout":
        return DEFAULT_VARIANT
    return folder_name.split("-", 1)[1] if folder_name.startswith("layout-") else folder_name


def parse_layout_file(path, variant: str, resolver: Optional[ResourceResolver] = None) -> LayoutDescriptor:
    """One variant's file -> descriptor holding just that variant."""
    try:
        outlets = extract_bindings(parse_layout_xml(path), resolver)
    except LayoutError as e:
        raise e.with_context(file=str(path), variant=variant)
    return LayoutDescriptor(
        name=Path(path).stem,
        variants={variant},
        files={str(path)},
        bindings=outlets.bindings,
        sublayouts=outlets.sublayouts,
        actions=outlets.actions,
    )


def _merge_order(descriptor: LayoutDescriptor):
    return (sorted(descriptor.variants), sorted(descriptor.files))


def _merge_entries(ordered: List[LayoutDescriptor], attr: str) -> Dict[str, object]:
    merged: Dict[str, object] = {}
    keys: List[str] = []
    for parse in ordered:
        keys.extend(k for k in getattr(parse, attr) if k not in keys)
    for key in keys:
        held = [getattr(p, attr)[key] for p in ordered if key in getattr(p, attr)]
        value = held[0]
        for other in held[1:]:
            if replace(other, optional=value.optional) != value:
                logger.debug("%s '%s' differs between variants; keeping %r over %r", attr, key, value, other)
        optional = len(held) < len(ordered) or any(v.optional for v in held)
        merged[key] = replace(value, optional=optional)
    return merged


def combine(parses: Iterable[LayoutDescriptor]) -> LayoutDescriptor:
    """
    Merge the parses of one logical layout.
    Order of `parses` does not matter: they are sorted by variant first, so the
    default variant supplies the payload of an entry whenever it holds one.
    A name that is a binding in one variant and a sublayout in another raises
    MalformedLayoutError.
    """
    ordered = sorted(parses, key=_merge_order)
    if not ordered:
        raise ValueError("combine() needs at least one parse")
    names = {p.name for p in ordered}
    if len(names) > 1:
        raise ValueError(f"cannot combine different layouts: {sorted(names)}")
    files = frozenset().union(*(p.files for p in ordered))
    bindings = _merge_entries(ordered, "bindings")
    sublayouts = _merge_entries(ordered, "sublayouts")
    # bindings and sublayouts share one name space across variants too
    clashes = sorted(set(bindings) & set(sublayouts))
    if clashes:
        raise MalformedLayoutError(
            f"identifier(s) {', '.join(clashes)} name a view in some variants and an <include> in others",
            file=", ".join(sorted(files)),
        )
    return LayoutDescriptor(
        name=ordered[0].name,
        variants=frozenset().union(*(p.variants for p in ordered)),
        files=files,
        bindings=bindings,
        sublayouts=sublayouts,
        actions=_merge_entries(ordered, "actions"),
    )


def _layout_folders(res_dir) -> List[str]:
    return sorted(
        d for d in os.listdir(res_dir)
        if d.startswith("layout") and os.path.isdir(os.path.join(res_dir, d))
    )


def layout_names(res_dir) -> List[str]:
    """Every logical layout name found in any layout* folder."""
    names = set()
    for folder in _layout_folders(res_dir):
        for fn in os.listdir(os.path.join(res_dir, folder)):
            if fn.endswith(".xml"):
                names.add(fn[:-len(".xml")])
    return sorted(names)


def variant_files(res_dir, name: str) -> Dict[str, str]:
    """variant -> path of that variant's file for one logical layout."""
    found = {}
    for folder in _layout_folders(res_dir):
        path = os.path.join(res_dir, folder, name + ".xml")
        if os.path.isfile(path):
            found[variant_of(folder)] = path
    return found


def parse_set(res_dir, name: str, resolver: Optional[ResourceResolver] = None) -> LayoutDescriptor:
    files = variant_files(res_dir, name)
    if not files:
        raise UnresolvedReferenceError(f"no layout named '{name}' under {res_dir}")
    return combine(parse_layout_file(path, variant, resolver) for variant, path in files.items())
