# android2views/translator/rules.py
"""
Declarative replacement rules: which destination element a source tag becomes,
and which destination properties each source attribute turns into.

A RuleTable is built once per target before any translation starts and is
never mutated afterwards.
"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..utils import local_name

Property = Tuple[str, str]


class GravityValue(Enum):
    START = "start"
    CENTER = "center"
    END = "end"
    STRETCH = "stretch"


class ChildArrangement(Enum):
    NONE = "none"
    LINEAR = "linear"
    FRAME = "frame"
    CUSTOM = "custom"


# token -> (horizontal, vertical); None leaves that axis alone
_GRAVITY_TOKENS = {
    "left": (GravityValue.START, None),
    "start": (GravityValue.START, None),
    "right": (GravityValue.END, None),
    "end": (GravityValue.END, None),
    "top": (None, GravityValue.START),
    "bottom": (None, GravityValue.END),
    "center_horizontal": (GravityValue.CENTER, None),
    "center_vertical": (None, GravityValue.CENTER),
    "fill_horizontal": (GravityValue.STRETCH, None),
    "fill_vertical": (None, GravityValue.STRETCH),
}
_GRAVITY_BOTH = {
    "center": GravityValue.CENTER,
    "fill": GravityValue.STRETCH,
}


@dataclass(frozen=True)
class Gravity:
    horizontal: GravityValue = GravityValue.CENTER
    vertical: GravityValue = GravityValue.CENTER

    def __getitem__(self, vertical: bool) -> GravityValue:
        return self.vertical if vertical else self.horizontal

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Gravity":
        """
        "center_vertical|end" -> Gravity(horizontal=END, vertical=CENTER).
        Axis-specific tokens win over "center"/"fill"; unknown tokens are ignored.
        """
        horizontal = vertical = GravityValue.CENTER
        if not raw:
            return cls()
        tokens = [t.strip().lower() for t in raw.split("|") if t.strip()]
        for t in tokens:
            if t in _GRAVITY_BOTH:
                horizontal = vertical = _GRAVITY_BOTH[t]
        for t in tokens:
            h, v = _GRAVITY_TOKENS.get(t, (None, None))
            horizontal = h or horizontal
            vertical = v or vertical
        return cls(horizontal=horizontal, vertical=vertical)


def horizontal_gravity(raw: Optional[str]) -> Optional[GravityValue]:
    """
    Horizontal component of an android:gravity value, or None when it only names
    vertical flags ("center_vertical" leaves text start-aligned).
    """
    tokens = [t.strip().lower() for t in (raw or "").split("|")]
    if not any(t in _GRAVITY_BOTH or _GRAVITY_TOKENS.get(t, (None, None))[0] for t in tokens):
        return None
    return Gravity.parse(raw).horizontal


@dataclass(frozen=True)
class ElementReplacement:
    """
    source tag -> destination tag + default destination properties.
    `inherits` names source tags whose attribute rules also apply (Button -> TextView).
    """
    source: str
    destination: str
    defaults: Tuple[Property, ...] = ()
    children: ChildArrangement = ChildArrangement.NONE
    inherits: Tuple[str, ...] = ()


Converter = Callable[[str, object], Iterable[Property]]


@dataclass(frozen=True)
class AttributeReplacement:
    """source attribute -> zero or more destination properties."""
    tag: str
    key: str
    convert: Converter = field(compare=False)

    def __call__(self, value: str, resolver=None) -> List[Property]:
        return list(self.convert(value, resolver))


class RuleTable:
    """
    Total lookup from source tag to ElementReplacement (unknown tags get `fallback`),
    partial lookup from (tag, attribute) to AttributeReplacement (absent = drop).
    """

    ANY = "*"

    def __init__(self, elements: Iterable[ElementReplacement], attributes: Iterable[AttributeReplacement],
                 fallback: ElementReplacement):
        self._elements: Mapping[str, ElementReplacement] = MappingProxyType({e.source: e for e in elements})
        self._attributes: Mapping[Tuple[str, str], AttributeReplacement] = MappingProxyType(
            {(a.tag, a.key): a for a in attributes}
        )
        self.fallback = fallback

    def knows(self, tag: str) -> bool:
        return tag in self._elements or local_name(tag) in self._elements

    def lookup_element(self, tag: str) -> ElementReplacement:
        return self._elements.get(tag) or self._elements.get(local_name(tag)) or self.fallback

    def lookup_attribute(self, tag: str, key: str) -> Optional[AttributeReplacement]:
        for candidate in self._attribute_chain(tag):
            rule = self._attributes.get((candidate, key))
            if rule is not None:
                return rule
        return None

    def _attribute_chain(self, tag: str) -> List[str]:
        chain: List[str] = []
        pending = [tag, local_name(tag)]
        while pending:
            current = pending.pop(0)
            if current in chain:
                continue
            chain.append(current)
            element = self._elements.get(current)
            if element is not None:
                pending.extend(element.inherits)
        if not self.knows(tag):
            chain.extend(t for t in (self.fallback.source,) + self.fallback.inherits if t not in chain)
        chain.append(self.ANY)
        return chain


# ----- converter helpers used by the per-target rule modules -----

def rename(dest_key: str, transform: Optional[Callable[[str], Optional[str]]] = None) -> Converter:
    def convert(value, resolver):
        value = resolver.resolve(value) if resolver is not None else value
        out = transform(value) if transform else value
        return [(dest_key, out)] if out is not None else []
    return convert


def lookup(dest_key: str, table: Dict[str, str]) -> Converter:
    def convert(value, resolver):
        out = table.get(value)
        return [(dest_key, out)] if out is not None else []
    return convert


def constant(*props: Property) -> Converter:
    def convert(value, resolver):
        return list(props)
    return convert
