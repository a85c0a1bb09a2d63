# android2views/translator/layout_rules.py
"""
Where a child sits inside its parent, independent of the target platform.

The functions here read the source attributes (android:layout_width,
android:layout_gravity, ...) of one child and answer with Gravity values;
the web and Flutter strategies turn those answers into CSS or widget wrappers.
"""
from typing import Mapping

from .rules import Gravity, GravityValue

MATCH_PARENT = ("match_parent", "fill_parent")


def is_vertical(attrs: Mapping[str, str]) -> bool:
    """LinearLayout orientation; Android defaults to horizontal."""
    return (attrs.get("android:orientation") or "").strip().lower() == "vertical"


def fills(attrs: Mapping[str, str], dimension: str) -> bool:
    """dimension: "width" / "height" """
    return (attrs.get(f"android:layout_{dimension}") or "").strip().lower() in MATCH_PARENT


def fills_main_axis(attrs: Mapping[str, str], vertical: bool) -> bool:
    return fills(attrs, "height" if vertical else "width")


def linear_cross_alignment(attrs: Mapping[str, str], vertical: bool) -> GravityValue:
    """
    Cross-axis alignment of a LinearLayout child.
    A child filling the main axis stretches across; otherwise its layout_gravity
    decides, read on the cross axis (horizontal for a vertical parent).
    """
    if fills_main_axis(attrs, vertical):
        return GravityValue.STRETCH
    return Gravity.parse(attrs.get("android:layout_gravity"))[not vertical]


def frame_alignment(attrs: Mapping[str, str]) -> Gravity:
    """FrameLayout child: each axis stretches if that dimension fills, else follows layout_gravity."""
    gravity = Gravity.parse(attrs.get("android:layout_gravity"))
    horizontal = GravityValue.STRETCH if fills(attrs, "width") else gravity.horizontal
    vertical = GravityValue.STRETCH if fills(attrs, "height") else gravity.vertical
    return Gravity(horizontal=horizontal, vertical=vertical)


def _flag(attrs: Mapping[str, str], key: str) -> bool:
    return (attrs.get(f"android:{key}") or "").strip().lower() == "true"


def relative_alignment(attrs: Mapping[str, str]) -> Gravity:
    """
    RelativeLayout child anchored to its parent only; sibling-relative rules are not modelled.
    Unanchored children sit at the top-start corner.
    """
    def axis(start_keys, end_keys, center_keys, dimension) -> GravityValue:
        if fills(attrs, dimension):
            return GravityValue.STRETCH
        at_start = any(_flag(attrs, k) for k in start_keys)
        at_end = any(_flag(attrs, k) for k in end_keys)
        if at_start and at_end:
            return GravityValue.STRETCH
        if at_end:
            return GravityValue.END
        if any(_flag(attrs, k) for k in center_keys):
            return GravityValue.CENTER
        return GravityValue.START

    horizontal = axis(
        ("layout_alignParentStart", "layout_alignParentLeft"),
        ("layout_alignParentEnd", "layout_alignParentRight"),
        ("layout_centerInParent", "layout_centerHorizontal"),
        "width",
    )
    vertical = axis(
        ("layout_alignParentTop",),
        ("layout_alignParentBottom",),
        ("layout_centerInParent", "layout_centerVertical"),
        "height",
    )
    return Gravity(horizontal=horizontal, vertical=vertical)
