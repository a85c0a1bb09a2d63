import pytest

from android2views.errors import LayoutError, MalformedLayoutError, UnresolvedReferenceError
from android2views.parser.layout_file import (
    Binding,
    LayoutDescriptor,
    SubLayoutReference,
    combine,
    extract_bindings,
    layout_names,
    parse_layout_file,
    parse_set,
    variant_files,
    variant_of,
)
from android2views.parser.xml_parser import parse_layout_string

from .conftest import layout_xml


def extract(body, resolver=None):
    return extract_bindings(parse_layout_string(layout_xml(body)), resolver)


def descriptor(variant, *names, optional=()):
    return LayoutDescriptor(
        name="screen",
        variants={variant},
        files={f"layout-{variant}/screen.xml"},
        bindings={n: Binding(n, "TextView", n, n in optional) for n in names},
    )


class TestExtraction:
    def test_only_identified_elements_are_bound(self):
        outlets = extract("""
            <LinearLayout>
                <TextView android:text="no id"/>
                <TextView android:id="@+id/title"/>
                <include layout="@layout/footer"/>
            </LinearLayout>
        """)
        assert list(outlets.bindings) == ["title"]
        assert outlets.sublayouts == {}
        assert outlets.includes == ["footer"]

    def test_include_with_id_is_a_sublayout(self):
        outlets = extract('<FrameLayout><include android:id="@+id/top" layout="@layout/app_bar"/></FrameLayout>')
        assert outlets.bindings == {}
        sub = outlets.sublayouts["top"]
        assert (sub.layout, sub.layout_class, sub.optional) == ("app_bar", "AppBarXml", False)

    def test_duplicate_normalized_names(self):
        """title_text and titleText both normalize to titleText."""
        with pytest.raises(MalformedLayoutError, match="titleText") as info:
            extract("""
                <LinearLayout>
                    <TextView android:id="@+id/title_text"/>
                    <TextView android:id="@+id/titleText"/>
                </LinearLayout>
            """)
        assert info.value.path == "/LinearLayout/TextView[2]"
        assert info.value.line == 4
        assert "line=4" in str(info.value)

    def test_binding_and_sublayout_share_a_namespace(self):
        with pytest.raises(MalformedLayoutError):
            extract("""
                <LinearLayout>
                    <TextView android:id="@+id/header"/>
                    <include android:id="@+id/header" layout="@layout/header"/>
                </LinearLayout>
            """)

    def test_tab_item_and_subtree_excluded(self):
        outlets = extract("""
            <LinearLayout>
                <com.google.android.material.tabs.TabItem android:id="@+id/tab_one">
                    <TextView android:id="@+id/nested"/>
                </com.google.android.material.tabs.TabItem>
            </LinearLayout>
        """)
        assert outlets.bindings == {}

    def test_id_contributed_by_style(self, resolver):
        outlets = extract('<TextView style="@style/Tagged"/>', resolver)
        assert list(outlets.bindings) == ["styledLabel"]

    def test_actions(self):
        outlets = extract("""
            <LinearLayout>
                <Button android:onClick="save"/>
                <Button android:onClick="save"/>
                <Button android:onClick="cancel"/>
            </LinearLayout>
        """)
        assert list(outlets.actions) == ["save", "cancel"]


class TestCombine:
    def test_commutative(self):
        a, b, c = descriptor("", "x", "y"), descriptor("land", "x"), descriptor("night", "z")
        assert combine([a, b, c]) == combine([c, a, b]) == combine([b, c, a])

    def test_associative(self):
        a, b, c = descriptor("", "x", "y"), descriptor("land", "x"), descriptor("night", "x", "z")
        flat = combine([a, b, c])
        assert combine([combine([a, b]), c]) == flat
        assert combine([a, combine([b, c])]) == flat

    def test_optionality(self):
        merged = combine([descriptor("", "x", "y"), descriptor("land", "x", "y"), descriptor("night", "x")])
        assert merged.bindings["x"].optional is False
        assert merged.bindings["y"].optional is True

    def test_unions(self):
        merged = combine([descriptor("", "x"), descriptor("land", "y")])
        assert merged.variants == {"", "land"}
        assert merged.files == {"layout-/screen.xml", "layout-land/screen.xml"}
        assert set(merged.bindings) == {"x", "y"}

    def test_single_parse_is_unchanged(self):
        only = descriptor("", "x")
        assert combine([only]) == only

    def test_disagreeing_types_keep_the_default_variant(self):
        default = descriptor("", "x")
        land = LayoutDescriptor("screen", {"land"}, {"land.xml"}, {"x": Binding("x", "Button", "x")})
        assert combine([land, default]).bindings["x"].type == "TextView"

    def test_result_is_read_only(self):
        merged = combine([descriptor("", "x")])
        with pytest.raises(TypeError):
            merged.bindings["y"] = Binding("y", "View", "y")

    def test_empty_input(self):
        with pytest.raises(ValueError):
            combine([])

    def test_different_layouts(self):
        other = LayoutDescriptor(name="other", variants={""})
        with pytest.raises(ValueError, match="different layouts"):
            combine([descriptor("", "x"), other])

    def test_binding_in_one_variant_include_in_another(self):
        """A name may not be a view in one variant and an <include> in another."""
        default = descriptor("", "title")
        land = LayoutDescriptor(
            "screen", {"land"}, {"layout-land/screen.xml"},
            sublayouts={"title": SubLayoutReference("title", "title", "header", "HeaderXml")},
        )
        with pytest.raises(MalformedLayoutError, match="title") as info:
            combine([land, default])
        assert "layout-land/screen.xml" in info.value.file


class TestVariantSets:
    def test_variant_of(self):
        assert variant_of("layout") == ""
        assert variant_of("layout-land") == "land"
        assert variant_of("layout-sw600dp-land") == "sw600dp-land"

    def test_screen_in_three_variants(self, write_layout, res_dir):
        """title exists in default and -land only."""
        titled = """
            <LinearLayout>
                <TextView android:id="@+id/title"/>
                <Button android:id="@+id/go"/>
            </LinearLayout>
        """
        write_layout("layout", "screen", titled)
        write_layout("layout-land", "screen", titled)
        write_layout("layout-night", "screen", '<LinearLayout><Button android:id="@+id/go"/></LinearLayout>')

        merged = parse_set(str(res_dir), "screen")
        assert merged.name == "screen"
        assert merged.class_name == "ScreenXml"
        assert merged.variants == {"", "land", "night"}
        assert len(merged.files) == 3
        assert merged.bindings["title"].optional is True
        assert merged.bindings["go"].optional is False

    def test_discovery(self, write_layout, res_dir):
        write_layout("layout", "main", "<FrameLayout/>")
        write_layout("layout-land", "main", "<FrameLayout/>")
        write_layout("layout-land", "wide_only", "<FrameLayout/>")
        (res_dir / "values").mkdir()
        assert layout_names(str(res_dir)) == ["main", "wide_only"]
        assert set(variant_files(str(res_dir), "main")) == {"", "land"}

    def test_missing_layout(self, res_dir):
        with pytest.raises(UnresolvedReferenceError, match="nowhere"):
            parse_set(str(res_dir), "nowhere")

    def test_error_carries_file_and_variant(self, write_layout):
        path = write_layout("layout-land", "broken", '<LinearLayout><include/></LinearLayout>')
        with pytest.raises(LayoutError) as info:
            parse_layout_file(path, "land")
        err = info.value
        assert err.file == str(path)
        assert err.variant == "land"
        assert err.path == "/LinearLayout/include[1]"
        assert "variant=land" in str(err)

    def test_malformed_xml(self, res_dir):
        folder = res_dir / "layout"
        folder.mkdir()
        (folder / "bad.xml").write_text("<LinearLayout><TextView></LinearLayout>", encoding="utf-8")
        with pytest.raises(MalformedLayoutError) as info:
            parse_set(str(res_dir), "bad")
        assert info.value.variant == ""
        assert "variant=<default>" in str(info.value)
