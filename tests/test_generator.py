import pytest

from android2views.translator.flutter import FlutterStrategy
from android2views.translator.generator import ConvertConfig, convert_project
from android2views.translator.web import WebStrategy

LOGIN = """
    <LinearLayout android:orientation="vertical">
        <TextView android:id="@+id/title" android:text="@string/app_name"/>
        <EditText android:id="@+id/user_name"/>
        <Button android:id="@+id/submit" android:onClick="onSubmit"/>
        <include android:id="@+id/footer_bar" layout="@layout/footer"/>
    </LinearLayout>
"""

LOGIN_LAND = """
    <LinearLayout>
        <TextView android:id="@+id/title"/>
        <Button android:id="@+id/submit"/>
        <ImageView android:id="@+id/extra"/>
        <include android:id="@+id/footer_bar" layout="@layout/footer"/>
    </LinearLayout>
"""


@pytest.fixture
def project(res_dir, write_layout, write_values, tmp_path):
    write_values('<string name="app_name">Demo</string>', "strings.xml")
    write_layout("layout", "login", LOGIN)
    write_layout("layout-land", "login", LOGIN_LAND)
    write_layout("layout", "footer", '<FrameLayout><com.example.Badge android:id="@+id/badge"/></FrameLayout>')
    write_layout("layout", "broken", '<LinearLayout><include layout="@layout/missing"/></LinearLayout>')
    return res_dir, tmp_path / "out"


def run(project, **kwargs):
    res, out = project
    kwargs.setdefault("targets", ("web", "flutter"))
    return convert_project(ConvertConfig(res_dir=str(res), out_dir=str(out), **kwargs)), out


class TestConvertProject:
    def test_failure_is_isolated(self, project):
        report, out = run(project)
        assert report.converted == ["footer", "login"]
        assert [f.name for f in report.failures] == ["broken"]
        assert not report.ok
        assert "missing" in str(report.failures[0].error)
        assert "variant=<default>" in str(report.failures[0].error)
        assert not (out / "web" / "broken.html").exists()
        assert not (out / "flutter" / "broken_xml.dart").exists()
        assert (out / "web" / "login.html").exists()
        assert (out / "flutter" / "footer_xml.dart").exists()

    def test_parallel_run_matches_serial(self, project, tmp_path):
        serial, out = run(project)
        texts = {p: open(p, encoding="utf-8").read() for p in serial.written}
        parallel, _ = run(project, jobs=4)
        assert parallel.converted == serial.converted
        assert [f.name for f in parallel.failures] == ["broken"]
        assert sorted(parallel.written) == sorted(serial.written)
        assert {p: open(p, encoding="utf-8").read() for p in parallel.written} == texts

    def test_layout_filter(self, project):
        report, out = run(project, layouts=("footer",), targets=("web",))
        assert report.ok
        assert report.converted == ["footer"]
        assert sorted(p.name for p in (out / "web").iterdir()) == ["footer.html", "footer.ts"]

    def test_missing_res_dir(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            convert_project(ConvertConfig(res_dir=str(tmp_path / "nope"), out_dir=str(tmp_path)))

    def test_unknown_target(self, project):
        with pytest.raises(ValueError, match="swing"):
            run(project, targets=("web", "swing"))


class TestWebOutput:
    def test_typescript_contract(self, project):
        _, out = run(project)
        ts = (out / "web" / "login.ts").read_text(encoding="utf-8")
        assert 'import html from \'./login.html\'' in ts
        assert "export interface LoginXml {" in ts
        assert "    _root: HTMLElement" in ts
        assert "    title: HTMLParagraphElement" in ts
        assert "    userName?: HTMLInputElement" in ts
        assert "    submit: HTMLButtonElement" in ts
        assert "    extra?: HTMLImageElement" in ts
        assert "    footerBar: HTMLDivElement" in ts
        assert 'return inflateHtmlFile(html, "title", "userName", "submit", "extra", "footerBar") as LoginXml' in ts

    def test_unknown_tag_typed_by_fallback_element(self, project):
        _, out = run(project)
        assert "    badge: HTMLDivElement" in (out / "web" / "footer.ts").read_text(encoding="utf-8")

    def test_unmapped_destination_is_generic(self):
        assert WebStrategy().type_lookup("marquee") == "HTMLElement"
        assert WebStrategy().type_lookup("a") == "HTMLAnchorElement"
        assert FlutterStrategy().type_lookup("Placeholder") == "Widget"

    def test_markup_comes_from_default_variant(self, project):
        _, out = run(project)
        html = (out / "web" / "login.html").read_text(encoding="utf-8")
        assert 'id="title"' in html
        assert ">Demo</p>" in html
        assert 'id="userName"' in html
        assert 'id="extra"' not in html
        assert 'data-onclick="onSubmit"' in html


class TestFlutterOutput:
    def test_dart_contract(self, project):
        _, out = run(project)
        dart = (out / "flutter" / "login_xml.dart").read_text(encoding="utf-8")
        assert "import 'package:flutter/material.dart';" in dart
        assert "import 'footer_xml.dart';" in dart
        assert "class LoginXml {" in dart
        assert 'final title = GlobalKey(debugLabel: "title");' in dart
        assert '/// Missing from some variants of this layout.\n  final userName = GlobalKey(debugLabel: "userName");' in dart
        assert "Text? get titleWidget => title.currentWidget as Text?;" in dart
        assert "TextField? get userNameWidget => userName.currentWidget as TextField?;" in dart
        assert "Image? get extraWidget => extra.currentWidget as Image?;" in dart
        assert "late final FooterXml footerBar;" in dart
        assert "VoidCallback? onSubmit;" in dart
        assert "static LoginXml inflate() {" in dart
        assert "(footerBar = FooterXml.inflate()).xmlRoot" in dart
        assert "onPressed: () => onSubmit?.call()" in dart

    def test_unknown_widget_type(self, project):
        _, out = run(project)
        dart = (out / "flutter" / "footer_xml.dart").read_text(encoding="utf-8")
        assert "Stack? get badgeWidget => badge.currentWidget as Stack?;" in dart


def test_view_and_include_sharing_a_name_across_variants(res_dir, write_layout, tmp_path):
    """title is a TextView in layout/ and an <include> in layout-land/: the layout fails, nothing is written."""
    write_layout("layout", "header", "<FrameLayout/>")
    write_layout("layout", "screen", '<LinearLayout><TextView android:id="@+id/title"/></LinearLayout>')
    write_layout("layout-land", "screen",
                 '<LinearLayout><include android:id="@+id/title" layout="@layout/header"/></LinearLayout>')
    out = tmp_path / "out"
    report = convert_project(ConvertConfig(res_dir=str(res_dir), out_dir=str(out), targets=("web", "flutter")))
    assert report.converted == ["header"]
    assert [f.name for f in report.failures] == ["screen"]
    assert "title" in str(report.failures[0].error)
    assert not (out / "web" / "screen.ts").exists()
    assert not (out / "flutter" / "screen_xml.dart").exists()
