import textwrap

import pytest

from android2views.parser.resource_resolver import ResourceResolver

ANDROID_XMLNS = 'xmlns:android="http://schemas.android.com/apk/res/android"'


def layout_xml(body: str) -> str:
    """Wrap a layout body so the root element declares the android namespace."""
    body = textwrap.dedent(body).strip()
    tag_end = body.index(">")
    head, tail = body[:tag_end], body[tag_end:]
    if head.endswith("/"):
        head, tail = head[:-1], "/" + tail
    return f'<?xml version="1.0" encoding="utf-8"?>\n{head} {ANDROID_XMLNS}{tail}\n'


@pytest.fixture
def res_dir(tmp_path):
    res = tmp_path / "res"
    res.mkdir()
    return res


@pytest.fixture
def write_layout(res_dir):
    """write_layout("layout-land", "screen", "<LinearLayout>...</LinearLayout>") -> path"""
    def write(folder: str, name: str, body: str):
        d = res_dir / folder
        d.mkdir(exist_ok=True)
        path = d / f"{name}.xml"
        path.write_text(layout_xml(body), encoding="utf-8")
        return path
    return write


@pytest.fixture
def write_values(res_dir):
    def write(body: str, filename: str = "styles.xml"):
        d = res_dir / "values"
        d.mkdir(exist_ok=True)
        (d / filename).write_text(
            '<?xml version="1.0" encoding="utf-8"?>\n<resources>\n'
            + textwrap.dedent(body).strip()
            + "\n</resources>\n",
            encoding="utf-8",
        )
        return d
    return write


@pytest.fixture
def resolver(res_dir, write_values):
    values = write_values("""
        <color name="primary">#FF112233</color>
        <string name="app_name">Demo</string>
        <dimen name="gap">16dp</dimen>
        <style name="Base">
            <item name="android:textColor">#FF0000</item>
            <item name="android:textSize">12sp</item>
        </style>
        <style name="Base.Big">
            <item name="android:textSize">20sp</item>
        </style>
        <style name="Title" parent="@style/Base.Big"/>
        <style name="Tagged">
            <item name="android:id">@+id/styled_label</item>
        </style>
        <style name="AppTheme" parent="Theme.AppCompat.Light">
            <item name="android:padding">4dp</item>
        </style>
    """)
    return ResourceResolver(str(values))
