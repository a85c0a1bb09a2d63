# android2views/utils.py
import re

_WORD_SPLIT = re.compile(r"[_\-\s.]+")


def indent(text: str, spaces: int = 2) -> str:
    pad = " " * spaces
    return "\n".join(pad + line if line.strip() else line for line in text.splitlines())


def escape_dart(s: str) -> str:
    """
    Escape for a double-quoted Dart string literal.
    - \\ -> \\\\
    - " -> \\"
    - $ -> \\$ (no interpolation)
    - newline -> \\n (CRLF / CR normalised to LF)
    """
    if s is None:
        return ""
    if isinstance(s, bytes):
        s = s.decode("utf-8", errors="ignore")
    s = s.replace("\r\n", "\n").replace("\r", "\n")
    s = s.replace("\\", "\\\\")
    s = s.replace('"', '\\"')
    s = s.replace("$", "\\$")
    s = s.replace("\n", "\\n")
    return s


def dart_string(s: str) -> str:
    return f'"{escape_dart(s)}"'


def escape_ts(s: str) -> str:
    """Escape for a double-quoted TypeScript string literal."""
    if s is None:
        return ""
    s = s.replace("\r\n", "\n").replace("\r", "\n")
    s = s.replace("\\", "\\\\")
    s = s.replace('"', '\\"')
    return s.replace("\n", "\\n")


def id_base(raw_id: str) -> str:
    """@+id/login_button -> login_button"""
    if not raw_id:
        return ""
    return raw_id.split("/")[-1]


def to_camel(s: str) -> str:
    """
    login_button -> loginButton, Title -> title, btnLogin -> btnLogin.
    Pure function of its input: two ids that camelCase the same are the same binding.
    """
    parts = [p for p in _WORD_SPLIT.split(s or "") if p]
    if not parts:
        return ""
    head = parts[0][:1].lower() + parts[0][1:]
    return head + "".join(p[:1].upper() + p[1:] for p in parts[1:])


def class_name_for(layout_name: str) -> str:
    """activity_main -> ActivityMainXml"""
    camel = to_camel(layout_name)
    return camel[:1].upper() + camel[1:] + "Xml"


def to_snake(name: str) -> str:
    """PascalCase / camelCase -> snake_case"""
    out = []
    for i, ch in enumerate(name):
        if ch.isupper() and i > 0 and (name[i - 1].islower() or (i + 1 < len(name) and name[i + 1].islower())):
            out.append("_")
        out.append(ch.lower())
    return "".join(out)


def local_name(tag: str) -> str:
    """com.google.android.material.button.MaterialButton -> MaterialButton"""
    return tag.rsplit(".", 1)[-1]
