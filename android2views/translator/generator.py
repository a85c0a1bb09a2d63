# android2views/translator/generator.py
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import LayoutError, UnresolvedReferenceError
from ..log import get_logger
from ..parser.layout_file import DEFAULT_VARIANT, LayoutDescriptor, layout_names, parse_set, variant_files
from ..parser.resource_resolver import ResourceResolver
from ..parser.xml_parser import parse_layout_xml
from ..utils import class_name_for, escape_ts, indent, to_snake
from .flutter import FlutterStrategy, render_widget
from .translator import LayoutStrategy, LayoutTranslator, Translation
from .web import WebStrategy, serialize_html

logger = get_logger(__name__)

# =============================================================
# Small utilities
# =============================================================

def _dart_file_from_class(cls: str) -> str:
    """ScreenXml -> screen_xml.dart"""
    return to_snake(cls) + ".dart"


def _source_label(path: str) -> str:
    """/abs/res/layout-land/screen.xml -> layout-land/screen.xml"""
    return "/".join(os.path.normpath(path).split(os.sep)[-2:])


def outlet_type(name: str, source_tag: str, translation: Translation, strategy: LayoutStrategy) -> str:
    """
    Type of a bound element: from the translated tree when the element is in it,
    otherwise from the rule the source tag would have used.
    """
    tag = translation.outlets.element_tags.get(name)
    if tag is None:
        tag = strategy.rules.lookup_element(source_tag).destination
    return strategy.type_lookup(tag)


def _outlet_rows(descriptor: LayoutDescriptor, translation: Translation, strategy: LayoutStrategy):
    rows = []
    for b in descriptor.bindings.values():
        rows.append((b.name, outlet_type(b.name, b.type, translation, strategy), b.optional))
    for s in descriptor.sublayouts.values():
        rows.append((s.name, outlet_type(s.name, "include", translation, strategy), s.optional))
    return rows

# =============================================================
# Web: <name>.html + <name>.ts
# =============================================================

def render_ts(descriptor: LayoutDescriptor, translation: Translation, strategy: LayoutStrategy) -> str:
    cls = descriptor.class_name
    rows = _outlet_rows(descriptor, translation, strategy)
    fields = "\n".join(f"{name}{'?' if optional else ''}: {ts_type}" for name, ts_type, optional in rows)
    names = ", ".join(f'"{escape_ts(name)}"' for name, _, _ in rows)
    inflate_args = f"html, {names}" if names else "html"
    return f"""// Generated by android2views from {', '.join(sorted(_source_label(f) for f in descriptor.files))}
import {{inflateHtmlFile}} from "android-xml-runtime";
import html from './{descriptor.name}.html'

export interface {cls} {{
    _root: HTMLElement
{indent(fields, 4)}
}}

export namespace {cls} {{
    export function inflate() {{
        return inflateHtmlFile({inflate_args}) as {cls}
    }}
}}
"""


def render_web(descriptor: LayoutDescriptor, translation: Translation, strategy: LayoutStrategy) -> Dict[str, str]:
    return {
        f"{descriptor.name}.html": serialize_html(translation.root),
        f"{descriptor.name}.ts": render_ts(descriptor, translation, strategy),
    }

# =============================================================
# Flutter: <name>_xml.dart
# =============================================================

def render_dart(descriptor: LayoutDescriptor, translation: Translation, strategy: LayoutStrategy) -> str:
    cls = descriptor.class_name
    imports = ["import 'package:flutter/material.dart';"]
    included = set(translation.outlets.includes) | {s.layout for s in descriptor.sublayouts.values()}
    for layout in sorted(included):
        imports.append(f"import '{_dart_file_from_class(class_name_for(layout))}';")

    members: List[str] = []
    getters: List[str] = []
    for b in descriptor.bindings.values():
        if b.optional:
            members.append("/// Missing from some variants of this layout.")
        members.append(f'final {b.name} = GlobalKey(debugLabel: "{b.name}");')
        widget = outlet_type(b.name, b.type, translation, strategy)
        getters.append(f"{widget}? get {b.name}Widget => {b.name}.currentWidget as {widget}?;")
    for s in descriptor.sublayouts.values():
        if s.optional:
            members.append(f"{s.layout_class}? {s.name};")
        else:
            members.append(f"late final {s.layout_class} {s.name};")
    for a in descriptor.actions.values():
        members.append(f"VoidCallback? {a.name};")
    members.append("late Widget xmlRoot;")

    body = render_widget(translation.root, 2)
    newline = "\n"
    return f"""// Generated by android2views from {', '.join(sorted(_source_label(f) for f in descriptor.files))}
{newline.join(imports)}

class {cls} {{
{indent(newline.join(members), 2)}

{indent(newline.join(getters), 2) if getters else '  // (no bindings)'}

  static {cls} inflate() {{
    final xml = {cls}();
    xml.xmlRoot = xml._build();
    return xml;
  }}

  Widget _build() {{
    return {body};
  }}
}}
"""


def render_flutter(descriptor: LayoutDescriptor, translation: Translation, strategy: LayoutStrategy) -> Dict[str, str]:
    return {_dart_file_from_class(descriptor.class_name): render_dart(descriptor, translation, strategy)}

# =============================================================
# Public entry point
# =============================================================

STRATEGIES: Dict[str, Callable[[], LayoutStrategy]] = {
    "web": WebStrategy,
    "flutter": FlutterStrategy,
}
EMITTERS: Dict[str, Callable[[LayoutDescriptor, Translation, LayoutStrategy], Dict[str, str]]] = {
    "web": render_web,
    "flutter": render_flutter,
}


@dataclass(frozen=True)
class ConvertConfig:
    res_dir: str
    out_dir: str
    values_dir: Optional[str] = None
    targets: Tuple[str, ...] = ("web",)
    jobs: int = 1
    layouts: Tuple[str, ...] = ()


@dataclass
class ConversionFailure:
    name: str
    error: LayoutError


@dataclass
class ConversionReport:
    converted: List[str] = field(default_factory=list)
    written: List[str] = field(default_factory=list)
    failures: List[ConversionFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def convert_layout(name: str, config: ConvertConfig, resolver: ResourceResolver,
                   translators: Dict[str, LayoutTranslator], known_layouts) -> List[str]:
    """
    Parse every variant of `name`, merge, translate the default variant for each
    target and write the results. Nothing is written unless every target succeeded.
    """
    descriptor = parse_set(config.res_dir, name, resolver)
    for sub in descriptor.sublayouts.values():
        if sub.layout not in known_layouts:
            raise UnresolvedReferenceError(
                f"sublayout '{sub.name}' references unknown layout '{sub.layout}'",
                file=", ".join(sorted(descriptor.files)),
            )

    files = variant_files(config.res_dir, name)
    variant = DEFAULT_VARIANT if DEFAULT_VARIANT in files else sorted(files)[0]
    path = files[variant]
    outputs: Dict[str, str] = {}
    try:
        root = parse_layout_xml(path)
        for target, translator in translators.items():
            translation = translator.translate(root)
            for filename, text in EMITTERS[target](descriptor, translation, translator.strategy).items():
                outputs[os.path.join(target, filename)] = text
    except LayoutError as e:
        raise e.with_context(file=path, variant=variant)

    written = []
    for rel, text in outputs.items():
        out_path = os.path.join(config.out_dir, rel)
        os.makedirs(os.path.dirname(out_path), exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info("Generated %s", out_path)
        written.append(out_path)
    return written


def convert_project(config: ConvertConfig) -> ConversionReport:
    if not os.path.isdir(config.res_dir):
        raise FileNotFoundError(f"resource directory not found: {config.res_dir}")
    unknown_targets = [t for t in config.targets if t not in STRATEGIES]
    if unknown_targets:
        raise ValueError(f"unknown target(s): {', '.join(unknown_targets)}")

    values_dir = config.values_dir or os.path.join(config.res_dir, "values")
    resolver = ResourceResolver(values_dir)
    known = set(layout_names(config.res_dir))
    names = list(config.layouts) or sorted(known)
    # rule tables, resolver and translators are shared read-only by every worker
    translators = {t: LayoutTranslator(STRATEGIES[t](), resolver, known) for t in config.targets}
    logger.info("Converting %d layout(s) for %s", len(names), ", ".join(config.targets))

    def run(name: str):
        try:
            return name, convert_layout(name, config, resolver, translators, known), None
        except LayoutError as e:
            logger.error("%s: %s", name, e)
            return name, [], e

    if config.jobs > 1:
        with ThreadPoolExecutor(max_workers=config.jobs) as executor:
            futures = [executor.submit(run, name) for name in names]
            results = [future.result() for future in as_completed(futures)]
    else:
        results = [run(name) for name in names]

    report = ConversionReport()
    for name, written, error in sorted(results, key=lambda r: r[0]):
        if error is None:
            report.converted.append(name)
            report.written.extend(written)
        else:
            report.failures.append(ConversionFailure(name=name, error=error))
    return report
