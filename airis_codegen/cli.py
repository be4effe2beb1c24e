#!/usr/bin/env python3
"""
AiIRIS-codegen CLI — 設計稿 → 元件程式碼

  airis-codegen generate --input scene.json [--node 1:2] [--framework vue]
  airis-codegen generate --file-key KEY --component "Primary Button"
  airis-codegen audit --input scene.json --node 1:2
  airis-codegen preview --input scene.json       # 預覽分類樹
  airis-codegen watch --input scene.json         # 場景檔變更時自動重產
"""

import argparse
import json
import os
import sys
import time

import requests
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from airis_codegen import __version__

from .accessibility import audit, quick_audit
from .classifier import classify, preview_classification_tree
from .config import DEFAULT_CONFIG_FILE, load_config, options_from_config
from .errors import CodeGenerationError
from .exporter import extract_design_tokens, write_component, write_design_tokens, write_manifest
from .figma_reader import FigmaAPIClient, load_document, parse_document
from .generator import ComponentGenerator
from .integrator import CustomFragments
from .scene_graph import count_nodes


def _load_scene(args, config: dict):
    """--input 本機 JSON，或 --file-key 透過 Figma API 取得."""
    if getattr(args, "input", None):
        if not os.path.exists(args.input):
            print(f"❌ 找不到場景檔 '{args.input}'。")
            return None
        try:
            return load_document(args.input)
        except ValueError as e:
            # 寫到一半的檔案也會落在這裡（watch 模式）
            print(f"❌ 場景檔不是有效的 JSON：{e}")
            return None

    figma_cfg = config.get("figma", {})
    token = figma_cfg.get("personalAccessToken") or os.environ.get("FIGMA_TOKEN")
    file_key = getattr(args, "file_key", None) or figma_cfg.get("fileKey")
    if not token:
        print(f"❌ 請設定 FIGMA_TOKEN 環境變數，或在 {DEFAULT_CONFIG_FILE} 的 figma.personalAccessToken 設定。")
        print("   取得方式：Figma → Settings → Personal access tokens → 新增")
        return None
    if not file_key:
        print("❌ 請使用 --input 或 --file-key（或在 config 的 figma.fileKey 設定）。")
        return None

    print(f"📥 Fetching Figma file: {file_key}")
    client = FigmaAPIClient(token)
    try:
        payload = client.get_file(file_key)
    except requests.RequestException as e:
        status = getattr(getattr(e, "response", None), "status_code", None)
        if status == 403:
            print("❌ Figma API 403：Token 無效或已過期，請重新產生 FIGMA_TOKEN。")
        elif status == 404:
            print(f"❌ Figma API 404：找不到檔案 '{file_key}'，請確認 file key 是否正確。")
        else:
            print(f"❌ Figma API 錯誤：{e}")
        return None
    return parse_document(payload)


def _load_fragments(path):
    if not path:
        return None
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return CustomFragments(
        markup=data.get("markup"),
        stylesheet=data.get("stylesheet"),
        advanced_stylesheet=data.get("advancedStylesheet"),
        imports=data.get("imports"),
        utilities=data.get("utilities"),
    )


def _options(args, config: dict):
    overrides = {
        "framework": getattr(args, "framework", None),
        "styling": getattr(args, "styling", None),
    }
    if getattr(args, "no_typescript", False):
        overrides["typescript"] = False
    if getattr(args, "no_accessibility", False):
        overrides["accessibility"] = False
    if getattr(args, "no_responsive", False):
        overrides["responsive"] = False
    if getattr(args, "optimize_images", False):
        overrides["optimizeImages"] = True
    return options_from_config(config, **overrides)


def run_generate(args, config: dict, generator=None) -> int:
    """Generate: 場景 → 元件檔案 + manifest."""
    document = _load_scene(args, config)
    if document is None:
        return 1
    try:
        generator = generator or ComponentGenerator(_options(args, config))
        fragments = _load_fragments(getattr(args, "custom", None))
        output_dir = args.output or config.get("export", {}).get("outputDir", "./generated")

        if getattr(args, "component", None):
            targets = [document.resolve_target(component_name=args.component).id]
        else:
            targets = args.node or [document.resolve_target().id]
        fragment_map = {node_id: fragments for node_id in targets} if fragments else None
        report = generator.generate_many(document, targets, fragment_map)
    except CodeGenerationError as e:
        print(f"❌ Generate failed: {e.message}")
        return 1
    except ValueError as e:
        print(f"❌ Generate failed: --custom 不是有效的 JSON（{e}）")
        return 1

    taken = set()
    for error in report.errors:
        print(f"   ❌ {error}")
    for component in report.components:
        meta = component.metadata
        print(f"   ✅ {component.sanitized_name}  [{meta.category}/{meta.complexity}]  "
              f"accuracy {meta.estimated_accuracy}%")
        for warning in meta.warnings:
            print(f"      ⚠️  {warning}")
        for path in write_component(output_dir, component, generator.options, taken):
            print(f"      📄 {path}")

    tokens = extract_design_tokens(document.root, generator.options.breakpoints)
    if getattr(args, "tokens", False):
        for path in write_design_tokens(output_dir, tokens):
            print(f"   🎨 {path}")
    manifest_path = write_manifest(output_dir, report, generator.options, tokens)
    print(f"   📄 Manifest saved to {manifest_path}")
    print(f"✅ Generated {report.component_count} component(s) from {report.total_nodes} nodes "
          f"(cache hits: {report.cache_hits}, avg accuracy: {report.average_accuracy}%)")
    return 1 if report.errors and not report.components else 0


def cmd_audit(args, config: dict) -> int:
    """Audit: 只跑無障礙稽核."""
    document = _load_scene(args, config)
    if document is None:
        return 1
    try:
        node = document.resolve_target(node_id=args.node, component_name=args.component)
    except CodeGenerationError as e:
        print(f"❌ {e.message}")
        return 1

    classification = classify(node)
    runner = quick_audit if args.simplified else audit
    report = runner(node, classification, "")
    print(f"♿ Accessibility audit: {node.name}")
    print(f"   Score: {report.score}/100  Tier: {report.compliance_tier}")
    for issue in report.issues:
        print(f"   ⚠️  [{issue.severity}] {issue.element}: {issue.message}")
        print(f"      → {issue.fix}")
    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    return 0


def cmd_preview(args, config: dict) -> int:
    """預覽分類樹."""
    document = _load_scene(args, config)
    if document is None:
        return 1
    try:
        node = document.resolve_target(node_id=args.node)
    except CodeGenerationError as e:
        print(f"❌ {e.message}")
        return 1
    print(f"👁️  Preview classification tree: {node.name}")
    print(preview_classification_tree(node, classify(node)))
    print(f"\nTotal nodes: {count_nodes(node)}")
    return 0


_WATCHED_EXTENSIONS = (".json",)


class ChangeHandler(FileSystemEventHandler):
    """檔案變更事件處理器，帶 debounce 防抖。"""

    def __init__(self, callback, target: str = None, debounce: float = 1.0):
        self.callback = callback
        self.target = os.path.abspath(target) if target else None
        self.last_trigger = 0.0
        self.debounce_seconds = debounce

    def on_modified(self, event):
        if event.is_directory:
            return
        if not event.src_path.endswith(_WATCHED_EXTENSIONS):
            return
        if self.target and os.path.abspath(event.src_path) != self.target:
            return
        current_time = time.time()
        if current_time - self.last_trigger < self.debounce_seconds:
            return
        self.last_trigger = current_time
        print(f"\n🔄 File changed: {event.src_path}")
        self.callback()


def cmd_watch(args, config: dict) -> int:
    """Watch: 場景檔變更時自動重新產生."""
    if not args.input:
        print("❌ watch 需要 --input 指定本機場景檔。")
        return 1
    watch_dir = os.path.dirname(os.path.abspath(args.input))
    print(f"👀 Watching '{args.input}' for changes...")
    print("   Press Ctrl+C to stop.")

    # 每次重產都用新的 generator：場景內容變了，舊快取沒有意義
    def regenerate():
        run_generate(args, config)

    regenerate()

    event_handler = ChangeHandler(regenerate, target=args.input)
    observer = Observer()
    observer.schedule(event_handler, path=watch_dir, recursive=False)
    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\n👋 Stopping watch...")
        observer.stop()
    finally:
        observer.join()
    return 0


def _add_source_args(p):
    p.add_argument("--input", "-i", help="Local scene JSON (Figma file export)")
    p.add_argument("--file-key", help="Figma file key (needs FIGMA_TOKEN)")


def _add_generation_args(p):
    p.add_argument("--node", action="append", help="Target node id (repeatable)")
    p.add_argument("--component", help="Target a named component from the component index")
    p.add_argument("--framework", choices=["react", "vue", "html"], help="Markup dialect")
    p.add_argument("--styling", choices=["tailwind", "css-modules", "styled-components", "plain-css"],
                   help="Stylesheet dialect")
    p.add_argument("--no-typescript", action="store_true", help="Skip type declarations")
    p.add_argument("--no-accessibility", action="store_true", help="Skip accessibility audit")
    p.add_argument("--no-responsive", action="store_true", help="Skip responsive variants")
    p.add_argument("--optimize-images", action="store_true", help="Add lazy-loading hints to images")
    p.add_argument("--custom", help="JSON file with custom markup/stylesheet/imports/utilities")
    p.add_argument("--tokens", action="store_true", help="Also write tokens.css and design-tokens.json")
    p.add_argument("--output", "-o", help="Output directory")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="AiIRIS-codegen: design scene graph → component code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_FILE, help="Config path")
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    gen_p = sub.add_parser("generate", help="Scene → component code",
        epilog="Examples:\n  airis-codegen generate --input scene.json --framework react --styling tailwind\n"
               "  airis-codegen generate --file-key ABC123 --component 'Primary Button' -o ./out",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_source_args(gen_p)
    _add_generation_args(gen_p)

    audit_p = sub.add_parser("audit", help="Accessibility audit only",
        epilog="Examples:\n  airis-codegen audit --input scene.json --node 1:2 --simplified",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_source_args(audit_p)
    audit_p.add_argument("--node", help="Target node id")
    audit_p.add_argument("--component", help="Target a named component")
    audit_p.add_argument("--simplified", action="store_true", help="error/warning/info profile")
    audit_p.add_argument("--json", action="store_true", help="Also print the report as JSON")

    preview_p = sub.add_parser("preview", help="Preview classification tree")
    _add_source_args(preview_p)
    preview_p.add_argument("--node", help="Target node id")

    watch_p = sub.add_parser("watch", help="Regenerate when the scene file changes")
    watch_p.add_argument("--input", "-i", help="Local scene JSON to watch")
    _add_generation_args(watch_p)

    args = parser.parse_args(argv)
    config = load_config(args.config)

    if args.command == "generate":
        status = run_generate(args, config)
    elif args.command == "audit":
        status = cmd_audit(args, config)
    elif args.command == "preview":
        status = cmd_preview(args, config)
    elif args.command == "watch":
        status = cmd_watch(args, config)
    else:
        parser.print_help()
        status = 0
    sys.exit(status)


if __name__ == "__main__":
    main()
