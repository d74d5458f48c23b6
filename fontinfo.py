"""
Font metadata command line

commands
  show  print the identity of font files, stdin (-) or http(s) URLs
  scan  scan font directories into families.json / fonts.yml reports

scan reads directories from the command line or from a sources.yml of the form
  name:
    dir: path/to/fonts
"""

import argparse
import json
import sys
from pathlib import Path

import requests
import yaml

from fonterrors import FontError, SourceUnavailable
from fontutil import build_file_index, font_metadata, scan_font_dir

FAMILIES_JSON_NAME = "families.json"
FAMILIES_MIN_NAME = "families.min.json"
FONTS_YML_NAME = "fonts.yml"

URL_PREFIXES = ("http://", "https://")
REQUEST_TIMEOUT = 60

FIELD_LABELS = [
    ("full_name", "Full name"),
    ("postscript_name", "PostScript name"),
    ("family_names", "Families"),
    ("subfamily_name", "Subfamily"),
    ("weight_class", "Weight"),
    ("notice", "Notice"),
]


def fetch_url(url: str) -> bytes:
    """
    download a font into memory
    """
    try:
        resp = requests.get(url, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise SourceUnavailable(f"cannot fetch {url}: {e}") from e
    return resp.content


def read_source(source: str) -> dict:
    """
    metadata for one command line source, a path, - for stdin or a URL
    """
    if source == "-":
        return font_metadata(sys.stdin.buffer)
    if source.startswith(URL_PREFIXES):
        return font_metadata(fetch_url(source))
    return font_metadata(Path(source))


def format_text(source: str, meta: dict) -> str:
    lines = [source]
    for key, label in FIELD_LABELS:
        value = meta[key]
        if key == "family_names":
            value = ", ".join(value)
        lines.append(f"  {label + ':':<17}{value}")
    return "\n".join(lines)


def cmd_show(args) -> int:
    """
    print metadata for every source, failures go to stderr
    """
    results = {}
    failed = 0
    for source in args.sources:
        try:
            results[source] = read_source(source)
        except FontError as e:
            print(f"Error: {source}: {e}", file=sys.stderr)
            failed += 1

    if args.format == "json":
        print(json.dumps(results, indent=2, ensure_ascii=False))
    elif args.format == "yaml":
        dumped = yaml.dump(results, default_flow_style=False, allow_unicode=True, sort_keys=False)
        print(dumped, end="")
    elif results:
        print("\n\n".join(format_text(src, meta) for src, meta in results.items()))

    return 1 if failed else 0


def load_sources(sources_path: Path) -> dict[str, Path]:
    """
    load name -> directory from a sources.yml
    relative directories are taken from the yml's own folder
    """
    if not sources_path.exists():
        raise FileNotFoundError(f"{sources_path} not found")

    with open(sources_path) as f:
        config = yaml.safe_load(f) or {}

    if not config:
        raise ValueError(f"No sources configured in {sources_path}")

    layout_msg = f"{sources_path}: expected name: {{dir: path}} entries"
    if not isinstance(config, dict):
        raise ValueError(layout_msg)

    base = sources_path.resolve().parent
    source_dirs = {}
    for name, cfg in config.items():
        if not isinstance(cfg, dict) or "dir" not in cfg:
            raise ValueError(layout_msg)
        source_dirs[name] = base / cfg["dir"]
    return source_dirs


def build_fonts_data(all_families: dict[str, dict[str, list[dict]]]) -> dict:
    """
    source -> family -> entries, entries of files that hold more than one
    family list the others under also_contains
    """
    fonts_data = {}
    for name, families in all_families.items():
        file_index = build_file_index(families)
        source_data = {}
        for family, entries in families.items():
            family_entries = []
            for e in entries:
                entry = dict(e)
                others = [o for o in file_index[e["file"]] if o["family"] != family]
                if others:
                    entry["also_contains"] = others
                family_entries.append(entry)
            source_data[family] = family_entries
        fonts_data[name] = source_data
    return fonts_data


def cmd_scan(args) -> int:
    """
    scan directories and write families.json, families.min.json and fonts.yml
    """
    if args.sources:
        try:
            source_dirs = load_sources(Path(args.sources))
        except (OSError, ValueError, KeyError, TypeError, yaml.YAMLError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    else:
        source_dirs = {Path(d).name or str(d): Path(d) for d in args.dirs}

    if not source_dirs:
        print("Error: no font directories given", file=sys.stderr)
        return 1

    all_families: dict[str, dict[str, list[dict]]] = {}
    for name, source_dir in source_dirs.items():
        if not source_dir.is_dir():
            print(f"[{name}] {source_dir} not found", file=sys.stderr)
            return 1
        families = scan_font_dir(source_dir, progress=args.progress)
        all_families[name] = families
        entry_count = sum(len(v) for v in families.values())
        print(f"[{name}] {len(families)} families, {entry_count} entries")

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    fonts_data = build_fonts_data(all_families)
    with open(output_dir / FONTS_YML_NAME, "w") as f:
        yaml.dump(fonts_data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    families_data = {name: sorted(families) for name, families in all_families.items()}
    with open(output_dir / FAMILIES_JSON_NAME, "w") as f:
        json.dump(families_data, f, indent=2, ensure_ascii=False)
    with open(output_dir / FAMILIES_MIN_NAME, "w") as f:
        json.dump(families_data, f, separators=(",", ":"))

    print("\nOutput:")
    print(f"  {output_dir / FONTS_YML_NAME}")
    print(f"  {output_dir / FAMILIES_JSON_NAME}")
    print(f"  {output_dir / FAMILIES_MIN_NAME}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TrueType / OpenType font metadata")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    show_parser = subparsers.add_parser("show", help="Show metadata of fonts")
    show_parser.add_argument("sources", nargs="+", help="Font files, - for stdin, or http(s) URLs")
    show_parser.add_argument(
        "--format", choices=("text", "json", "yaml"), default="text", help="Output format"
    )
    show_parser.set_defaults(func=cmd_show)

    scan_parser = subparsers.add_parser("scan", help="Scan font directories into reports")
    scan_parser.add_argument("dirs", nargs="*", help="Font directories")
    scan_parser.add_argument("--sources", help="YAML file mapping source names to directories")
    scan_parser.add_argument("--output-dir", default=".", help="Where to write the reports")
    scan_parser.add_argument(
        "--no-progress", dest="progress", action="store_false", help="Hide the progress bar"
    )
    scan_parser.set_defaults(func=cmd_scan)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
