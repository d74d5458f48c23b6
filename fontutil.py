"""
Shared font file utilities
per file metadata dicts, directory scanning and family / file indexes
"""

import sys
from pathlib import Path

from tqdm import tqdm

from fonterrors import FontError
from ttffile import TTFFile

# collections (.ttc) are not readable by TTFFile
FONT_EXTENSIONS = {".ttf", ".otf"}


def font_metadata(source) -> dict:
    """
    read one font and return its metadata as a plain dict
    raises FontError if the font can't be described
    """
    return TTFFile.open(source).to_dict()


def scan_font_metadata(font_path: Path) -> dict | None:
    """
    like font_metadata but reports broken fonts on stderr and returns None
    """
    try:
        return font_metadata(font_path)
    except FontError as e:
        print(f"  skipping {font_path}: {e}", file=sys.stderr)
        return None


def find_font_files(font_dir: Path) -> list[Path]:
    return [
        p
        for p in sorted(font_dir.rglob("*"))
        if p.is_file() and p.suffix.lower() in FONT_EXTENSIONS
    ]


def scan_font_dir(font_dir: Path, progress: bool = False) -> dict[str, list[dict]]:
    """
    scan a directory tree for font files and build family -> entries map
    returns dict of family -> [{"file", "subfamily", "full_name", "postscript_name",
    "weight_class"}]
    a font with several family names (nameID 1 and 16) is listed under each
    """
    # family -> (file, subfamily) -> entry, the first entry for a key is kept
    families: dict[str, dict[tuple[str, str], dict]] = {}

    font_files = find_font_files(font_dir)
    for font_path in tqdm(font_files, desc=font_dir.name, unit="font", disable=not progress):
        meta = scan_font_metadata(font_path)
        if meta is None:
            continue

        rel_path = font_path.relative_to(font_dir).as_posix()
        entry = {
            "file": rel_path,
            "subfamily": meta["subfamily_name"],
            "full_name": meta["full_name"],
            "postscript_name": meta["postscript_name"],
            "weight_class": meta["weight_class"],
        }
        for family in meta["family_names"]:
            families.setdefault(family, {}).setdefault((rel_path, entry["subfamily"]), entry)

    return {
        family: [dict(by_key[key]) for key in sorted(by_key)]
        for family, by_key in sorted(families.items())
    }


def build_file_index(families: dict) -> dict[str, list[dict]]:
    """
    build file -> [{family, subfamily}] index from a families map
    """
    index: dict[str, list[dict]] = {}
    for family, entries in families.items():
        for e in entries:
            pair = {"family": family, "subfamily": e.get("subfamily")}
            index.setdefault(e["file"], []).append(pair)
    return index
