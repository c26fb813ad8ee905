#!/usr/bin/env python3
"""
build_reference_index.py - Index the reference corpus for sampling and originality checks.

Walks reference/ (or --root) recursively and writes reference/index.json with,
for every image: relative path, dimensions, a 0-1 minimal score, a 64-bit
dHash and tags taken from its folder names.

Usage:
  python scripts/build_reference_index.py                   # index reference/
  python scripts/build_reference_index.py --root ref_pack   # another corpus root
  python scripts/build_reference_index.py --dry-run         # list files only
  python scripts/build_reference_index.py --stats-only      # stats from existing index
"""

from __future__ import annotations

import argparse
import json
import sys
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path

from series_art.reference_library import IMAGE_EXTS, INDEX_FILENAME, index_image

SCRIPT_DIR   = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent


def find_images(root: Path) -> list:
    return sorted(
        p for p in root.rglob("*")
        if p.is_file() and p.suffix.lower() in IMAGE_EXTS and not p.name.startswith(".")
    )


def build_index(root: Path, dry_run: bool = False) -> dict:
    images = find_images(root)
    print(f"\n{'='*60}")
    print(f"  {root}: {len(images)} images")
    print(f"{'='*60}")

    entries = []
    failed = 0
    for i, img_path in enumerate(images, 1):
        print(f"  [{i}/{len(images)}] {img_path.relative_to(root)}", end="  ", flush=True)
        if dry_run:
            print("(dry-run)")
            continue
        try:
            entry = index_image(img_path, root)
        except Exception as e:
            print(f"✗ {e}")
            failed += 1
            continue
        if entry is None:
            print("✗ empty image")
            failed += 1
            continue
        entries.append(entry)
        print(f"✓ score={entry['minimalScore']:.3f} dhash={entry['dHash']}")

    entries.sort(key=lambda e: -e["minimalScore"])
    print(f"\n  ✓ {len(entries)} indexed, {failed} failed")
    return {
        "generatedAt": datetime.now(timezone.utc).isoformat(),
        "root": root.name,
        "count": len(entries),
        "images": entries,
    }


def print_stats(index: dict) -> None:
    images = index.get("images", [])
    if not images:
        print("  (empty index)")
        return

    scores = [e.get("minimalScore", 0) for e in images]
    tags = Counter(t for e in images for t in e.get("tags", []))
    missing_hash = sum(1 for e in images if not e.get("dHash"))

    print(f"\n{'─'*60}")
    print(f"  {len(images)} images")
    print(f"{'─'*60}")
    print(f"  minimal score: avg={sum(scores) / len(scores):.3f}  min={min(scores):.3f}  max={max(scores):.3f}")
    if missing_hash:
        print(f"  ⚠ {missing_hash} without dHash (re-run to add)")
    top = "  ".join(f"{t}({c})" for t, c in tags.most_common(8))
    print(f"  tags: {top or '-'}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Index reference images (dHash + minimal score)")
    parser.add_argument("--root", default=str(PROJECT_ROOT / "reference"), help="Corpus root directory")
    parser.add_argument("--dry-run", action="store_true", help="List images without indexing")
    parser.add_argument("--stats-only", action="store_true", help="Print stats from existing index")
    args = parser.parse_args()

    root = Path(args.root)
    index_path = root / INDEX_FILENAME

    if args.stats_only:
        if not index_path.exists():
            print(f"Error: {index_path} not found")
            sys.exit(1)
        print_stats(json.loads(index_path.read_text(encoding="utf-8")))
        return

    if not root.exists():
        print(f"Error: {root} not found")
        sys.exit(1)

    index = build_index(root, dry_run=args.dry_run)
    if args.dry_run:
        return

    index_path.write_text(json.dumps(index, indent=2), encoding="utf-8")
    print(f"  Saved → {index_path}")
    print_stats(index)


if __name__ == "__main__":
    main()
