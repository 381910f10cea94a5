#!/usr/bin/env python3
"""Build the example registry and factory, then run the example.

Writes META-INF/services/example.spi.property_resolver.PropertyResolver and
example/spi/property_resolver_factory.py under the repository root.

Usage:
  python scripts/build_example.py              # build and run
  python scripts/build_example.py --no-run     # build only
  python scripts/build_example.py --clean      # delete what a build wrote
"""

import argparse
import subprocess
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from config import settings  # noqa: E402
from diagnostics import Messager  # noqa: E402
from processor import ServiceProviderProcessor  # noqa: E402
from registry import Filer  # noqa: E402
from services.naming import SERVICES_DIR  # noqa: E402
from symbols import AstSymbolModel  # noqa: E402

GENERATED = [
    ROOT / SERVICES_DIR / "example.spi.property_resolver.PropertyResolver",
    ROOT / "example" / "spi" / "property_resolver_factory.py",
]


def clean():
    for path in GENERATED:
        if path.exists():
            path.unlink()
            print(f"Deleted {path}")


def build() -> bool:
    messager = Messager()
    # Only the example package is scanned among the root's directories
    ignore_dirs = list(settings.ignore_dirs) + [
        p.name for p in ROOT.iterdir() if p.is_dir() and p.name != "example"
    ]
    symbols = AstSymbolModel([ROOT], messager=messager, ignore_dirs=ignore_dirs)
    processor = ServiceProviderProcessor(Filer(class_output=ROOT, source_output=ROOT), messager)
    result = processor.process(symbols)
    for diagnostic in result.diagnostics:
        print(diagnostic.format())
    for path in result.registry_files + result.generated_sources:
        print(f"Wrote {path}")
    return not result.has_errors


def main():
    ap = argparse.ArgumentParser(description="Build and run the property resolver example")
    ap.add_argument("--no-run", action="store_true", help="Only build, do not run the example")
    ap.add_argument("--clean", action="store_true", help="Delete generated files and exit")
    args = ap.parse_args()

    if args.clean:
        clean()
        return 0

    # Rebuild from scratch so the factory picks up a fresh timestamp
    clean()
    if not build():
        return 1
    if args.no_run:
        return 0
    return subprocess.call([sys.executable, "-m", "example"], cwd=ROOT)


if __name__ == "__main__":
    sys.exit(main())
