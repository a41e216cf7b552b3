"""Example: Listing the files needed to build a Go package.

Runs ``go list`` under the hood, so the go toolchain must be on PATH.
Usage: python list_sources.py [PACKAGE_DIR] [TAG ...]
"""

import logging
import sys

from gosrcs import GosrcsError, ListerConfig, collect_sources

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

package_dir = sys.argv[1] if len(sys.argv) > 1 else "."
config = ListerConfig(build_tags=sys.argv[2:])

try:
    sources = collect_sources(package_dir, config=config)
except GosrcsError as e:
    print(f"Error: {e}", file=sys.stderr)
    sys.exit(1)

# Group by owning package; manifest files have none
by_package: dict[str, list[str]] = {}
for source in sources:
    by_package.setdefault(source.import_path or "(module files)", []).append(source.path)

for import_path in sorted(by_package):
    print(import_path)
    for path in by_package[import_path]:
        print(f"  {path}")

print(f"\n{len(sources)} files")
