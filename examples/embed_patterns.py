"""Example: Expanding //go:embed patterns."""

import tempfile
from pathlib import Path

from gosrcs import EmbedError, resolve_embed

with tempfile.TemporaryDirectory() as tmpdir:
    pkg = Path(tmpdir)
    for name in ("static/index.html", "static/css/site.css", "static/.env", "templates/page.tmpl"):
        path = pkg / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")

    # A nested module is never embedded
    (pkg / "static/vendor").mkdir()
    (pkg / "static/vendor/go.mod").write_text("module vendored\n")

    print("static:")
    for file in resolve_embed(tmpdir, ["static"]):
        print(f"  - {file}")

    print("all:static:")
    for file in resolve_embed(tmpdir, ["all:static"]):
        print(f"  - {file}")

    print("templates/*.tmpl static/*.html:")
    for file in resolve_embed(tmpdir, ["templates/*.tmpl", "static/*.html"]):
        print(f"  - {file}")

    for pattern in (".", "missing/*", "static/vendor"):
        try:
            resolve_embed(tmpdir, [pattern])
        except EmbedError as e:
            print(f"Error: {e}")
