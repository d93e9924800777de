"""Allow running as ``python -m semver_py``."""

from semver_py.cli.main import app

app()
