"""Project file handling: where the version number is stored."""

from __future__ import annotations
