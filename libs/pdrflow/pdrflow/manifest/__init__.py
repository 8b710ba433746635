"""Input and output manifest I/O."""

from pdrflow.manifest.reader import parse_manifest_lines, read_manifest
from pdrflow.manifest.writer import output_manifest_key, render_manifest_csv, write_manifest

__all__ = [
    "output_manifest_key",
    "parse_manifest_lines",
    "read_manifest",
    "render_manifest_csv",
    "write_manifest",
]
