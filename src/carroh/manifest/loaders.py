"""
Loading harvest manifests.

Reads only the header row up front; data rows are streamed on demand by
Manifest.rows().
"""

from __future__ import annotations

import csv
from pathlib import Path

from carroh.errors import ManifestNotFound, ManifestNotTabular

from .models import MANIFEST_ENCODING, Manifest


def read_headers(path: Path) -> tuple[str, ...]:
    """
    Read the header row of a CSV file.

    Parameters:
        path: CSV file path

    Returns:
        Header names in column order

    Raises:
        ManifestNotTabular: If the file is empty or cannot be parsed as CSV
    """
    try:
        with path.open("r", encoding=MANIFEST_ENCODING, newline="") as f:
            header = next(csv.reader(f), None)
    except csv.Error as e:
        raise ManifestNotTabular(path, str(e)) from e
    except UnicodeDecodeError as e:
        raise ManifestNotTabular(path, f"not valid UTF-8 ({e.reason})") from e

    if not header:
        raise ManifestNotTabular(path, "missing header row")
    return tuple(header)


def load_manifest(path: Path | str) -> Manifest:
    """
    Open a manifest CSV.

    Parameters:
        path: Path to the manifest

    Returns:
        Manifest with its headers loaded

    Raises:
        ManifestNotFound: If the path does not exist or is not a file
        ManifestNotTabular: If the header row cannot be read

    Example:
        >>> manifest = load_manifest("cahuca_2023-2024_checkin.csv")
        >>> for row in manifest.rows():
        ...     print(row)
    """
    p = Path(path).expanduser()
    if not p.is_file():
        raise ManifestNotFound(p)
    return Manifest(path=p, headers=read_headers(p))
