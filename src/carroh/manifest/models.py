"""
Models for harvest manifests.

A manifest is a CSV with one header row and one row per catalogued object.
Rows are never cached: every call to Manifest.rows() re-opens the file, so
each validation pass and the import loop get an independent cursor.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from pydantic import BaseModel, ConfigDict

from carroh.errors import ManifestNotTabular

# A data row, aligned to Manifest.headers and accessed by index only.
Row = tuple[str, ...]

MANIFEST_ENCODING = "utf-8-sig"


class Manifest(BaseModel):
    """
    Harvest manifest (CSV).

    Header names may repeat across positions; resolving a name to a single
    position is the job of carroh.manifest.columns.locate_column().
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    headers: tuple[str, ...]

    def rows(self) -> Iterator[Row]:
        """
        Iterate data rows in file order.

        Blank lines are ignored and do not count towards row numbers.

        Yields:
            One tuple of field values per data row

        Raises:
            ManifestNotTabular: If a row's field count differs from the header's
                or the file stops parsing as CSV
        """
        try:
            with self.path.open("r", encoding=MANIFEST_ENCODING, newline="") as f:
                reader = csv.reader(f)
                next(reader, None)
                row_number = 0
                for record in reader:
                    if not record:
                        continue
                    row_number += 1
                    if len(record) != len(self.headers):
                        raise ManifestNotTabular(
                            self.path,
                            f"row {row_number} has {len(record)} fields, "
                            f"expected {len(self.headers)}",
                        )
                    yield tuple(record)
        except csv.Error as e:
            raise ManifestNotTabular(self.path, str(e)) from e
        except UnicodeDecodeError as e:
            raise ManifestNotTabular(self.path, f"not valid UTF-8 ({e.reason})") from e

    def row_count(self) -> int:
        return sum(1 for _ in self.rows())


@dataclass(frozen=True)
class ColumnRef:
    """
    A column name resolved against a specific manifest.

    Attributes:
        name: Header name
        index: Zero-based position of the single matching header
    """

    name: str
    index: int

    def value(self, row: Row) -> str:
        return row[self.index]
