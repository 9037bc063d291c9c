"""
Harvest manifest reading and column validation.

Basic usage:
    >>> from carroh.manifest import load_manifest, assert_uniform_column
    >>>
    >>> manifest = load_manifest("batch.csv")
    >>> assert_uniform_column(manifest, "marc")
    >>> pit = select_identifier_column(manifest, "obj_call_number", "obj_temporary_id")
    >>> for row in manifest.rows():
    ...     print(pit.value(row))
"""

from .models import (
    Manifest,
    ColumnRef,
    Row,
)
from .loaders import (
    load_manifest,
    read_headers,
)
from .columns import (
    locate_column,
    assert_uniform_column,
    column_is_populated,
    first_value,
    select_identifier_column,
)

__all__ = [
    # Models
    "Manifest",
    "ColumnRef",
    "Row",
    # Loaders
    "load_manifest",
    "read_headers",
    # Column checks
    "locate_column",
    "assert_uniform_column",
    "column_is_populated",
    "first_value",
    "select_identifier_column",
]
