"""
Column checks for harvest manifests.

These run before anything is written: a batch is only imaged once its
MARC code and grant cycle are the same on every row and one of the
identifier columns is filled in on every row.
"""

from __future__ import annotations

import logging

from carroh.errors import (
    AmbiguousColumn,
    ColumnNotFound,
    EmptyColumn,
    NonUniformColumn,
    NoPopulatedIdentifierColumn,
)

from .models import ColumnRef, Manifest


logger = logging.getLogger(__name__)


def locate_column(manifest: Manifest, name: str) -> ColumnRef:
    """
    Resolve a column name to its single position in the header.

    Parameters:
        manifest: Manifest to search
        name: Exact header name

    Returns:
        ColumnRef for the only matching header

    Raises:
        ColumnNotFound: If no header matches
        AmbiguousColumn: If more than one header matches

    Example:
        >>> locate_column(manifest, "marc")
        ColumnRef(name='marc', index=3)
    """
    matches = [i for i, header in enumerate(manifest.headers) if header == name]

    if not matches:
        raise ColumnNotFound(name)
    if len(matches) > 1:
        raise AmbiguousColumn(name, matches)

    logger.debug("column_located", extra={"column": name, "index": matches[0]})
    return ColumnRef(name=name, index=matches[0])


def assert_uniform_column(manifest: Manifest, name: str) -> ColumnRef:
    """
    Check that every row holds the first row's value in a column.

    Rows are scanned in file order and the check stops at the first
    mismatch.

    Parameters:
        manifest: Manifest to check
        name: Column name

    Returns:
        The resolved column

    Raises:
        ColumnNotFound, AmbiguousColumn: If the column does not resolve
        EmptyColumn: If the manifest has no data rows
        NonUniformColumn: At the first row whose value differs, numbered from 1
    """
    column = locate_column(manifest, name)
    rows = manifest.rows()

    first = next(rows, None)
    if first is None:
        raise EmptyColumn(name)
    reference = column.value(first)

    for row_number, row in enumerate(rows, start=2):
        value = column.value(row)
        logger.debug(
            "column_compare",
            extra={"column": name, "row": row_number, "value": value, "reference": reference},
        )
        if value != reference:
            raise NonUniformColumn(name, row_number)

    return column


def column_is_populated(manifest: Manifest, name: str) -> bool:
    """
    Check that no row has an empty value in a column.

    Parameters:
        manifest: Manifest to check
        name: Column name

    Returns:
        True if every row has a non-empty value (vacuously true with no rows)

    Raises:
        ColumnNotFound, AmbiguousColumn: If the column does not resolve
    """
    column = locate_column(manifest, name)
    return all(column.value(row) != "" for row in manifest.rows())


def first_value(manifest: Manifest, name: str) -> str:
    """
    Return a column's value on the first data row.

    Raises:
        ColumnNotFound, AmbiguousColumn: If the column does not resolve
        EmptyColumn: If the manifest has no data rows
    """
    column = locate_column(manifest, name)
    first = next(manifest.rows(), None)
    if first is None:
        raise EmptyColumn(name)
    return column.value(first)


def select_identifier_column(manifest: Manifest, column_one: str, column_two: str) -> ColumnRef:
    """
    Pick the column that identifies the physical items on each row.

    The decision is made for the whole manifest, not per row:
    - column_one when it is filled in on every row
    - otherwise column_two when it is filled in on every row

    Parameters:
        manifest: Manifest to inspect
        column_one: Preferred identifier column (e.g. obj_call_number)
        column_two: Fallback identifier column (e.g. obj_temporary_id)

    Returns:
        The selected column

    Raises:
        ColumnNotFound, AmbiguousColumn: If either column does not resolve
        NoPopulatedIdentifierColumn: If neither column is fully populated
    """
    one_populated = column_is_populated(manifest, column_one)
    two_populated = column_is_populated(manifest, column_two)

    if one_populated:
        selected = column_one
    elif two_populated:
        selected = column_two
    else:
        raise NoPopulatedIdentifierColumn(column_one, column_two)

    logger.info(
        "identifier_column_selected",
        extra={
            "column": selected,
            "column_one_populated": one_populated,
            "column_two_populated": two_populated,
        },
    )
    return locate_column(manifest, selected)
