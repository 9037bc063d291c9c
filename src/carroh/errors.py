"""
Error taxonomy for carroh.

Every failure the import can hit is a subclass of CarrohError, so the CLI
has exactly one thing to catch. Each exception keeps the structured detail
(column names, row numbers, paths) as attributes and renders a precise
message through str().
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class CarrohError(Exception):
    """Root of every error raised by carroh."""


# -- manifest validation ----------------------------------------------------


class ManifestValidationError(CarrohError):
    """The manifest does not satisfy a structural invariant."""


class ManifestNotFound(ManifestValidationError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"{str(path)!r} could not be found, but is expected to exist.")


class ManifestNotTabular(ManifestValidationError):
    def __init__(self, path: Path, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"{str(path)!r} could not be read as CSV: {detail}")


class ColumnNotFound(ManifestValidationError):
    def __init__(self, column: str):
        self.column = column
        super().__init__(
            f'An error occurred while searching for the header "{column}": Not found.'
        )


class AmbiguousColumn(ManifestValidationError):
    def __init__(self, column: str, indices: Sequence[int]):
        self.column = column
        self.indices = list(indices)
        super().__init__(
            f'An error occurred while searching for the header "{column}": '
            f"Multiple results at {self.indices}"
        )


class NonUniformColumn(ManifestValidationError):
    """
    A column expected to hold one value for the whole batch varies.

    Attributes:
        column: Column name
        row_number: First offending data row, 1-indexed from the first row
            after the header
    """

    def __init__(self, column: str, row_number: int):
        self.column = column
        self.row_number = row_number
        super().__init__(
            f'An error occurred while verifying all values in a "{column}" are equal: '
            f"Non-equal value at row {row_number}"
        )


class EmptyColumn(ManifestValidationError):
    def __init__(self, column: str):
        self.column = column
        super().__init__(
            f'An error occurred while reading the "{column}" column: '
            "There are no records in the CSV."
        )


class NoPopulatedIdentifierColumn(ManifestValidationError):
    def __init__(self, column_one: str, column_two: str):
        self.column_one = column_one
        self.column_two = column_two
        super().__init__(
            f"Tried to find a filled column '{column_one}' or '{column_two}' "
            "but both were at least partially empty."
        )


class EmptyIdentifier(ManifestValidationError):
    """
    An identifier cell holds no usable sub-identifier (e.g. " " or ";").

    Attributes:
        column: Identifier column name
        row_number: Offending data row, 1-indexed from the first row after
            the header
    """

    def __init__(self, column: str, row_number: int):
        self.column = column
        self.row_number = row_number
        super().__init__(
            f'An error occurred while reading identifiers from "{column}": '
            f"No identifier at row {row_number}"
        )


# -- output layout ----------------------------------------------------------


class LayoutError(CarrohError):
    """An input or output location is not in the expected state."""


class OutputLocationExists(LayoutError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"{str(path)!r} should not already exist, but does.")


class InputLocationMissing(LayoutError):
    def __init__(self, path: Path, *, expect_directory: bool = False):
        self.path = path
        self.expect_directory = expect_directory
        if expect_directory and path.exists():
            message = f"{str(path)!r} should be a directory, but is not."
        else:
            message = f"{str(path)!r} could not be found, but is expected to exist."
        super().__init__(message)


# -- operator decisions -----------------------------------------------------


class ImportCancelled(CarrohError):
    """The operator chose to stop the import at an output collision."""

    def __init__(self, identifier: str, path: Path):
        self.identifier = identifier
        self.path = path
        super().__init__(
            f"The import encountered an existing file ({path}) while importing "
            f"{identifier!r} which cannot be overwritten, and the operator "
            "elected to cancel the import."
        )


class OperatorDeclined(CarrohError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            f"Output location {str(path)!r} already exists and the operator "
            "declined to continue into it."
        )


# -- device / media gateway -------------------------------------------------


class GatewayError(CarrohError):
    """A device or media operation failed; the message names the operation."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Error while {operation}: {detail}")


class DeviceCommandError(GatewayError):
    """An external command could not be run or exited non-zero."""

    def __init__(self, command: Sequence[str], detail: str):
        self.command = list(command)
        super().__init__(f"running {' '.join(self.command)!r}", detail)


class UnsupportedPlatform(GatewayError):
    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(
            "selecting a device gateway",
            f"platform {platform!r} is not supported (expected linux or darwin)",
        )
