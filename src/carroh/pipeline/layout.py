"""
Output directory planning.

Derives where a batch's images and file copies go from the manifest's MARC
code and grant cycle, and creates the batch directories without ever
merging into something that is already there.

Layout for grant cycle "2023/2024" and MARC code "cahuca":

    {output_root}/2023-2024_cahuca/                     parent
    {output_root}/2023-2024_cahuca/cahuca_2023-2024_Raw/ raw
        {identifier}_{label}.iso                        image
        {identifier}_{label}/                           file copy
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from carroh.config import ExecutionMode, ExistingOutputPolicy
from carroh.errors import OperatorDeclined, OutputLocationExists
from carroh.operator import OperatorGateway


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemArtifacts:
    """
    Output paths for one imaged disc.

    Only known once the disc is in the drive, since the label is part of
    both names.

    Attributes:
        image: ISO image file
        copy: Directory holding the disc's files
    """

    image: Path
    copy: Path


@dataclass(frozen=True)
class DirectoryLayout:
    """
    Batch output directories.

    Attributes:
        parent: {output_root}/{gcd}_{marc}
        raw: {parent}/{marc}_{gcd}_Raw
    """

    parent: Path
    raw: Path

    def artifacts(self, identifier: str, label: str) -> ItemArtifacts:
        stem = f"{identifier}_{label}"
        return ItemArtifacts(image=self.raw / f"{stem}.iso", copy=self.raw / stem)


def grant_cycle_descriptor(grant_cycle: str) -> str:
    """Make a grant cycle usable in a directory name ("2023/2024" -> "2023-2024")."""
    return grant_cycle.replace("/", "-")


def plan_layout(output_root: Path, grant_cycle: str, marc: str) -> DirectoryLayout:
    """
    Compute the batch directories. Touches nothing on disk.

    Parameters:
        output_root: Directory the batch parent directory goes in
        grant_cycle: The manifest's grant cycle value
        marc: The manifest's MARC code

    Returns:
        DirectoryLayout

    Example:
        >>> plan_layout(Path("out"), "2023/2024", "cahuca").raw
        PosixPath('out/2023-2024_cahuca/cahuca_2023-2024_Raw')
    """
    gcd = grant_cycle_descriptor(grant_cycle)
    parent = output_root / f"{gcd}_{marc}"
    return DirectoryLayout(parent=parent, raw=parent / f"{marc}_{gcd}_Raw")


def create_output_directory(
    path: Path,
    *,
    mode: ExecutionMode,
    policy: ExistingOutputPolicy = ExistingOutputPolicy.STRICT,
    operator: OperatorGateway | None = None,
) -> bool:
    """
    Create one batch directory that must not exist yet.

    The existence check runs in dry mode too; only the mkdir is skipped.

    Parameters:
        path: Directory to create (its parent must exist, except in dry mode)
        mode: Live or dry execution
        policy: STRICT fails on an existing path; CONFIRM asks the operator
        operator: Required for the CONFIRM policy

    Returns:
        True if the directory was created (or would have been, in dry mode),
        False if the operator chose to continue into an existing directory

    Raises:
        OutputLocationExists: If the path exists under the STRICT policy
        OperatorDeclined: If the operator refuses to reuse an existing path
    """
    logger.info("create_output_location", extra={"path": str(path), "mode": mode.value})

    if path.exists():
        if policy is ExistingOutputPolicy.STRICT or operator is None:
            raise OutputLocationExists(path)
        if not operator.confirm(
            f"Output location {path} already exists. Continue importing into it?"
        ):
            raise OperatorDeclined(path)
        logger.warning("output_location_reused", extra={"path": str(path)})
        return False

    if mode.is_dry:
        logger.info("dry_run_skip_mkdir", extra={"path": str(path)})
        return True

    try:
        path.mkdir()
    except FileExistsError as e:
        raise OutputLocationExists(path) from e
    return True


def create_layout(
    layout: DirectoryLayout,
    *,
    mode: ExecutionMode,
    policy: ExistingOutputPolicy = ExistingOutputPolicy.STRICT,
    operator: OperatorGateway | None = None,
) -> None:
    """Create the parent directory, then the raw directory inside it."""
    for path in (layout.parent, layout.raw):
        create_output_directory(path, mode=mode, policy=policy, operator=operator)
