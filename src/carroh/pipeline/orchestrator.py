"""
Disc import orchestration.

Runs a whole harvest batch: validates the manifest, creates the batch
directories, then walks the operator through one disc per sub-identifier
in manifest order.

Each sub-identifier goes through a small state machine:

    AWAIT_INSERTION -> LABEL_READ -> COLLISION_CHECK -> IMAGING
        -> CONTENT_COPY -> EJECT -> COMPLETE

COLLISION_CHECK (and the same check repeated at the start of CONTENT_COPY)
can end the item as SKIPPED, or the whole run as CANCELLED, when an output
path already exists. Nothing is rolled back on cancel, and device failures
are never retried; the only loop is the operator re-confirming insertion.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from carroh.config import ImportSettings
from carroh.devices import DeviceGateway
from carroh.errors import EmptyIdentifier, ImportCancelled, InputLocationMissing
from carroh.manifest import (
    ColumnRef,
    Manifest,
    assert_uniform_column,
    first_value,
    load_manifest,
    select_identifier_column,
)
from carroh.operator import OperatorGateway

from .layout import DirectoryLayout, ItemArtifacts, create_layout, plan_layout


logger = logging.getLogger(__name__)

CANCEL_OPTION = "Cancel Import and Exit Program"


class ItemState(str, Enum):
    AWAIT_INSERTION = "await_insertion"
    LABEL_READ = "label_read"
    COLLISION_CHECK = "collision_check"
    IMAGING = "imaging"
    CONTENT_COPY = "content_copy"
    EJECT = "eject"
    COMPLETE = "complete"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({ItemState.COMPLETE, ItemState.SKIPPED, ItemState.CANCELLED})


@dataclass
class ItemSession:
    """
    Imaging session for one sub-identifier.

    Attributes:
        identifier: Sub-identifier being imaged
        device: Device the disc is read from
        state: Current state
        label: Disc label, once read
        artifacts: Output paths, once the label is known
    """

    identifier: str
    device: str
    state: ItemState = ItemState.AWAIT_INSERTION
    label: str | None = None
    artifacts: ItemArtifacts | None = None


@dataclass(frozen=True)
class ImportPlan:
    """
    Everything derived from the manifest before any disc is touched.

    Attributes:
        manifest: The validated manifest
        identifier_column: Column the per-item identifiers are read from
        marc: The batch MARC code
        grant_cycle: The batch grant cycle, as written in the manifest
        layout: Batch output directories
    """

    manifest: Manifest
    identifier_column: ColumnRef
    marc: str
    grant_cycle: str
    layout: DirectoryLayout


@dataclass
class ImportSummary:
    """
    Result of a run that reached the end of the manifest.

    Attributes:
        layout: Batch output directories
        device: Device that was imaged from
        completed: Sub-identifiers imaged, in order
        skipped: Sub-identifiers skipped at a collision, in order
        elapsed_seconds: Wall time of the run
    """

    layout: DirectoryLayout
    device: str
    completed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0


def split_identifiers(value: str, separator: str = ";") -> list[str]:
    """
    Split an identifier cell into sub-identifiers.

    Whitespace around each part is dropped, as are empty parts.

    Example:
        >>> split_identifiers("CA001; CA002")
        ['CA001', 'CA002']
    """
    parts = [part.strip() for part in value.split(separator)]
    if any(not part for part in parts):
        logger.warning("empty_identifier_dropped", extra={"value": value})
    return [part for part in parts if part]


class ImportOrchestrator:
    """
    Drives one harvest batch end to end.

    Parameters:
        settings: Run settings, including the execution mode
        devices: Device/media gateway for the running platform
        operator: Prompts for the person at the imaging station

    Example:
        >>> orchestrator = ImportOrchestrator(settings, devices, operator)
        >>> summary = orchestrator.run()
        >>> print(f"{len(summary.completed)} discs imaged")
    """

    def __init__(
        self,
        settings: ImportSettings,
        devices: DeviceGateway,
        operator: OperatorGateway,
    ) -> None:
        self.settings = settings
        self.devices = devices
        self.operator = operator
        self._handlers: dict[ItemState, Callable[[ItemSession], ItemState]] = {
            ItemState.AWAIT_INSERTION: self._await_insertion,
            ItemState.LABEL_READ: self._read_label,
            ItemState.COLLISION_CHECK: self._check_image_collision,
            ItemState.IMAGING: self._dump_image,
            ItemState.CONTENT_COPY: self._copy_contents,
            ItemState.EJECT: self._eject,
        }
        self._layout: DirectoryLayout | None = None

    # -- batch ---------------------------------------------------------------

    def validate(self) -> ImportPlan:
        """
        Check the inputs and the manifest and compute the output layout.

        Does not touch the filesystem or the device.

        Raises:
            ManifestNotFound, ManifestNotTabular: If the manifest cannot be read
            InputLocationMissing: If the output parent is missing or not a directory
            ManifestValidationError: If a column invariant does not hold
            EmptyIdentifier: If a row's identifier cell has no sub-identifier
        """
        s = self.settings
        manifest = load_manifest(s.input_csv)
        logger.info("input_manifest", extra={"path": str(manifest.path)})

        if not s.output_parent.is_dir():
            raise InputLocationMissing(s.output_parent, expect_directory=True)
        logger.info("output_parent", extra={"path": str(s.output_parent)})

        for row_number, row in enumerate(manifest.rows(), start=1):
            logger.debug("manifest_row", extra={"row": row_number, "fields": list(row)})

        assert_uniform_column(manifest, s.marc_column)
        assert_uniform_column(manifest, s.grant_cycle_column)

        column_one, column_two = s.identifier_columns
        identifier_column = select_identifier_column(manifest, column_one, column_two)
        for row_number, row in enumerate(manifest.rows(), start=1):
            if not split_identifiers(identifier_column.value(row), s.identifier_separator):
                raise EmptyIdentifier(identifier_column.name, row_number)

        grant_cycle = first_value(manifest, s.grant_cycle_column)
        marc = first_value(manifest, s.marc_column)
        layout = plan_layout(s.output_parent, grant_cycle, marc)

        return ImportPlan(
            manifest=manifest,
            identifier_column=identifier_column,
            marc=marc,
            grant_cycle=grant_cycle,
            layout=layout,
        )

    def run(self) -> ImportSummary:
        """
        Validate, create the batch directories, and import every disc.

        Returns:
            ImportSummary once every row has been processed

        Raises:
            CarrohError: Any validation, layout, gateway or cancellation error;
                files already written stay on disk
        """
        start_time = time.perf_counter()

        plan = self.validate()
        create_layout(
            plan.layout,
            mode=self.settings.mode,
            policy=self.settings.existing_output,
            operator=self.operator,
        )
        self._layout = plan.layout

        device = self.settings.device or self.devices.select_device()
        logger.info("device_selected", extra={"device": device, "gateway": self.devices.name})

        summary = ImportSummary(layout=plan.layout, device=device)

        for row in plan.manifest.rows():
            group = plan.identifier_column.value(row)
            logger.info("row_identifiers", extra={"identifiers": group})

            for identifier in split_identifiers(group, self.settings.identifier_separator):
                session = self.import_item(identifier, device)
                if session.state is ItemState.SKIPPED:
                    summary.skipped.append(identifier)
                else:
                    summary.completed.append(identifier)

        summary.elapsed_seconds = time.perf_counter() - start_time
        return summary

    # -- one item ------------------------------------------------------------

    def import_item(self, identifier: str, device: str) -> ItemSession:
        """
        Run the state machine for one sub-identifier until it ends.

        Returns:
            The finished session (COMPLETE or SKIPPED)

        Raises:
            ImportCancelled: If the operator cancels at a collision
            GatewayError: If any device operation fails
        """
        if self._layout is None:
            raise RuntimeError("import_item() called before the batch layout was created")

        logger.info("item_start", extra={"identifier": identifier, "device": device})
        session = ItemSession(identifier=identifier, device=device)

        while session.state not in TERMINAL_STATES:
            previous = session.state
            session.state = self._handlers[previous](session)
            logger.debug(
                "item_transition",
                extra={
                    "identifier": identifier,
                    "from": previous.value,
                    "to": session.state.value,
                },
            )

        logger.info("item_end", extra={"identifier": identifier, "state": session.state.value})
        return session

    def _await_insertion(self, session: ItemSession) -> ItemState:
        while not self.operator.confirm(
            f"Is the disk associated with {session.identifier} inserted into {session.device}?"
        ):
            self.devices.eject(session.device)
        return ItemState.LABEL_READ

    def _read_label(self, session: ItemSession) -> ItemState:
        assert self._layout is not None
        session.label = self.devices.read_label(session.device)
        session.artifacts = self._layout.artifacts(session.identifier, session.label)
        logger.info("disc_label", extra={"identifier": session.identifier, "label": session.label})
        return ItemState.COLLISION_CHECK

    def _check_image_collision(self, session: ItemSession) -> ItemState:
        assert session.artifacts is not None
        if self._collides(session, session.artifacts.image, "iso write location"):
            return ItemState.SKIPPED
        return ItemState.IMAGING

    def _dump_image(self, session: ItemSession) -> ItemState:
        assert session.artifacts is not None and session.label is not None
        dest = session.artifacts.image

        if self.settings.mode.is_dry:
            logger.info("dry_run_skip_image", extra={"dest": str(dest)})
            return ItemState.CONTENT_COPY

        source = self.devices.image_source(session.device, session.label)
        logger.info("image_start", extra={"source": str(source), "dest": str(dest)})
        self.devices.dump_image(source, dest)
        logger.info("image_done", extra={"dest": str(dest)})
        return ItemState.CONTENT_COPY

    def _copy_contents(self, session: ItemSession) -> ItemState:
        assert session.artifacts is not None and session.label is not None
        dest = session.artifacts.copy

        if self._collides(session, dest, "file dump location"):
            return ItemState.SKIPPED

        if self.settings.mode.is_dry:
            logger.info("dry_run_skip_copy", extra={"dest": str(dest)})
            return ItemState.EJECT

        source = self.devices.mount_point(session.device, session.label)
        logger.info("copy_start", extra={"source": str(source), "dest": str(dest)})
        self.devices.copy_recursive(source, dest)
        logger.info("copy_done", extra={"dest": str(dest)})
        return ItemState.EJECT

    def _eject(self, session: ItemSession) -> ItemState:
        self.devices.eject(session.device)
        return ItemState.COMPLETE

    def _collides(self, session: ItemSession, path: Path, what: str) -> bool:
        """
        Ask the operator what to do if `path` already exists.

        Returns:
            False if the path is free, True if the operator chose to skip

        Raises:
            ImportCancelled: If the operator chose to cancel the import
        """
        if not path.exists():
            return False

        logger.warning("output_collision", extra={"identifier": session.identifier, "path": str(path)})
        skip_option = f"Skip {session.identifier} and continue to the next identifier."
        choice = self.operator.ask_choice(
            f"The {what}, {path} already exists, so importing {session.identifier} "
            f"cannot continue. Would you like to skip importing {session.identifier} "
            "and move on to the remaining records?",
            [CANCEL_OPTION, skip_option],
        )
        if choice == skip_option:
            return True

        session.state = ItemState.CANCELLED
        raise ImportCancelled(session.identifier, path)
