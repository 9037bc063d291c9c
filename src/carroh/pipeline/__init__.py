"""
Pipeline module for carroh disc harvesting.

Provides the batch output layout and the import orchestrator that walks an
operator through imaging each disc listed in a manifest.
"""

from .layout import (
    DirectoryLayout,
    ItemArtifacts,
    create_layout,
    create_output_directory,
    grant_cycle_descriptor,
    plan_layout,
)
from .orchestrator import (
    CANCEL_OPTION,
    ImportOrchestrator,
    ImportPlan,
    ImportSummary,
    ItemSession,
    ItemState,
    split_identifiers,
)

__all__ = [
    "DirectoryLayout",
    "ItemArtifacts",
    "create_layout",
    "create_output_directory",
    "grant_cycle_descriptor",
    "plan_layout",
    "CANCEL_OPTION",
    "ImportOrchestrator",
    "ImportPlan",
    "ImportSummary",
    "ItemSession",
    "ItemState",
    "split_identifiers",
]
