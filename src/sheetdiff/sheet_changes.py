"""Sheet-level structural changes, reported at every tier."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sheetdiff.exceptions import MalformedStateError
from sheetdiff.models import SheetChanges, SheetRef, SheetRename

if TYPE_CHECKING:
    from sheetdiff.models import DatasetState, SheetState


def index_sheets(state: DatasetState) -> dict[int, SheetState]:
    """Build the sheet_id -> SheetState lookup for one state.

    Raises:
        MalformedStateError: If a sheet has no integer id or ids repeat
    """
    index: dict[int, SheetState] = {}
    for position, sheet in enumerate(state.sheets):
        sheet_id = sheet.sheet_id
        if not isinstance(sheet_id, int) or isinstance(sheet_id, bool):
            raise MalformedStateError(
                state.document_id,
                f"sheet at position {position} ({sheet.title!r}) has no valid sheetId",
            )
        if sheet_id in index:
            raise MalformedStateError(
                state.document_id,
                f"sheetId {sheet_id} appears more than once",
            )
        index[sheet_id] = sheet
    return index


def detect_sheet_changes(
    before: DatasetState,
    after: DatasetState,
    before_index: dict[int, SheetState] | None = None,
    after_index: dict[int, SheetState] | None = None,
) -> SheetChanges:
    """Compare sheet lists by id: added, removed and renamed sheets."""
    if before_index is None:
        before_index = index_sheets(before)
    if after_index is None:
        after_index = index_sheets(after)

    changes = SheetChanges()

    for after_sheet in after.sheets:
        if after_sheet.sheet_id not in before_index:
            changes.sheets_added.append(
                SheetRef(sheet_id=after_sheet.sheet_id, title=after_sheet.title)
            )

    for before_sheet in before.sheets:
        after_sheet = after_index.get(before_sheet.sheet_id)
        if after_sheet is None:
            changes.sheets_removed.append(
                SheetRef(sheet_id=before_sheet.sheet_id, title=before_sheet.title)
            )
        elif after_sheet.title != before_sheet.title:
            changes.sheets_renamed.append(
                SheetRename(
                    sheet_id=before_sheet.sheet_id,
                    old_title=before_sheet.title,
                    new_title=after_sheet.title,
                )
            )

    return changes
