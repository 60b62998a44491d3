import logging
from typing import List

from ..exceptions import StaleLogEntryError
from ..models import RenameRecord, UndoSummary
from .journal import OperationLog


class UndoFacility:
    """
    Reverts the renames of the last forward run.

    Records are replayed last-first so that names freed by later renames
    are restored before earlier ones need them. Records that cannot be
    reverted stay in the journal so a later undo can retry them; the journal
    ends up empty when everything was reverted.
    """

    def __init__(self, log: OperationLog):
        self.log = log

    def undo(self) -> UndoSummary:
        records = self.log.read_renames()
        summary = UndoSummary()
        failed: List[RenameRecord] = []

        for record in reversed(records):
            try:
                self._revert(record)
                summary.reverted += 1
            except StaleLogEntryError as e:
                logging.warning(f"Warning: {e} Skipping.")
                failed.append(record)
                summary.stale += 1

        failed.reverse()
        self.log.rewrite(failed)

        logging.info(f"Undo operation completed. Reverted {summary.reverted}, skipped {summary.stale}.")
        return summary

    def _revert(self, record: RenameRecord):
        if not record.new.exists():
            raise StaleLogEntryError(f"File {record.new} does not exist.")
        if record.original.exists():
            raise StaleLogEntryError(f"Original path {record.original} is occupied.")
        try:
            record.new.rename(record.original)
        except OSError as e:
            raise StaleLogEntryError(f"Cannot revert {record.new}: {e}") from e
        logging.info(f"Reverted: {record.new} -> {record.original}")
