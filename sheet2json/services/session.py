from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from pathlib import Path

from ..errors import ClipboardError, ParseError, WorkerError
from ..models.dataset import Dataset, DisplayOptions, Projection
from . import projection as renderer
from .pipeline import load_dataset, strip_extension
from .selection import ColumnSelector
from .worker import ParseResponse, WorkerBridge

"""Converter session: the explicit owner of Dataset, selection and display options.

The controller (CLI, or any other event source) calls one method per event;
preview/export/copy all go through the same render() call so they never diverge.
"""

__all__ = [
    "ConverterSession",
]

logger = logging.getLogger(__name__)


class ConverterSession:
    """State of one converter window: loaded dataset, selected columns, options."""

    def __init__(
        self,
        options: DisplayOptions | None = None,
        camel_case: bool = True,
        duplicate_keys: str = "last_wins",
        null_sentinels: set[str] | None = None,
        skip_blank_rows: bool = False,
    ) -> None:
        self.options = options or DisplayOptions()
        self.camel_case = camel_case
        self.duplicate_keys = duplicate_keys
        self.null_sentinels = null_sentinels
        self.skip_blank_rows = skip_blank_rows
        self.dataset: Dataset | None = None
        self.selector: ColumnSelector | None = None
        self._pending_request: int | None = None

    # --- loading -----------------------------------------------------------

    def _install(self, dataset: Dataset) -> Dataset:
        self.dataset = dataset
        self.selector = ColumnSelector(dataset.columns)
        logger.info(f"loaded {dataset.output_filename}: records={len(dataset.records)} columns={len(self.selector.columns)}")
        return dataset

    def load(self, data: bytes, filename: str) -> Dataset:
        """Synchronous path: parse bytes in-process and replace the dataset.

        Raises:
            ParseError: the file could not be read

        Whatever the failure, the session is left empty.
        """
        self._pending_request = None
        try:
            dataset = load_dataset(
                data,
                filename,
                camel_case=self.camel_case,
                duplicate_keys=self.duplicate_keys,
                null_sentinels=self.null_sentinels,
                skip_blank_rows=self.skip_blank_rows,
            )
        except Exception:
            self.clear()
            raise
        return self._install(dataset)

    def request_load(self, bridge: WorkerBridge, data: bytes, filename: str) -> int:
        """Worker path: send the bytes to the worker. The new request supersedes older ones."""
        request_id = bridge.submit(
            data,
            filename,
            self.camel_case,
            duplicate_keys=self.duplicate_keys,
            null_sentinels=self.null_sentinels,
            skip_blank_rows=self.skip_blank_rows,
        )
        self._pending_request = request_id
        return request_id

    def apply_response(self, response: ParseResponse | None) -> bool:
        """Install a worker response.

        Returns:
            False when the response is stale (not the latest request_load) and was ignored

        Raises:
            WorkerError: the worker answered with an error; the session is left empty
        """
        if response is None:
            return False
        if response.request_id != self._pending_request:
            logger.debug(f"ignoring stale response {response.request_id} (pending={self._pending_request})")
            return False
        self._pending_request = None
        if not response.ok:
            self.clear()
            raise WorkerError(response.error_message or "worker failed")
        name = strip_extension(response.output_filename or "")
        self._install(Dataset(records=response.records or [], columns=response.columns or [], name=name))
        return True

    def clear(self) -> None:
        self.dataset = None
        self.selector = None

    # --- selection ---------------------------------------------------------

    @property
    def selected(self) -> list[str]:
        return self.selector.selected if self.selector else []

    def select_all(self) -> None:
        if self.selector:
            self.selector.select_all()

    def deselect_all_but_first(self) -> None:
        if self.selector:
            self.selector.deselect_all_but_first()

    def toggle(self, key: str, want_selected: bool) -> None:
        """Raises SelectionViolation / UnknownColumnError; state unchanged on error."""
        if self.selector is None:
            return
        self.selector.toggle(key, want_selected)

    def select_only(self, keys: Iterable[str]) -> None:
        if self.selector:
            self.selector.select_only(keys)

    def exclude(self, keys: Iterable[str]) -> None:
        if self.selector:
            self.selector.exclude(keys)

    # --- options -----------------------------------------------------------

    def set_pretty_print(self, enabled: bool) -> None:
        self.options = replace(self.options, pretty_print=enabled)

    def set_show_nulls(self, enabled: bool) -> None:
        self.options = replace(self.options, show_nulls=enabled)

    # --- output ------------------------------------------------------------

    def preview(self) -> Projection:
        return renderer.render(self.dataset, self.selected, self.options)

    def export_bytes(self) -> bytes:
        return renderer.export_bytes(self.preview())

    def clipboard_text(self) -> str:
        return renderer.clipboard_text(self.preview())

    def write_export(self, directory: Path) -> Path:
        """Write `<name>.json` (BOM + JSON) into `directory` and return its path."""
        if self.dataset is None:
            raise ParseError("no file loaded")
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.dataset.output_filename
        path.write_bytes(self.export_bytes())
        return path

    def copy(self, writer: Callable[[str], None]) -> str:
        """Hand the clipboard text to `writer` (the platform clipboard).

        Raises:
            ClipboardError: the writer failed
        """
        text = self.clipboard_text()
        try:
            writer(text)
        except Exception as e:
            raise ClipboardError(f"failed to copy: {e}") from e
        return text
