from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable
from concurrent.futures import CancelledError, Executor, Future, ProcessPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Any

from .pipeline import load_dataset, output_filename

"""Background parsing worker and its request/response bridge.

The worker runs in a separate process (ProcessPoolExecutor); requests and
responses are pickled, so the file buffer travels by value. Every request gets
a monotonically increasing id. Only the most recently submitted request is
active: responses for superseded requests are dropped.
"""

__all__ = [
    "ParseRequest",
    "ParseResponse",
    "handle_request",
    "WorkerBridge",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseRequest:
    request_id: int
    buffer: bytes
    filename: str
    camel_case: bool = True
    duplicate_keys: str = "last_wins"
    null_sentinels: frozenset[str] | None = None
    skip_blank_rows: bool = False


@dataclass(frozen=True)
class ParseResponse:
    request_id: int
    records: list[dict[str, Any]] | None = None
    columns: list[str] | None = None
    output_filename: str | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_message is None


def handle_request(request: ParseRequest) -> ParseResponse:
    """Worker entry point. Never raises: failures become error responses."""
    try:
        dataset = load_dataset(
            request.buffer,
            request.filename,
            camel_case=request.camel_case,
            duplicate_keys=request.duplicate_keys,
            null_sentinels=set(request.null_sentinels) if request.null_sentinels else None,
            skip_blank_rows=request.skip_blank_rows,
        )
    except Exception as e:
        return ParseResponse(request_id=request.request_id, error_message=str(e) or type(e).__name__)
    return ParseResponse(
        request_id=request.request_id,
        records=dataset.records,
        columns=dataset.columns,
        output_filename=output_filename(request.filename),
    )


@dataclass
class _Pending:
    request: ParseRequest
    future: Future = field(repr=False)


class WorkerBridge:
    """Single-flight request/response channel to the parsing worker.

    Args:
        executor: Executor to run handle_request on. Defaults to a one-process
            ProcessPoolExecutor owned (and shut down) by the bridge.
        timeout: Seconds wait() blocks before answering with a timeout error.
    """

    def __init__(self, executor: Executor | None = None, timeout: float | None = None) -> None:
        self._owns_executor = executor is None
        self._executor = executor if executor is not None else ProcessPoolExecutor(max_workers=1)
        self.timeout = timeout
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._active_id: int | None = None
        self._last_id = 0
        self._pending: dict[int, _Pending] = {}

    @property
    def active_request_id(self) -> int | None:
        return self._active_id

    def is_current(self, response: ParseResponse) -> bool:
        return response.request_id == self._active_id

    def submit(
        self,
        buffer: bytes,
        filename: str,
        camel_case: bool = True,
        *,
        duplicate_keys: str = "last_wins",
        null_sentinels: set[str] | None = None,
        skip_blank_rows: bool = False,
        on_response: Callable[[ParseResponse], None] | None = None,
    ) -> int:
        """Send a parse request. It supersedes any request still in flight.

        Args:
            on_response: Called with the response only if the request is still
                the active one when it completes.

        Returns:
            Request id
        """
        with self._lock:
            request_id = next(self._ids)
            self._last_id = request_id
            previous = self._pending.get(self._active_id) if self._active_id is not None else None
            self._active_id = request_id
            request = ParseRequest(
                request_id=request_id,
                buffer=bytes(buffer),
                filename=filename,
                camel_case=camel_case,
                duplicate_keys=duplicate_keys,
                null_sentinels=frozenset(null_sentinels) if null_sentinels else None,
                skip_blank_rows=skip_blank_rows,
            )
            future = self._executor.submit(handle_request, request)
            self._pending[request_id] = _Pending(request=request, future=future)
        logger.debug(f"worker request {request_id} submitted: {filename} ({len(request.buffer)} bytes)")

        if previous is not None:
            # the superseded entry (and its buffer) goes away once its future is done;
            # runs immediately when it already is, or when the cancel below succeeds
            previous_id = previous.request.request_id
            previous.future.add_done_callback(lambda _f: self._forget(previous_id))
            # best effort: only a request that has not started can be cancelled
            previous.future.cancel()

        if on_response is not None:
            future.add_done_callback(lambda f: self._dispatch(request_id, f, on_response))
        return request_id

    def _forget(self, request_id: int) -> None:
        with self._lock:
            if request_id != self._active_id:
                self._pending.pop(request_id, None)

    def _dispatch(self, request_id: int, future: Future, callback: Callable[[ParseResponse], None]) -> None:
        with self._lock:
            self._pending.pop(request_id, None)
        if future.cancelled():
            return
        response = self._to_response(request_id, future)
        if not self.is_current(response):
            logger.debug(f"worker response {request_id} is stale (active={self._active_id}) -> dropped")
            return
        callback(response)

    def _to_response(self, request_id: int, future: Future) -> ParseResponse:
        try:
            return future.result(timeout=0)
        except Exception as e:
            # pool crash (BrokenProcessPool), pickling failure, ...
            return ParseResponse(request_id=request_id, error_message=f"worker failed: {e}")

    def wait(self, request_id: int, timeout: float | None = None) -> ParseResponse | None:
        """Block until the response for `request_id` is available.

        Returns:
            The response, or None when the request has been superseded.
            A timeout produces an error response.

        Raises:
            KeyError: request_id was never issued, or was already collected
        """
        with self._lock:
            pending = self._pending.get(request_id)
            superseded = 0 < request_id <= self._last_id and request_id != self._active_id
        if pending is None:
            if superseded:
                return None
            raise KeyError(f"unknown request id: {request_id}")
        limit = timeout if timeout is not None else self.timeout
        response: ParseResponse | None
        try:
            response = pending.future.result(timeout=limit)
        except FutureTimeoutError:
            pending.future.cancel()
            with self._lock:
                self._pending.pop(request_id, None)
                if self._active_id == request_id:
                    self._active_id = None
            return ParseResponse(
                request_id=request_id,
                error_message=f"worker timed out after {limit}s",
            )
        except CancelledError:
            response = None
        except Exception as e:
            response = ParseResponse(request_id=request_id, error_message=f"worker failed: {e}")

        with self._lock:
            self._pending.pop(request_id, None)
            if request_id != self._active_id:
                logger.debug(f"worker response {request_id} is stale (active={self._active_id}) -> dropped")
                return None
        return response

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True, cancel_futures=True)

    def __enter__(self) -> WorkerBridge:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
