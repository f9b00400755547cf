from __future__ import annotations

"""
Offload section splitting to one background worker with id-correlated replies.

Design intent:
- Own the worker handle, pending-request table and id counter in one service
  object that callers receive by reference.
- Fall back to synchronous splitting when no worker is available.
- Resolve each request strictly by its id; arrival order is irrelevant.
"""

import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, Optional

from pydantic import ValidationError

from handoff.document.sections import Section, split_sections
from handoff.extract.signals import scan_keywords
from handoff.internal_core.config import HandoffConfig
from handoff.internal_core.contracts import (
    WORKER_RESPONSE_ADAPTER,
    ContentPayload,
    ExtractKeywordsRequest,
    ParseDocumentRequest,
    ParseResultMessage,
    WorkerErrorMessage,
)
from handoff.internal_core.worker import MessageCallback, ParseWorker

logger = logging.getLogger(__name__)

WorkerFactory = Callable[[MessageCallback], ParseWorker]


class ParseDispatchError(RuntimeError):
    """Raised on a request future when the background worker reports a failure."""


def _resolved(value: Any) -> Future:
    future: Future = Future()
    future.set_result(value)
    return future


class ParseDispatcher:
    def __init__(
        self,
        *,
        worker_enabled: bool = True,
        worker_factory: Optional[WorkerFactory] = None,
    ) -> None:
        self._worker_enabled = worker_enabled
        self._worker_factory: WorkerFactory = worker_factory or ParseWorker
        self._worker: Optional[ParseWorker] = None
        self._worker_unavailable = False
        self._lock = threading.Lock()
        self._pending: dict[str, Future] = {}
        self._message_id = 0

    @classmethod
    def from_config(cls, config: HandoffConfig) -> "ParseDispatcher":
        return cls(worker_enabled=config.HANDOFF_PARSE_WORKER_ENABLED)

    @property
    def is_worker_ready(self) -> bool:
        return self._get_worker() is not None

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def _get_worker(self) -> Optional[ParseWorker]:
        if not self._worker_enabled or self._worker_unavailable:
            return None
        with self._lock:
            if self._worker is not None:
                return self._worker
            try:
                worker = self._worker_factory(self._on_worker_message)
                worker.start()
            except RuntimeError as exc:
                logger.warning("parse_dispatcher worker_unavailable error=%s fallback=sync", exc)
                self._worker_unavailable = True
                return None
            self._worker = worker
            return worker

    def parse_async(self, content: str) -> Future:
        """Future resolving to the document's sections (list[Section])."""
        worker = self._get_worker()
        if worker is None:
            return _resolved(split_sections(content))
        return self._dispatch(worker, "parse", ParseDocumentRequest, content)

    def extract_keywords_async(self, content: str) -> Future:
        worker = self._get_worker()
        if worker is None:
            return _resolved(scan_keywords(content))
        return self._dispatch(worker, "keywords", ExtractKeywordsRequest, content)

    def close(self) -> None:
        with self._lock:
            worker = self._worker
            self._worker = None
        if worker is not None:
            worker.terminate()

    def _dispatch(self, worker: ParseWorker, prefix: str, request_cls: Any, content: str) -> Future:
        future: Future = Future()
        with self._lock:
            self._message_id += 1
            request_id = f"{prefix}-{self._message_id}"
            self._pending[request_id] = future
        message = request_cls(id=request_id, payload=ContentPayload(content=content or ""))
        worker.post_message(message.model_dump())
        return future

    def _on_worker_message(self, message: dict[str, Any]) -> None:
        try:
            response = WORKER_RESPONSE_ADAPTER.validate_python(message)
        except ValidationError:
            logger.warning("parse_dispatcher unknown_response kind=%s", message.get("kind"))
            return

        with self._lock:
            future = self._pending.pop(response.id, None)
        if future is None:
            logger.warning("parse_dispatcher orphan_response id=%s", response.id)
            return

        if isinstance(response, WorkerErrorMessage):
            future.set_exception(ParseDispatchError(response.error))
        elif isinstance(response, ParseResultMessage):
            future.set_result(
                [Section(header=item.header, lines=list(item.lines)) for item in response.result]
            )
        else:
            future.set_result(list(response.result))
