from __future__ import annotations

"""
Background parse worker answering request messages on its own thread.

Design intent:
- Talk to the foreground only through plain message dicts (no shared state).
- Mirror the request/response protocol: PARSE_DOCUMENT -> PARSE_RESULT,
  EXTRACT_KEYWORDS -> KEYWORDS_RESULT.
"""

import logging
import queue
import threading
from typing import Any, Callable, Optional

from pydantic import ValidationError

from handoff.document.sections import split_sections
from handoff.extract.signals import scan_keywords
from handoff.internal_core.contracts import (
    WORKER_REQUEST_ADAPTER,
    KeywordsResultMessage,
    ParseDocumentRequest,
    ParseResultMessage,
    SectionPayload,
    WorkerErrorMessage,
)

logger = logging.getLogger(__name__)

MessageCallback = Callable[[dict[str, Any]], None]


def handle_message(message: dict[str, Any]) -> Optional[dict[str, Any]]:
    try:
        request = WORKER_REQUEST_ADAPTER.validate_python(message)
    except ValidationError:
        kind = message.get("kind") if isinstance(message, dict) else type(message).__name__
        logger.warning("parse_worker unknown_message kind=%s", kind)
        return None

    if isinstance(request, ParseDocumentRequest):
        sections = split_sections(request.payload.content)
        return ParseResultMessage(
            id=request.id,
            result=[SectionPayload(header=item.header, lines=list(item.lines)) for item in sections],
        ).model_dump()

    return KeywordsResultMessage(
        id=request.id,
        result=scan_keywords(request.payload.content),
    ).model_dump()


class ParseWorker:
    def __init__(self, on_message: MessageCallback, *, name: str = "handoff-parse-worker") -> None:
        self._on_message = on_message
        self._inbox: queue.Queue[Optional[dict[str, Any]]] = queue.Queue()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> None:
        self._thread.start()

    def post_message(self, message: dict[str, Any]) -> None:
        self._inbox.put(message)

    def terminate(self) -> None:
        # Messages queued behind the sentinel are never answered.
        self._inbox.put(None)

    def _run(self) -> None:
        while True:
            message = self._inbox.get()
            if message is None:
                return
            request_id = str(message.get("id", "")) if isinstance(message, dict) else ""
            try:
                response = handle_message(message)
            except Exception as exc:
                logger.exception("parse_worker handler_failed id=%s", request_id)
                response = WorkerErrorMessage(id=request_id, error=str(exc)).model_dump()
            if response is None:
                continue
            try:
                self._on_message(response)
            except Exception:
                logger.exception("parse_worker delivery_failed id=%s", request_id)
