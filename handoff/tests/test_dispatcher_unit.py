from typing import Any

from handoff.document.sections import Section, split_sections
from handoff.internal_core.dispatcher import ParseDispatchError, ParseDispatcher
from handoff.internal_core.worker import handle_message

_DOCUMENT = "Census\n### 1. John Doe - 101\n#Sepsis\n- abx\n### 2. Jane Roe - 102\n#CHF"


class _ManualWorker:
    """Worker double that holds posted messages until the test answers them."""

    def __init__(self, on_message: Any) -> None:
        self.on_message = on_message
        self.posted: list[dict[str, Any]] = []
        self.started = False
        self.terminated = False

    def start(self) -> None:
        self.started = True

    def post_message(self, message: dict[str, Any]) -> None:
        self.posted.append(message)

    def terminate(self) -> None:
        self.terminated = True

    def answer(self, index: int) -> None:
        response = handle_message(self.posted[index])
        assert response is not None
        self.on_message(response)


def _manual_dispatcher() -> tuple[ParseDispatcher, list[_ManualWorker]]:
    created: list[_ManualWorker] = []

    def factory(on_message: Any) -> _ManualWorker:
        worker = _ManualWorker(on_message)
        created.append(worker)
        return worker

    return ParseDispatcher(worker_factory=factory), created


def test_parse_async_without_worker_resolves_synchronously() -> None:
    dispatcher = ParseDispatcher(worker_enabled=False)
    future = dispatcher.parse_async(_DOCUMENT)
    assert future.done() is True
    assert future.result() == split_sections(_DOCUMENT)
    assert dispatcher.is_worker_ready is False
    assert dispatcher.extract_keywords_async("Sepsis, stable").result() == ["sepsis", "stable"]


def test_worker_factory_failure_falls_back_to_sync() -> None:
    calls: list[int] = []

    def broken_factory(on_message: Any) -> Any:
        _ = on_message
        calls.append(1)
        raise RuntimeError("threads unavailable")

    dispatcher = ParseDispatcher(worker_factory=broken_factory)
    assert dispatcher.parse_async("### A\nx").result() == [Section(header="### A", lines=["x"])]
    assert dispatcher.parse_async("### B").result() == [Section(header="### B", lines=[])]
    assert len(calls) == 1


def test_background_worker_round_trip() -> None:
    dispatcher = ParseDispatcher()
    try:
        sections = dispatcher.parse_async(_DOCUMENT).result(timeout=5)
        keywords = dispatcher.extract_keywords_async("CHF, now improving").result(timeout=5)
    finally:
        dispatcher.close()
    assert sections == split_sections(_DOCUMENT)
    assert keywords == ["chf", "improving"]
    assert dispatcher.pending_count == 0


def test_requests_complete_by_id_not_by_arrival_order() -> None:
    dispatcher, created = _manual_dispatcher()
    first = dispatcher.parse_async("### A\n1")
    second = dispatcher.parse_async("### B\n2")
    keywords = dispatcher.extract_keywords_async("sepsis")

    worker = created[0]
    assert worker.started is True
    assert [item["id"] for item in worker.posted] == ["parse-1", "parse-2", "keywords-3"]
    assert dispatcher.pending_count == 3

    worker.answer(1)
    assert second.done() is True
    assert first.done() is False

    worker.answer(2)
    worker.answer(0)
    assert first.result() == [Section(header="### A", lines=["1"])]
    assert second.result() == [Section(header="### B", lines=["2"])]
    assert keywords.result() == ["sepsis"]
    assert dispatcher.pending_count == 0
    assert len(created) == 1


def test_worker_error_message_fails_only_its_request() -> None:
    dispatcher, created = _manual_dispatcher()
    failing = dispatcher.parse_async("### A")
    other = dispatcher.parse_async("### B")

    created[0].on_message({"kind": "ERROR", "id": "parse-1", "error": "boom"})
    assert isinstance(failing.exception(), ParseDispatchError)
    assert "boom" in str(failing.exception())
    assert other.done() is False


def test_orphan_and_unknown_responses_are_ignored() -> None:
    dispatcher, created = _manual_dispatcher()
    pending = dispatcher.parse_async("### A")
    created[0].on_message({"kind": "PARSE_RESULT", "id": "parse-99", "result": []})
    created[0].on_message({"kind": "SOMETHING_ELSE", "id": "parse-1"})
    assert pending.done() is False
    assert dispatcher.pending_count == 1


def test_handler_failure_in_worker_thread_reports_error(monkeypatch) -> None:
    def exploding_split(raw: str) -> list[Section]:
        _ = raw
        raise ValueError("split failed for test")

    monkeypatch.setattr("handoff.internal_core.worker.split_sections", exploding_split)
    dispatcher = ParseDispatcher()
    try:
        error = dispatcher.parse_async("### A").exception(timeout=5)
    finally:
        dispatcher.close()
    assert isinstance(error, ParseDispatchError)
    assert "split failed for test" in str(error)


def test_handle_message_ignores_unknown_kind() -> None:
    assert handle_message({"kind": "PING", "id": "x"}) is None


def test_close_terminates_worker() -> None:
    dispatcher, created = _manual_dispatcher()
    dispatcher.parse_async("### A")
    dispatcher.close()
    assert created[0].terminated is True
