import logging

from vdfy.core.logging import ContextFormatter, ContextInjectionFilter, get_log_context, log_context


def _record(msg: str = "upload transcoded -> transcribed", **extra) -> logging.LogRecord:
    record = logging.LogRecord("vdfy.orchestration", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_log_context_nests_and_resets():
    with log_context(request_id="r1"):
        with log_context(owner="user_example_com"):
            assert get_log_context() == {"request_id": "r1", "owner": "user_example_com"}
        assert get_log_context() == {"request_id": "r1"}
    assert get_log_context() == {}


def test_filter_copies_context_onto_record():
    record = _record()
    with log_context(request_id="r1", stage="stored"):
        assert ContextInjectionFilter().filter(record) is True
    assert record.request_id == "r1"
    assert record.stage == "stored"


def test_formatter_appends_extras():
    formatter = ContextFormatter("%(message)s")

    assert formatter.format(_record(short_id="abc123")) == "upload transcoded -> transcribed [short_id=abc123]"
    assert formatter.format(_record()) == "upload transcoded -> transcribed"
