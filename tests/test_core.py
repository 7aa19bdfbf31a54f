# tests/test_core.py

import threading

import pytest

from arithma_tech.core.exceptions import StoreError, WriteFailed
from arithma_tech.core.history_store import HistoryStore
from arithma_tech.core.models import (
    InputMode, OperationKind, OperationRecord, Selection, StatusCode, completion_message, is_image_file,
)
from arithma_tech.core.progress import SimulatedProgress


@pytest.fixture
def store(tmp_path):
    """A fresh history store in a temporary directory."""
    return HistoryStore(tmp_path / "history.db")


def _text_record(text="hello", timestamp=None):
    return OperationRecord(name="Text Data", operation=OperationKind.COMPRESS, data_type=InputMode.TEXT,
                           file_path="", text_content=text, timestamp=timestamp)


def _file_record(path="/tmp/photo.png", timestamp=None):
    return OperationRecord(name=path.rsplit("/", 1)[-1], operation=OperationKind.DECOMPRESS,
                           data_type=InputMode.FILE, file_path=path, text_content="", timestamp=timestamp)


# --- Tests for models.py ---

@pytest.mark.parametrize("path", [
    "a.png", "a.PNG", "b.jpg", "b.JpG", "c.jpeg", "d.bmp", "e.GIF", "/tmp/dir.with.dots/photo.Jpeg",
])
def test_is_image_file_accepts_allowed_extensions(path):
    assert is_image_file(path)


@pytest.mark.parametrize("path", ["a.txt", "a.tiff", "a.webp", "png", "archive.png.zip", "noext", ""])
def test_is_image_file_rejects_other_extensions(path):
    assert not is_image_file(path)


def test_selection_emptiness_depends_on_mode():
    selection = Selection(mode=InputMode.TEXT, file_path="/tmp/a.png", text="")
    assert selection.is_empty()

    selection.mode = InputMode.FILE
    assert not selection.is_empty()

    selection.file_path = ""
    assert selection.is_empty()


def test_whitespace_text_is_not_empty():
    """Only the empty string is rejected; text is not trimmed."""
    assert not Selection(mode=InputMode.TEXT, text="   ").is_empty()


def test_record_from_text_selection():
    record = OperationRecord.from_selection(Selection(mode=InputMode.TEXT, text="hello"), OperationKind.COMPRESS)

    assert record == OperationRecord(name="Text Data", operation=OperationKind.COMPRESS,
                                     data_type=InputMode.TEXT, file_path="", text_content="hello")


def test_record_from_file_selection_uses_base_name():
    selection = Selection(mode=InputMode.FILE, file_path="/tmp/photo.JPG")
    record = OperationRecord.from_selection(selection, OperationKind.DECOMPRESS)

    assert record.name == "photo.JPG"
    assert record.file_path == "/tmp/photo.JPG"
    assert record.text_content == ""
    assert record.data_type == InputMode.FILE


def test_records_are_immutable():
    record = _text_record()
    with pytest.raises(AttributeError):
        record.name = "changed"


def test_status_rendering_and_completion_messages():
    assert StatusCode.FILE_SELECTED.render("cat.gif") == "File selected: cat.gif"
    assert StatusCode.COMPRESSING_TEXT.render() == "⚙️ Compressing text..."
    assert completion_message(OperationKind.COMPRESS, InputMode.TEXT) == "Your text has been compressed successfully!"
    assert completion_message(OperationKind.DECOMPRESS, InputMode.FILE) == \
        "Your image has been decompressed successfully!"


# --- Tests for progress.py ---

def test_simulated_progress_completes_at_one_hundred():
    progress = SimulatedProgress(step=5)
    ticks = 0
    while not progress.is_complete():
        progress.advance()
        ticks += 1

    assert ticks == 20
    assert progress.percent == 100


def test_simulated_progress_never_overshoots_and_resets():
    progress = SimulatedProgress(step=30)
    for _ in range(5):
        progress.advance()
    assert progress.percent == 100

    progress.reset()
    assert progress.percent == 0
    assert not progress.is_complete()


def test_simulated_progress_rejects_non_positive_step():
    with pytest.raises(ValueError):
        SimulatedProgress(step=0)


# --- Tests for history_store.py ---

def test_initialize_is_idempotent(store):
    store.initialize()
    store.initialize()
    assert store.db_path.exists()
    assert list(store.list_all()) == []


def test_insert_assigns_identity_and_timestamp(store):
    stored = store.insert(_text_record())

    assert stored.record_id == 1
    assert stored.timestamp  # filled in by the database default
    assert stored.name == "Text Data"
    assert stored.text_content == "hello"


def test_insert_keeps_supplied_timestamp(store):
    stored = store.insert(_file_record(timestamp="2024-01-01 10:00:00"))
    assert stored.timestamp == "2024-01-01 10:00:00"


def test_list_all_is_newest_first(store):
    for i in range(3):
        store.insert(_text_record(text=f"entry {i}"))

    records = list(store.list_all())

    assert [r.text_content for r in records] == ["entry 2", "entry 1", "entry 0"]
    assert [r.record_id for r in records] == [3, 2, 1]


def test_list_all_round_trips_every_column(store):
    store.insert(_file_record("/tmp/photo.JPG", timestamp="2024-01-01 10:00:00"))

    (record,) = store.list_all()

    assert record.name == "photo.JPG"
    assert record.operation == OperationKind.DECOMPRESS
    assert record.data_type == InputMode.FILE
    assert record.file_path == "/tmp/photo.JPG"
    assert record.text_content == ""
    assert record.timestamp == "2024-01-01 10:00:00"


def test_list_all_queries_when_iterated(store):
    """The query runs on iteration, so a pending listing sees rows inserted after the call."""
    listing = store.list_all()
    store.insert(_text_record())

    assert len(list(listing)) == 1
    assert len(list(store.list_all())) == 1


def test_list_all_can_be_iterated_more_than_once(store):
    store.insert(_text_record(text="first"))
    listing = store.list_all()

    assert [r.text_content for r in listing] == ["first"]
    assert [r.text_content for r in listing] == ["first"]

    store.insert(_text_record(text="second"))
    assert [r.text_content for r in listing] == ["second", "first"]


def test_delete_unique_timestamp_removes_one_row(store):
    for i in range(4):
        store.insert(_text_record(text=f"entry {i}", timestamp=f"2024-01-01 10:00:0{i}"))

    removed = store.delete_by_timestamp("2024-01-01 10:00:02")
    records = list(store.list_all())

    assert removed == 1
    assert len(records) == 3
    assert [r.text_content for r in records] == ["entry 3", "entry 1", "entry 0"]


def test_delete_shared_timestamp_removes_all_matching_rows(store):
    store.insert(_text_record(text="first", timestamp="2024-01-01 10:00:00"))
    store.insert(_text_record(text="second", timestamp="2024-01-01 10:00:00"))
    store.insert(_text_record(text="third", timestamp="2024-01-01 10:00:01"))

    assert store.delete_by_timestamp("2024-01-01 10:00:00") == 2
    assert [r.text_content for r in store.list_all()] == ["third"]


def test_delete_is_idempotent(store):
    store.insert(_text_record(timestamp="2024-01-01 10:00:00"))

    assert store.delete_by_timestamp("2024-01-01 10:00:00") == 1
    assert store.delete_by_timestamp("2024-01-01 10:00:00") == 0
    assert list(store.list_all()) == []


def test_identity_keeps_increasing_after_delete(store):
    store.insert(_text_record(timestamp="2024-01-01 10:00:00"))
    store.delete_by_timestamp("2024-01-01 10:00:00")

    stored = store.insert(_text_record())
    assert stored.record_id == 2


def test_subscribers_are_notified_after_commit(store):
    events = []
    store.subscribe(lambda action, payload: events.append((action, payload)))

    stored = store.insert(_text_record(timestamp="2024-01-01 10:00:00"))
    store.delete_by_timestamp("2024-01-01 10:00:00")

    assert events == [("insert", stored), ("delete", "2024-01-01 10:00:00")]


def test_failing_subscriber_does_not_break_the_store(store):
    events = []

    def broken(action, payload):
        raise RuntimeError("viewer closed")

    store.subscribe(broken)
    store.subscribe(lambda action, payload: events.append(action))

    store.insert(_text_record())

    assert events == ["insert"]
    assert len(list(store.list_all())) == 1


def test_unsubscribe_stops_notifications(store):
    events = []
    callback = lambda action, payload: events.append(action)  # noqa: E731
    store.subscribe(callback)
    store.unsubscribe(callback)
    store.unsubscribe(callback)  # unknown callbacks are ignored

    store.insert(_text_record())
    assert events == []


def test_unwritable_database_raises_write_failed(tmp_path):
    # A directory cannot be opened as a database file.
    bad_store = HistoryStore(tmp_path)

    with pytest.raises(WriteFailed) as exc_info:
        bad_store.insert(_text_record())
    assert exc_info.value.action == "initialize"

    with pytest.raises(StoreError):
        list(bad_store.list_all())


def test_concurrent_inserts_are_serialized(store):
    writers, per_writer = 5, 20

    def write(worker):
        for i in range(per_writer):
            store.insert(_text_record(text=f"{worker}-{i}"))

    threads = [threading.Thread(target=write, args=(w,)) for w in range(writers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    records = list(store.list_all())
    ids = [r.record_id for r in records]
    assert len(records) == writers * per_writer
    assert ids == sorted(ids, reverse=True)
    assert len(set(ids)) == len(ids)
    assert len({r.text_content for r in records}) == writers * per_writer
