# tests/test_controller.py

import threading

import pytest

from arithma_tech.core.exceptions import EmptyInput, NoFileSelected, UnsupportedFormat, WriteFailed
from arithma_tech.core.history_store import HistoryStore
from arithma_tech.core.models import InputMode, OperationKind, OperationRecord, StatusCode
from arithma_tech.core.operation_controller import ControllerState, OperationController


class Recorder:
    """Collects every callback the controller makes."""

    def __init__(self):
        self.statuses = []
        self.progress = []
        self.completed = []
        self.store_errors = []

    def attach(self, store, **kwargs) -> OperationController:
        return OperationController(
            store,
            on_status=lambda code, text: self.statuses.append((code, text)),
            on_progress=self.progress.append,
            on_complete=lambda kind, mode, message: self.completed.append((kind, mode, message)),
            on_store_error=self.store_errors.append,
            **kwargs,
        )


@pytest.fixture
def store(tmp_path):
    return HistoryStore(tmp_path / "history.db")


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def controller(store, recorder):
    return recorder.attach(store)


def _run_to_completion(controller, max_ticks=100):
    ticks = 0
    while not controller.is_idle() and ticks < max_ticks:
        controller.tick()
        ticks += 1
    return ticks


# --- Initial State and Mode Switching ---

def test_starts_idle_in_file_mode(controller):
    assert controller.state == ControllerState.IDLE
    assert controller.mode == InputMode.FILE
    assert controller.operation_in_progress is False
    assert controller.status_text == "Ready to start..."


def test_switch_to_text_clears_file_selection(controller, recorder):
    controller.select_file("/tmp/photo.png")
    controller.switch_mode(InputMode.TEXT)

    assert controller.mode == InputMode.TEXT
    assert controller.selection.file_path is None
    codes = [code for code, _ in recorder.statuses]
    assert codes[-2:] == [StatusCode.FILE_CLEARED, StatusCode.TEXT_MODE_SELECTED]


def test_switch_back_to_file_does_not_restore_selection(controller):
    controller.select_file("/tmp/photo.png")
    controller.switch_mode(InputMode.TEXT)
    controller.switch_mode(InputMode.FILE)

    assert controller.selection.file_path is None
    assert controller.status_text == "File input mode selected"
    with pytest.raises(NoFileSelected):
        controller.request_compress()


def test_switch_to_file_clears_text(controller):
    controller.switch_mode(InputMode.TEXT)
    controller.set_text("hello")
    controller.switch_mode(InputMode.FILE)
    controller.switch_mode(InputMode.TEXT)

    assert controller.selection.text == ""
    with pytest.raises(EmptyInput):
        controller.request_compress()


# --- File Selection ---

@pytest.mark.parametrize("path", ["/tmp/a.png", "/tmp/a.JPG", "/tmp/a.jpeg", "/tmp/a.Bmp", "/tmp/a.gif"])
def test_select_file_accepts_images(controller, path):
    assert controller.select_file(path) is True
    assert controller.selection.file_path == path
    assert controller.status == StatusCode.FILE_SELECTED


@pytest.mark.parametrize("path", ["/tmp/a.txt", "/tmp/a.pdf", "/tmp/a", "/tmp/a.png.exe"])
def test_select_file_rejects_other_formats_and_keeps_selection(controller, path):
    controller.select_file("/tmp/keep.png")

    with pytest.raises(UnsupportedFormat) as exc_info:
        controller.select_file(path)

    assert exc_info.value.file_path == path
    assert controller.selection.file_path == "/tmp/keep.png"


def test_select_file_is_ignored_in_text_mode(controller):
    controller.switch_mode(InputMode.TEXT)

    assert controller.select_file("/tmp/photo.png") is False
    assert controller.selection.file_path is None


def test_clear_selection(controller):
    controller.select_file("/tmp/photo.png")
    controller.clear_selection()

    assert controller.selection.file_path is None
    assert controller.status_text == "File selection cleared"


# --- Requests and Validation ---

def test_text_compress_scenario(controller, store, recorder):
    controller.switch_mode(InputMode.TEXT)
    controller.set_text("hello")

    assert controller.request_compress() is True
    assert controller.operation_in_progress is True
    assert controller.status_text == "⚙️ Compressing text..."

    (record,) = store.list_all()
    assert (record.name, record.operation, record.data_type, record.file_path, record.text_content) == \
        ("Text Data", OperationKind.COMPRESS, InputMode.TEXT, "", "hello")

    ticks = _run_to_completion(controller)

    assert ticks == 20
    assert controller.operation_in_progress is False
    assert recorder.progress[0] == 0
    assert recorder.progress[-1] == 100
    assert controller.status_text == "✓ Compression completed successfully"
    assert recorder.completed == [
        (OperationKind.COMPRESS, InputMode.TEXT, "Your text has been compressed successfully!")
    ]


def test_file_decompress_scenario(controller, store):
    controller.select_file("/tmp/photo.JPG")

    assert controller.request_decompress() is True
    assert controller.status_text == "⚙️ Decompressing: photo.JPG"

    (record,) = store.list_all()
    assert (record.name, record.operation, record.data_type, record.file_path, record.text_content) == \
        ("photo.JPG", OperationKind.DECOMPRESS, InputMode.FILE, "/tmp/photo.JPG", "")

    _run_to_completion(controller)
    assert controller.status_text == "✓ Decompression completed successfully"


def test_no_file_selected_is_rejected_without_side_effects(controller, store):
    with pytest.raises(NoFileSelected) as exc_info:
        controller.request_compress()

    assert exc_info.value.title == "No File Selected"
    assert str(exc_info.value) == "Please select an image to compress"
    assert controller.operation_in_progress is False
    assert list(store.list_all()) == []


def test_empty_text_is_rejected_without_side_effects(controller, store):
    controller.switch_mode(InputMode.TEXT)

    with pytest.raises(EmptyInput) as exc_info:
        controller.request_decompress()

    assert str(exc_info.value) == "Please enter text to decompress"
    assert controller.operation_in_progress is False
    assert list(store.list_all()) == []


def test_requests_while_busy_are_dropped(controller, store):
    controller.select_file("/tmp/photo.png")
    controller.request_compress()
    selection_before = (controller.selection.mode, controller.selection.file_path, controller.selection.text)

    assert controller.request_compress() is False
    assert controller.request_decompress() is False

    assert controller.operation_in_progress is True
    assert controller.active_operation == OperationKind.COMPRESS
    assert len(list(store.list_all())) == 1
    assert (controller.selection.mode, controller.selection.file_path, controller.selection.text) == selection_before


def test_busy_check_precedes_validation(controller):
    """A request while busy is dropped before its payload is inspected."""
    controller.select_file("/tmp/photo.png")
    controller.request_compress()
    controller.selection.file_path = None

    assert controller.request_decompress() is False


def test_input_changes_are_ignored_while_busy(controller):
    controller.select_file("/tmp/photo.png")
    controller.request_compress()

    controller.switch_mode(InputMode.TEXT)
    controller.clear_selection()
    controller.set_text("ignored")
    assert controller.select_file("/tmp/other.png") is False

    assert controller.mode == InputMode.FILE
    assert controller.selection.file_path == "/tmp/photo.png"
    assert controller.selection.text == ""


def test_every_accepted_request_logs_exactly_one_record(controller, store):
    controller.select_file("/tmp/photo.png")
    controller.request_compress()
    _run_to_completion(controller)
    controller.request_decompress()
    _run_to_completion(controller)

    records = list(store.list_all())
    assert [r.operation for r in records] == [OperationKind.DECOMPRESS, OperationKind.COMPRESS]
    assert all(r.data_type == InputMode.FILE for r in records)


def test_record_is_written_before_completion(controller, store):
    controller.select_file("/tmp/photo.png")
    controller.request_compress()

    assert controller.last_record is not None
    assert controller.last_record.record_id == 1
    assert len(list(store.list_all())) == 1
    assert controller.operation_in_progress is True


# --- Progress and Completion ---

def test_tick_while_idle_does_nothing(controller, recorder):
    assert controller.tick() is None
    assert recorder.progress == []


def test_processing_complete_while_idle_is_ignored(controller, recorder):
    controller.processing_complete()
    assert recorder.completed == []
    assert controller.status == StatusCode.READY


def test_external_completion_signal_finishes_operation(controller, recorder):
    controller.switch_mode(InputMode.TEXT)
    controller.set_text("abc")
    controller.request_decompress()

    controller.processing_complete()

    assert controller.is_idle()
    assert recorder.completed[0][0] == OperationKind.DECOMPRESS


def test_progress_restarts_for_each_operation(controller, recorder):
    controller.select_file("/tmp/photo.png")
    controller.request_compress()
    _run_to_completion(controller)
    recorder.progress.clear()

    controller.request_compress()
    controller.tick()

    assert recorder.progress == [0, 5]


# --- Store Failures ---

class FailingStore(HistoryStore):
    """A store whose every insert is rejected by the medium."""

    def insert(self, record: OperationRecord) -> OperationRecord:
        raise WriteFailed("insert", "disk is full")


def test_store_failure_does_not_block_the_operation(tmp_path, recorder):
    controller = recorder.attach(FailingStore(tmp_path / "history.db"))
    controller.select_file("/tmp/photo.png")

    assert controller.request_compress() is True
    assert controller.operation_in_progress is True
    assert controller.last_record is None
    assert len(recorder.store_errors) == 1
    assert isinstance(recorder.store_errors[0], WriteFailed)

    _run_to_completion(controller)
    assert controller.is_idle()
    assert recorder.completed


def test_custom_progress_source_gates_completion(store):
    class TwoStepProgress:
        def __init__(self):
            self.percent = 0

        def reset(self):
            self.percent = 0

        def advance(self):
            self.percent += 50
            return self.percent

        def is_complete(self):
            return self.percent >= 100

    controller = OperationController(store, progress=TwoStepProgress())
    controller.select_file("/tmp/photo.png")
    controller.request_compress()

    assert controller.tick() == 50
    assert controller.operation_in_progress is True
    assert controller.tick() == 100
    assert controller.operation_in_progress is False


def test_only_one_of_simultaneous_requests_is_accepted(controller, store):
    controller.select_file("/tmp/photo.png")
    callers = 8
    barrier = threading.Barrier(callers)
    results = []
    results_lock = threading.Lock()

    def request():
        barrier.wait()
        accepted = controller.request_compress()
        with results_lock:
            results.append(accepted)

    threads = [threading.Thread(target=request) for _ in range(callers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1
    assert results.count(False) == callers - 1
    assert len(list(store.list_all())) == 1
