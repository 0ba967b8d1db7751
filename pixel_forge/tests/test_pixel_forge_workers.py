#!/usr/bin/env python3
"""
Tests for the export save worker
"""

import pytest

from pixel_forge.core.pixel_forge_workers import ExportSaveWorker


@pytest.mark.qt
class TestExportSaveWorker:
    def test_writes_bytes_and_emits(self, qapp, qtbot, tmp_path):
        target = tmp_path / "nested" / "out.png"
        worker = ExportSaveWorker(b"\x89PNGdata", target)
        progress = []
        worker.progress.connect(lambda value, _msg: progress.append(value))

        with qtbot.waitSignals([worker.saved, worker.finished], timeout=1000):
            worker.run()

        assert target.read_bytes() == b"\x89PNGdata"
        assert progress == [0, 50, 100]

    def test_empty_data_is_an_error(self, qapp, qtbot, tmp_path):
        worker = ExportSaveWorker(b"", tmp_path / "out.png")
        with qtbot.waitSignal(worker.error, timeout=1000) as blocker:
            worker.run()
        assert blocker.args == ["No image data to save"]
        assert not (tmp_path / "out.png").exists()

    def test_write_failure_is_reported(self, qapp, qtbot, tmp_path):
        # A directory at the target path cannot be written as a file
        target = tmp_path / "taken"
        target.mkdir()
        worker = ExportSaveWorker(b"data", target)
        with qtbot.waitSignal(worker.error, timeout=1000) as blocker:
            worker.run()
        assert blocker.args[0].startswith("Failed to save image")

    def test_cancelled_worker_stays_silent(self, qapp, qtbot, tmp_path):
        worker = ExportSaveWorker(b"data", tmp_path / "out.png")
        worker.cancel()
        with qtbot.assertNotEmitted(worker.saved):
            worker.run()
        assert worker.is_cancelled()
        assert worker.file_path == tmp_path / "out.png"
