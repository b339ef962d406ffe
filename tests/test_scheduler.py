"""Tests for the Qt-backed scheduler and background task runner (real event loop)."""

import sys
import threading
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from PySide6.QtCore import QCoreApplication, QElapsedTimer, QThread

from echobloom.core.scheduler import QtScheduler, QtTaskRunner


def spin(ms, until=None):
    """Process Qt events for up to ms milliseconds, or until `until()` is true."""
    timer = QElapsedTimer()
    timer.start()
    while timer.elapsed() < ms:
        QCoreApplication.processEvents()
        if until is not None and until():
            return
        QThread.msleep(5)


@pytest.fixture
def scheduler():
    return QtScheduler()


class TestQtScheduler:
    def test_call_later_fires_once(self, scheduler):
        calls = []
        handle = scheduler.call_later(10, lambda: calls.append(1))
        assert handle.active
        spin(200)
        assert calls == [1]
        assert not handle.active

    def test_cancelled_never_fires(self, scheduler):
        calls = []
        handle = scheduler.call_later(20, lambda: calls.append(1))
        handle.cancel()
        spin(100)
        assert calls == []
        assert not handle.active

    def test_call_every_repeats_until_cancelled(self, scheduler):
        calls = []
        handle = scheduler.call_every(10, lambda: calls.append(1))
        spin(500, until=lambda: len(calls) >= 3)
        handle.cancel()
        seen = len(calls)
        spin(100)
        assert seen >= 3
        assert len(calls) == seen

    def test_negative_delay_rejected(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.call_later(-1, lambda: None)


class TestQtTaskRunner:
    def test_result_delivered_on_gui_thread(self):
        runner = QtTaskRunner()
        main_thread = threading.get_ident()
        results = []

        def job():
            return threading.get_ident()

        runner.submit(job, lambda worker: results.append((worker, threading.get_ident())))
        spin(2000, until=lambda: results)
        assert len(results) == 1
        worker, delivered_on = results[0]
        assert delivered_on == main_thread

    def test_cancelled_task_not_delivered(self):
        runner = QtTaskRunner()
        results = []
        handle = runner.submit(lambda: 42, results.append)
        handle.cancel()
        runner.pool.waitForDone(2000)
        spin(100)
        assert results == []

    def test_exception_delivers_none(self):
        runner = QtTaskRunner()
        results = []

        def boom():
            raise RuntimeError("nope")

        runner.submit(boom, results.append)
        spin(2000, until=lambda: results)
        assert results == [None]
