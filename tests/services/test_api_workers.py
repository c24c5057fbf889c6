"""Tests for the Qt worker bridge to the translation event loop."""

import pytest

pytest.importorskip("PySide6")

from PySide6.QtCore import QCoreApplication

from triagro.services.api_workers import (
    AsyncLoopThread,
    DiagnosisTranslationWorker,
    TranslationWorker,
)
from triagro.services.translation import HybridTranslationService, StaticTermStore


@pytest.fixture(scope="module", autouse=True)
def ensure_app():
    if QCoreApplication.instance() is None:
        QCoreApplication([])
    yield


@pytest.fixture
def loop_thread():
    thread = AsyncLoopThread()
    thread.start()
    yield thread
    thread.stop()


@pytest.fixture
def translator(fake_remote):
    store = StaticTermStore.from_dicts(terms={"Tomato": {"tw": "Tomato"}})
    return HybridTranslationService(term_store=store, remote=fake_remote)


def collect(signals):
    received = {"result": [], "error": [], "finished": 0}

    def on_finished():
        received["finished"] += 1

    signals.translation_result.connect(lambda value: received["result"].append(value))
    signals.diagnosis_result.connect(lambda value: received["result"].append(value))
    signals.error.connect(lambda message: received["error"].append(message))
    signals.finished.connect(on_finished)
    return received


def test_loop_thread_runs_coroutines(loop_thread, translator):
    assert loop_thread.is_running
    assert loop_thread.submit(translator.translate("Tomato", "en", "tw"), timeout=5) == "Tomato"


def test_translation_worker_emits_result(loop_thread, translator, fake_remote):
    worker = TranslationWorker(loop_thread, translator, "Good day", "tw")
    received = collect(worker.signals)

    worker.run()

    assert received["result"] == ["[tw] Good day"]
    assert received["error"] == []
    assert received["finished"] == 1
    assert fake_remote.calls == [("Good day", "en", "tw")]


def test_diagnosis_worker_emits_result(loop_thread, translator):
    worker = DiagnosisTranslationWorker(loop_thread, translator, {"plant": "Tomato"}, "tw")
    received = collect(worker.signals)

    worker.run()

    assert received["result"] == [{"plant": "Tomato"}]
    assert received["finished"] == 1


def test_worker_reports_error_when_loop_stopped(translator):
    thread = AsyncLoopThread()
    thread.start()
    thread.stop()

    worker = TranslationWorker(thread, translator, "Good day", "tw")
    received = collect(worker.signals)

    worker.run()

    assert received["result"] == []
    assert len(received["error"]) == 1
    assert received["finished"] == 1
