"""Async workers for non-blocking translation calls using Qt threading.

Needs PySide6, installed with the `qt` extra. The core package does not
import this module.
"""

import asyncio
import threading
from typing import Any, Awaitable, Mapping, Optional

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from triagro.services.translation import HybridTranslationService


class AsyncLoopThread:
    """
    Hosts the single asyncio event loop the translator lives on.

    The resolver's cache, in-flight map and debounce timer are bound to
    one loop, so every Qt worker submits its coroutine here instead of
    starting a loop of its own.
    """

    def __init__(self, name: str = "triagro-translation-loop"):
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def submit(self, coroutine: Awaitable[Any], timeout: Optional[float] = None) -> Any:
        """Run coroutine on the loop and block the calling thread for its result."""
        future = asyncio.run_coroutine_threadsafe(coroutine, self.loop)
        return future.result(timeout)

    def stop(self) -> None:
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join()
        self.loop.close()

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()

    def _run(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()


class WorkerSignals(QObject):
    """
    Signals for communicating results from worker threads.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals.
    """
    finished = Signal()
    error = Signal(str)
    translation_result = Signal(object)  # str
    diagnosis_result = Signal(object)  # dict


class TranslationWorker(QRunnable):
    """
    Worker that translates one text without blocking the GUI thread.

    Uses Qt's thread pool for the blocking wait; the translation itself
    runs on the shared AsyncLoopThread.
    """

    def __init__(
        self,
        loop_thread: AsyncLoopThread,
        translator: HybridTranslationService,
        text: str,
        target_lang: str,
        source_lang: str = "en",
    ):
        super().__init__()
        self.loop_thread = loop_thread
        self.translator = translator
        self.text = text
        self.target_lang = target_lang
        self.source_lang = source_lang
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        """Execute the translation on the event loop and emit the result."""
        try:
            result = self.loop_thread.submit(
                self.translator.translate_text(self.text, self.target_lang, self.source_lang)
            )
            self.signals.translation_result.emit(result)
        except Exception as e:
            # The translator never raises; this covers a stopped loop
            self.signals.error.emit(f"Unexpected translation error: {str(e)}")
        finally:
            self.signals.finished.emit()


class DiagnosisTranslationWorker(QRunnable):
    """Worker that translates a diagnosis result (plant, disease, remedy)."""

    def __init__(
        self,
        loop_thread: AsyncLoopThread,
        translator: HybridTranslationService,
        diagnosis: Mapping[str, Any],
        target_lang: str,
    ):
        super().__init__()
        self.loop_thread = loop_thread
        self.translator = translator
        self.diagnosis = diagnosis
        self.target_lang = target_lang
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        try:
            result = self.loop_thread.submit(
                self.translator.translate_diagnosis_result(self.diagnosis, self.target_lang)
            )
            self.signals.diagnosis_result.emit(result)
        except Exception as e:
            self.signals.error.emit(f"Unexpected diagnosis translation error: {str(e)}")
        finally:
            self.signals.finished.emit()
