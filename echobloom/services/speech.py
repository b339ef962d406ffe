"""
Speech I/O — text-to-speech output and one-shot voice input.

Output uses Qt's QTextToSpeech. Input records a short microphone clip through
QtMultimedia and transcribes it with OpenAI's speech-to-text endpoint.
Platform support is detected once at construction; when a side is missing the
app degrades to text only and callers check `supported` before any call.
"""

from __future__ import annotations

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional, Sequence

from openai import OpenAI, OpenAIError
from PySide6.QtCore import QUrl

from echobloom.core.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

# Whether the QtTextToSpeech / QtMultimedia modules shipped with this PySide6 build
_tts_available = False
try:
    from PySide6.QtTextToSpeech import QTextToSpeech
    _tts_available = True
except ImportError:
    logger.warning("QtTextToSpeech not available; spoken output disabled.")

_multimedia_available = False
try:
    from PySide6.QtMultimedia import (
        QAudioInput, QMediaCaptureSession, QMediaDevices, QMediaFormat, QMediaRecorder,
    )
    _multimedia_available = True
except ImportError:
    logger.warning("QtMultimedia not available; voice input disabled.")

DEFAULT_PREFERRED_VOICES = ("Female", "Samantha", "Karen", "Moira")


class SpeechUnsupported(RuntimeError):
    """A speech call was made on a platform without that capability."""


def to_qt_rate(rate: Optional[float]) -> float:
    """Map a web-style rate (1.0 = normal) onto Qt's -1.0 .. 1.0 range."""
    if rate is None:
        return 0.0
    return max(-1.0, min(1.0, rate - 1.0))


def pick_voice_name(names: Sequence[str], hint: Optional[str],
                    preferred: Sequence[str] = DEFAULT_PREFERRED_VOICES) -> Optional[str]:
    """Choose a voice: explicit hint first, then the preference list, then the first voice."""
    if not names:
        return None
    candidates = [hint] if hint else []
    candidates.extend(preferred)
    for wanted in candidates:
        for name in names:
            if wanted.lower() in name.lower():
                return name
    return names[0]


# ── Output ──────────────────────────────────────────────────────────────────


class SpeechOutput:
    """The single shared speech channel. Only one utterance plays at a time."""

    def __init__(self, enabled: bool = True, default_rate: float = 0.8,
                 preferred_voices: Sequence[str] = DEFAULT_PREFERRED_VOICES) -> None:
        self.default_rate = default_rate
        self.preferred_voices = tuple(preferred_voices)
        self._engine = None
        self.supported = False

        if enabled and _tts_available and QTextToSpeech.availableEngines():
            self._engine = QTextToSpeech()
            self.supported = True
            logger.info("Speech output ready (engine=%s).", self._engine.engine())
        elif enabled:
            logger.warning("No text-to-speech engine found; coach will be text-only.")

    def speak(self, text: str, voice_hint: Optional[str] = None, rate: Optional[float] = None) -> None:
        """Fire-and-forget. Cancels whatever is currently being spoken."""
        if not self.supported:
            raise SpeechUnsupported("Speech output is not available on this platform.")
        if self.is_speaking():
            self.cancel_speech()

        voices = self._engine.availableVoices()
        chosen = pick_voice_name([v.name() for v in voices], voice_hint, self.preferred_voices)
        for v in voices:
            if v.name() == chosen:
                self._engine.setVoice(v)
                break
        self._engine.setRate(to_qt_rate(rate if rate is not None else self.default_rate))
        self._engine.say(text)

    def cancel_speech(self) -> None:
        if self._engine is not None:
            self._engine.stop()

    def is_speaking(self) -> bool:
        if self._engine is None:
            return False
        return self._engine.state() == QTextToSpeech.State.Speaking


# ── Input ───────────────────────────────────────────────────────────────────


class SpeechInput(ABC):
    """Produces (eventually) one transcript per listen() call."""

    supported: bool = False

    @abstractmethod
    def listen(self, on_transcript: Callable[[str], None],
               continuous: bool = False, interim_results: bool = False,
               on_end: Optional[Callable[[bool], None]] = None) -> None:
        """on_end(heard) fires once when capture finishes, with or without a transcript."""

    @abstractmethod
    def cancel_listen(self) -> None:
        ...

    @property
    @abstractmethod
    def listening(self) -> bool:
        ...


class WhisperSpeechInput(SpeechInput):
    """
    Records a fixed-length clip from the default microphone, then sends it
    to OpenAI for transcription on a background thread.

    Only one-shot capture is supported; `continuous` and `interim_results`
    are accepted for interface parity and ignored.
    """

    def __init__(self, scheduler: Scheduler, runner, clip_seconds: int = 5,
                 model_name: str = "whisper-1", client=None) -> None:
        self.scheduler = scheduler
        self.runner = runner
        self.clip_seconds = clip_seconds
        self.model_name = model_name
        self._client = client
        self._on_transcript: Optional[Callable[[str], None]] = None
        self._on_end: Optional[Callable[[bool], None]] = None
        self._stop_handle: Optional[TimerHandle] = None
        self._task = None
        self._clip_path: Optional[Path] = None

        self.supported = bool(_multimedia_available and QMediaDevices.audioInputs())
        if not self.supported:
            logger.warning("No microphone found; voice input disabled.")
            return

        self._session = QMediaCaptureSession()
        self._audio_input = QAudioInput()
        self._session.setAudioInput(self._audio_input)
        self._recorder = QMediaRecorder()
        media_format = QMediaFormat()
        media_format.setFileFormat(QMediaFormat.FileFormat.Wave)
        self._recorder.setMediaFormat(media_format)
        self._session.setRecorder(self._recorder)
        self._recorder.recorderStateChanged.connect(self._on_recorder_state)
        self._recorder.errorOccurred.connect(self._on_recorder_error)

    @property
    def listening(self) -> bool:
        return self._on_transcript is not None

    def listen(self, on_transcript: Callable[[str], None],
               continuous: bool = False, interim_results: bool = False,
               on_end: Optional[Callable[[bool], None]] = None) -> None:
        if not self.supported:
            raise SpeechUnsupported("Voice input is not available on this platform.")
        self.cancel_listen()

        fd, path = tempfile.mkstemp(prefix="echobloom_", suffix=".wav")
        os.close(fd)
        Path(path).unlink(missing_ok=True)
        self._clip_path = Path(path)
        self._on_transcript = on_transcript
        self._on_end = on_end
        self._recorder.setOutputLocation(QUrl.fromLocalFile(path))
        self._recorder.record()
        self._stop_handle = self.scheduler.call_later(self.clip_seconds * 1000, self._recorder.stop)
        logger.info("Listening for %d s.", self.clip_seconds)

    def cancel_listen(self) -> None:
        self._on_transcript = None
        self._on_end = None
        if self._stop_handle is not None:
            self._stop_handle.cancel()
            self._stop_handle = None
        if self._task is not None:
            self._task.cancel()
            self._task = None
        if self.supported and self._recorder.recorderState() != QMediaRecorder.RecorderState.StoppedState:
            self._recorder.stop()
        if self._clip_path is not None:
            self._clip_path.unlink(missing_ok=True)
            self._clip_path = None

    # ── Internal ────────────────────────────────────────────────────────────

    @property
    def client(self):
        if self._client is None:
            self._client = OpenAI()
        return self._client

    def _on_recorder_state(self, state) -> None:
        if state != QMediaRecorder.RecorderState.StoppedState or self._on_transcript is None:
            return
        self._stop_handle = None
        actual = self._recorder.actualLocation().toLocalFile()
        path = Path(actual) if actual else self._clip_path
        self._task = self.runner.submit(lambda: self._transcribe(path), self._deliver)

    def _on_recorder_error(self, error, message: str) -> None:
        logger.warning("Voice capture failed: %s", message)
        on_end = self._on_end
        self.cancel_listen()
        if on_end is not None:
            on_end(False)

    def _transcribe(self, path: Path) -> str:
        try:
            with open(path, "rb") as f:
                resp = self.client.audio.transcriptions.create(model=self.model_name, file=f)
            return resp.text or ""
        except (OpenAIError, OSError) as e:
            logger.warning("Transcription failed: %s", e)
            return ""
        finally:
            path.unlink(missing_ok=True)

    def _deliver(self, transcript: Optional[str]) -> None:
        self._task = None
        callback, on_end = self._on_transcript, self._on_end
        self._on_transcript = None
        self._on_end = None
        if callback is None:
            return
        heard = bool(transcript and transcript.strip())
        if heard:
            logger.info("Heard: %r", transcript)
        else:
            logger.info("Nothing was heard.")
        if on_end is not None:
            on_end(heard)
        if heard:
            callback(transcript)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Gives the coach a voice (QTextToSpeech) and ears (microphone clip +
#   Whisper transcription). Both sides detect support once at startup.
#
# Key design decisions:
#   - One speech channel: speak() stops the current utterance before the
#     next, matching platform engines that allow only one at a time.
#   - Voice choice: an explicit hint wins, then a list of calm-sounding
#     voices, then whatever the engine offers first.
#   - Graceful degradation: if Qt lacks the module or the OS has no engine,
#     `supported` is False and the UI hides the voice controls.
#
# Data flow (voice input):
#   Voice button → listen() → QMediaRecorder.record() → clip timer →
#   recorder stops → background transcription → on_transcript(text) →
#   CoachService.handle_utterance().
