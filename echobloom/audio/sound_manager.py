"""
Sound Manager — soft audio cues for breathing phases and session events.

Uses pygame.mixer for lightweight audio. All cues are generated
programmatically as sine tones (no audio files ship with the app).
"""

from __future__ import annotations

import logging
import math
import struct
import wave
from io import BytesIO
from pathlib import Path
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

SOUNDS_DIR = Path(__file__).resolve().parent.parent / "assets" / "sounds"
SAMPLE_RATE = 22050

# Whether pygame mixer is available
_mixer_available = False
try:
    import pygame.mixer
    _mixer_available = True
except ImportError:
    logger.warning("pygame not installed; phase cues will be disabled.")


class SoundManager:
    """Manages cue playback with volume control and an on/off toggle."""

    def __init__(self, enabled: bool = True, volume: float = 0.5) -> None:
        self.enabled = enabled
        self.volume = max(0.0, min(volume, 1.0))
        self._initialized = False
        self._sounds: dict = {}

        if _mixer_available and enabled:
            self._init_mixer()

    def _init_mixer(self) -> None:
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1, buffer=512)
            self._initialized = True
            self._generate_sounds()
            logger.info("Sound manager initialized.")
        except pygame.error as e:
            logger.warning("Could not init audio: %s", e)

    @classmethod
    def cue_generators(cls) -> Dict[str, Callable[[], bytes]]:
        return {
            "phase_inhale": cls._gen_inhale,
            "phase_hold": cls._gen_hold,
            "phase_exhale": cls._gen_exhale,
            "phase_pause": cls._gen_pause,
            "session_complete": cls._gen_session_complete,
        }

    def _generate_sounds(self) -> None:
        SOUNDS_DIR.mkdir(parents=True, exist_ok=True)

        for name, gen_func in self.cue_generators().items():
            path = SOUNDS_DIR / f"{name}.wav"
            if not path.exists():
                with open(path, "wb") as f:
                    f.write(gen_func())
            try:
                self._sounds[name] = pygame.mixer.Sound(str(path))
                self._sounds[name].set_volume(self.volume)
            except pygame.error as e:
                logger.warning("Could not load sound %s: %s", name, e)

    def play(self, sound_name: str) -> None:
        """Play a named cue."""
        if not self.enabled or not self._initialized:
            return
        sound = self._sounds.get(sound_name)
        if sound:
            sound.set_volume(self.volume)
            sound.play()

    def play_phase(self, phase) -> None:
        """Cue for a BreathingPhase (uses the phase's value as the cue suffix)."""
        self.play(f"phase_{phase.value}")

    def set_volume(self, volume: float) -> None:
        self.volume = max(0.0, min(volume, 1.0))
        for s in self._sounds.values():
            s.set_volume(self.volume)

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        if enabled and not self._initialized and _mixer_available:
            self._init_mixer()

    # ── Sound generators (simple waveforms) ─────────────────────────────────

    @staticmethod
    def _make_wav(samples: List[float], sample_rate: int = SAMPLE_RATE) -> bytes:
        """Pack raw samples into a WAV byte string."""
        buf = BytesIO()
        with wave.open(buf, "wb") as w:
            w.setnchannels(1)
            w.setsampwidth(2)
            w.setframerate(sample_rate)
            data = b"".join(struct.pack("<h", int(s)) for s in samples)
            w.writeframes(data)
        return buf.getvalue()

    @staticmethod
    def _sweep(start_hz: float, end_hz: float, seconds: float, peak: float) -> List[float]:
        """Sine sweep with a gentle swell-and-fade envelope."""
        n = int(SAMPLE_RATE * seconds)
        samples = []
        phase = 0.0
        for t in range(n):
            freq = start_hz + (end_hz - start_hz) * t / n
            phase += 2 * math.pi * freq / SAMPLE_RATE
            amp = peak * math.sin(math.pi * t / n)
            samples.append(amp * math.sin(phase))
        return samples

    @classmethod
    def _gen_inhale(cls) -> bytes:
        """Rising tone."""
        return cls._make_wav(cls._sweep(330, 523, 0.6, 6000))

    @classmethod
    def _gen_hold(cls) -> bytes:
        """Steady soft tone."""
        return cls._make_wav(cls._sweep(523, 523, 0.4, 4000))

    @classmethod
    def _gen_exhale(cls) -> bytes:
        """Falling tone."""
        return cls._make_wav(cls._sweep(523, 294, 0.8, 6000))

    @classmethod
    def _gen_pause(cls) -> bytes:
        """Low, quiet hum."""
        return cls._make_wav(cls._sweep(220, 220, 0.3, 2500))

    @classmethod
    def _gen_session_complete(cls) -> bytes:
        """Completion chime."""
        samples: List[float] = []
        for freq in (523, 659, 784, 1047):  # C5, E5, G5, C6
            dur = int(SAMPLE_RATE * 0.14)
            for t in range(dur):
                amp = 6000 * (1 - t / dur)
                samples.append(amp * math.sin(2 * math.pi * freq * t / SAMPLE_RATE))
        return cls._make_wav(samples)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Synthesizes and plays the breathing cues: a rising tone on inhale, a
#   steady tone on hold, a falling tone on exhale and a quiet hum on pause,
#   plus a chime when a session completes.
#
# Data flow:
#   BreathingPhaseClock.phase_changed → CoachService → play_phase(phase)
#   → pygame.mixer.Sound.play().
#
# Interviewer-friendly talking points:
#   1. Frequency sweeps: accumulating phase per sample (instead of
#      sin(2*pi*f*t)) keeps the sweep click-free while the pitch moves.
#   2. If pygame is missing or there is no audio device, play() is a no-op;
#      the visual breathing widget still works.
