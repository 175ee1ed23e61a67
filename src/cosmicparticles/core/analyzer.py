"""
Audio feature extraction for the audio-reactive flow.

Spectrum snapshots use the browser-analyser byte scale: one amplitude per
frequency bin in [0, 255]. Two scalars drive the flow field:

  - volume: mean bin amplitude, normalized to [0, 1]
  - pitch:  index of the loudest bin, normalized to [0, 1]
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union

import librosa
import numpy as np

logger = logging.getLogger(__name__)

BYTE_MAX = 255.0
ANALYSER_FFT_SIZE = 512
ANALYSER_BINS = ANALYSER_FFT_SIZE // 2
DB_FLOOR = -80.0


@dataclass(frozen=True)
class AudioFeatures:
    """Scalar drivers derived from one spectrum snapshot."""

    volume: float = 0.0
    pitch: float = 0.0

    @property
    def is_silent(self) -> bool:
        return self.volume == 0.0 and self.pitch == 0.0


def extract_features(spectrum: Optional[np.ndarray]) -> AudioFeatures:
    """
    Reduce a spectrum snapshot to (volume, pitch).

    A missing or empty snapshot gives neutral zeros.
    """
    if spectrum is None:
        return AudioFeatures()
    bins = np.asarray(spectrum, dtype=np.float64).ravel()
    if bins.size == 0:
        return AudioFeatures()

    volume = float(np.clip(bins.mean() / BYTE_MAX, 0.0, 1.0))
    pitch = float(np.argmax(bins)) / (bins.size - 1) if bins.size > 1 else 0.0
    return AudioFeatures(volume=volume, pitch=pitch)


class SpectrumSource(Protocol):
    def sample(self) -> Optional[np.ndarray]:
        ...


class SpectrumBuffer:
    """
    Latest-value holder written by a capture thread and read once per frame.

    ``push`` swaps in an immutable copy, so a reader never sees a half-written
    snapshot.
    """

    def __init__(self):
        self._latest: Optional[np.ndarray] = None

    def push(self, spectrum: Optional[np.ndarray]) -> None:
        if spectrum is None:
            self._latest = None
            return
        snapshot = np.array(spectrum, dtype=np.float32).ravel()
        snapshot.flags.writeable = False
        self._latest = snapshot

    def clear(self) -> None:
        self._latest = None

    def sample(self) -> Optional[np.ndarray]:
        return self._latest


class FileSpectrumSource:
    """
    Replays an audio file as a stream of analyser-style byte spectra.

    Each ``sample()`` returns the next frame, looping at the end of the file.
    """

    def __init__(
        self,
        audio_path: Union[str, Path],
        fps: int = 60,
        sr: Optional[int] = 22050,
        n_fft: int = ANALYSER_FFT_SIZE,
    ):
        self.audio_path = Path(audio_path)
        self.fps = fps
        self.n_fft = n_fft

        y, self.sample_rate = librosa.load(self.audio_path, sr=sr, mono=True)
        self.hop_length = self.compute_hop_length(self.sample_rate)
        self.frames = self.spectra_from_signal(y, self.sample_rate)
        self._cursor = 0

        logger.info(
            "Loaded %s: %d spectrum frames at %d fps",
            self.audio_path.name, len(self), self.fps,
        )

    def compute_hop_length(self, sr: int) -> int:
        return max(int(sr / self.fps), 1)

    def spectra_from_signal(self, y: np.ndarray, sr: int) -> np.ndarray:
        """
        (n_frames, n_fft // 2) byte spectra for a mono signal.

        Magnitudes are taken in dB relative to the loudest bin in the file,
        floored at -80 dB, then mapped linearly to [0, 255].
        """
        hop = self.compute_hop_length(sr)
        if len(y) == 0:
            return np.zeros((0, self.n_fft // 2), dtype=np.float32)
        mag = np.abs(librosa.stft(y, n_fft=self.n_fft, hop_length=hop))
        db = librosa.amplitude_to_db(mag, ref=np.max, top_db=-DB_FLOOR)
        scaled = (db - DB_FLOOR) / -DB_FLOOR * BYTE_MAX
        spectra = np.clip(scaled, 0.0, BYTE_MAX)[: self.n_fft // 2].T
        return np.ascontiguousarray(spectra, dtype=np.float32)

    def __len__(self) -> int:
        return int(self.frames.shape[0])

    def frame(self, index: int) -> Optional[np.ndarray]:
        if len(self) == 0:
            return None
        return self.frames[index % len(self)]

    def sample(self) -> Optional[np.ndarray]:
        spectrum = self.frame(self._cursor)
        self._cursor = (self._cursor + 1) % max(len(self), 1)
        return spectrum

    def rewind(self) -> None:
        self._cursor = 0
