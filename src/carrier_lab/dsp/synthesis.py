"""Baseband waveform synthesis from primitive oscillators."""

import logging
from collections.abc import Sequence
from enum import StrEnum

import numpy as np
from pydantic import BaseModel

from carrier_lab.dsp.signals import MIN_SAMPLE_RATE_HZ, RealSequence, TimeSeries

logger = logging.getLogger(__name__)


class WaveformKind(StrEnum):
  """Primitive oscillator shapes."""

  SINE = "sine"
  COSINE = "cosine"
  SQUARE = "square"
  TRIANGLE = "triangle"
  SAWTOOTH = "sawtooth"


class OscillatorDescriptor(BaseModel):
  """One additive component of the baseband signal.

  Attributes:
    kind: Waveform shape.
    amplitude: Peak amplitude.
    frequency_hz: Oscillation frequency; negative values are treated as 0.
    phase_rad: Phase offset in radians (ignored by the sawtooth).
  """

  kind: WaveformKind = WaveformKind.SINE
  amplitude: float = 1.0
  frequency_hz: float = 10.0
  phase_rad: float = 0.0

  model_config = {"frozen": True}

  def waveform(self, t: RealSequence) -> RealSequence:
    """Evaluate this oscillator at the instants `t`."""
    f = max(0.0, self.frequency_hz)
    arg = 2 * np.pi * f * t + self.phase_rad

    match self.kind:
      case WaveformKind.SINE:
        shape = np.sin(arg)
      case WaveformKind.COSINE:
        shape = np.cos(arg)
      case WaveformKind.SQUARE:
        shape = np.where(np.sin(arg) >= 0, 1.0, -1.0)
      case WaveformKind.TRIANGLE:
        shape = (2 / np.pi) * np.arcsin(np.sin(arg))
      case WaveformKind.SAWTOOTH:
        shape = 2 * (f * t - np.floor(f * t + 0.5))

    return self.amplitude * shape


def sample_count(duration_s: float, sample_rate_hz: float) -> int:
  """Number of samples `synthesize` produces (never less than 1)."""
  fs = max(MIN_SAMPLE_RATE_HZ, sample_rate_hz)
  return max(1, round(duration_s * fs))


def max_frequency(oscillators: Sequence[OscillatorDescriptor]) -> float:
  """Highest oscillator frequency, 0 if there are none."""
  return max((max(0.0, osc.frequency_hz) for osc in oscillators), default=0.0)


def synthesize(
  oscillators: Sequence[OscillatorDescriptor],
  duration_s: float,
  sample_rate_hz: float,
) -> TimeSeries:
  """Sum the oscillators over `duration_s` seconds sampled at `sample_rate_hz`.

  Args:
    oscillators: Components to superpose. An empty list gives silence.
    duration_s: Signal length in seconds.
    sample_rate_hz: Sampling rate; floored to a small positive value.

  Returns:
    TimeSeries with t[i] = i / fs.
  """
  if sample_rate_hz < MIN_SAMPLE_RATE_HZ:
    logger.debug(
      f"Sample rate {sample_rate_hz} Hz floored to {MIN_SAMPLE_RATE_HZ} Hz"
    )
  fs = max(MIN_SAMPLE_RATE_HZ, sample_rate_hz)
  n = sample_count(duration_s, fs)

  t = np.arange(n, dtype=np.float64) / fs
  y = np.zeros(n, dtype=np.float64)
  for oscillator in oscillators:
    y += oscillator.waveform(t)

  return TimeSeries(time=t, samples=y)
