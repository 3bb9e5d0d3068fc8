"""FFT-based Hilbert transform and the detectors built on it."""

import numpy as np
import numpy.typing as npt

from carrier_lab.dsp import fourier
from carrier_lab.dsp.signals import RealSequence, TimeSeries


def hilbert(signal: TimeSeries | npt.ArrayLike) -> RealSequence:
  """Quadrature component of a real signal.

  The samples are zero-padded to a power of two and transformed. DC and
  Nyquist bins are cleared, positive-frequency bins are multiplied by -j and
  negative-frequency bins by +j, and the inverse transform is truncated back
  to the input length. `hilbert(cos(wt))` is therefore ~`sin(wt)`.

  Args:
    signal: A `TimeSeries` or a plain sequence of samples.

  Returns:
    Array of the same length as the input.
  """
  samples = signal.samples if isinstance(signal, TimeSeries) else signal
  samples = np.asarray(samples, dtype=np.float64)
  n = len(samples)
  if n == 0:
    return np.zeros(0, dtype=np.float64)

  spectrum = fourier.fft(fourier.zero_pad(samples))
  fft_len = len(spectrum)
  half = fft_len // 2

  spectrum[0] = 0
  if fft_len > 1:
    spectrum[half] = 0
    spectrum[1:half] *= -1j
    spectrum[half + 1 :] *= 1j

  return fourier.ifft(spectrum)[:n]


def envelope(samples: npt.ArrayLike) -> RealSequence:
  """Envelope sqrt(s^2 + H{s}^2)."""
  s = np.asarray(samples, dtype=np.float64)
  return np.sqrt(s**2 + hilbert(s) ** 2)


def instantaneous_phase(samples: npt.ArrayLike, unwrap: bool = True) -> RealSequence:
  """Phase atan2(H{s}, s) of the analytic signal, in radians.

  Args:
    samples: Real signal.
    unwrap: Remove 2*pi jumps so the phase is continuous across samples.
  """
  s = np.asarray(samples, dtype=np.float64)
  phase = np.arctan2(hilbert(s), s)
  if unwrap:
    return np.unwrap(phase)
  return phase
