"""Discrete Fourier engine.

Provides a radix-2 Cooley-Tukey FFT, its inverse via the conjugation identity,
and direct DTFT evaluation for frequency-response queries at arbitrary
frequencies. The spectrum and filter-response helpers used for display are
thin consumers of these primitives.

Every caller must zero-pad to a power of two before calling `fft`/`ifft`;
`zero_pad` does this.
"""

import logging

import numpy as np
import numpy.typing as npt

from carrier_lab.dsp.signals import (
  ComplexSequence,
  FrequencyResponse,
  RealSequence,
  TimeSeries,
)

logger = logging.getLogger(__name__)


def next_power_of_two(n: int) -> int:
  """Smallest power of two that is >= n (1 for n <= 1)."""
  if n <= 1:
    return 1
  return 1 << (n - 1).bit_length()


def is_power_of_two(n: int) -> bool:
  return n > 0 and (n & (n - 1)) == 0


def zero_pad(x: npt.ArrayLike) -> RealSequence:
  """Copy `x` into a zero-filled array whose length is the next power of two."""
  values = np.asarray(x, dtype=np.float64)
  padded = np.zeros(next_power_of_two(len(values)), dtype=np.float64)
  padded[: len(values)] = values
  return padded


def _fft_recursive(x: ComplexSequence) -> ComplexSequence:
  n = len(x)
  if n <= 1:
    return x.copy()

  even = _fft_recursive(x[0::2])
  odd = _fft_recursive(x[1::2])

  twiddled = np.exp(-2j * np.pi * np.arange(n // 2) / n) * odd
  return np.concatenate([even + twiddled, even - twiddled])


def fft(x: npt.ArrayLike) -> ComplexSequence:
  """Forward DFT by recursive radix-2 decimation in time.

  Args:
    x: Real or complex samples; length must be a power of two.

  Returns:
    Complex spectrum of the same length.

  Raises:
    ValueError: If the length is not a power of two.
  """
  values = np.asarray(x, dtype=np.complex128)
  if values.ndim != 1 or not is_power_of_two(len(values)):
    msg = f"FFT length must be a power of two, got {values.shape}"
    raise ValueError(msg)
  return _fft_recursive(values)


def ifft(spectrum: npt.ArrayLike) -> RealSequence:
  """Inverse DFT, returning the real part of the reconstructed sequence.

  Computed as conj(fft(conj(X))) / N rather than with a separate butterfly.
  """
  values = np.asarray(spectrum, dtype=np.complex128)
  n = len(values)
  reconstructed = np.conj(fft(np.conj(values))) / n
  return reconstructed.real.copy()


def dtft(
  coefficients: npt.ArrayLike,
  frequency_hz: float,
  sample_rate_hz: float,
  center_index: float,
) -> float:
  """Magnitude of the DTFT of `coefficients` at a single frequency.

  Evaluates |sum h[n] * exp(-j 2 pi f (n - center) / fs)| by direct summation,
  so the kernel may have any length.
  """
  h = np.asarray(coefficients, dtype=np.float64)
  n = np.arange(len(h), dtype=np.float64)
  theta = -2 * np.pi * frequency_hz * (n - center_index) / sample_rate_hz
  return float(np.abs(np.sum(h * np.exp(1j * theta))))


def compute_frequency_response(
  coefficients: npt.ArrayLike, sample_rate_hz: float, num_points: int = 256
) -> FrequencyResponse:
  """Sample the DTFT magnitude of a symmetric kernel linearly over [0, fs/2]."""
  h = np.asarray(coefficients, dtype=np.float64)
  if len(h) == 0 or num_points <= 0:
    return FrequencyResponse.empty()

  center = (len(h) - 1) / 2
  frequencies = np.linspace(0.0, sample_rate_hz / 2, num_points)
  magnitudes = np.array(
    [dtft(h, f, sample_rate_hz, center) for f in frequencies], dtype=np.float64
  )
  return FrequencyResponse(time=frequencies, samples=magnitudes)


def compute_spectrum(signal: TimeSeries, sample_rate_hz: float) -> FrequencyResponse:
  """Single-sided magnitude spectrum of a real signal.

  The signal is zero-padded to the next power of two. Magnitudes are divided
  by the unpadded length and doubled for every bin strictly between DC and
  Nyquist.
  """
  if signal.is_empty:
    return FrequencyResponse.empty()

  n = len(signal)
  spectrum = fft(zero_pad(signal.samples))
  fft_len = len(spectrum)
  half_len = fft_len // 2 + 1

  k = np.arange(half_len)
  frequencies = k * sample_rate_hz / fft_len
  magnitudes = np.abs(spectrum[:half_len]) / n
  one_sided = (k > 0) & (k < fft_len / 2)
  magnitudes[one_sided] *= 2

  logger.debug(f"Spectrum of {n} samples padded to {fft_len} bins")
  return FrequencyResponse(time=frequencies, samples=magnitudes)
