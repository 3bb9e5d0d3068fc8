"""Windowed-sinc FIR band-pass design and same-length convolution.

The band-pass kernel is the difference of two low-pass kernels at the high and
low cutoffs, shaped by a Hamming window and normalised to unity gain at the
band centre. Out-of-range parameters are clamped rather than rejected; an
empty pass band turns the filter into a copy.
"""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt
from pydantic import BaseModel
from scipy import signal as scipy_signal

from carrier_lab.dsp import fourier
from carrier_lab.dsp.signals import (
  MIN_SAMPLE_RATE_HZ,
  FrequencyResponse,
  RealSequence,
  TimeSeries,
)

logger = logging.getLogger(__name__)

MIN_ORDER = 3
DEFAULT_ORDER = 101
# Cutoffs are kept strictly below Nyquist by this margin.
NYQUIST_MARGIN_HZ = 1e-9


class ResolvedFilter(BaseModel):
  """Effective band-pass parameters after clamping."""

  order: int
  low_cutoff_hz: float
  high_cutoff_hz: float
  sample_rate_hz: float

  model_config = {"frozen": True}

  @property
  def is_identity(self) -> bool:
    """True when the pass band is empty and filtering degenerates to a copy."""
    return self.low_cutoff_hz >= self.high_cutoff_hz

  @property
  def center_hz(self) -> float:
    return (self.low_cutoff_hz + self.high_cutoff_hz) / 2


class FilterSpec(BaseModel):
  """Band-pass filter request.

  Attributes:
    low_cutoff_hz: Lower band edge; None means 0 Hz.
    high_cutoff_hz: Upper band edge; None means just below Nyquist.
    order: Number of taps; forced odd and at least 3 when resolved.
    sample_rate_hz: Sampling rate of the signal to be filtered; None means
      the rate of the chain the filter is used in.
  """

  low_cutoff_hz: float | None = None
  high_cutoff_hz: float | None = None
  order: int = DEFAULT_ORDER
  sample_rate_hz: float | None = None

  model_config = {"frozen": True}

  def resolve(self, sample_rate_hz: float | None = None) -> ResolvedFilter:
    """Clamp the parameters; `sample_rate_hz` is used when the spec has none."""
    fs = self.sample_rate_hz if self.sample_rate_hz is not None else sample_rate_hz
    if fs is None:
      msg = "FilterSpec has no sampling rate and none was supplied"
      raise ValueError(msg)
    return resolve_filter(self.order, fs, self.low_cutoff_hz, self.high_cutoff_hz)


def resolve_order(order: int) -> int:
  """Force an odd tap count of at least 3."""
  if order % 2 == 0:
    order += 1
  return max(MIN_ORDER, order)


def resolve_filter(
  order: int,
  sample_rate_hz: float,
  low_cutoff_hz: float | None,
  high_cutoff_hz: float | None,
) -> ResolvedFilter:
  """Apply the clamping policy to raw band-pass parameters."""
  fs = max(MIN_SAMPLE_RATE_HZ, sample_rate_hz)
  upper = fs / 2 - NYQUIST_MARGIN_HZ

  low = 0.0 if low_cutoff_hz is None else low_cutoff_hz
  high = upper if high_cutoff_hz is None else high_cutoff_hz
  clamped_low = float(np.clip(low, 0.0, upper))
  clamped_high = float(np.clip(high, 0.0, upper))

  if (clamped_low, clamped_high) != (low, high):
    logger.debug(
      f"Cutoffs {low}-{high} Hz clamped to {clamped_low}-{clamped_high} Hz "
      f"for fs={fs} Hz"
    )

  return ResolvedFilter(
    order=resolve_order(order),
    low_cutoff_hz=clamped_low,
    high_cutoff_hz=clamped_high,
    sample_rate_hz=fs,
  )


def sinc(x: npt.ArrayLike) -> npt.NDArray[np.float64]:
  """Normalised sinc sin(pi x) / (pi x) with sinc(0) = 1."""
  return np.sinc(np.asarray(x, dtype=np.float64))


def hamming_window(n: int) -> RealSequence:
  """Hamming window 0.54 - 0.46 cos(2 pi k / (n - 1))."""
  if n == 1:
    return np.ones(1)
  k = np.arange(n, dtype=np.float64)
  return 0.54 - 0.46 * np.cos(2 * np.pi * k / (n - 1))


def design_band_pass(
  order: int, sample_rate_hz: float, low_cutoff_hz: float, high_cutoff_hz: float
) -> RealSequence:
  """Design band-pass FIR coefficients.

  Args:
    order: Number of taps (should be odd for a symmetric kernel).
    sample_rate_hz: Sampling rate in Hz.
    low_cutoff_hz: Lower band edge in Hz.
    high_cutoff_hz: Upper band edge in Hz.

  Returns:
    Palindromic coefficients of length `order`, scaled so the magnitude
    response is 1 at (low + high) / 2 unless that frequency is 0.
  """
  n_taps = order
  center = (n_taps - 1) / 2
  fc_low = low_cutoff_hz / sample_rate_hz
  fc_high = high_cutoff_hz / sample_rate_hz

  k = np.arange(n_taps, dtype=np.float64) - center
  low_pass_high = 2 * fc_high * sinc(2 * fc_high * k)
  low_pass_low = 2 * fc_low * sinc(2 * fc_low * k)
  h = (low_pass_high - low_pass_low) * hamming_window(n_taps)

  band_center = (low_cutoff_hz + high_cutoff_hz) / 2
  if band_center > 0:
    gain = fourier.dtft(h, band_center, sample_rate_hz, center)
    if gain > 0:
      h = h / gain

  return h


def convolve_same(x: npt.ArrayLike, h: npt.ArrayLike) -> RealSequence:
  """Convolution centred on the kernel, truncated to the length of `x`.

  out[n] = sum_k x[n + k - half] * h[k], half = len(h) // 2, with samples
  outside `x` treated as zero. For the symmetric kernels produced here this is
  the ordinary convolution aligned on the kernel centre.
  """
  x = np.asarray(x, dtype=np.float64)
  h = np.asarray(h, dtype=np.float64)
  if len(x) == 0 or len(h) == 0:
    return np.zeros(len(x), dtype=np.float64)
  return scipy_signal.correlate(x, h, mode="same", method="direct")


def apply_band_pass(
  signal: TimeSeries,
  low_cutoff_hz: float | None,
  high_cutoff_hz: float | None,
  sample_rate_hz: float,
  order: int = DEFAULT_ORDER,
) -> TimeSeries:
  """Band-pass filter a signal, keeping its time axis.

  Returns a value copy of the input when the clamped pass band is empty.
  """
  if signal.is_empty:
    return TimeSeries.empty()

  resolved = resolve_filter(order, sample_rate_hz, low_cutoff_hz, high_cutoff_hz)
  if resolved.is_identity:
    logger.debug(
      f"Empty pass band {resolved.low_cutoff_hz}-{resolved.high_cutoff_hz} Hz, "
      "filter is a no-op"
    )
    return signal.with_samples(signal.samples.copy())

  h = design_band_pass(
    resolved.order,
    resolved.sample_rate_hz,
    resolved.low_cutoff_hz,
    resolved.high_cutoff_hz,
  )
  return signal.with_samples(convolve_same(signal.samples, h))


def apply_filter(
  signal: TimeSeries, spec: FilterSpec, sample_rate_hz: float | None = None
) -> TimeSeries:
  """`apply_band_pass` driven by a `FilterSpec`.

  `sample_rate_hz` fills in for a spec without a sampling rate.
  """
  resolved = spec.resolve(sample_rate_hz)
  return apply_band_pass(
    signal,
    resolved.low_cutoff_hz,
    resolved.high_cutoff_hz,
    resolved.sample_rate_hz,
    resolved.order,
  )


def apply_low_pass(
  signal: TimeSeries,
  cutoff_hz: float,
  sample_rate_hz: float,
  order: int = DEFAULT_ORDER,
) -> TimeSeries:
  """Low-pass filter, realised as a band-pass starting at 0 Hz.

  Used after coherent detection to remove the image at twice the carrier.
  """
  return apply_band_pass(signal, 0.0, cutoff_hz, sample_rate_hz, order)


def filter_frequency_response(
  spec: FilterSpec, sample_rate_hz: float | None = None, num_points: int = 256
) -> FrequencyResponse | None:
  """Design the kernel for `spec` and sample its magnitude response.

  Returns None when the spec resolves to the identity filter.
  """
  resolved = spec.resolve(sample_rate_hz)
  if resolved.is_identity:
    return None
  h = design_band_pass(
    resolved.order,
    resolved.sample_rate_hz,
    resolved.low_cutoff_hz,
    resolved.high_cutoff_hz,
  )
  return fourier.compute_frequency_response(h, resolved.sample_rate_hz, num_points)
