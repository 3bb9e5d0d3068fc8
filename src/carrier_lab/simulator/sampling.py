"""Sampling-rate diagnostics for a transmit configuration.

These checks never raise: aliasing is a property of the user's configuration,
so the transmitter reports violations and proceeds.
"""

from collections.abc import Sequence

from carrier_lab.dsp.filters import NYQUIST_MARGIN_HZ
from carrier_lab.dsp.synthesis import OscillatorDescriptor, max_frequency


def nyquist_violated(
  oscillators: Sequence[OscillatorDescriptor], sample_rate_hz: float
) -> bool:
  """True if the highest oscillator frequency is above fs / 2."""
  f_max = max_frequency(oscillators)
  return f_max > 0 and sample_rate_hz < 2 * f_max


def required_sample_rate(
  carrier_frequency_hz: float, oscillators: Sequence[OscillatorDescriptor]
) -> float:
  """Minimum rate 2 * (fc + f_max) that represents the modulated signal."""
  return 2 * (carrier_frequency_hz + max_frequency(oscillators))


def filter_nyquist_violated(
  high_cutoff_hz: float | None, sample_rate_hz: float
) -> bool:
  """True if the band-pass upper edge would be clamped below Nyquist."""
  if high_cutoff_hz is None:
    return False
  return high_cutoff_hz >= sample_rate_hz / 2 - NYQUIST_MARGIN_HZ
