"""Analog modulation and demodulation.

Five schemes are supported, all operating on real passband samples:

  AM-DSB      (1 + k m(t)) cos(wt)
  AM-DSB-SC   k m(t) cos(wt)
  AM-SSB-USB  k (m(t) cos(wt) - H{m}(t) sin(wt))
  PM          cos(wt + k m(t))
  FM          cos(wt + k sum(m) / fs)

The meaning of the modulation constant k depends on the scheme: modulation
index for the AM family, kp for PM and kf for FM. Output series share the time
axis of their input.

Coherent detection (AM-DSB-SC and AM-SSB-USB) leaves the image at twice the
carrier in place; callers low-pass the result themselves, e.g. with
`filters.apply_low_pass`.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import assert_never

import numpy as np
from pydantic import BaseModel

from carrier_lab.dsp.hilbert import envelope, hilbert, instantaneous_phase
from carrier_lab.dsp.signals import RealSequence, TimeSeries

logger = logging.getLogger(__name__)


class Modulation(StrEnum):
  """Supported modulation schemes."""

  AM_DSB = "AM-DSB"
  AM_DSB_SC = "AM-DSB-SC"
  AM_SSB = "AM-SSB-USB"
  PM = "PM"
  FM = "FM"


class ModulationSpec(BaseModel):
  """Carrier and scheme parameters.

  Attributes:
    carrier_frequency_hz: Carrier frequency fc.
    modulation_constant: Index for AM, kp for PM, kf for FM.
    scheme: Modulation scheme.
  """

  carrier_frequency_hz: float = 1000.0
  modulation_constant: float = 0.5
  scheme: Modulation = Modulation.AM_DSB

  model_config = {"frozen": True}


def _resolve_scheme(scheme: Modulation | str) -> Modulation | None:
  try:
    return Modulation(scheme)
  except ValueError:
    logger.error(
      f"Unsupported modulation scheme {scheme!r}; "
      f"expected one of {[m.value for m in Modulation]}"
    )
    return None


def _omega_t(signal: TimeSeries, carrier_frequency_hz: float) -> RealSequence:
  return 2 * np.pi * carrier_frequency_hz * signal.time


def modulate_am_dsb(message: TimeSeries, fc: float, k: float) -> RealSequence:
  return (1 + k * message.samples) * np.cos(_omega_t(message, fc))


def modulate_am_dsb_sc(message: TimeSeries, fc: float, k: float) -> RealSequence:
  return k * message.samples * np.cos(_omega_t(message, fc))


def modulate_am_ssb_usb(message: TimeSeries, fc: float, k: float) -> RealSequence:
  """Upper sideband by the phasing (Hilbert) method."""
  wt = _omega_t(message, fc)
  quadrature = hilbert(message.samples)
  return k * (message.samples * np.cos(wt) - quadrature * np.sin(wt))


def modulate_pm(message: TimeSeries, fc: float, kp: float) -> RealSequence:
  return np.cos(_omega_t(message, fc) + kp * message.samples)


def modulate_fm(message: TimeSeries, fc: float, fs: float, kf: float) -> RealSequence:
  """Frequency modulation with the running sum of the message as its integral."""
  integral = np.cumsum(message.samples) / fs
  return np.cos(_omega_t(message, fc) + kf * integral)


def modulate(
  message: TimeSeries, spec: ModulationSpec, sample_rate_hz: float | None = None
) -> TimeSeries:
  """Modulate `message` onto a carrier.

  Args:
    message: Baseband signal.
    spec: Carrier frequency, constant and scheme.
    sample_rate_hz: Sampling rate of `message`, used by FM integration.
      Inferred from the time axis when omitted.

  Returns:
    The modulated signal on the message's time axis, or an empty series for
    empty input or an unknown scheme.
  """
  scheme = _resolve_scheme(spec.scheme)
  if message.is_empty or scheme is None:
    return TimeSeries.empty()

  fc = spec.carrier_frequency_hz
  k = spec.modulation_constant

  match scheme:
    case Modulation.AM_DSB:
      y = modulate_am_dsb(message, fc, k)
    case Modulation.AM_DSB_SC:
      y = modulate_am_dsb_sc(message, fc, k)
    case Modulation.AM_SSB:
      y = modulate_am_ssb_usb(message, fc, k)
    case Modulation.PM:
      y = modulate_pm(message, fc, k)
    case Modulation.FM:
      fs = sample_rate_hz or message.sample_rate_hz() or 1.0
      y = modulate_fm(message, fc, fs, k)
    case _:
      assert_never(scheme)

  return message.with_samples(y)


def demodulate_am_dsb(modulated: TimeSeries, k: float) -> RealSequence:
  """Envelope detector, offset removed and scaled by 1/k."""
  return (envelope(modulated.samples) - 1) / k


def demodulate_coherent(modulated: TimeSeries, fc: float, k: float) -> RealSequence:
  """Product detector 2 s(t) cos(wt) / k, without the image-rejection filter."""
  return 2 * modulated.samples * np.cos(_omega_t(modulated, fc)) / k


def demodulate_pm(modulated: TimeSeries, fc: float, kp: float) -> RealSequence:
  phase = instantaneous_phase(modulated.samples)
  return (phase - _omega_t(modulated, fc)) / kp


def demodulate_fm(
  modulated: TimeSeries, fc: float, fs: float, kf: float
) -> RealSequence:
  """Frequency discriminator on the instantaneous phase.

  The phase is differentiated with central differences (one-sided at the two
  end samples), converted to Hz, the carrier removed and the result scaled by
  fs / kf.
  """
  phase = instantaneous_phase(modulated.samples)
  if len(phase) < 2:
    d_phase = np.zeros_like(phase)
  else:
    d_phase = np.gradient(phase)
  return (d_phase * fs / (2 * np.pi) - fc) * fs / kf


def demodulate(
  modulated: TimeSeries,
  carrier_frequency_hz: float,
  sample_rate_hz: float,
  demodulation_constant: float,
  scheme: Modulation | str,
) -> TimeSeries:
  """Recover the message from a modulated signal.

  Args:
    modulated: Received passband signal.
    carrier_frequency_hz: Carrier frequency fc.
    sample_rate_hz: Sampling rate of `modulated`.
    demodulation_constant: Same constant used by the modulator.
    scheme: Modulation scheme.

  Returns:
    The demodulated signal on the input's time axis, or an empty series for
    empty input or an unknown scheme.
  """
  resolved = _resolve_scheme(scheme)
  if modulated.is_empty or resolved is None:
    return TimeSeries.empty()

  fc = carrier_frequency_hz
  k = demodulation_constant

  match resolved:
    case Modulation.AM_DSB:
      y = demodulate_am_dsb(modulated, k)
    case Modulation.AM_DSB_SC | Modulation.AM_SSB:
      y = demodulate_coherent(modulated, fc, k)
    case Modulation.PM:
      y = demodulate_pm(modulated, fc, k)
    case Modulation.FM:
      y = demodulate_fm(modulated, fc, sample_rate_hz, k)
    case _:
      assert_never(resolved)

  return modulated.with_samples(y)


def demodulate_with_spec(
  modulated: TimeSeries, spec: ModulationSpec, sample_rate_hz: float
) -> TimeSeries:
  """`demodulate` driven by the same `ModulationSpec` used to transmit."""
  return demodulate(
    modulated,
    spec.carrier_frequency_hz,
    sample_rate_hz,
    spec.modulation_constant,
    spec.scheme,
  )
