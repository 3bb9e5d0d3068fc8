"""Tests for analog modulation and demodulation."""

import logging

import numpy as np
import pytest

from carrier_lab.dsp import filters, fourier
from carrier_lab.dsp.modulation import (
  Modulation,
  ModulationSpec,
  demodulate,
  demodulate_with_spec,
  modulate,
)
from carrier_lab.dsp.signals import TimeSeries
from carrier_lab.dsp.synthesis import OscillatorDescriptor, WaveformKind, synthesize

# One second at 1024 Hz puts every integer frequency on an exact FFT bin.
FS = 1024.0
T = np.arange(1024) / FS


def message(amplitude: float = 0.5, freq: float = 4.0) -> TimeSeries:
  return TimeSeries(time=T, samples=amplitude * np.sin(2 * np.pi * freq * T))


class TestModulate:
  """Tests for modulate."""

  def test_am_dsb_first_sample(self) -> None:
    """Test that AM-DSB of a 10 Hz sine starts at (1 + 0) cos(0) = 1."""
    osc = OscillatorDescriptor(kind=WaveformKind.SINE, amplitude=1.0, frequency_hz=10.0)
    baseband = synthesize([osc], duration_s=1.0, sample_rate_hz=1000.0)
    spec = ModulationSpec(
      carrier_frequency_hz=100.0, modulation_constant=0.5, scheme=Modulation.AM_DSB
    )
    modulated = modulate(baseband, spec, 1000.0)

    assert len(modulated) == 1000
    assert modulated.samples[0] == pytest.approx(1.0)

  @pytest.mark.parametrize("scheme", list(Modulation))
  def test_time_axis_is_shared(self, scheme) -> None:
    """Test that every scheme reuses the message time axis."""
    msg = message()
    spec = ModulationSpec(carrier_frequency_hz=128.0, scheme=scheme)
    assert modulate(msg, spec, FS).time is msg.time

  def test_am_dsb_formula(self) -> None:
    """Test (1 + k m) cos(wt)."""
    msg = message()
    spec = ModulationSpec(carrier_frequency_hz=128.0, modulation_constant=0.8)
    expected = (1 + 0.8 * msg.samples) * np.cos(2 * np.pi * 128 * T)
    np.testing.assert_allclose(modulate(msg, spec, FS).samples, expected)

  def test_am_dsb_sc_formula(self) -> None:
    """Test k m cos(wt)."""
    msg = message()
    spec = ModulationSpec(
      carrier_frequency_hz=128.0, modulation_constant=2.0, scheme=Modulation.AM_DSB_SC
    )
    expected = 2.0 * msg.samples * np.cos(2 * np.pi * 128 * T)
    np.testing.assert_allclose(modulate(msg, spec, FS).samples, expected)

  def test_pm_formula(self) -> None:
    """Test cos(wt + kp m)."""
    msg = message()
    spec = ModulationSpec(
      carrier_frequency_hz=128.0, modulation_constant=1.5, scheme=Modulation.PM
    )
    expected = np.cos(2 * np.pi * 128 * T + 1.5 * msg.samples)
    np.testing.assert_allclose(modulate(msg, spec, FS).samples, expected)

  def test_fm_formula(self) -> None:
    """Test cos(wt + kf cumsum(m) / fs)."""
    msg = message()
    spec = ModulationSpec(
      carrier_frequency_hz=128.0, modulation_constant=50.0, scheme=Modulation.FM
    )
    expected = np.cos(2 * np.pi * 128 * T + 50.0 * np.cumsum(msg.samples) / FS)
    np.testing.assert_allclose(modulate(msg, spec, FS).samples, expected)

  def test_fm_infers_sample_rate(self) -> None:
    """Test that FM falls back to the rate of the time axis."""
    msg = message()
    spec = ModulationSpec(
      carrier_frequency_hz=128.0, modulation_constant=50.0, scheme=Modulation.FM
    )
    np.testing.assert_allclose(
      modulate(msg, spec).samples, modulate(msg, spec, FS).samples
    )

  def test_ssb_keeps_upper_sideband_only(self) -> None:
    """Test that USB of a tone has energy at fc + fm and none at fc - fm."""
    msg = TimeSeries(time=T, samples=np.cos(2 * np.pi * 10 * T))
    spec = ModulationSpec(
      carrier_frequency_hz=200.0, modulation_constant=0.7, scheme=Modulation.AM_SSB
    )
    spectrum = fourier.compute_spectrum(modulate(msg, spec, FS), FS)

    assert spectrum.peak_frequency() == pytest.approx(210.0)
    assert spectrum.magnitudes[210] == pytest.approx(0.7)
    assert spectrum.magnitudes[190] < 1e-9

  def test_empty_message(self) -> None:
    """Test that empty input gives empty output."""
    assert modulate(TimeSeries.empty(), ModulationSpec(), FS).is_empty

  def test_unknown_scheme(self, caplog) -> None:
    """Test that an unsupported scheme gives an empty series and an error log."""
    spec = ModulationSpec.model_construct(
      carrier_frequency_hz=128.0, modulation_constant=1.0, scheme="QAM"
    )
    with caplog.at_level(logging.ERROR):
      assert modulate(message(), spec, FS).is_empty
    assert "QAM" in caplog.text

  def test_scheme_from_string(self) -> None:
    """Test that schemes validate from their string values."""
    spec = ModulationSpec.model_validate({"scheme": "AM-SSB-USB"})
    assert spec.scheme is Modulation.AM_SSB


class TestDemodulate:
  """Tests for demodulate."""

  def test_am_dsb_round_trip(self) -> None:
    """Test envelope detection recovers the message."""
    msg = message(amplitude=0.5)
    spec = ModulationSpec(carrier_frequency_hz=128.0, modulation_constant=0.5)
    recovered = demodulate_with_spec(modulate(msg, spec, FS), spec, FS)
    np.testing.assert_allclose(recovered.samples, msg.samples, atol=1e-6)

  @pytest.mark.parametrize("scheme", [Modulation.AM_DSB_SC, Modulation.AM_SSB])
  def test_coherent_round_trip_after_low_pass(self, scheme) -> None:
    """Test product detection plus an external low-pass."""
    msg = message(amplitude=1.0, freq=5.0)
    spec = ModulationSpec(
      carrier_frequency_hz=200.0, modulation_constant=0.5, scheme=scheme
    )
    detected = demodulate_with_spec(modulate(msg, spec, FS), spec, FS)
    recovered = filters.apply_low_pass(detected, 50.0, FS, 201)

    interior = slice(200, -200)
    np.testing.assert_allclose(
      recovered.samples[interior], msg.samples[interior], atol=0.02
    )

  def test_coherent_detection_keeps_image(self) -> None:
    """Test that the product detector alone leaves the 2 fc component."""
    msg = message(amplitude=1.0, freq=5.0)
    spec = ModulationSpec(
      carrier_frequency_hz=200.0, modulation_constant=1.0, scheme=Modulation.AM_DSB_SC
    )
    detected = demodulate_with_spec(modulate(msg, spec, FS), spec, FS)
    spectrum = fourier.compute_spectrum(detected, FS)
    assert spectrum.magnitudes[405] > 0.4

  def test_pm_round_trip(self) -> None:
    """Test phase discrimination recovers the message."""
    msg = message(amplitude=0.5)
    spec = ModulationSpec(
      carrier_frequency_hz=128.0, modulation_constant=1.0, scheme=Modulation.PM
    )
    recovered = demodulate_with_spec(modulate(msg, spec, FS), spec, FS)
    np.testing.assert_allclose(recovered.samples, msg.samples, atol=1e-3)

  def test_fm_discriminator_scaling(self) -> None:
    """Test that the discriminator output is m(t) * fs / (2 pi)."""
    msg = message(amplitude=1.0)
    kf = 2 * np.pi * 20
    spec = ModulationSpec(
      carrier_frequency_hz=128.0, modulation_constant=kf, scheme=Modulation.FM
    )
    recovered = demodulate_with_spec(modulate(msg, spec, FS), spec, FS)

    interior = slice(2, -2)
    np.testing.assert_allclose(
      recovered.samples[interior] * 2 * np.pi / FS, msg.samples[interior], atol=0.05
    )

  def test_fm_boundary_samples_are_finite(self) -> None:
    """Test the one-sided differences at both ends."""
    spec = ModulationSpec(
      carrier_frequency_hz=128.0, modulation_constant=10.0, scheme=Modulation.FM
    )
    recovered = demodulate_with_spec(modulate(message(), spec, FS), spec, FS)
    assert np.isfinite(recovered.samples[[0, -1]]).all()

  @pytest.mark.parametrize("scheme", list(Modulation))
  def test_output_length_and_axis(self, scheme) -> None:
    """Test that every scheme preserves length and time axis."""
    received = TimeSeries(time=T, samples=np.cos(2 * np.pi * 128 * T))
    out = demodulate(received, 128.0, FS, 1.0, scheme)
    assert len(out) == len(received)
    assert out.time is received.time

  def test_single_sample_fm(self) -> None:
    """Test that FM on one sample does not fail."""
    received = TimeSeries(time=[0.0], samples=[1.0])
    assert len(demodulate(received, 10.0, FS, 1.0, Modulation.FM)) == 1

  def test_empty_input(self) -> None:
    """Test that empty input gives empty output."""
    assert demodulate(TimeSeries.empty(), 128.0, FS, 1.0, Modulation.AM_DSB).is_empty

  def test_unknown_scheme(self) -> None:
    """Test that an unknown scheme string gives an empty series."""
    received = TimeSeries(time=T, samples=np.cos(2 * np.pi * 128 * T))
    assert demodulate(received, 128.0, FS, 1.0, "VSB").is_empty

  def test_scheme_accepts_string_value(self) -> None:
    """Test that string scheme values are dispatched."""
    received = TimeSeries(time=T, samples=np.cos(2 * np.pi * 128 * T))
    np.testing.assert_allclose(
      demodulate(received, 128.0, FS, 1.0, "AM-DSB").samples,
      demodulate(received, 128.0, FS, 1.0, Modulation.AM_DSB).samples,
    )
