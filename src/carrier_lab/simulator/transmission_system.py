"""Transmit and receive chains built from the pure DSP stages.

The architecture mirrors a radio link:
- Transmitter: synthesize -> (band-pass) -> modulate, plus analysis views
- Receiver: (band-pass) -> demodulate -> (low-pass)
- TransmissionSystem: feeds the transmitter output into the receiver

The classes hold configuration only; every call recomputes its output from
scratch, so instances can be shared between threads.
"""

import logging

from pydantic import BaseModel

from carrier_lab.config import ReceiverConfig, TransmitterConfig
from carrier_lab.dsp import filters, fourier, modulation, synthesis
from carrier_lab.dsp.signals import FrequencyResponse, TimeSeries
from carrier_lab.simulator import sampling
from carrier_lab.units import format_frequency

logger = logging.getLogger(__name__)


class Transmission(BaseModel):
  """Everything a transmitter run produces.

  Attributes:
    baseband: Synthesized message.
    filtered: Band-passed message, None when filtering is disabled.
    frequency_response: Magnitude response of the band-pass, None when
      filtering is disabled or the pass band is empty.
    modulated: Passband signal.
    spectrum: Single-sided magnitude spectrum of `modulated`.
  """

  baseband: TimeSeries
  filtered: TimeSeries | None = None
  frequency_response: FrequencyResponse | None = None
  modulated: TimeSeries
  spectrum: FrequencyResponse

  model_config = {"frozen": True}

  @property
  def message(self) -> TimeSeries:
    """The signal that was actually modulated."""
    return self.filtered if self.filtered is not None else self.baseband


class Reception(BaseModel):
  """Everything a receiver run produces.

  Attributes:
    filtered: Band-passed input, None when filtering is disabled.
    demodulated: Raw demodulator output.
    recovered: Demodulator output after the optional low-pass.
  """

  filtered: TimeSeries | None = None
  demodulated: TimeSeries
  recovered: TimeSeries

  model_config = {"frozen": True}


class Transmitter:
  """Generates a modulated signal from a `TransmitterConfig`."""

  def __init__(self, config: TransmitterConfig) -> None:
    self.config = config

  @property
  def name(self) -> str:
    mod = self.config.modulation
    return f"{mod.scheme.value}@{format_frequency(mod.carrier_frequency_hz)}"

  @property
  def sample_rate_hz(self) -> float:
    return self.config.sample_rate_hz

  def check_sampling(self) -> list[str]:
    """Describe each sampling-rate problem of the configuration."""
    cfg = self.config
    fs = cfg.sample_rate_hz
    problems = []

    if sampling.nyquist_violated(cfg.oscillators, fs):
      f_max = synthesis.max_frequency(cfg.oscillators)
      problems.append(
        f"Sampling rate {format_frequency(fs)} is below twice the highest "
        f"oscillator frequency {format_frequency(f_max)}"
      )

    required = sampling.required_sample_rate(
      cfg.modulation.carrier_frequency_hz, cfg.oscillators
    )
    if fs < required:
      problems.append(
        f"Sampling rate {format_frequency(fs)} is below the "
        f"{format_frequency(required)} needed for the modulated signal"
      )

    if cfg.filter is not None and sampling.filter_nyquist_violated(
      cfg.filter.high_cutoff_hz, cfg.filter.sample_rate_hz or fs
    ):
      problems.append(
        f"Filter upper cutoff {format_frequency(cfg.filter.high_cutoff_hz)} "
        "reaches Nyquist and will be clamped"
      )

    return problems

  def transmit(self) -> Transmission:
    """Run synthesis, optional filtering and modulation."""
    cfg = self.config
    fs = cfg.sample_rate_hz

    for problem in self.check_sampling():
      logger.warning(problem)

    baseband = synthesis.synthesize(cfg.oscillators, cfg.duration_s, fs)
    logger.debug(
      f"Synthesized {len(baseband)} samples from {len(cfg.oscillators)} oscillators"
    )

    filtered = None
    response = None
    if cfg.filter is not None:
      filtered = filters.apply_filter(baseband, cfg.filter, fs)
      response = filters.filter_frequency_response(cfg.filter, fs)

    message = filtered if filtered is not None else baseband
    modulated = modulation.modulate(message, cfg.modulation, fs)
    spectrum = fourier.compute_spectrum(modulated, fs)

    return Transmission(
      baseband=baseband,
      filtered=filtered,
      frequency_response=response,
      modulated=modulated,
      spectrum=spectrum,
    )


class Receiver:
  """Recovers a message from a received signal per a `ReceiverConfig`."""

  def __init__(self, config: ReceiverConfig) -> None:
    self.config = config

  @property
  def name(self) -> str:
    mod = self.config.modulation
    return f"{mod.scheme.value}@{format_frequency(mod.carrier_frequency_hz)}"

  def receive(self, signal: TimeSeries) -> Reception:
    """Run optional band-pass, demodulation and optional low-pass."""
    cfg = self.config
    fs = cfg.sample_rate_hz

    filtered = None
    if cfg.filter is not None:
      filtered = filters.apply_filter(signal, cfg.filter, fs)

    source = filtered if filtered is not None else signal
    demodulated = modulation.demodulate_with_spec(source, cfg.modulation, fs)
    if demodulated.is_empty and not source.is_empty:
      logger.error(f"Receiver {self.name} produced no output")

    recovered = demodulated
    if cfg.low_pass_hz is not None:
      recovered = filters.apply_low_pass(
        demodulated, cfg.low_pass_hz, fs, cfg.low_pass_order
      )

    return Reception(filtered=filtered, demodulated=demodulated, recovered=recovered)


class TransmissionSystem:
  """Complete link: Transmitter -> Receiver.

  There is no channel model; the receiver sees the transmitted samples.
  """

  def __init__(self, transmitter: Transmitter, receiver: Receiver) -> None:
    self.transmitter = transmitter
    self.receiver = receiver

    if transmitter.sample_rate_hz != receiver.config.sample_rate_hz:
      logger.warning(
        f"Transmitter and receiver sampling rates differ: "
        f"{transmitter.sample_rate_hz} Hz vs {receiver.config.sample_rate_hz} Hz"
      )

  def process(self) -> tuple[Transmission, Reception]:
    """Transmit and then receive the transmitted signal."""
    transmission = self.transmitter.transmit()
    reception = self.receiver.receive(transmission.modulated)
    return transmission, reception

  @property
  def name(self) -> str:
    """System name for reporting (TX_RX format)."""
    return f"{self.transmitter.name}_{self.receiver.name}"
