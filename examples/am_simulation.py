#!/usr/bin/env python3
"""Analog modulation simulation script.

This script runs a complete analog link:
Oscillators -> (Band-pass) -> Modulator -> Demodulator -> (Low-pass) -> Output

The transmitter can be described by a JSON record (see
`carrier_lab.config.TransmitterConfig`) or assembled from command-line options.
The modulated and recovered signals are written as WAV files.
"""

import logging
import sys
from pathlib import Path
from typing import Annotated

import numpy as np
import scipy.io.wavfile
import typer
from pydantic import ValidationError

from carrier_lab.config import (
  ReceiverConfig,
  TransmitterConfig,
  load_config,
  save_config,
)
from carrier_lab.dsp.filters import FilterSpec
from carrier_lab.dsp.modulation import Modulation, ModulationSpec
from carrier_lab.dsp.signals import TimeSeries
from carrier_lab.dsp.synthesis import OscillatorDescriptor, WaveformKind
from carrier_lab.setup_logging import setup_logging
from carrier_lab.simulator.transmission_system import (
  Receiver,
  TransmissionSystem,
  Transmitter,
)
from carrier_lab.units import format_frequency

setup_logging(level="INFO")
logger = logging.getLogger(__name__)


def save_signal(file_path: Path, sample_rate: float, signal: TimeSeries) -> None:
  """Save a signal as int16 wav, peak-normalised to full scale."""
  data = signal.samples
  peak = np.max(np.abs(data)) if len(data) else 0.0
  if peak > 0:
    data = data / peak
  data_int16 = (np.clip(data, -1.0, 1.0) * 32767).astype(np.int16)
  scipy.io.wavfile.write(file_path, round(sample_rate), data_int16)
  logger.info(f"Saved {len(data)} samples to {file_path}")


def build_config(
  frequency: float,
  waveform: WaveformKind,
  duration: float,
  sample_rate: float,
  carrier: float,
  constant: float,
  scheme: Modulation,
  band: tuple[float, float] | None,
) -> TransmitterConfig:
  """Assemble a single-oscillator transmitter configuration."""
  return TransmitterConfig(
    oscillators=[OscillatorDescriptor(kind=waveform, frequency_hz=frequency)],
    duration_s=duration,
    sample_rate_hz=sample_rate,
    filter=(
      FilterSpec(low_cutoff_hz=band[0], high_cutoff_hz=band[1]) if band else None
    ),
    modulation=ModulationSpec(
      carrier_frequency_hz=carrier, modulation_constant=constant, scheme=scheme
    ),
  )


def main(
  config_file: Annotated[
    Path | None,
    typer.Option(
      "--config", "-c", help="TransmitterConfig JSON file.", exists=True, readable=True
    ),
  ] = None,
  output_dir: Annotated[
    Path,
    typer.Option("--output-dir", "-o", help="Directory for WAV and JSON output."),
  ] = Path(),
  frequency: Annotated[
    float, typer.Option("--frequency", "-f", help="Message frequency in Hz.")
  ] = 10.0,
  waveform: Annotated[
    WaveformKind, typer.Option("--waveform", "-w", help="Message waveform.")
  ] = WaveformKind.SINE,
  duration: Annotated[
    float, typer.Option("--duration", "-d", help="Duration in seconds.")
  ] = 1.0,
  sample_rate: Annotated[
    float, typer.Option("--sample-rate", "-s", help="Sampling rate in Hz.")
  ] = 8000.0,
  carrier: Annotated[
    float, typer.Option("--carrier", help="Carrier frequency in Hz.")
  ] = 1000.0,
  constant: Annotated[
    float,
    typer.Option("--constant", "-k", help="Modulation index, kp or kf."),
  ] = 0.5,
  scheme: Annotated[
    Modulation, typer.Option("--scheme", "-m", help="Modulation scheme.")
  ] = Modulation.AM_DSB,
  low_pass: Annotated[
    float | None,
    typer.Option("--low-pass", help="Low-pass cutoff after demodulation in Hz."),
  ] = None,
  band_low: Annotated[
    float | None, typer.Option("--band-low", help="Baseband filter low cutoff.")
  ] = None,
  band_high: Annotated[
    float | None, typer.Option("--band-high", help="Baseband filter high cutoff.")
  ] = None,
) -> None:
  """Simulate an analog modulation link and write its signals to disk."""
  # 1. Configuration
  if config_file is not None:
    try:
      tx_config = load_config(config_file, TransmitterConfig)
    except ValidationError:
      logger.exception(f"Invalid transmitter configuration in {config_file}")
      sys.exit(1)
  else:
    band = None
    if band_low is not None or band_high is not None:
      band = (band_low or 0.0, band_high or sample_rate / 2)
    tx_config = build_config(
      frequency, waveform, duration, sample_rate, carrier, constant, scheme, band
    )

  rx_config = ReceiverConfig(
    sample_rate_hz=tx_config.sample_rate_hz,
    modulation=tx_config.modulation,
    low_pass_hz=low_pass,
  )

  # 2. Setup System
  system = TransmissionSystem(Transmitter(tx_config), Receiver(rx_config))
  logger.info(f"Running {system.name} (record {tx_config.record_id})...")

  # 3. Run Simulation
  transmission, reception = system.process()
  if transmission.modulated.is_empty:
    logger.error("Transmitter produced no output")
    sys.exit(1)

  peak = transmission.spectrum.peak_frequency()
  logger.info(f"Spectrum peak at {format_frequency(peak)}")
  if transmission.frequency_response is not None:
    gain = transmission.frequency_response.magnitudes.max()
    logger.info(f"Band-pass peak gain {gain:.3f}")

  # 4. Output
  output_dir.mkdir(parents=True, exist_ok=True)
  fs = tx_config.sample_rate_hz
  stem = output_dir / tx_config.record_id
  save_signal(stem.with_name(f"{stem.name}_modulated.wav"), fs, transmission.modulated)
  save_signal(stem.with_name(f"{stem.name}_recovered.wav"), fs, reception.recovered)
  save_config(stem.with_suffix(".json"), tx_config)
  logger.info("Simulation complete!")


if __name__ == "__main__":
  typer.run(main)
