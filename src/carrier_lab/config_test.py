"""Tests for the configuration records."""

import pytest
from pydantic import ValidationError

from carrier_lab.config import (
  ReceiverConfig,
  TransmitterConfig,
  load_config,
  new_record_id,
  save_config,
)
from carrier_lab.dsp.filters import FilterSpec
from carrier_lab.dsp.modulation import Modulation, ModulationSpec
from carrier_lab.dsp.synthesis import OscillatorDescriptor, WaveformKind


def test_transmitter_defaults() -> None:
  """Test that default values are set correctly."""
  config = TransmitterConfig()
  assert config.duration_s == 0.2
  assert config.sample_rate_hz == 5000.0
  assert len(config.oscillators) == 1
  assert config.filter is None
  assert config.modulation.scheme is Modulation.AM_DSB
  assert len(config.record_id) == 8


def test_record_ids_are_unique() -> None:
  """Test that each record gets its own identifier."""
  assert len({new_record_id() for _ in range(100)}) == 100


@pytest.mark.parametrize(
  "overrides",
  [
    {"sample_rate_hz": 0},
    {"sample_rate_hz": -1.0},
    {"duration_s": -0.1},
    {"oscillators": []},
  ],
)
def test_transmitter_validation(overrides) -> None:
  """Test that invalid records are rejected."""
  with pytest.raises(ValidationError):
    TransmitterConfig(**overrides)


def test_receiver_validation() -> None:
  """Test receiver constraints."""
  with pytest.raises(ValidationError):
    ReceiverConfig(low_pass_hz=0.0)
  with pytest.raises(ValidationError):
    ReceiverConfig(low_pass_order=1)


def test_json_round_trip() -> None:
  """Test that a full record survives JSON serialisation."""
  config = TransmitterConfig(
    oscillators=[
      OscillatorDescriptor(kind=WaveformKind.SQUARE, amplitude=0.3, frequency_hz=12.0),
      OscillatorDescriptor(kind=WaveformKind.SAWTOOTH, frequency_hz=3.0, phase_rad=1.0),
    ],
    duration_s=0.5,
    sample_rate_hz=8000.0,
    filter=FilterSpec(low_cutoff_hz=1.0, high_cutoff_hz=40.0, order=51),
    modulation=ModulationSpec(
      carrier_frequency_hz=1200.0, modulation_constant=3.0, scheme=Modulation.FM
    ),
  )
  restored = TransmitterConfig.model_validate_json(config.model_dump_json())
  assert restored == config


def test_save_and_load(tmp_path) -> None:
  """Test writing and reading a record file."""
  config = ReceiverConfig(
    sample_rate_hz=2000.0,
    modulation=ModulationSpec(scheme=Modulation.AM_DSB_SC),
    low_pass_hz=100.0,
  )
  path = tmp_path / "rx.json"
  save_config(path, config)
  assert load_config(path, ReceiverConfig) == config


def test_load_invalid_file(tmp_path) -> None:
  """Test that a malformed record raises a validation error."""
  path = tmp_path / "tx.json"
  path.write_text('{"sample_rate_hz": -5}')
  with pytest.raises(ValidationError):
    load_config(path, TransmitterConfig)
