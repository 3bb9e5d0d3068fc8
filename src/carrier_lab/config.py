"""Configuration records for transmit and receive chains.

A `TransmitterConfig` carries everything needed to regenerate a transmission
(oscillators, duration, sampling rate, optional filter and modulation), so it
can be stored as JSON and reloaded into identical output.
"""

import logging
import uuid
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, Field

from carrier_lab.dsp.filters import FilterSpec
from carrier_lab.dsp.modulation import ModulationSpec
from carrier_lab.dsp.synthesis import OscillatorDescriptor

logger = logging.getLogger(__name__)

ConfigT = TypeVar("ConfigT", bound=BaseModel)


def new_record_id() -> str:
  """Short random identifier for a stored record."""
  return uuid.uuid4().hex[:8]


class TransmitterConfig(BaseModel):
  """Configuration of a transmitter.

  Attributes:
    record_id: Identifier under which the record is stored.
    oscillators: Components of the baseband signal.
    duration_s: Signal duration in seconds.
    sample_rate_hz: Sampling rate in Hz.
    filter: Optional band-pass applied to the baseband before modulation.
    modulation: Carrier and scheme.
  """

  record_id: str = Field(default_factory=new_record_id)
  oscillators: list[OscillatorDescriptor] = Field(
    default_factory=lambda: [OscillatorDescriptor()], min_length=1
  )
  duration_s: float = Field(0.2, description="Signal duration in seconds.", ge=0)
  sample_rate_hz: float = Field(5000.0, description="Sampling rate in Hz.", gt=0)
  filter: FilterSpec | None = None
  modulation: ModulationSpec = Field(default_factory=ModulationSpec)

  model_config = {"frozen": True}


class ReceiverConfig(BaseModel):
  """Configuration of a receiver.

  Attributes:
    sample_rate_hz: Sampling rate of the received signal in Hz.
    modulation: Carrier and scheme the signal was transmitted with.
    filter: Optional band-pass applied before demodulation.
    low_pass_hz: Optional low-pass cutoff applied after demodulation.
    low_pass_order: Tap count of the post-demodulation low-pass.
  """

  sample_rate_hz: float = Field(5000.0, description="Sampling rate in Hz.", gt=0)
  modulation: ModulationSpec = Field(default_factory=ModulationSpec)
  filter: FilterSpec | None = None
  low_pass_hz: float | None = Field(None, gt=0)
  low_pass_order: int = Field(101, ge=3)

  model_config = {"frozen": True}


def load_config(path: Path, model: type[ConfigT]) -> ConfigT:
  """Read a JSON record into `model`.

  Raises:
    pydantic.ValidationError: If the file does not describe a valid record.
  """
  logger.debug(f"Loading {model.__name__} from {path}")
  return model.model_validate_json(path.read_text())


def save_config(path: Path, config: BaseModel) -> None:
  """Write a record as indented JSON."""
  path.write_text(config.model_dump_json(indent=2))
  logger.debug(f"Saved {type(config).__name__} to {path}")
