"""Signal containers shared by every processing stage.

A `TimeSeries` is the universal in/out type of the synthesizer, filter,
modulator and demodulator. A `FrequencyResponse` reuses the same shape with the
time axis reinterpreted as a frequency axis in Hz.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from pydantic import BaseModel, field_validator, model_validator

ComplexSequence = npt.NDArray[np.complex128]
RealSequence = npt.NDArray[np.float64]

# Floor applied to non-positive sampling rates.
MIN_SAMPLE_RATE_HZ = 1e-6


class TimeSeries(BaseModel):
  """A sampled real-valued signal.

  Attributes:
    time: Sample instants in seconds, non-decreasing.
    samples: Signal value at each instant.
  """

  time: np.ndarray
  samples: np.ndarray

  model_config = {"frozen": True, "arbitrary_types_allowed": True}

  @field_validator("time", "samples", mode="before")
  @classmethod
  def _as_float_array(cls, value: object) -> np.ndarray:
    # np.asarray keeps the same object for float64 input, so axes can be shared
    array = np.asarray(value, dtype=np.float64)
    if array.ndim != 1:
      msg = f"Expected a 1-D sequence, got shape {array.shape}"
      raise ValueError(msg)
    return array

  @model_validator(mode="after")
  def _check_lengths(self) -> TimeSeries:
    if len(self.time) != len(self.samples):
      msg = (
        f"Time axis and samples differ in length: "
        f"{len(self.time)} != {len(self.samples)}"
      )
      raise ValueError(msg)
    return self

  @classmethod
  def empty(cls) -> TimeSeries:
    """Return a series with no samples."""
    return cls(time=np.zeros(0), samples=np.zeros(0))

  def __len__(self) -> int:
    return len(self.samples)

  @property
  def is_empty(self) -> bool:
    return len(self.samples) == 0

  def sample_rate_hz(self) -> float | None:
    """Sampling rate implied by a uniform time axis, None if it cannot be told."""
    if len(self.time) < 2:
      return None
    span = float(self.time[-1] - self.time[0])
    if span <= 0:
      return None
    return (len(self.time) - 1) / span

  def with_samples(self, samples: npt.ArrayLike) -> TimeSeries:
    """Return a new series on the same time axis with different samples."""
    return type(self)(time=self.time, samples=samples)


class FrequencyResponse(TimeSeries):
  """Magnitude over frequency; `time` holds frequencies in Hz."""

  @property
  def frequencies(self) -> RealSequence:
    return self.time

  @property
  def magnitudes(self) -> RealSequence:
    return self.samples

  def peak_frequency(self) -> float:
    """Frequency of the largest magnitude bin."""
    if self.is_empty:
      msg = "Cannot locate the peak of an empty response"
      raise ValueError(msg)
    return float(self.time[int(np.argmax(self.samples))])

  @classmethod
  def empty(cls) -> FrequencyResponse:
    return cls(time=np.zeros(0), samples=np.zeros(0))
