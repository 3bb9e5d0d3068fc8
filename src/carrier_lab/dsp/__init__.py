"""Signal-processing core: synthesis, FIR filtering, Fourier analysis and modulation."""

from carrier_lab.dsp.filters import (
  FilterSpec,
  ResolvedFilter,
  apply_band_pass,
  apply_filter,
  apply_low_pass,
  design_band_pass,
  filter_frequency_response,
)
from carrier_lab.dsp.fourier import (
  compute_frequency_response,
  compute_spectrum,
  dtft,
  fft,
  ifft,
)
from carrier_lab.dsp.hilbert import envelope, hilbert, instantaneous_phase
from carrier_lab.dsp.modulation import (
  Modulation,
  ModulationSpec,
  demodulate,
  demodulate_with_spec,
  modulate,
)
from carrier_lab.dsp.signals import ComplexSequence, FrequencyResponse, TimeSeries
from carrier_lab.dsp.synthesis import OscillatorDescriptor, WaveformKind, synthesize

__all__ = [
  # Data model
  "ComplexSequence",
  "FilterSpec",
  "FrequencyResponse",
  "Modulation",
  "ModulationSpec",
  "OscillatorDescriptor",
  "ResolvedFilter",
  "TimeSeries",
  "WaveformKind",
  # Operations
  "apply_band_pass",
  "apply_filter",
  "apply_low_pass",
  "compute_frequency_response",
  "compute_spectrum",
  "demodulate",
  "demodulate_with_spec",
  "design_band_pass",
  "dtft",
  "envelope",
  "fft",
  "filter_frequency_response",
  "hilbert",
  "ifft",
  "instantaneous_phase",
  "modulate",
  "synthesize",
]
