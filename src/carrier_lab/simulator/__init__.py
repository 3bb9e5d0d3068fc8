"""Simulator module for analog transmit/receive chains."""

from carrier_lab.simulator.sampling import (
  filter_nyquist_violated,
  nyquist_violated,
  required_sample_rate,
)
from carrier_lab.simulator.transmission_system import (
  Reception,
  Receiver,
  Transmission,
  TransmissionSystem,
  Transmitter,
)

__all__ = [
  # Transmission system components
  "Reception",
  "Receiver",
  "Transmission",
  "TransmissionSystem",
  "Transmitter",
  # Sampling diagnostics
  "filter_nyquist_violated",
  "nyquist_violated",
  "required_sample_rate",
]
