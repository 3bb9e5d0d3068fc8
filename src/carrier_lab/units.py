"""Human-readable formatting of physical quantities."""

import math
import re

_FREQUENCY_UNITS = (
  (1e9, "GHz"),
  (1e6, "MHz"),
  (1e3, "kHz"),
)


def format_frequency(value: float | None) -> str:
  """Format a frequency in Hz with an SI prefix.

  Examples: 1500 -> "1.5 kHz", 2_400_000_000 -> "2.4 GHz", 50 -> "50 Hz".
  Values below 10 in the chosen unit keep two decimals, below 100 one, and
  larger values none; trailing zeros are dropped.
  """
  if value is None or math.isnan(value):
    return ""

  unit, factor = "Hz", 1.0
  for threshold, name in _FREQUENCY_UNITS:
    if abs(value) >= threshold:
      unit, factor = name, threshold
      break

  num = value / factor
  if abs(num) >= 100:
    formatted = f"{num:.0f}"
  elif abs(num) >= 10:
    formatted = f"{num:.1f}"
  else:
    formatted = f"{num:.2f}"

  formatted = re.sub(r"\.0+$", "", formatted)
  formatted = re.sub(r"(\.\d*[1-9])0+$", r"\1", formatted)
  return f"{formatted} {unit}"
