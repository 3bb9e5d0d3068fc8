"""Logging configuration for the carrier_lab package."""

import coloredlogs


def setup_logging(level: str = "INFO") -> None:
  """Install a colored root handler with a compact one-line format.

  Library modules only create loggers; this is called once by the entry
  point that runs a simulation.

  Args:
    level: Logging level name (e.g., "INFO", "DEBUG").
  """
  coloredlogs.install(
    level=level,
    fmt="%(asctime)s | %(levelname)-8s | %(module)s | %(message)s",
    datefmt="%H:%M:%S",
  )
