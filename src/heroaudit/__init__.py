"""
CONTRACT: inline
ROLE: Top-level heroaudit package.

INPUTS:
  - Artifacts: traces, devtoolsLogs, HeroElements, ViewportDimensions
OUTPUTS:
  - Audit results (dict per audit id)

CONFIG KEYS:
  - n/a

PERF / TIMING:
  - n/a

FAILURE MODES:
  - n/a

LOG EVENTS:
  - n/a

TESTS:
  - n/a
"""

from .version import __version__

__all__ = ["__version__"]
