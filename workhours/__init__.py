"""Work hours calculation with per-country holidays, served over HTTP."""

__version__ = "0.1.0"