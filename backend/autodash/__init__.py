"""autodash: tabular dataset profiling and local analytics."""

__version__ = "0.1.0"
