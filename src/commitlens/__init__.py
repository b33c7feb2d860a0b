"""CommitLens - commit activity analytics over per-line history logs."""

__version__ = "0.1.0"
