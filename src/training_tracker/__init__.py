"""training-tracker: hierarchical training plans and workout logs in a local store."""

__version__ = "0.1.0"
