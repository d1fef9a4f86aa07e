"""Quest log data model, persistence facade, and console front-end."""

__version__ = "0.1.0"
