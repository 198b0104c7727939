"""Run SQL against AWS Athena and collect the results."""

__version__ = "0.3.0"
