"""
Data Ingestion Module

Handles fetching and validating data from external sources:
- Boursorama GetTicksEOD for end-of-day OHLCV ticks
"""

__version__ = "0.1.0"
