"""
Analysis Engine Module

Calculates metrics from an end-of-day tick series:
- Period statistics (high, low, change, daily variation)
- Compound daily growth rate and baseline classification
- Leveraged performance simulation
"""

__version__ = "0.1.0"
