"""
Test Suite for the Stock Ticks Research Workbench

Includes:
- Unit tests for metrics calculations
- Adapter tests with mocked HTTP
- Pipeline and CLI tests on fixture ticks
"""
