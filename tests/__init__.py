"""
AI Trading System Test Suite

This package contains all tests for the AI Trading System, organized by category:
- unit: Unit tests for individual components
- integration: Integration tests for component interactions
- e2e: End-to-end tests for complete workflows
- performance: Performance and profiling tests
- validation: Validation and quality tests
- comparison: Comparison tests between approaches
"""

__version__ = "1.0.0"
