"""
Data access layer: HTTP client, indicator providers, reference data and
document persistence.
"""
