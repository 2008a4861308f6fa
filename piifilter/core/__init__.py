# piifilter/core/__init__.py

"""Core domain models and utilities used across the PII filter.

This package provides rule types, the error hierarchy, and the YAML rule
loader shared by the matcher, the filters and the service layer.
"""
