"""core.contracts

Central, stable interfaces (ABCs) shared between features.

This package intentionally contains only interfaces and shared type definitions.
"""
