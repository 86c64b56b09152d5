"""Supervisory controller for the Nucleares reactor simulation."""

__version__ = "0.1.0"
