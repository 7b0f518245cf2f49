"""Hyper-SOC — security-analyst workstation installer."""

__version__ = "0.1.0"
