"""
Utilities Module
================

Logging setup used by the command line.
"""

from .logger import setup_logging

__all__ = ['setup_logging']
