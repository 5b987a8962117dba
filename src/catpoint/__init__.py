"""Catpoint security panel core"""

__version__ = "1.0.0"
