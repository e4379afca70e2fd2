"""
Multi-core CPU scheduling simulator.
"""

__version__ = "0.1.0"
