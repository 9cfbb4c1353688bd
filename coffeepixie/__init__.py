"""Coffee Pixie - scheduled coffee on a Raspberry Pi"""

__version__ = "1.0.0"
