"""Core package"""

from .server import PixieServer

__all__ = ['PixieServer']
