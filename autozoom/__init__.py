"""
autozoom: automatic pan and zoom for screen recordings.
"""

__version__ = '0.1.0'
