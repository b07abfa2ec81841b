"""
Krill: a small screen-oriented terminal text editor.
"""
__version__ = "0.1.0"
