"""Cauldron Core Engine"""
__version__ = "0.1.0-alpha"
