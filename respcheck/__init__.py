"""RESP value assertions and scripted test cases for checking Redis-compatible servers."""

__version__ = "0.1.0"