"""Equilibro — textbook adoption reports for school book sellers."""
__version__ = "1.0.0"
