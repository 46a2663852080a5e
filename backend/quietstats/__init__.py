"""
QuietStats - privacy-first web analytics reporting engine.
"""
__version__ = "1.0.0"
