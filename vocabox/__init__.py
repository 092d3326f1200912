"""
vocabox - offline-first Leitner box trainer for vocabulary lists.
"""

__version__ = "0.1.0"
