"""
Helpdesk BoW Analyzer.

This package infers the mood and technical category of helpdesk tickets
from their free-text descriptions using a lexicon-based Bag-of-Words
classifier.
"""

__version__ = "1.0.0"
