"""
Paper Catcher: keyword-driven arXiv ingestion, translation and search.
"""

__version__ = "0.1.0"
