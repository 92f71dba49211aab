"""
NullFake - review authenticity scoring.

Entry point: nullfake.analyzer.ReviewAnalyzer
"""
