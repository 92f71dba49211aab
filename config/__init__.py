"""
Configuration package for NullFake.
"""
