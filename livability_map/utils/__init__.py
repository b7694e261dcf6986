"""
Utility Module

Configuration, logging, geospatial and browser helpers.
"""
