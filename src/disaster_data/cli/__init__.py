"""
Command-line interface for Disaster Data Platform.
"""
