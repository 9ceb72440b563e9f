"""
Disaster Data Platform.

Normalizes EMDAT disaster exports (CSV or XLSX) into geolocated
disaster events ready for mapping, filtering and analysis.
"""

__version__ = "0.1.0"
