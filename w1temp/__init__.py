"""
One-wire temperature reader with InfluxDB publishing.
"""
__version__ = "0.1.0"
