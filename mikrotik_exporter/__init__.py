"""
mikrotik_exporter - Prometheus exporter for MikroTik RouterOS devices.
"""

__version__ = "1.0.0"
