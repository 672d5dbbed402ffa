"""Configuration loading for mikrotik_exporter."""

from mikrotik_exporter.config.settings import ExporterConfig, ExporterSettings

__all__ = ["ExporterConfig", "ExporterSettings"]
