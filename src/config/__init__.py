"""
ABT Analytics Dashboard
Configuration Module
"""
from .settings import IngestionSettings, MonitoringSettings, Settings, get_settings

__all__ = ["IngestionSettings", "MonitoringSettings", "Settings", "get_settings"]
