"""
Tracker Settings

Validated configuration models for the observer, satellite selection, pass
prediction, radio, alerts and display refresh, loaded from a TOML file.

The file location defaults to the TRACKER_CONFIG environment variable, then
``config.toml`` in the working directory. Any problem reading or validating
the file is reported as ConfigurationError.
"""

import os
import tomllib
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from tracking_service.errors import ConfigurationError
from tracking_service.observer import Observer

DEFAULT_CONFIG_PATH = "config.toml"


class ObserverSettings(BaseModel):
    """Ground station location"""
    name: str = "Ground Station"
    latitude: float = Field(0.0, ge=-90.0, le=90.0)
    longitude: float = Field(0.0, ge=-180.0, le=180.0)
    altitude: float = 0.0  # meters

    def to_observer(self) -> Observer:
        return Observer(self.name, self.latitude, self.longitude, self.altitude)


class SatelliteSettings(BaseModel):
    """Which satellites of the element file to track"""
    tle_file: Optional[Path] = None
    tracked_satellites: List[str] = Field(default_factory=list)
    max_satellites: int = Field(10, ge=1)


class PredictionSettings(BaseModel):
    """Pass search parameters"""
    num_passes: int = Field(5, ge=1)
    min_elevation: float = Field(10.0, ge=-90.0, le=90.0)  # degrees
    search_days: float = Field(2.0, gt=0.0)
    time_step: float = Field(30.0, gt=0.0)  # seconds


class RadioSettings(BaseModel):
    """Doppler and link evaluation"""
    enabled: bool = False
    downlink_frequency_mhz: float = Field(145.800, gt=0.0)
    uplink_frequency_mhz: float = Field(437.800, gt=0.0)


class AlertSettings(BaseModel):
    """Upcoming pass alerts"""
    enabled: bool = True
    alert_before_pass: int = Field(10, ge=0)  # minutes
    min_elevation_for_alert: float = Field(20.0, ge=-90.0, le=90.0)


class DisplaySettings(BaseModel):
    """Refresh loop timing"""
    refresh_rate: int = Field(1000, gt=0)  # milliseconds


class Settings(BaseModel):
    """Complete tracker configuration"""
    observer: ObserverSettings = Field(default_factory=ObserverSettings)
    satellites: SatelliteSettings = Field(default_factory=SatelliteSettings)
    prediction: PredictionSettings = Field(default_factory=PredictionSettings)
    radio: RadioSettings = Field(default_factory=RadioSettings)
    alerts: AlertSettings = Field(default_factory=AlertSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)


def default_config_path() -> Path:
    return Path(os.getenv("TRACKER_CONFIG", DEFAULT_CONFIG_PATH))


def parse_settings(text: str) -> Settings:
    """Validate TOML text into Settings."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML: {e}")

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from a TOML file.

    Args:
        path: Config file; defaults to $TRACKER_CONFIG or config.toml

    Raises:
        ConfigurationError: If the file cannot be read or is invalid
    """
    path = Path(path) if path is not None else default_config_path()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Could not load configuration file '{path}': {e}")
    return parse_settings(text)
