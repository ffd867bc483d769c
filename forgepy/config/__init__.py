"""Configuration registry."""

from forgepy.config.registry import ConfigRecord, ConfigRegistry, ConfigScalar, to_config_value

__all__ = [
    "ConfigRecord",
    "ConfigRegistry",
    "ConfigScalar",
    "to_config_value",
]
