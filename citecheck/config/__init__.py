"""Configuration loading."""

from citecheck.config.loader import load_validator_config

__all__ = ["load_validator_config"]
