"""
Configuration module.

Default parameters, vault loading and configuration validation.
"""
