"""Configuration: pydantic-settings models with YAML layering."""
