"""Generates and applies Artifactory upload permissions from YAML definitions."""

__version__ = "1.0.0"
