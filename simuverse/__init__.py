"""WGSL shader preprocessing, cameras, lights, scenes, buffer models and simulation settings."""

__version__ = "0.1.0"