"""Configuration for Spinet frontend."""
