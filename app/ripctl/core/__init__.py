"""Core configuration, paths and theming for ripctl."""
