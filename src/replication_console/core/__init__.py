"""Core infrastructure shared by the CLI and the dashboard."""
