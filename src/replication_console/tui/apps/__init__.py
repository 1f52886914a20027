"""TUI applications package.

Available applications:
- dashboard: live cluster view with confirmed operator actions
"""
