"""Reusable TUI components.

Usage:
    from replication_console.tui.components import ConfirmModal, PromptModal

    confirmed = await app.push_screen(ConfirmModal("Confirm failover"), wait_for_dismiss=True)
"""

from replication_console.tui.components.modal import ButtonVariant, ConfirmModal, PromptModal

__all__ = [
    "ButtonVariant",
    "ConfirmModal",
    "PromptModal",
]
