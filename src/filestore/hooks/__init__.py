"""Hooks installed into new stores."""

from filestore.hooks.installer import install_post_update_hook, is_hook_installed

__all__ = ["install_post_update_hook", "is_hook_installed"]
