"""Configuration management for the agent chat service."""

from agent_chat.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
