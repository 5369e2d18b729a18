"""Java tree loader plugin."""

from plugins.java.plugin import JavaPlugin

__all__ = ["JavaPlugin"]
