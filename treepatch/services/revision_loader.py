"""
Revision loading.

Loads the previous and the new revision of a program as two independent
trees, picking the tree loader plugin by file extension.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from plugins.manager import PluginManager
from treepatch.models.node import Node

logger = logging.getLogger(__name__)


def default_plugin_manager(java_config_path: Optional[Path] = None) -> PluginManager:
    """Plugin manager with the bundled Java loader registered."""
    from plugins.java.plugin import JavaPlugin

    if java_config_path is None:
        from treepatch.config import settings
        java_config_path = settings.java_config_path

    manager = PluginManager()
    manager.register_plugin(JavaPlugin(config_path=java_config_path))
    return manager


class RevisionLoader:
    """Loads revisions through the registered tree loader plugins."""

    def __init__(self, plugin_manager: Optional[PluginManager] = None):
        self._plugin_manager = plugin_manager or default_plugin_manager()

    def load(self, path: Union[str, Path]) -> Node:
        """
        Load one revision.

        Raises:
            ValueError: If no plugin handles the file or it cannot be parsed
            FileNotFoundError: If the file does not exist
        """
        plugin = self._plugin_manager.get_plugin_for_file(str(path))
        if plugin is None:
            raise ValueError(f"No tree loader registered for {path}")
        return plugin.load_file(path)

    def load_pair(self, prev_path: Union[str, Path], new_path: Union[str, Path]) -> Tuple[Node, Node]:
        """Load the previous and the new revision."""
        prev_root = self.load(prev_path)
        new_root = self.load(new_path)
        logger.info(f"Loaded revision pair {prev_path} -> {new_path}")
        return prev_root, new_root
