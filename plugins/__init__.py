"""Tree loader plugins."""

from plugins.base import LoaderConfig, TreeLoaderPlugin
from plugins.manager import PluginManager

__all__ = ["LoaderConfig", "TreeLoaderPlugin", "PluginManager"]
