"""
Registry of tree loader plugins.

Revisions are routed to a loader by file extension. Plugin
configurations live in ``<plugins_dir>/<language>/config.yaml`` and are
validated as ``LoaderConfig``.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from plugins.base import LoaderConfig, TreeLoaderPlugin

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.yaml"


class PluginManager:
    """Tracks registered tree loaders by language and by file extension."""

    def __init__(self):
        self._plugins: Dict[str, TreeLoaderPlugin] = {}
        self._extensions: Dict[str, str] = {}
        self._configs: Dict[Path, LoaderConfig] = {}

    def register_plugin(self, plugin: TreeLoaderPlugin) -> None:
        """
        Register a loader, replacing any loader of the same language.

        Extensions already claimed by another language are taken over.
        """
        language = plugin.language_name
        if language in self._plugins:
            logger.warning(f"Replacing tree loader for '{language}'")
            self.unregister_plugin(language)

        self._plugins[language] = plugin
        for ext in plugin.file_extensions:
            ext = ext.lower()
            owner = self._extensions.get(ext)
            if owner is not None and owner != language:
                logger.warning(f"Extension '{ext}' moves from '{owner}' to '{language}'")
            self._extensions[ext] = language

        logger.info(f"Registered tree loader '{language}' for {', '.join(plugin.file_extensions)}")

    def unregister_plugin(self, language_name: str) -> bool:
        """
        Remove a loader and the extensions it owns.

        Returns:
            True if a loader was removed
        """
        if self._plugins.pop(language_name, None) is None:
            return False
        self._extensions = {
            ext: language for ext, language in self._extensions.items() if language != language_name
        }
        logger.info(f"Unregistered tree loader '{language_name}'")
        return True

    def get_plugin_for_file(self, file_path: Union[str, Path]) -> Optional[TreeLoaderPlugin]:
        """Loader for ``file_path`` by its (case-insensitive) extension, if any."""
        language = self._extensions.get(Path(file_path).suffix.lower())
        if language is None:
            logger.debug(f"No tree loader for {file_path}")
            return None
        return self._plugins[language]

    def get_plugin(self, language_name: str) -> Optional[TreeLoaderPlugin]:
        return self._plugins.get(language_name)

    def list_supported_languages(self) -> List[str]:
        return list(self._plugins)

    def list_supported_extensions(self) -> List[str]:
        return list(self._extensions)

    def load_plugin_config(self, plugin_dir: Path) -> LoaderConfig:
        """
        Load the configuration of the plugin in ``plugin_dir``.

        Results are cached per file.

        Raises:
            FileNotFoundError: If config.yaml is not found
            yaml.YAMLError: If config.yaml is malformed
            ValueError: If the configuration does not validate
        """
        config_path = Path(plugin_dir) / CONFIG_FILE
        cached = self._configs.get(config_path)
        if cached is not None:
            return cached

        try:
            config = LoaderConfig.from_yaml(config_path)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse plugin configuration {config_path}: {e}")
            raise

        self._configs[config_path] = config
        logger.debug(f"Loaded plugin configuration {config.name} v{config.version} from {config_path}")
        return config

    def discover_plugin_configs(self, plugins_dir: Path) -> Dict[str, LoaderConfig]:
        """
        Collect the configurations found one level below ``plugins_dir``.

        Directories without a config.yaml are skipped, and so are invalid
        configurations (logged as errors).

        Returns:
            Mapping of language name to configuration
        """
        plugins_dir = Path(plugins_dir)
        if not plugins_dir.is_dir():
            logger.warning(f"Plugins directory not found: {plugins_dir}")
            return {}

        discovered: Dict[str, LoaderConfig] = {}
        for plugin_dir in sorted(p for p in plugins_dir.iterdir() if (p / CONFIG_FILE).is_file()):
            try:
                config = self.load_plugin_config(plugin_dir)
            except (ValidationError, yaml.YAMLError) as e:
                logger.error(f"Skipping plugin in {plugin_dir}: {e}")
                continue
            discovered[config.name] = config
        return discovered

    def get_statistics(self) -> Dict[str, object]:
        return {
            "total_plugins": len(self._plugins),
            "total_extensions": len(self._extensions),
            "languages": list(self._plugins),
        }
