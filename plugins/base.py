"""
Base interface for tree loader plugins.

A tree loader turns the source text of one revision into a mutable
``Node`` tree. Each plugin handles one language and describes how its
grammar maps onto node roles in a ``config.yaml`` next to it.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from treepatch.models.node import CONTAINER_KINDS, Node, role_kind


class LoaderConfig(BaseModel):
    """Contents of a tree loader plugin's config.yaml."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Language name the plugin registers under")
    version: str = Field(..., description="Plugin version")
    file_extensions: List[str] = Field(..., description="Handled file extensions, with leading dot")
    containers: Dict[str, str] = Field(
        default_factory=dict,
        description="Node type -> container role of its un-fielded named children",
    )
    executables: List[str] = Field(
        default_factory=list, description="Node types that always own a thrown set"
    )
    flattened: Dict[str, str] = Field(
        default_factory=dict,
        description="Wrapper node type -> container role its children are lifted into",
    )
    multi_valued_roles: List[str] = Field(default_factory=list)
    keyword_parents: List[str] = Field(default_factory=list)
    operator_parents: List[str] = Field(
        default_factory=list,
        description="Node types whose field-less operator tokens are kept as leaves",
    )
    ignored_types: List[str] = Field(default_factory=list)

    @field_validator("containers", "flattened")
    @classmethod
    def _container_roles_only(cls, mapping: Dict[str, str]) -> Dict[str, str]:
        for node_type, role in mapping.items():
            if role_kind(role) not in CONTAINER_KINDS:
                raise ValueError(f"'{node_type}' maps to '{role}', which is not a container role")
        return mapping

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> "LoaderConfig":
        """
        Load and validate a plugin configuration file.

        Raises:
            FileNotFoundError: If the file does not exist
            yaml.YAMLError: If the file is not valid YAML
            pydantic.ValidationError: If a required key is missing or a
                role mapping is invalid (a ``ValueError``)
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Plugin configuration not found: {config_path}")
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)


class TreeLoaderPlugin(ABC):
    """Base interface for language-specific tree loaders."""

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the language name (e.g., 'java')."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> List[str]:
        """Return supported file extensions (e.g., ['.java'])."""
        pass

    @abstractmethod
    def parse_file(self, file_path: str, content: str, origin: Optional[str] = None) -> Node:
        """
        Parse file content into a syntax tree.

        Args:
            file_path: Path to the file being parsed
            content: File content as string
            origin: Provenance label stored on every node; defaults to ``file_path``

        Returns:
            Root node of the tree

        Raises:
            ValueError: If the file cannot be parsed
        """
        pass

    def load_file(self, file_path: Union[str, Path]) -> Node:
        """Read and parse a file, using its path as the origin of every node."""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {path}")
        return self.parse_file(str(path), path.read_text(encoding="utf-8"), origin=str(path))
