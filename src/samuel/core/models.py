"""Component identity models shared by the registry, extractor and tracker."""

from dataclasses import dataclass
from typing import Literal

# Closed set of component kinds. Anything outside it is rejected at the boundary.
ComponentType = Literal["language", "framework", "workflow", "template"]

COMPONENT_TYPES: tuple[ComponentType, ...] = ("language", "framework", "workflow", "template")

# Short forms accepted on the command line.
TYPE_ALIASES: dict[str, ComponentType] = {
    "lang": "language",
    "l": "language",
    "fw": "framework",
    "f": "framework",
    "wf": "workflow",
    "w": "workflow",
    "tpl": "template",
    "t": "template",
}

# Component sources live under this prefix in the remote tree.
TEMPLATE_PREFIX = "template"


def canonical_type(type_or_alias: str) -> ComponentType | None:
    """Map a component type or one of its aliases to the canonical type.

    Returns None for unknown identifiers.
    """
    for component_type in COMPONENT_TYPES:
        if component_type == type_or_alias:
            return component_type
    return TYPE_ALIASES.get(type_or_alias)


@dataclass(frozen=True, order=True)
class ComponentKey:
    """Identity of a component as persisted in the project config."""

    type: ComponentType
    name: str

    def __str__(self) -> str:
        return f"{self.type}/{self.name}"


@dataclass(frozen=True)
class Component:
    """An addressable distributable unit with a source and destination path.

    source_path is relative to the root of a cached snapshot; dest_path is
    relative to the project directory. Directory components own everything
    beneath dest_path.
    """

    type: ComponentType
    name: str
    source_path: str
    dest_path: str
    description: str
    is_directory: bool = False

    @property
    def key(self) -> ComponentKey:
        return ComponentKey(type=self.type, name=self.name)

    def owns(self, path: str) -> bool:
        """Check whether a project-relative path belongs to this component."""
        if path == self.dest_path:
            return True
        return self.is_directory and path.startswith(self.dest_path + "/")
