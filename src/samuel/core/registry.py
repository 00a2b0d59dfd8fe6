"""Static catalog mapping component identity to source and destination paths.

The registry is built once at startup and is read-only afterwards. Lookups
never raise: unknown identifiers resolve to None.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from samuel.core.models import Component, ComponentKey, canonical_type


@dataclass(frozen=True)
class Preset:
    """A named selection of components offered by `samuel init`.

    workflows=None selects every workflow.
    """

    name: str
    description: str
    languages: tuple[str, ...]
    frameworks: tuple[str, ...]
    workflows: tuple[str, ...] | None


class Registry:
    """Ordered, read-only mapping from (type, name) to Component."""

    def __init__(self, components: Iterable[Component], presets: Iterable[Preset] = ()) -> None:
        self._components: dict[ComponentKey, Component] = {}
        for component in components:
            if component.key in self._components:
                msg = f"Duplicate component in registry: {component.key}"
                raise ValueError(msg)
            self._components[component.key] = component
        self._presets: dict[str, Preset] = {preset.name: preset for preset in presets}

    def resolve(self, type_or_alias: str, name: str) -> Component | None:
        """Resolve a component by type (or type alias) and name."""
        component_type = canonical_type(type_or_alias)
        if component_type is None:
            return None
        return self._components.get(ComponentKey(type=component_type, name=name))

    def get(self, key: ComponentKey) -> Component | None:
        return self._components.get(key)

    def list_components(self, type_or_alias: str | None = None) -> list[Component]:
        """List components in definition order, optionally filtered by type.

        An unknown type yields an empty list.
        """
        if type_or_alias is None:
            return list(self._components.values())
        component_type = canonical_type(type_or_alias)
        return [c for c in self._components.values() if c.type == component_type]

    def core_templates(self) -> list[Component]:
        """Template components, which every installation carries."""
        return self.list_components("template")

    def destinations_for(self, selection: Iterable[Component]) -> list[str]:
        """Deduplicated destination paths of a selection, in definition order."""
        selected = {component.key for component in selection}
        destinations: list[str] = []
        for component in self._components.values():
            if component.key in selected and component.dest_path not in destinations:
                destinations.append(component.dest_path)
        return destinations

    def owner_of(self, path: str) -> Component | None:
        """Find the component whose destination contains a project-relative path."""
        for component in self._components.values():
            if component.owns(path):
                return component
        return None

    @property
    def presets(self) -> list[Preset]:
        return list(self._presets.values())

    def preset(self, name: str) -> Preset | None:
        return self._presets.get(name)

    def select_preset(self, preset: Preset) -> list[Component]:
        """Expand a preset into components, core templates first."""
        selection = self.core_templates()
        selection.extend(self._select("language", preset.languages))
        selection.extend(self._select("framework", preset.frameworks))
        if preset.workflows is None:
            selection.extend(self.list_components("workflow"))
        else:
            selection.extend(self._select("workflow", preset.workflows))
        return selection

    def _select(self, component_type: str, names: Sequence[str]) -> list[Component]:
        selected: list[Component] = []
        for name in names:
            component = self.resolve(component_type, name)
            if component is not None:
                selected.append(component)
        return selected
