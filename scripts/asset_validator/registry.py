"""
Registration of entity lists and their asset checks.

Validations are declared through a small builder API or loaded from a
declarative TOML/JSON file, never by evaluating code:

    registry = ValidationRegistry()
    users = registry.entity_list("users", "db/data/01.users.csv")
    users.on_path("public/images/users").validate("{id}/{name}.png", "60x60", 3072)

The equivalent config/asset_validations.toml:

    [[entity_lists]]
    name = "users"
    source = "db/data/01.users.csv"

      [[entity_lists.paths]]
      base = "public/images/users"

        [[entity_lists.paths.checks]]
        file = "{id}/{name}.png"
        dimension = "60x60"
        max_size = 3072
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from .config import ConfigurationError, load_data
from .processing.entities import EntitySourceError, Row
from .processing.validator import CheckRequest, EntityContext


CheckRoutine = Callable[[Row, EntityContext], None]


class _RowFields(dict):
    """Row values for file templates; cells missing from a short row are an error."""

    def __getitem__(self, key):
        value = super().__getitem__(key)
        if value is None:
            raise EntitySourceError(f"Row has no value for column '{key}': {dict(self)}")
        return value


@dataclass(frozen=True)
class AssetCheck:
    """A file check whose name is a template filled from row fields."""
    file_template: str
    dimension: Optional[str] = None
    max_size: int = 0

    def __post_init__(self):
        if not self.file_template:
            raise ConfigurationError("Asset check needs a file name")
        if not isinstance(self.max_size, int) or self.max_size < 0:
            raise ConfigurationError(f"max_size must be a non-negative integer, got {self.max_size!r}")

    def request_for(self, row: Row) -> CheckRequest:
        """
        Build the check request for one row.

        Raises:
            ConfigurationError: If the template refers to an unknown column
            EntitySourceError: If the row is too short to fill a referenced column
        """
        try:
            # Surplus cells end up under a None key in csv.DictReader rows
            fields = _RowFields((key, value) for key, value in row.items() if isinstance(key, str))
            file_name = self.file_template.format_map(fields)
        except KeyError as e:
            raise ConfigurationError(
                f"Column {e} used in '{self.file_template}' is not in the entity list header"
            ) from e
        except (IndexError, ValueError) as e:
            raise ConfigurationError(f"Invalid file template '{self.file_template}': {e}") from e
        return CheckRequest(file_name, self.dimension, self.max_size)


@dataclass
class PathGroup:
    """Checks sharing one base path."""
    base_path: str
    checks: List[AssetCheck] = field(default_factory=list)


class PathBuilder:
    """Adds checks below one base path."""

    def __init__(self, group: PathGroup):
        self.group = group

    def validate(self, file_template: str, dimension: Optional[str] = None, max_size: int = 0) -> "PathBuilder":
        self.group.checks.append(AssetCheck(file_template, dimension, max_size))
        return self


@dataclass
class EntityListSpec:
    """A registered entity list: name, CSV source and the checks run per row."""
    name: str
    source: str
    paths: List[PathGroup] = field(default_factory=list)
    routines: List[CheckRoutine] = field(default_factory=list)

    @property
    def check_count(self) -> int:
        return sum(len(group.checks) for group in self.paths) + len(self.routines)

    def run_checks(self, row: Row, entity: EntityContext) -> None:
        """Run every registered check for one row, in registration order."""
        for group in self.paths:
            with entity.on_path(group.base_path) as path:
                for check in group.checks:
                    request = check.request_for(row)
                    path.validate(request.file_name, request.dimension, request.max_size)
        for routine in self.routines:
            routine(row, entity)


class EntityListBuilder:
    """Builder returned by ValidationRegistry.entity_list."""

    def __init__(self, spec: EntityListSpec):
        self.spec = spec

    def on_path(self, base_path: Union[str, Path]) -> PathBuilder:
        group = PathGroup(str(base_path))
        self.spec.paths.append(group)
        return PathBuilder(group)

    def check(self, routine: CheckRoutine) -> CheckRoutine:
        """Register a custom routine called as routine(row, entity); usable as a decorator."""
        if not callable(routine):
            raise ConfigurationError(f"Check routine must be callable, got {routine!r}")
        self.spec.routines.append(routine)
        return routine


class ValidationRegistry:
    """Ordered collection of entity lists to validate."""

    def __init__(self):
        self._lists: List[EntityListSpec] = []

    def entity_list(self, name: str, source: Union[str, Path]) -> EntityListBuilder:
        if not name:
            raise ConfigurationError("Entity list needs a name")
        if not source:
            raise ConfigurationError(f"Entity list {name} needs a source")
        spec = EntityListSpec(name=name, source=str(source))
        self._lists.append(spec)
        return EntityListBuilder(spec)

    def __iter__(self) -> Iterator[EntityListSpec]:
        return iter(self._lists)

    def __len__(self) -> int:
        return len(self._lists)

    @property
    def names(self) -> List[str]:
        return [spec.name for spec in self._lists]


def _require(entry: Dict[str, Any], key: str, where: str) -> Any:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"{where} must be a table, got {type(entry).__name__}")
    value = entry.get(key)
    if value in (None, ""):
        raise ConfigurationError(f"{where} is missing '{key}'")
    return value


def registry_from_dict(data: Dict[str, Any]) -> ValidationRegistry:
    """Build a registry from parsed validations data."""
    registry = ValidationRegistry()
    lists = data.get("entity_lists", [])
    if not isinstance(lists, list):
        raise ConfigurationError("'entity_lists' must be an array of tables")

    for i, entry in enumerate(lists):
        where = f"entity_lists[{i}]"
        builder = registry.entity_list(_require(entry, "name", where), _require(entry, "source", where))

        for j, group in enumerate(entry.get("paths", [])):
            group_where = f"{where}.paths[{j}]"
            path = builder.on_path(_require(group, "base", group_where))
            for k, check in enumerate(group.get("checks", [])):
                check_where = f"{group_where}.checks[{k}]"
                file_template = _require(check, "file", check_where)
                try:
                    max_size = int(check.get("max_size", 0) or 0)
                except (TypeError, ValueError):
                    raise ConfigurationError(f"{check_where} has a non-numeric max_size")
                path.validate(
                    file_template,
                    check.get("dimension") or None,
                    max_size,
                )

    return registry


def load_registry(path: Union[str, Path]) -> ValidationRegistry:
    """
    Load a validations file.

    Raises:
        ConfigurationError: If the file cannot be read or is malformed
    """
    return registry_from_dict(load_data(path))
