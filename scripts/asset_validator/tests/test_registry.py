"""
Tests for entity list registration and validations files.
"""

import io
import json
import unittest
import tempfile
import shutil
from pathlib import Path

from rich.console import Console

from ..config import ConfigurationError
from ..formatters.structured import JsonFormatter
from ..probes.base import StaticProbe
from ..processing.entities import EntitySourceError
from ..processing.messages import MessageKind
from ..processing.validator import AssetValidator, EntityContext
from ..registry import AssetCheck, ValidationRegistry, load_registry, registry_from_dict


VALIDATIONS_TOML = """
[[entity_lists]]
name = "users"
source = "db/data/01.users.csv"

  [[entity_lists.paths]]
  base = "public/images/users"

    [[entity_lists.paths.checks]]
    file = "{id}/{name}.png"
    dimension = "60x60"
    max_size = 3072

    [[entity_lists.paths.checks]]
    file = "{id}/{name}_large.png"

[[entity_lists]]
name = "products"
source = "db/data/02.products.csv"
"""


class TestAssetCheck(unittest.TestCase):
    """Test AssetCheck class."""

    def test_request_from_row(self):
        """Test file templates are filled from row fields."""
        check = AssetCheck("{id}/{name}.png", "60x60", 3072)
        request = check.request_for({"id": "1", "name": "alice"})

        self.assertEqual(request.file_name, "1/alice.png")
        self.assertEqual(request.dimension, "60x60")
        self.assertEqual(request.max_size, 3072)

    def test_surplus_cells_ignored(self):
        """Test rows with more cells than header columns."""
        check = AssetCheck("{id}.png")
        self.assertEqual(check.request_for({"id": "7", None: ["extra"]}).file_name, "7.png")

    def test_unknown_column(self):
        """Test templates referring to missing columns."""
        with self.assertRaises(ConfigurationError) as ctx:
            AssetCheck("{avatar}.png").request_for({"id": "1"})
        self.assertIn("avatar", str(ctx.exception))

    def test_positional_placeholder(self):
        """Test positional placeholders are rejected."""
        with self.assertRaises(ConfigurationError):
            AssetCheck("{0}.png").request_for({"id": "1"})

    def test_short_row(self):
        """Test a row missing a referenced cell is an entity list error."""
        check = AssetCheck("{id}/{name}.png")
        with self.assertRaises(EntitySourceError) as ctx:
            check.request_for({"id": "3", "name": None})
        self.assertIn("name", str(ctx.exception))

    def test_short_row_unreferenced_cell(self):
        """Test empty cells that the template does not use are fine."""
        check = AssetCheck("{id}.png")
        self.assertEqual(check.request_for({"id": "3", "name": None}).file_name, "3.png")

    def test_invalid_definitions(self):
        """Test empty file names and negative sizes."""
        with self.assertRaises(ConfigurationError):
            AssetCheck("")
        with self.assertRaises(ConfigurationError):
            AssetCheck("a.png", max_size=-5)


class TestValidationRegistry(unittest.TestCase):
    """Test the builder API."""

    def setUp(self):
        """Set up test fixtures."""
        self.registry = ValidationRegistry()

    def test_registration_order(self):
        """Test entity lists keep their registration order."""
        self.registry.entity_list("users", "db/users.csv")
        self.registry.entity_list("products", "db/products.csv")

        self.assertEqual(self.registry.names, ["users", "products"])
        self.assertEqual(len(self.registry), 2)

    def test_builder_chain(self):
        """Test on_path and validate build path groups."""
        users = self.registry.entity_list("users", "db/users.csv")
        users.on_path("public/images/users").validate("{id}.png", "60x60", 3072).validate("{id}.gif")
        users.on_path("public/thumbs").validate("{id}.jpg")

        spec = list(self.registry)[0]
        self.assertEqual([group.base_path for group in spec.paths], ["public/images/users", "public/thumbs"])
        self.assertEqual(spec.paths[0].checks[1], AssetCheck("{id}.gif"))
        self.assertEqual(spec.check_count, 3)

    def test_custom_routine_decorator(self):
        """Test custom routines register through a decorator."""
        users = self.registry.entity_list("users", "db/users.csv")

        @users.check
        def avatar(row, entity):
            pass

        self.assertEqual(list(self.registry)[0].routines, [avatar])

    def test_invalid_registrations(self):
        """Test empty names, sources and non-callable routines."""
        with self.assertRaises(ConfigurationError):
            self.registry.entity_list("", "db/users.csv")
        with self.assertRaises(ConfigurationError):
            self.registry.entity_list("users", "")
        with self.assertRaises(ConfigurationError):
            self.registry.entity_list("users", "db/users.csv").check("not callable")


class TestRunChecks(unittest.TestCase):
    """Test running registered checks against the engine."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.root = Path(self.temp_dir)
        self.sink = JsonFormatter(console=Console(file=io.StringIO()))
        self.validator = AssetValidator(self.sink, StaticProbe("PNG", "60x60", 100), root=self.root)
        self.registry = ValidationRegistry()

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_checks_run_in_order(self):
        """Test declared checks and routines run per row in order."""
        users = self.registry.entity_list("users", "db/users.csv")
        users.on_path("public/a").validate("{id}.png")
        users.on_path("public/b").validate("{id}.png")

        @users.check
        def custom(row, entity):
            with entity.on_path("public/c") as path:
                path.validate(f"{row['id']}.png")

        spec = list(self.registry)[0]
        spec.run_checks({"id": "1"}, EntityContext(self.validator, "users"))

        paths = [m.path for m in self.sink.messages.messages_for("users")]
        self.assertEqual(paths, [
            str(self.root / "public/a/1.png"),
            str(self.root / "public/b/1.png"),
            str(self.root / "public/c/1.png"),
        ])

    def test_entity_list_end_to_end(self):
        """Test a registered list checked through the validator."""
        (self.root / "db").mkdir()
        (self.root / "db/users.csv").write_text("id,name\n1,alice\n2,bob\n", encoding="utf-8")
        image = self.root / "public/images/users/1/alice.png"
        image.parent.mkdir(parents=True)
        image.write_bytes(b"png")

        self.registry.entity_list("users", "db/users.csv").on_path("public/images/users").validate("{id}/{name}.png")
        spec = list(self.registry)[0]

        rows = self.validator.entity_list(spec.name, spec.source, spec.run_checks)

        self.assertEqual(rows, 2)
        messages = self.sink.messages.messages_for("users")
        self.assertEqual([m.kind for m in messages], [MessageKind.MISSING])
        self.assertTrue(messages[0].path.endswith("bob.png"))

    def test_short_csv_row_stops_the_list(self):
        """Test a short CSV row fails instead of checking 'None' file names."""
        (self.root / "db").mkdir()
        (self.root / "db/users.csv").write_text("id,name\n1,alice\n2\n", encoding="utf-8")

        self.registry.entity_list("users", "db/users.csv").on_path("public").validate("{id}/{name}.png")
        spec = list(self.registry)[0]

        with self.assertRaises(EntitySourceError):
            self.validator.entity_list(spec.name, spec.source, spec.run_checks)

        paths = [m.path for m in self.sink.messages.messages_for("users")]
        self.assertEqual(paths, [str(self.root / "public/1/alice.png")])
        self.assertFalse(any("None" in path for path in paths))


class TestLoadRegistry(unittest.TestCase):
    """Test loading validations files."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, name: str, content: str) -> Path:
        path = Path(self.temp_dir) / name
        path.write_text(content, encoding="utf-8")
        return path

    def test_load_toml(self):
        """Test the TOML layout."""
        registry = load_registry(self._write("validations.toml", VALIDATIONS_TOML))

        self.assertEqual(registry.names, ["users", "products"])
        users, products = list(registry)
        self.assertEqual(users.source, "db/data/01.users.csv")
        self.assertEqual(users.paths[0].base_path, "public/images/users")
        self.assertEqual(users.paths[0].checks, [
            AssetCheck("{id}/{name}.png", "60x60", 3072),
            AssetCheck("{id}/{name}_large.png", None, 0),
        ])
        self.assertEqual(products.paths, [])

    def test_load_json(self):
        """Test the same layout as JSON."""
        data = {
            "entity_lists": [{
                "name": "users",
                "source": "db/users.csv",
                "paths": [{"base": "public", "checks": [{"file": "{id}.gif", "dimension": "10x10"}]}],
            }]
        }
        registry = load_registry(self._write("validations.json", json.dumps(data)))

        check = list(registry)[0].paths[0].checks[0]
        self.assertEqual(check, AssetCheck("{id}.gif", "10x10", 0))

    def test_empty_file(self):
        """Test a file without entity lists."""
        self.assertEqual(len(load_registry(self._write("empty.toml", ""))), 0)

    def test_malformed_files(self):
        """Test syntax errors and unsupported formats."""
        with self.assertRaises(ConfigurationError):
            load_registry(self._write("bad.toml", "[[entity_lists]\nname = "))
        with self.assertRaises(ConfigurationError):
            load_registry(self._write("bad.json", "{not json"))
        with self.assertRaises(ConfigurationError):
            load_registry(self._write("validations.yaml", "entity_lists: []"))
        with self.assertRaises(ConfigurationError):
            load_registry(Path(self.temp_dir) / "missing.toml")

    def test_missing_keys(self):
        """Test required keys are enforced."""
        broken = [
            {"entity_lists": [{"source": "db/users.csv"}]},
            {"entity_lists": [{"name": "users"}]},
            {"entity_lists": [{"name": "users", "source": "s.csv", "paths": [{"checks": []}]}]},
            {"entity_lists": [{"name": "users", "source": "s.csv", "paths": [{"base": "p", "checks": [{}]}]}]},
            {"entity_lists": [{"name": "users", "source": "s.csv", "paths": [{"base": "p", "checks": [{"file": "a", "max_size": "big"}]}]}]},
            {"entity_lists": {"name": "users"}},
            {"entity_lists": ["users"]},
        ]
        for data in broken:
            with self.assertRaises(ConfigurationError, msg=str(data)):
                registry_from_dict(data)


if __name__ == "__main__":
    unittest.main()
