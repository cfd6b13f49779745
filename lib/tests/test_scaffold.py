"""Tests for kozen-env package scaffold structure."""

import pathlib

import tomllib


ROOT = pathlib.Path(__file__).resolve().parent.parent.parent
PACKAGE = ROOT / "lib" / "kozen_env"


class TestDirectoryStructure:
    """Verify kozen_env has the expected files."""

    def test_pyproject_toml_exists(self):
        assert (ROOT / "pyproject.toml").is_file()

    def test_package_init_exists(self):
        assert (PACKAGE / "__init__.py").is_file()

    def test_core_modules_exist(self):
        for name in ("codec", "sanitizer", "profile", "dispatch", "exposer", "runner"):
            assert (PACKAGE / f"{name}.py").is_file(), name


class TestPyprojectToml:
    """Verify pyproject.toml has correct metadata."""

    def _load(self) -> dict:
        return tomllib.loads((ROOT / "pyproject.toml").read_text())

    def test_package_name(self):
        assert self._load()["project"]["name"] == "kozen-env"

    def test_requires_python(self):
        assert self._load()["project"]["requires-python"] == ">=3.11"

    def test_runtime_dependencies(self):
        deps = self._load()["project"]["dependencies"]
        assert any("pydantic" in d for d in deps)
        assert any("python-dotenv" in d for d in deps)

    def test_hatchling_build_backend(self):
        assert self._load()["build-system"]["build-backend"] == "hatchling.build"

    def test_no_entry_points(self):
        project = self._load()["project"]
        assert "scripts" not in project
        assert "gui-scripts" not in project
