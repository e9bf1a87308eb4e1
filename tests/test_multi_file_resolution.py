"""Tests for import resolution over real grammar files."""

import os
import tempfile
from pathlib import Path

import pytest

from g4resolve import (
    CircularImportError,
    ImportResolver,
    NotFoundError,
    ResolverConfig,
    SecurityError,
)


def create_temp_file(directory, name, content):
    """Helper to create temporary grammar files."""
    file_path = directory / name
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content)
    return file_path


class TestLocalResolution:
    """Test resolution through the local file store."""

    def test_basic_import_resolution(self) -> None:
        """Test basic import resolution."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir = Path(tmpdir)

            main_content = """
grammar Expr;
import Common;

expr: expr '+' term | term;
"""
            common_content = """
grammar Common;

term: INT;
INT: [0-9]+;
"""
            main_file = create_temp_file(tmpdir, "Expr.g4", main_content)
            create_temp_file(tmpdir, "Common.g4", common_content)

            resolver = ImportResolver(ResolverConfig(allowed_base_paths=[str(tmpdir)]))
            resolved = resolver.resolve_imports(main_content, main_file)

            assert list(resolved) == ["Common"]
            assert resolved["Common"].content == common_content
            assert resolved["Common"].source_path.resolve() == (tmpdir / "Common.g4").resolve()
            assert resolved["Common"].locator.startswith("file://")

    def test_nested_imports(self) -> None:
        """Test nested import resolution across directories."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir = Path(tmpdir)

            # main/Main.g4 -> lib/Lib1.g4 -> lib/Lib2.g4
            main_content = "grammar Main;\nimport Lib1;\nmain: lib1;\n"
            main_file = create_temp_file(tmpdir / "main", "Main.g4", main_content)
            create_temp_file(tmpdir / "lib", "Lib1.g4", "grammar Lib1;\nimport Lib2;\nlib1: lib2;\n")
            create_temp_file(tmpdir / "lib", "Lib2.g4", "grammar Lib2;\nlib2: 'x';\n")

            config = ResolverConfig(
                allowed_base_paths=[str(tmpdir / "main"), str(tmpdir / "lib")],
            )
            report = ImportResolver(config).resolve_file(main_file)

            assert report.root_name == "Main"
            assert set(report.imports) == {"Lib1", "Lib2"}
            assert report.imports["Lib2"].base_dir.resolve() == (tmpdir / "lib").resolve()
            assert report.order == ["Lib2", "Lib1", "Main"]

    def test_circular_import_detection(self) -> None:
        """Test detection of circular imports."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir = Path(tmpdir)

            a_file = create_temp_file(tmpdir, "A.g4", "grammar A;\nimport B;\na: 'a';\n")
            create_temp_file(tmpdir, "B.g4", "grammar B;\nimport A;\nb: 'b';\n")

            resolver = ImportResolver(ResolverConfig(allowed_base_paths=[str(tmpdir)]))
            with pytest.raises(CircularImportError, match="Circular import detected"):
                resolver.resolve_file(a_file)

    def test_missing_import(self) -> None:
        """Test a reference to a grammar that does not exist."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir = Path(tmpdir)
            main_file = create_temp_file(tmpdir, "Main.g4", "grammar Main;\nimport Nope;\n")

            resolver = ImportResolver(ResolverConfig(allowed_base_paths=[str(tmpdir)]))
            with pytest.raises(NotFoundError, match="Nope"):
                resolver.resolve_file(main_file)

    def test_auto_discovery(self) -> None:
        """Test finding imports in nested allowed directories."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir = Path(tmpdir)

            main_file = create_temp_file(tmpdir / "src", "Main.g4", "grammar Main;\nimport Common;\n")
            common = create_temp_file(tmpdir / "vendor" / "antlr", "Common.g4", "grammar Common;\n")

            config = ResolverConfig(allowed_base_paths=[str(tmpdir)])
            with pytest.raises(NotFoundError):
                ImportResolver(config).resolve_file(main_file)

            config = ResolverConfig(allowed_base_paths=[str(tmpdir)], auto_discovery=True)
            report = ImportResolver(config).resolve_file(main_file)
            assert report.imports["Common"].source_path.resolve() == common.resolve()

    def test_import_outside_allowed_paths(self) -> None:
        """Test that imports next to a grammar outside the allowed root are rejected."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir = Path(tmpdir)

            content = "grammar Main;\nimport Common;\n"
            main_file = create_temp_file(tmpdir / "outside", "Main.g4", content)
            create_temp_file(tmpdir / "outside", "Common.g4", "grammar Common;\n")
            (tmpdir / "allowed").mkdir()

            resolver = ImportResolver(ResolverConfig(allowed_base_paths=[str(tmpdir / "allowed")]))
            with pytest.raises(SecurityError):
                resolver.resolve_imports(content, main_file)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlink_escape(self) -> None:
        """Test that a symlink pointing outside the allowed root is rejected."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir = Path(tmpdir)

            secret = create_temp_file(tmpdir / "secret", "Common.g4", "grammar Common;\n")
            content = "grammar Main;\nimport Common;\n"
            main_file = create_temp_file(tmpdir / "allowed", "Main.g4", content)
            try:
                (tmpdir / "allowed" / "Common.g4").symlink_to(secret)
            except OSError:
                pytest.skip("cannot create symlinks")

            resolver = ImportResolver(ResolverConfig(allowed_base_paths=[str(tmpdir / "allowed")]))
            with pytest.raises(SecurityError):
                resolver.resolve_imports(content, main_file)

    def test_cache_survives_file_change(self) -> None:
        """Test that a resolver reuses cached imports across runs."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir = Path(tmpdir)

            content = "grammar Main;\nimport Common;\n"
            main_file = create_temp_file(tmpdir, "Main.g4", content)
            common = create_temp_file(tmpdir, "Common.g4", "grammar Common;\nc: 'v1';\n")

            resolver = ImportResolver(ResolverConfig(allowed_base_paths=[str(tmpdir)]))
            first = resolver.resolve_imports(content, main_file)

            common.write_text("grammar Common;\nc: 'v2';\n")
            second = resolver.resolve_imports(content, main_file)
            assert second["Common"] is first["Common"]

            uncached = ImportResolver(
                ResolverConfig(allowed_base_paths=[str(tmpdir)], cache_enabled=False),
            )
            assert "'v2'" in uncached.resolve_imports(content, main_file)["Common"].content
