"""
Smoke tests to verify the runtime and dependencies are installed correctly.

These tests confirm that:
1. Python 3.11+ is installed
2. All core dependencies are importable
3. Project version is accessible
"""

import sys


class TestPythonVersion:
    """Verify Python version requirements."""

    def test_python_311_or_higher(self) -> None:
        assert sys.version_info >= (3, 11), (
            f"Python 3.11+ required, "
            f"got {sys.version_info.major}.{sys.version_info.minor}"
        )


class TestCoreDependencies:
    def test_structlog_import(self) -> None:
        """structlog must be importable for structured logging."""
        import structlog

        assert structlog.get_logger() is not None

    def test_dotenv_import(self) -> None:
        """python-dotenv must be importable for script configuration."""
        from dotenv import load_dotenv

        assert callable(load_dotenv)


class TestProjectVersion:
    def test_version_is_semver(self, project_version: str) -> None:
        parts = project_version.split(".")

        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)
