"""
Import validation tests.

These tests ensure all modules can be imported successfully, catching
issues like missing dependencies or circular imports BEFORE deployment.

Run with: pytest tests/unit/test_imports.py -v
"""

import importlib
import sys
from pathlib import Path

import pytest


# Add src to path to simulate Lambda environment
SRC_PATH = Path(__file__).parent.parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


class TestHandlerImports:
    """Verify all handler modules can be imported without errors."""

    @pytest.mark.parametrize("module_name,entrypoints", [
        ("handlers.main", ["lambda_handler"]),
        ("handlers.health_check", ["lambda_handler"]),
        ("handlers.events", ["lambda_handler"]),
        ("handlers.tickets", ["lambda_handler"]),
        ("handlers.bulk_tickets", ["lambda_handler", "import_handler"]),
        ("handlers.redemption", [
            "check_handler", "scan_handler", "redeem_handler", "unredeem_handler", "activity_handler",
        ]),
    ])
    def test_handler_import(self, module_name: str, entrypoints):
        """Each handler module should import without errors and expose its entrypoints."""
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")
        for name in entrypoints:
            assert hasattr(module, name), f"{module_name} missing {name}"


class TestServiceImports:
    """Verify all service modules can be imported."""

    @pytest.mark.parametrize("module_name", [
        "services.code_generator",
        "services.code_resolver",
        "services.redemption_service",
        "services.ticket_service",
        "services.event_service",
        "services.bulk_issuance_service",
        "services.csv_import",
        "services.wiring",
    ])
    def test_service_import(self, module_name: str):
        """Each service module should import without errors."""
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")


class TestModelImports:
    """Verify all model modules can be imported."""

    @pytest.mark.parametrize("module_name", [
        "models",
        "models.event",
        "models.ticket",
        "models.bulk",
        "models.redemption",
    ])
    def test_model_import(self, module_name: str):
        """Each model module should import without errors."""
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")


class TestRepositoryImports:
    """Verify storage modules can be imported without a database."""

    @pytest.mark.parametrize("module_name", [
        "repositories.schema",
        "repositories.engine",
        "repositories.ticket_store",
    ])
    def test_repository_import(self, module_name: str):
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")


class TestUtilImports:
    """Verify all utility modules can be imported."""

    @pytest.mark.parametrize("module_name", [
        "utils.logging_config",
        "utils.error_handling",
        "utils.validators",
        "utils.settings",
        "utils.http",
    ])
    def test_util_import(self, module_name: str):
        """Each utility module should import without errors."""
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")


class TestNoSrcPrefix:
    """Ensure no modules use 'from src.' imports (breaks in Lambda)."""

    @pytest.mark.parametrize("package", ["handlers", "services", "models", "repositories", "utils"])
    def test_no_src_prefix(self, package: str):
        """Source files should not have 'from src.' imports."""
        for py_file in (SRC_PATH / package).glob("*.py"):
            content = py_file.read_text()
            assert "from src." not in content, f"{py_file.name} contains 'from src.' import"
            assert "import src." not in content, f"{py_file.name} contains 'import src.' import"
