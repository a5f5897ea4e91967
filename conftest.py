"""
Repository-level test configuration for the command-line tests.
"""
import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    """Create click test runner fixture"""
    return CliRunner()
