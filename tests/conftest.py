"""
Pytest configuration shared by all test packages
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def pytest_addoption(parser):
    """Add custom pytest option for integration tests"""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="Run integration tests that require real Open States / Supabase access"
    )
