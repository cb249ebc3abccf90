"""可选依赖检测。

Runtime feature detection for optional extras.
"""
from __future__ import annotations


def _check_import(module_name: str) -> bool:
    """Check if a module is importable."""
    try:
        __import__(module_name)
        return True
    except ImportError:
        return False


HAS_KEYRING: bool = _check_import("keyring")


def require_extra(extra_name: str, package_name: str) -> None:
    """Raise ImportError with installation hint if extra is not available.

    Args:
        extra_name: Name of the pip extra (e.g., 'keyring')
        package_name: Import name of the required package

    Raises:
        ImportError: With installation instructions when package is not available.
    """
    if _check_import(package_name):
        return
    raise ImportError(
        f"The '{extra_name}' extra is required for this feature. "
        f"Install it with: pip install luzia-python[{extra_name}]"
    )
