"""Access package version string."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["get_version"]


def get_version() -> str:
    """Get the package version.

    Returns
    -------
    version : `str`
        Version string of the installed ``fastly-api-client`` distribution.
    """
    try:
        return version("fastly-api-client")
    except PackageNotFoundError:
        # Package is not installed
        return "0.0.0"
