"""Path helpers for filesystem operations."""

import re


def sanitize_path_component(component: str) -> str:
    """
    Sanitize a string for use as a filesystem path component.

    Cache entry names such as ``public/assets`` contain slashes and must map
    to a single directory name.

    Args:
        component: String to sanitize

    Returns:
        Filesystem-safe string

    Example:
        >>> sanitize_path_component("public/assets")
        'public_assets'
        >>> sanitize_path_component("schema_version")
        'schema_version'
    """
    return re.sub(r"[^a-zA-Z0-9._-]", "_", component)
