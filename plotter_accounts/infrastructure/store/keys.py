"""Store key builders. Single place for key format.

Layout: <namespace>plotter/accounts/<username> and
<namespace>plotter/tagdefs/<tag>. The namespace is the deployment-wide
config_key_prefix and is applied to every key, including scan prefixes.
"""

from plotter_accounts.core.constants import (
    KEY_NAMESPACE_ACCOUNTS,
    KEY_NAMESPACE_TAG_DEFINITIONS,
    KEY_REVISION,
    KEY_ROOT,
    KEY_SEP,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty.

    Args:
        value: Name used as the last key segment.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value is empty.
    """
    if not value:
        raise ValueError(f"Store key component {name!r} must be non-empty")


class KeySpace:
    """Builds and parses store keys for one configuration namespace."""

    def __init__(self, namespace: str = "") -> None:
        self.namespace = namespace
        base = f"{namespace}{KEY_ROOT}{KEY_SEP}"
        self._accounts_root = f"{base}{KEY_NAMESPACE_ACCOUNTS}{KEY_SEP}"
        self._tag_definitions_root = f"{base}{KEY_NAMESPACE_TAG_DEFINITIONS}{KEY_SEP}"
        self._revision = f"{base}{KEY_REVISION}"

    def account_key(self, username: str) -> str:
        """Key for an account by username."""
        _validate_key_component(username, "username")
        return f"{self._accounts_root}{username}"

    def accounts_prefix(self, username_prefix: str = "") -> str:
        """Scan prefix for accounts whose username starts with username_prefix."""
        return f"{self._accounts_root}{username_prefix}"

    def username_from_key(self, key: str) -> str:
        return key.removeprefix(self._accounts_root)

    def tag_definition_key(self, tag: str) -> str:
        """Key for a tag definition by tag name."""
        _validate_key_component(tag, "tag")
        return f"{self._tag_definitions_root}{tag}"

    def tag_definitions_prefix(self, tag_prefix: str = "") -> str:
        """Scan prefix for tag definitions whose name starts with tag_prefix."""
        return f"{self._tag_definitions_root}{tag_prefix}"

    def tag_from_key(self, key: str) -> str:
        return key.removeprefix(self._tag_definitions_root)

    def revision_key(self) -> str:
        """Namespace-wide counter that stamps record versions."""
        return self._revision
