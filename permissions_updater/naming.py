"""
Deterministic names for generated objects.

Names are used both when payloads are generated and later when remote objects
are listed and deleted, so they must be reproducible across runs.
"""

import hashlib
import re

# Artifactory has an undocumented limit of 64 characters for object names
MAX_NAME_LENGTH = 64
_TRUNCATED_LENGTH = 54
_HASH_LENGTH = 7

_SEPARATORS = re.compile(r"[ /]")


def _sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


class NameCodec:
    """Derives the names of generated groups, permission targets, and token users."""

    def __init__(self, prefix: str):
        self.prefix = prefix

    def _generated_name(self, base: str) -> str:
        name = self.prefix + _SEPARATORS.sub("_", base)
        if len(name) > MAX_NAME_LENGTH:
            # 28 bits of hash keep collisions unlikely, not impossible
            name = f"{name[:_TRUNCATED_LENGTH]}_{_sha256_hex(name)[:_HASH_LENGTH]}"
        return name

    def permission_target_name(self, base: str) -> str:
        """Name of the permission target generated for a definition file base name."""
        return self._generated_name(base)

    def group_name(self, repository: str) -> str:
        """Name of the CD group generated for a GitHub repository (`org/repo`)."""
        return self._generated_name("cd-" + repository)

    @staticmethod
    def token_username(repository: str) -> str:
        """User name of the (non-existing) token user acting for a GitHub repository."""
        return "CD-for-" + _SEPARATORS.sub("__", repository)

    def is_managed(self, name: str) -> bool:
        """Whether a remote object name belongs to the namespace this tool maintains."""
        return name.startswith(self.prefix)
