from enum import Enum


class ObjectKind(str, Enum):
    """Kinds of generated objects maintained on the permission API.

    Members are declared in reconciliation order: groups must exist before
    the permission targets that grant rights to them.
    """

    GROUP = "group"
    PERMISSION_TARGET = "permission target"

    @property
    def payload_dir(self) -> str:
        """Name of the output subdirectory holding payloads of this kind."""
        return "groups" if self is ObjectKind.GROUP else "permissions"

    def __str__(self) -> str:
        return self.value
