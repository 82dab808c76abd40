"""Protocol identifiers used as registry keys."""

from enum import Enum


class Protocol(str, Enum):
    ANGLE_PROTOCOL = 'angle-protocol'

    def __str__(self) -> str:
        return self.value
