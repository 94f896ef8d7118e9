from focusloop.models.base import Base
from focusloop.models.snapshot import StoredSnapshot

__all__ = [
    "Base",
    "StoredSnapshot",
]
