"""Option storage backends."""

from .store import MemoryOptionStore, OptionRow, OptionStore  # noqa: F401
from .database import SQLiteOptionStore  # noqa: F401
from .remote import HttpOptionStore  # noqa: F401
from .serialization import maybe_serialize, maybe_unserialize  # noqa: F401
