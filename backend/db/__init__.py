# Database utilities package
from .store import (
    Store,
    StoreError,
    StoreNotOpenError,
    bind_positional,
    init_store,
    get_store,
)
from .schema import create_tables
