"""Writer subpackage — imports trigger @register_writer decorators."""

from user_store.writers.bulk import BulkWriter  # noqa: F401
from user_store.writers.row_by_row import RowByRowWriter  # noqa: F401
