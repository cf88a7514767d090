# Core module exports
from core.config import settings, get_settings
from core.database import Base, Store, get_store
from core.logging import (
    configure_logging,
    get_logger,
    bind_context,
    clear_context,
    generate_correlation_id,
    api_logger,
    db_logger,
    ingest_logger,
    ledger_logger,
    queue_logger,
    srs_logger,
)
