# app/services/__init__.py 

# Matching
from .range_matcher import date_in_range, power_in_range, is_stale_open_ended, commissioning_date_matches

# Tariff catalog
from .tariff_catalog_service import (
    build_query,
    filter_tariffs,
    sort_by_power,
    lookup_tariffs_service,
    select_best_match,
    ENERGY_TYPE_REQUIRED,
)

# Catalog ingestion
from .catalog_ingestion_service import ingest_rows, read_sheet_rows, write_catalog, populate_catalog_service

# Automation webhook
from .webhook_service import process_webhook_service, UNKNOWN_INSTALLATION
