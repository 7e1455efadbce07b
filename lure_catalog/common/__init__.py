# Common utilities
from .config_loader import (
    get_section,
    load_config,
    load_pipeline_config,
    load_tracker_config,
)
from .log_config import setup_logging
from .rest_client import RestClient
from .settings import Settings, load_settings
from .text_utils import clean_text, slug_from_url, slugify, truncate
from .units import inches_to_mm, ounces_to_grams, tax_included
