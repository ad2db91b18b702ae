# Common utilities
from .config_loader import (
    load_color_patterns,
    load_config,
    load_size_order,
    load_size_patterns,
    load_sku_color_codes,
)
from .log_config import setup_logging
from .settings import ShopifySettings
from .text_utils import collapse_whitespace, make_handle, strip_non_alphanumeric
