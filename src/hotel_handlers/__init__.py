import logging

from hotel_core.utils.config import get_settings

logging.getLogger().setLevel(get_settings().log_level)
