from offer_monitor.utils.logger import logger, get_logger, setup_logging

__all__ = ["logger", "get_logger", "setup_logging"]
