import logging


class LogManager:
    """
    Writes structured event lines for SNMP transport and topology activity.
    """

    def __init__(self, logger_name: str = "zyxel_ies.events"):
        self.standard_logger = logging.getLogger(logger_name)

    def log(self, event: str, details: dict, level: str = "info"):
        """
        Logs an event with its details at the requested level.
        """
        log_message = f"Event: {event}, Details: {details}"
        if level == "info":
            self.standard_logger.info(log_message)
        elif level == "warning":
            self.standard_logger.warning(log_message)
        elif level == "error":
            self.standard_logger.error(log_message)
        else:
            self.standard_logger.debug(log_message)
