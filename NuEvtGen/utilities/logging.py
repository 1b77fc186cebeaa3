import logging

LOGGING_STATUS = 25


class NuEvtGenLogger(logging.Logger):
    def __init__(self, name="NuEvtGen"):
        super().__init__(name)

        # Add STATUS as the level name, to be used in message formatting
        logging.addLevelName(LOGGING_STATUS, "STATUS")

    def addHandler(self, hdlr: logging.Handler):
        # Ensure that the logger level is always lower than the lowest handler
        if hdlr.level < self.level:
            self.setLevel(hdlr.level)

        super().addHandler(hdlr)

    def status(self, message, *args, **kwargs):
        if self.isEnabledFor(LOGGING_STATUS):
            self._log(LOGGING_STATUS, message, args, **kwargs)


def setup_logger(name="NuEvtGen", level=None):
    """
    Set up the parent logger which all module loggers pass their logs on to.

    A single `logging.StreamHandler()` with a custom formatter is added. If the
    logger already has handlers it is returned unchanged, so calling this twice
    does not duplicate output.

    Parameters
    ----------
    name : str, default="NuEvtGen"
        The name of the base logger
    level : int, default=25
        The logging level of the handler (STATUS if not given)

    Returns
    -------
    logger: logging.Logger
    """
    logger = logging.getLogger(name)

    if logger.hasHandlers() and logger.handlers:
        if level is not None:
            for handler in logger.handlers:
                handler.setLevel(level)
            logger.setLevel(level)
        return logger
    logger.propagate = False

    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        '%(levelname)s - %(asctime)s - %(name)s - %(message)s',
        datefmt="%Y %b %d @ %H:%M:%S UTC%z"
    )
    handler.setFormatter(formatter)

    if level is not None:
        handler.setLevel(level)
        logger.setLevel(level)
    else:
        handler.setLevel(LOGGING_STATUS)
        logger.setLevel(LOGGING_STATUS)

    logger.addHandler(handler)

    return logger
