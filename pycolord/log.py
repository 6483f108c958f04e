#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
import logging

import colorlog
from wrapt import synchronized


# Raw bus traffic
LOG_TRACE = 5

logging.addLevelName(LOG_TRACE, 'TRACE')


class Log:
    """
    Logging module

    Call get() to get a cached instance of a specific logger.
    Colored output can optionally be enabled.
    """

    _LOGGERS = {}
    _HANDLERS = {}
    _use_color = False

    @classmethod
    def _make_handler(cls):
        if cls._use_color:
            handler = colorlog.StreamHandler()
            handler.setFormatter(colorlog.ColoredFormatter(
                ' %(log_color)s%(name)s/%(levelname)-8s%(reset)s |'
                ' %(log_color)s%(message)s%(reset)s'))
        else:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(
                ' %(name)s/%(levelname)-8s | %(message)s'))
        return handler

    @synchronized
    @classmethod
    def get(cls, tag):
        """
        Get the global logger instance for the given tag

        :param tag: the log tag
        :return: the logger instance
        """
        if tag not in cls._LOGGERS:
            handler = cls._make_handler()

            logger = logging.getLogger(tag)
            logger.addHandler(handler)

            cls._LOGGERS[tag] = logger
            cls._HANDLERS[tag] = handler

        return cls._LOGGERS[tag]

    @synchronized
    @classmethod
    def enable_color(cls, enable):
        """
        Enable colored output for loggers. Loggers which were
        already handed out by get() are switched over too.
        """
        if cls._use_color == enable:
            return
        cls._use_color = enable

        for tag, logger in cls._LOGGERS.items():
            logger.removeHandler(cls._HANDLERS[tag])
            handler = cls._make_handler()
            logger.addHandler(handler)
            cls._HANDLERS[tag] = handler
