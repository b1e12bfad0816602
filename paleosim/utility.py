#! /usr/bin/env python

##############################################################################
## Copyright (c) 2014 Jeet Sukumaran.
## All rights reserved.
##
## Redistribution and use in source and binary forms, with or without
## modification, are permitted provided that the following conditions are met:
##
##     * Redistributions of source code must retain the above copyright
##       notice, this list of conditions and the following disclaimer.
##     * Redistributions in binary form must reproduce the above copyright
##       notice, this list of conditions and the following disclaimer in the
##       documentation and/or other materials provided with the distribution.
##     * The names of its contributors may not be used to endorse or promote
##       products derived from this software without specific prior written
##       permission.
##
## THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS
## IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
## THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR
## PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL JEET SUKUMARAN OR MARK T. HOLDER
## BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
## CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
## SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
## INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
## CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
## ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
## POSSIBILITY OF SUCH DAMAGE.
##
##############################################################################



"""
Run logging for simulations.
"""

import os
import logging

_LOGGING_LEVEL_ENVAR = "PALEOSIM_LOGGING_LEVEL"
_LOGGING_FORMAT_ENVAR = "PALEOSIM_LOGGING_FORMAT"

_LOGGING_LEVELS = {
    "NOTSET": logging.NOTSET,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_MESSAGE_FORMATS = {
    "DEFAULT": "[%(asctime)s] %(message)s",
    "RICH": "[%(asctime)s] %(filename)s (%(lineno)d): %(levelname) 8s: %(message)s",
    "SIMPLE": "%(levelname) 8s: %(message)s",
    "NONE": "%(message)s",
}

# used while a simulator is attached; ``elapsed_time`` and ``simulation``
# come from the simulator
_SIMULATION_FORMAT = "[%(asctime)s] %(simulation)s t = %(elapsed_time)s: %(message)s"

def get_logging_level(level=None):
    """
    Resolves ``level`` (a ``logging`` level or a level name) to a ``logging``
    level. With no level, the name is taken from the
    ``PALEOSIM_LOGGING_LEVEL`` environment variable. Unrecognized names give
    ``logging.NOTSET``.
    """
    if level in _LOGGING_LEVELS.values():
        return level
    if level is None:
        level = os.environ.get(_LOGGING_LEVEL_ENVAR, "NOTSET")
    return _LOGGING_LEVELS.get(str(level).upper(), logging.NOTSET)

class RunLogger(object):
    """
    Logs to stderr and/or a file (or stream), each with its own level
    threshold. While a simulator is attached as ``system``, messages are
    prefixed with its name and current simulation time.
    """

    def __init__(self, **kwargs):
        self.name = kwargs.get("name", "RunLog")
        self._log = logging.getLogger(self.name)
        self._log.setLevel(logging.DEBUG)
        self._log.propagate = False
        for handler in list(self._log.handlers):
            self._log.removeHandler(handler)
        self.handlers = []
        self._owned_streams = []
        self.logging_format = kwargs.get("logging_format", None)
        if kwargs.get("log_to_stderr", True):
            self._add_handler(None, kwargs.get("stderr_logging_level", logging.INFO))
        if kwargs.get("log_to_file", True):
            log_stream = kwargs.get("log_stream", None)
            if log_stream is None:
                log_stream = open(kwargs.get("log_path", self.name + ".log"), "w")
                self._owned_streams.append(log_stream)
            self._add_handler(log_stream, kwargs.get("file_logging_level", logging.DEBUG))
        if not self.handlers:
            # keeps messages away from logging's last-resort stderr handler
            self._log.addHandler(logging.NullHandler())
        self._system = None

    def _add_handler(self, stream, level):
        handler = logging.StreamHandler(stream)
        handler.setLevel(get_logging_level(level))
        handler.setFormatter(self.get_logging_formatter(self.logging_format))
        self._log.addHandler(handler)
        self.handlers.append(handler)
        return handler

    def _get_system(self):
        return self._system

    def _set_system(self, system):
        self._system = system
        if system is None:
            formatter = self.get_logging_formatter(self.logging_format)
        else:
            formatter = logging.Formatter(_SIMULATION_FORMAT, datefmt=_DATE_FORMAT)
        for handler in self.handlers:
            handler.setFormatter(formatter)

    system = property(_get_system, _set_system)

    def get_logging_formatter(self, format=None):
        if format is None:
            format = os.environ.get(_LOGGING_FORMAT_ENVAR, "DEFAULT")
        message_format = _MESSAGE_FORMATS.get(format.upper(), _MESSAGE_FORMATS["DEFAULT"])
        return logging.Formatter(message_format, datefmt=_DATE_FORMAT)

    def supplemental_info_d(self):
        if self._system is None:
            return None
        return {
                "simulation": self._system.name,
                "elapsed_time": "{:.6f}".format(self._system.elapsed_time),
                }

    def is_enabled_for(self, level):
        level = get_logging_level(level)
        return any(handler.level <= level for handler in self.handlers)

    def log(self, level, msg, *args):
        self._log.log(level, msg, *args, extra=self.supplemental_info_d())

    def debug(self, msg, *args):
        self.log(logging.DEBUG, msg, *args)

    def info(self, msg, *args):
        self.log(logging.INFO, msg, *args)

    def warning(self, msg, *args):
        self.log(logging.WARNING, msg, *args)

    def error(self, msg, *args):
        self.log(logging.ERROR, msg, *args)

    def critical(self, msg, *args):
        self.log(logging.CRITICAL, msg, *args)

    def close(self):
        for handler in self.handlers:
            handler.flush()
            self._log.removeHandler(handler)
        self.handlers = []
        for stream in self._owned_streams:
            stream.close()
        self._owned_streams = []
