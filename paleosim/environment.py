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
Environmental time series (e.g. temperature or CO2 through time) used to
drive environment-dependent rates.
"""

import numpy
import pandas
from paleosim import error

class EnvironmentTable(object):
    """
    An immutable series of (time, value) rows, ordered by strictly increasing
    time, queried by linear interpolation.

    Times are in clade-relative time (0 is the clade origin). Queries outside
    the range of the table raise :class:`error.EnvironmentOutOfRange`; there is
    no extrapolation or clamping.
    """

    def __init__(self, times, values, label=None):
        times = numpy.array(times, dtype=float)
        values = numpy.array(values, dtype=float)
        if times.ndim != 1 or values.ndim != 1:
            raise error.ConstructionError("Environment times and values must be one-dimensional")
        if len(times) != len(values):
            raise error.ConstructionError("Environment table has {} times but {} values".format(
                len(times), len(values)))
        if len(times) < 2:
            raise error.ConstructionError("Environment table needs at least two rows, but {} given".format(len(times)))
        if not (numpy.all(numpy.isfinite(times)) and numpy.all(numpy.isfinite(values))):
            raise error.ConstructionError("Environment table contains non-finite entries")
        if numpy.any(numpy.diff(times) <= 0):
            raise error.ConstructionError("Environment table times must be strictly increasing")
        times.setflags(write=False)
        values.setflags(write=False)
        self._times = times
        self._values = values
        self.label = label

    @classmethod
    def from_data_frame(cls, df, label=None):
        """
        The first column of ``df`` is taken as time and the second as the
        value of the environmental variable. Rows are sorted by time.
        """
        if df.shape[1] < 2:
            raise error.ConstructionError("Environment data frame needs (at least) two columns: time and value")
        df = df.iloc[:, :2].sort_values(by=df.columns[0])
        if label is None:
            label = str(df.columns[1])
        return cls(
                times=df.iloc[:, 0].values,
                values=df.iloc[:, 1].values,
                label=label)

    @classmethod
    def from_path(cls, filepath, delimiter=None, label=None):
        if delimiter is None:
            if filepath.endswith(".csv"):
                delimiter = ","
            else:
                delimiter = "\t"
        df = pandas.read_csv(filepath, sep=delimiter)
        return cls.from_data_frame(df, label=label)

    @property
    def times(self):
        return self._times

    @property
    def values(self):
        return self._values

    @property
    def min_time(self):
        return float(self._times[0])

    @property
    def max_time(self):
        return float(self._times[-1])

    def __len__(self):
        return len(self._times)

    def __str__(self):
        return "EnvironmentTable({}: {} rows, t = [{}, {}])".format(
                self.label, len(self), self.min_time, self.max_time)

    def covers(self, t0, t1):
        return self.min_time <= t0 and t1 <= self.max_time

    def value_at(self, t):
        t = float(t)
        if t < self.min_time or t > self.max_time:
            raise error.EnvironmentOutOfRange(t, self.min_time, self.max_time)
        return float(numpy.interp(t, self._times, self._values))

    def __call__(self, t):
        return self.value_at(t)

    def as_data_frame(self):
        value_col = self.label if self.label else "value"
        return pandas.DataFrame({"time": self._times, value_col: self._values}, columns=["time", value_col])
