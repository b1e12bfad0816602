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
Construction of normalized rates.

A rate may be specified as a number, a function of time, a function of time
and an environmental variable, or a vector of values holding between shift
times. Every specification is classified into exactly one of the
``*RateSpec`` variants below, and each variant knows how to normalize itself
into a :class:`Rate`: a plain function of clade-relative time
(0 = clade origin, ``t_max`` = present).
"""

import math
import numbers
import inspect
import numpy
from paleosim import error

MIN_SHAPE = 0.01
SHAPE_PROBE_POINTS = 101

class Rate(object):
    """
    A normalized rate: a callable mapping time to a non-negative real.

    ``breakpoints`` lists the times at which the function may jump or kink
    (shift times, environment table rows); the integrator splits its
    intervals there.
    """

    def __init__(self,
            func,
            description=None,
            is_constant=False,
            value=None,
            breakpoints=None,
            is_piecewise_constant=False):
        self._func = func
        self.description = description
        self.is_constant = is_constant
        self.is_piecewise_constant = is_piecewise_constant or is_constant
        self.value = value
        if breakpoints is None:
            self.breakpoints = ()
        else:
            self.breakpoints = tuple(float(b) for b in breakpoints)

    @classmethod
    def constant(cls, value, description=None):
        value = float(value)
        if description is None:
            description = "constant({})".format(value)
        f = lambda t: value
        return cls(func=f,
                description=description,
                is_constant=True,
                value=value)

    def __call__(self, t):
        return float(self._func(t))

    def checked(self, t, quantity="rate"):
        """
        Evaluates the rate at ``t``, raising :class:`error.InvalidRate` if the
        result is negative or not finite.
        """
        v = self(t)
        if not math.isfinite(v) or v < 0:
            raise error.InvalidRate("Invalid {} at t = {}: {} ({})".format(
                quantity, t, v, self.description))
        return v

    def breakpoints_between(self, t0, t1):
        return [b for b in self.breakpoints if t0 < b < t1]

    def __str__(self):
        return str(self.description)

    def __repr__(self):
        return "<Rate: {}>".format(self.description)

class RateSpec(object):

    def normalize(self, t_max):
        raise NotImplementedError()

class ConstantRateSpec(RateSpec):

    def __init__(self, value):
        self.value = value

    def normalize(self, t_max):
        v = float(self.value)
        if not math.isfinite(v) or v < 0:
            raise error.InvalidRate("Rate must be finite and non-negative: {}".format(self.value))
        return Rate.constant(v)

class TimeRateSpec(RateSpec):

    def __init__(self, func):
        self.func = func

    def normalize(self, t_max):
        # values are not checked here; the sampler checks them as it queries
        return Rate(func=self.func,
                description=_describe_function(self.func))

class EnvironmentRateSpec(RateSpec):

    def __init__(self, func, environment=None):
        self.func = func
        self.environment = environment

    def normalize(self, t_max):
        if self.environment is None:
            raise error.MissingEnvironment("Rate function '{}' depends on an environmental variable, but no environment table was given".format(
                _describe_function(self.func)))
        environment = self.environment
        if environment.min_time > 0:
            raise error.EnvironmentOutOfRange(0.0, environment.min_time, environment.max_time)
        if environment.max_time < t_max:
            raise error.EnvironmentOutOfRange(t_max, environment.min_time, environment.max_time)
        func = self.func
        f = lambda t: func(t, environment.value_at(t))
        return Rate(func=f,
                description="{} of {}".format(_describe_function(func), environment.label),
                breakpoints=[t for t in environment.times if 0 < t < t_max])

class StepRateSpec(RateSpec):

    def __init__(self, values, shifts=None):
        self.values = values
        self.shifts = shifts

    def normalize(self, t_max):
        values = numpy.array(self.values, dtype=float)
        if self.shifts is None:
            raise error.ShiftLengthMismatch("Step rate of {} values given without shift times".format(len(values)))
        shifts = numpy.array(self.shifts, dtype=float)
        if len(shifts) != len(values):
            raise error.ShiftLengthMismatch("Step rate has {} values but {} shift times".format(
                len(values), len(shifts)))
        if not numpy.all(numpy.isfinite(values)) or numpy.any(values < 0):
            raise error.InvalidRate("Step rate values must be finite and non-negative: {}".format(list(values)))
        if not numpy.all(numpy.isfinite(shifts)):
            raise error.ShiftOrderError("Shift times must be finite: {}".format(list(shifts)))
        if shifts[0] > shifts[-1]:
            # given as time before present
            shifts = t_max - shifts
        if numpy.any(numpy.diff(shifts) <= 0):
            raise error.ShiftOrderError("Shift times must be strictly increasing or strictly decreasing: {}".format(
                list(self.shifts)))
        last_idx = len(values) - 1
        def f(t):
            idx = int(numpy.searchsorted(shifts, t, side="right")) - 1
            if idx < 0:
                idx = 0
            elif idx > last_idx:
                idx = last_idx
            return values[idx]
        return Rate(func=f,
                description="step({} at {})".format(
                    ", ".join(str(v) for v in values),
                    ", ".join(str(s) for s in shifts)),
                breakpoints=[s for s in shifts if 0 < s < t_max],
                is_piecewise_constant=True)

def _describe_function(func):
    name = getattr(func, "__name__", None)
    if name is None or name == "<lambda>":
        if func.__doc__ and not isinstance(func, type):
            return func.__doc__.strip()
        return repr(func)
    return name

def _count_positional_parameters(func):
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # e.g. numpy ufuncs
        return 1
    count = 0
    for param in signature.parameters.values():
        if param.default is not inspect.Parameter.empty:
            continue
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count

def _is_vector(spec):
    if isinstance(spec, (str, bytes)):
        return False
    if isinstance(spec, numpy.ndarray):
        return True
    return isinstance(spec, (list, tuple))

def classify_rate_spec(spec, environment=None, shifts=None):
    """
    Returns the :class:`RateSpec` variant describing ``spec``.

    Raw functions are classified by the number of required positional
    parameters they take: one (time) or two (time and environmental value).
    """
    if isinstance(spec, RateSpec):
        if environment is not None or shifts is not None:
            raise error.UnsupportedCombination("Environment tables and shift times must be given as part of an explicit rate specification")
        return spec
    if isinstance(spec, bool):
        raise error.ConstructionError("Unrecognized rate specification: {!r}".format(spec))
    if isinstance(spec, numbers.Real):
        if shifts is not None and len(shifts) != 1:
            raise error.ShiftLengthMismatch("Constant rate given with {} shift times".format(len(shifts)))
        return ConstantRateSpec(spec)
    if callable(spec):
        if shifts is not None:
            raise error.UnsupportedCombination("Shift times cannot be combined with a rate function")
        if _count_positional_parameters(spec) >= 2:
            return EnvironmentRateSpec(spec, environment=environment)
        return TimeRateSpec(spec)
    if _is_vector(spec):
        if len(spec) == 0:
            raise error.ConstructionError("Empty rate vector")
        if environment is not None:
            raise error.UnsupportedCombination("A step rate vector cannot be combined with an environment table")
        if len(spec) == 1:
            if shifts is not None and len(shifts) != 1:
                raise error.ShiftLengthMismatch("Rate vector of length 1 given with {} shift times".format(len(shifts)))
            return ConstantRateSpec(spec[0])
        return StepRateSpec(spec, shifts=shifts)
    raise error.ConstructionError("Unrecognized rate specification: {!r}".format(spec))

def make_rate(spec, t_max, environment=None, shifts=None):
    """
    Normalizes ``spec`` into a :class:`Rate` on ``[0, t_max]``.

    Parameters
    ----------
    spec : number, callable, sequence of numbers, or RateSpec
        The rate. A sequence of more than one number is a step function and
        requires ``shifts``.
    t_max : float
        Duration of the simulation (time of the present, in clade-relative
        time).
    environment : EnvironmentTable
        Required if ``spec`` is a function of time and an environmental
        variable.
    shifts : sequence of float
        Shift times for a step rate, either ascending from the origin (0
        first) or descending from the present (``t_max`` first).
    """
    if isinstance(spec, Rate):
        if environment is not None or shifts is not None:
            raise error.UnsupportedCombination("Cannot apply an environment table or shift times to an already normalized rate")
        return spec
    return classify_rate_spec(spec, environment=environment, shifts=shifts).normalize(t_max)

def make_shape(spec, t_max):
    """
    Normalizes a Weibull shape specification (a number or a function of
    time), or returns `None` for an age-independent process.
    """
    if spec is None:
        return None
    shape = make_rate(spec, t_max)
    if shape.is_constant:
        if shape.value < MIN_SHAPE:
            raise error.DegenerateShape("Shape must be at least {}: {}".format(MIN_SHAPE, shape.value))
        return shape
    for t in numpy.linspace(0, t_max, SHAPE_PROBE_POINTS):
        v = shape.checked(t, quantity="shape")
        if v < MIN_SHAPE:
            raise error.DegenerateShape("Shape must be at least {}, but is {} at t = {}".format(
                MIN_SHAPE, v, t))
    return shape
