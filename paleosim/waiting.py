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
Waiting times to the next event of a lineage under time-varying and
optionally age-dependent (Weibull) hazards.

The waiting time ``s`` solves ``H(s) = E``, where ``H`` is the cumulative
hazard since the current time and ``E`` is a unit exponential draw. Hazards
with a closed-form cumulative hazard are inverted directly; all others are
integrated with ``scipy.integrate.quad`` and solved with
``scipy.optimize.brentq`` in :func:`solve_next_event`.
"""

import math
import warnings
from scipy import integrate
from scipy import optimize
from paleosim import error
from paleosim import rates

class SolverBudget(object):
    """
    Tolerances and iteration caps of the numerical solver. With a fixed
    budget, the same draw and inputs always give the same waiting time.
    """

    def __init__(self,
            integration_abs_tol=1e-10,
            integration_rel_tol=1e-8,
            integration_subintervals=200,
            root_tol=1e-12,
            root_max_iterations=200):
        self.integration_abs_tol = integration_abs_tol
        self.integration_rel_tol = integration_rel_tol
        self.integration_subintervals = integration_subintervals
        self.root_tol = root_tol
        self.root_max_iterations = root_max_iterations

DEFAULT_BUDGET = SolverBudget()

class NoEventBeforeHorizon(object):
    """
    The cumulative hazard up to the horizon is below the exponential draw.
    ``residual`` is the part of the draw left over at the horizon.
    """

    def __init__(self, residual):
        self.residual = residual

    def __repr__(self):
        return "<NoEventBeforeHorizon: residual={}>".format(self.residual)

class Hazard(object):
    """
    Hazard as a function of elapsed time ``s`` since the current time.
    Subclasses override :meth:`invert` (and :meth:`cumulative`) where a
    closed form exists.
    """

    def __call__(self, s):
        raise NotImplementedError()

    def breakpoints(self, s1):
        return []

    def cumulative(self, s, budget=None):
        if s <= 0:
            return 0.0
        if budget is None:
            budget = DEFAULT_BUDGET
        # quad takes fewer break points than subintervals, so long lists of
        # breakpoints (e.g. environment table rows) are integrated in chunks
        edges = [0.0] + list(self.breakpoints(s)) + [s]
        chunk_size = max(budget.integration_subintervals // 2, 1)
        value = 0.0
        start_idx = 0
        while start_idx < len(edges) - 1:
            end_idx = min(start_idx + chunk_size, len(edges) - 1)
            points = edges[start_idx+1:end_idx]
            value += self.integrate_segment(edges[start_idx], edges[end_idx], points, budget)
            start_idx = end_idx
        if not math.isfinite(value):
            raise error.NonConvergence("Cumulative hazard over [0, {}] is not finite: {}".format(s, value))
        return value

    def integrate_segment(self, s0, s1, points, budget):
        with warnings.catch_warnings():
            warnings.simplefilter("error", integrate.IntegrationWarning)
            try:
                value, abs_err = integrate.quad(
                        self,
                        s0,
                        s1,
                        epsabs=budget.integration_abs_tol,
                        epsrel=budget.integration_rel_tol,
                        limit=budget.integration_subintervals,
                        points=points if points else None)
            except integrate.IntegrationWarning as e:
                raise error.NonConvergence("Cumulative hazard over [{}, {}] did not converge: {}".format(s0, s1, e))
        return value

    def invert(self, target):
        """
        Returns the elapsed time at which the cumulative hazard reaches
        ``target`` (``math.inf`` if never), or `None` if there is no closed
        form.
        """
        return None

class PoissonHazard(Hazard):
    """
    Age-independent hazard: ``rate(t0 + s)``.
    """

    def __init__(self, rate, t0):
        self.rate = rate
        self.t0 = t0
        self._steps = None
        if rate.is_constant:
            if not math.isfinite(rate.value) or rate.value < 0:
                raise error.InvalidRate("Invalid rate: {}".format(rate.value))
        elif rate.is_piecewise_constant:
            self._steps = self._compose_steps()

    def _compose_steps(self):
        knots = [0.0] + [b - self.t0 for b in self.rate.breakpoints if b > self.t0]
        return [(knot, self.rate.checked(self.t0 + knot)) for knot in knots]

    def __call__(self, s):
        return self.rate.checked(self.t0 + s)

    def breakpoints(self, s1):
        return [b - self.t0 for b in self.rate.breakpoints_between(self.t0, self.t0 + s1)]

    def cumulative(self, s, budget=None):
        if s <= 0:
            return 0.0
        if self.rate.is_constant:
            return self.rate.value * s
        if self._steps is not None:
            total = 0.0
            for idx, (start, value) in enumerate(self._steps):
                if start >= s:
                    break
                if idx + 1 < len(self._steps):
                    end = min(self._steps[idx+1][0], s)
                else:
                    end = s
                total += value * (end - start)
            return total
        return Hazard.cumulative(self, s, budget)

    def invert(self, target):
        if self.rate.is_constant:
            if self.rate.value == 0:
                return math.inf
            return target / self.rate.value
        if self._steps is not None:
            remaining = target
            for idx, (start, value) in enumerate(self._steps):
                if idx + 1 < len(self._steps):
                    width = self._steps[idx+1][0] - start
                else:
                    width = math.inf
                if value * width >= remaining:
                    return start + remaining / value
                remaining -= value * width
            return math.inf
        return None

class WeibullHazard(Hazard):
    """
    Age-dependent hazard of a Weibull distribution with (possibly
    time-varying) ``scale`` and ``shape``, for a lineage that is ``age`` old
    at time ``t0``::

        h(s) = k / lam * ((age + s) / lam) ** (k - 1)

    with ``lam = scale(t0 + s)`` and ``k = shape(t0 + s)``. A shape of 1 is an
    exponential hazard of rate ``1 / lam``.
    """

    def __init__(self, scale, shape, t0, age):
        self.scale = scale
        self.shape = shape
        self.t0 = t0
        self.age = age
        if scale.is_constant and scale.value <= 0:
            raise error.InvalidRate("Weibull scale must be positive: {}".format(scale.value))
        if shape.is_constant and shape.value < rates.MIN_SHAPE:
            raise error.DegenerateShape("Shape must be at least {}: {}".format(rates.MIN_SHAPE, shape.value))
        self.is_closed_form = scale.is_constant and shape.is_constant

    def _parameters(self, t):
        lam = self.scale.checked(t, quantity="Weibull scale")
        if lam == 0:
            raise error.InvalidRate("Weibull scale must be positive, but is 0 at t = {}".format(t))
        k = self.shape.checked(t, quantity="shape")
        if k < rates.MIN_SHAPE:
            raise error.DegenerateShape("Shape must be at least {}, but is {} at t = {}".format(
                rates.MIN_SHAPE, k, t))
        return lam, k

    def __call__(self, s):
        lam, k = self._parameters(self.t0 + s)
        a = self.age + s
        if a <= 0:
            if k < 1:
                return math.inf
            elif k == 1:
                return 1.0 / lam
            return 0.0
        return k / lam * ((a / lam) ** (k - 1))

    def breakpoints(self, s1):
        t1 = self.t0 + s1
        points = set(self.scale.breakpoints_between(self.t0, t1))
        points.update(self.shape.breakpoints_between(self.t0, t1))
        return sorted(b - self.t0 for b in points)

    def cumulative(self, s, budget=None):
        if s <= 0:
            return 0.0
        if self.is_closed_form:
            lam = self.scale.value
            k = self.shape.value
            return ((self.age + s) / lam) ** k - (self.age / lam) ** k
        return Hazard.cumulative(self, s, budget)

    def invert(self, target):
        if not self.is_closed_form:
            return None
        lam = self.scale.value
        k = self.shape.value
        return lam * ((target + (self.age / lam) ** k) ** (1.0 / k)) - self.age

def solve_next_event(hazard, horizon, target, budget=None):
    """
    Finds the elapsed time ``s`` in ``[0, horizon]`` at which the cumulative
    hazard reaches ``target``.

    Returns
    -------
    float or NoEventBeforeHorizon
        The waiting time, or :class:`NoEventBeforeHorizon` if the cumulative
        hazard at ``horizon`` falls short of ``target``.

    Raises
    ------
    error.NonConvergence
        If integration or root-finding fail within ``budget``.
    """
    if budget is None:
        budget = DEFAULT_BUDGET
    if horizon <= 0:
        return NoEventBeforeHorizon(target)
    s = hazard.invert(target)
    if s is not None:
        if s <= horizon:
            return max(s, 0.0)
        return NoEventBeforeHorizon(target - hazard.cumulative(horizon, budget))
    # accumulate over breakpoint-bounded segments and only search the
    # segment in which the target is reached
    edges = [0.0] + list(hazard.breakpoints(horizon)) + [horizon]
    total = 0.0
    for s0, s1 in zip(edges[:-1], edges[1:]):
        segment = hazard.integrate_segment(s0, s1, None, budget)
        if not math.isfinite(segment):
            raise error.NonConvergence("Cumulative hazard over [{}, {}] is not finite: {}".format(s0, s1, segment))
        if total + segment >= target:
            break
        total += segment
    else:
        return NoEventBeforeHorizon(target - total)
    offset = total
    f = lambda x: offset + hazard.integrate_segment(s0, x, None, budget) - target
    try:
        s, result = optimize.brentq(
                f,
                s0,
                s1,
                xtol=budget.root_tol,
                maxiter=budget.root_max_iterations,
                full_output=True,
                disp=False)
    except ValueError as e:
        raise error.NonConvergence("Root-finding of cumulative hazard failed: {}".format(e))
    if not result.converged:
        raise error.NonConvergence("Root-finding of cumulative hazard did not converge after {} iterations ({})".format(
            result.iterations, result.flag))
    return s

def make_hazard(rate, current_time, age=0.0, shape=None):
    if shape is None:
        return PoissonHazard(rate, current_time)
    return WeibullHazard(rate, shape, current_time, age)

def sample_waiting_time(rate, current_time, t_max, rng, age=0.0, shape=None, budget=None):
    """
    Draws the time from ``current_time`` to the next event of a lineage that
    is ``age`` old, under ``rate`` (a Weibull scale if ``shape`` is given).

    Returns the waiting time, or :class:`NoEventBeforeHorizon` if the event
    does not happen before ``t_max``.
    """
    target = rng.expovariate(1.0)
    hazard = make_hazard(rate, current_time, age=age, shape=shape)
    return solve_next_event(hazard, t_max - current_time, target, budget)

def extend_beyond_horizon(rate, t_max, residual, age_at_horizon=0.0, shape=None):
    """
    Time past ``t_max`` at which an event left over as ``residual`` by
    :class:`NoEventBeforeHorizon` happens, with the rate (and shape) held at
    their values at ``t_max``. Returns ``math.inf`` if the frozen hazard is
    zero.
    """
    frozen_rate = rates.Rate.constant(rate.checked(t_max))
    if shape is None:
        hazard = PoissonHazard(frozen_rate, t_max)
    else:
        frozen_shape = rates.Rate.constant(shape.checked(t_max, quantity="shape"))
        hazard = WeibullHazard(frozen_rate, frozen_shape, t_max, age_at_horizon)
    return hazard.invert(residual)
