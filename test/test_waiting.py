#! /usr/bin/env python

import math
import random
import unittest
import numpy
from scipy import stats
from paleosim import error
from paleosim import rates
from paleosim import waiting
from paleosim.environment import EnvironmentTable

class LinearHazard(waiting.Hazard):
    """
    h(s) = a + b * s, with H(s) = a * s + b * s^2 / 2.
    """

    def __init__(self, a, b):
        self.a = a
        self.b = b

    def __call__(self, s):
        return self.a + self.b * s

    def expected_time(self, target):
        return (-self.a + math.sqrt(self.a ** 2 + 2 * self.b * target)) / self.b

class SolveNextEventTestCase(unittest.TestCase):

    def test_numerical_against_closed_form(self):
        for a, b, target in (
                (0.5, 0.1, 1.0),
                (0.01, 2.0, 0.3),
                (1.0, 0.5, 3.7),
                ):
            hazard = LinearHazard(a, b)
            s = waiting.solve_next_event(hazard, horizon=100.0, target=target)
            self.assertAlmostEqual(s, hazard.expected_time(target), places=7)
            self.assertAlmostEqual(hazard.cumulative(s), target, places=7)

    def test_no_event_before_horizon(self):
        hazard = LinearHazard(0.1, 0.0)
        result = waiting.solve_next_event(hazard, horizon=1.0, target=5.0)
        self.assertIsInstance(result, waiting.NoEventBeforeHorizon)
        self.assertAlmostEqual(result.residual, 4.9)

    def test_no_event_closed_form(self):
        hazard = waiting.PoissonHazard(rates.Rate.constant(0.1), t0=0.0)
        result = waiting.solve_next_event(hazard, horizon=1.0, target=5.0)
        self.assertIsInstance(result, waiting.NoEventBeforeHorizon)
        self.assertAlmostEqual(result.residual, 4.9)

    def test_zero_horizon(self):
        hazard = waiting.PoissonHazard(rates.Rate.constant(10.0), t0=5.0)
        result = waiting.solve_next_event(hazard, horizon=0.0, target=0.5)
        self.assertIsInstance(result, waiting.NoEventBeforeHorizon)
        self.assertEqual(result.residual, 0.5)

    def test_zero_rate_never_fires(self):
        hazard = waiting.PoissonHazard(rates.Rate.constant(0.0), t0=0.0)
        result = waiting.solve_next_event(hazard, horizon=1e9, target=1e-9)
        self.assertIsInstance(result, waiting.NoEventBeforeHorizon)

    def test_non_convergence(self):
        budget = waiting.SolverBudget(root_max_iterations=1)
        hazard = LinearHazard(0.5, 0.1)
        with self.assertRaises(error.NonConvergence):
            waiting.solve_next_event(hazard, horizon=100.0, target=1.0, budget=budget)

class PoissonHazardTestCase(unittest.TestCase):

    def test_step_inversion(self):
        rate = rates.make_rate([1.0, 2.0], t_max=10, shifts=[0, 1])
        hazard = waiting.PoissonHazard(rate, t0=0.0)
        self.assertAlmostEqual(hazard.invert(3.0), 2.0)
        hazard = waiting.PoissonHazard(rate, t0=0.5)
        self.assertAlmostEqual(hazard.invert(1.5), 1.0)
        self.assertAlmostEqual(hazard.cumulative(1.0), 1.5)

    def test_step_matches_numerical_integration(self):
        rate = rates.make_rate([0.3, 1.2, 0.1, 0.7], t_max=20, shifts=[0, 4, 9, 15])
        hazard = waiting.PoissonHazard(rate, t0=2.5)
        for s in (0.5, 3.0, 7.2, 17.5):
            self.assertAlmostEqual(
                    hazard.cumulative(s),
                    waiting.Hazard.cumulative(hazard, s),
                    places=7)

    def test_invalid_rate_function(self):
        rng = random.Random(1)
        rate = rates.make_rate(lambda t: 0.1 - t, t_max=10)
        with self.assertRaises(error.InvalidRate):
            waiting.sample_waiting_time(rate, current_time=0.0, t_max=10.0, rng=rng)

    def test_non_finite_rate_function(self):
        rng = random.Random(1)
        rate = rates.make_rate(lambda t: math.nan, t_max=10)
        with self.assertRaises(error.InvalidRate):
            waiting.sample_waiting_time(rate, current_time=0.0, t_max=10.0, rng=rng)

class WeibullHazardTestCase(unittest.TestCase):

    def test_closed_form_matches_numerical_integration(self):
        hazard = waiting.WeibullHazard(
                scale=rates.Rate.constant(2.0),
                shape=rates.Rate.constant(2.5),
                t0=1.0,
                age=0.3)
        self.assertTrue(hazard.is_closed_form)
        for s in (0.2, 1.7, 4.0):
            self.assertAlmostEqual(
                    hazard.cumulative(s),
                    waiting.Hazard.cumulative(hazard, s),
                    places=7)
        s = hazard.invert(1.25)
        self.assertAlmostEqual(hazard.cumulative(s), 1.25)

    def test_shape_one_is_exponential(self):
        hazard = waiting.WeibullHazard(
                scale=rates.Rate.constant(4.0),
                shape=rates.Rate.constant(1.0),
                t0=0.0,
                age=2.0)
        self.assertAlmostEqual(hazard(0.0), 0.25)
        self.assertAlmostEqual(hazard(3.0), 0.25)
        self.assertAlmostEqual(hazard.invert(1.0), 4.0)

    def test_hazard_at_birth(self):
        for k, expected in ((0.5, math.inf), (1.0, 0.5), (2.0, 0.0)):
            hazard = waiting.WeibullHazard(
                    scale=rates.Rate.constant(2.0),
                    shape=rates.Rate.constant(k),
                    t0=0.0,
                    age=0.0)
            self.assertEqual(hazard(0.0), expected)

    def test_degenerate_shape(self):
        with self.assertRaises(error.DegenerateShape):
            waiting.WeibullHazard(
                    scale=rates.Rate.constant(1.0),
                    shape=rates.Rate.constant(0.001),
                    t0=0.0,
                    age=0.0)
        hazard = waiting.WeibullHazard(
                scale=rates.Rate.constant(1.0),
                shape=rates.Rate(lambda t: 0.001),
                t0=0.0,
                age=1.0)
        with self.assertRaises(error.DegenerateShape):
            hazard(0.5)

    def test_zero_scale(self):
        with self.assertRaises(error.InvalidRate):
            waiting.WeibullHazard(
                    scale=rates.Rate.constant(0.0),
                    shape=rates.Rate.constant(1.0),
                    t0=0.0,
                    age=0.0)

class WaitingTimeDistributionTestCase(unittest.TestCase):

    def assert_fits(self, samples, cdf, args=()):
        statistic, p_value = stats.kstest(samples, cdf, args=args)
        self.assertGreater(p_value, 0.001, "D = {}, p = {}".format(statistic, p_value))

    def test_constant_rate_is_exponential(self):
        rng = random.Random(8142)
        rate = rates.make_rate(0.5, t_max=1e6)
        samples = [waiting.sample_waiting_time(rate, 0.0, 1e6, rng) for i in range(2000)]
        self.assert_fits(samples, "expon", args=(0, 2.0))

    def test_numerically_constant_rate_is_exponential(self):
        rng = random.Random(71)
        rate = rates.make_rate(lambda t: 0.5 + 0.0 * t, t_max=100)
        samples = []
        for i in range(300):
            s = waiting.sample_waiting_time(rate, 0.0, 100.0, rng)
            self.assertNotIsInstance(s, waiting.NoEventBeforeHorizon)
            samples.append(s)
        self.assert_fits(samples, "expon", args=(0, 2.0))

    def test_shape_one_matches_exponential_of_inverse_scale(self):
        rng = random.Random(3)
        scale = rates.make_rate(2.0, t_max=1e6)
        shape = rates.make_shape(1.0, t_max=1e6)
        samples = [waiting.sample_waiting_time(scale, 0.0, 1e6, rng, age=0.0, shape=shape) for i in range(2000)]
        self.assert_fits(samples, "expon", args=(0, 2.0))

    def test_numerical_shape_one_matches_exponential_of_inverse_scale(self):
        rng = random.Random(5)
        scale = rates.make_rate(lambda t: 2.0, t_max=100)
        shape = rates.make_shape(lambda t: 1.0, t_max=100)
        samples = [waiting.sample_waiting_time(scale, 0.0, 100.0, rng, age=0.0, shape=shape) for i in range(200)]
        self.assert_fits(samples, "expon", args=(0, 2.0))

    def test_weibull_residual_lifetime(self):
        rng = random.Random(11)
        lam, k, age = 2.0, 2.0, 1.0
        scale = rates.make_rate(lam, t_max=1e6)
        shape = rates.make_shape(k, t_max=1e6)
        samples = [waiting.sample_waiting_time(scale, 5.0, 1e6, rng, age=age, shape=shape) for i in range(2000)]
        cdf = lambda s: 1.0 - numpy.exp(-(((age + s) / lam) ** k - (age / lam) ** k))
        self.assert_fits(samples, cdf)

    def test_step_rate(self):
        rng = random.Random(13)
        rate = rates.make_rate([1.0, 0.25], t_max=1e6, shifts=[0, 1])
        samples = [waiting.sample_waiting_time(rate, 0.0, 1e6, rng) for i in range(2000)]
        def cdf(s):
            s = numpy.asarray(s)
            cumulative = numpy.where(s < 1, s, 1 + 0.25 * (s - 1))
            return 1.0 - numpy.exp(-cumulative)
        self.assert_fits(samples, cdf)

    def test_reproducible(self):
        rate = rates.make_rate(lambda t: 0.2 + 0.05 * t, t_max=20)
        a = [waiting.sample_waiting_time(rate, 1.0, 20.0, random.Random(99)) for i in range(3)]
        b = [waiting.sample_waiting_time(rate, 1.0, 20.0, random.Random(99)) for i in range(3)]
        self.assertEqual(a, b)

class DenseEnvironmentTestCase(unittest.TestCase):

    def setUp(self):
        # temperature rising linearly over a 1001-row table
        times = numpy.linspace(0, 40, 1001)
        self.env = EnvironmentTable(times=times, values=10.0 + 0.5 * times, label="temperature")
        self.rate = rates.make_rate(lambda t, temp: 0.001 * temp, t_max=40, environment=self.env)

    def test_breakpoints_exceed_subinterval_limit(self):
        self.assertGreater(len(self.rate.breakpoints), waiting.DEFAULT_BUDGET.integration_subintervals)

    def test_cumulative(self):
        hazard = waiting.PoissonHazard(self.rate, t0=0.0)
        for s in (0.013, 7.5, 40.0):
            self.assertAlmostEqual(hazard.cumulative(s), 0.01 * s + 0.00025 * s * s, places=8)

    def test_solve_next_event(self):
        hazard = waiting.PoissonHazard(self.rate, t0=0.0)
        s = waiting.solve_next_event(hazard, horizon=40.0, target=0.5)
        expected = (-0.01 + math.sqrt(0.01 ** 2 + 4 * 0.00025 * 0.5)) / (2 * 0.00025)
        self.assertAlmostEqual(s, expected, places=6)

    def test_sample_waiting_time(self):
        rng = random.Random(1)
        for i in range(20):
            s = waiting.sample_waiting_time(self.rate, 0.0, 40.0, rng)
            if isinstance(s, waiting.NoEventBeforeHorizon):
                self.assertGreater(s.residual, 0)
            else:
                self.assertTrue(0 <= s <= 40)

    def test_small_subinterval_budget(self):
        budget = waiting.SolverBudget(integration_subintervals=3)
        hazard = waiting.PoissonHazard(self.rate, t0=2.0)
        self.assertAlmostEqual(
                hazard.cumulative(30.0, budget),
                (0.01 * 32 + 0.00025 * 32 * 32) - (0.01 * 2 + 0.00025 * 2 * 2),
                places=8)

class ExtendBeyondHorizonTestCase(unittest.TestCase):

    def test_constant(self):
        self.assertAlmostEqual(waiting.extend_beyond_horizon(rates.Rate.constant(0.5), 10.0, 1.0), 2.0)

    def test_zero_rate(self):
        self.assertEqual(waiting.extend_beyond_horizon(rates.Rate.constant(0.0), 10.0, 1.0), math.inf)

    def test_frozen_at_horizon(self):
        rate = rates.make_rate([0.1, 4.0], t_max=10, shifts=[0, 5])
        self.assertAlmostEqual(waiting.extend_beyond_horizon(rate, 10.0, 2.0), 0.5)
        rate = rates.make_rate(lambda t: 0.1 * t, t_max=10)
        self.assertAlmostEqual(waiting.extend_beyond_horizon(rate, 10.0, 3.0), 3.0)

    def test_weibull(self):
        scale = rates.Rate.constant(2.0)
        shape = rates.Rate.constant(2.0)
        overshoot = waiting.extend_beyond_horizon(scale, 10.0, 1.0, age_at_horizon=1.0, shape=shape)
        self.assertAlmostEqual(((1.0 + overshoot) / 2.0) ** 2 - 0.25, 1.0)

if __name__ == "__main__":
    unittest.main()
