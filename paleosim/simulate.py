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


import sys
import math
import heapq
import random
import argparse
import dendropy
import paleosim
from paleosim import error
from paleosim import rates
from paleosim import waiting
from paleosim import record
from paleosim import phylogeny
from paleosim import monitor
from paleosim import utility
from paleosim.environment import EnvironmentTable

MAX_ATTEMPTS = 100000

SPECIATION_EVENT = "speciation"
EXTINCTION_EVENT = "extinction"

class CountRange(object):
    """
    Inclusive interval of acceptable lineage counts.
    """

    def __init__(self, low=0, high=math.inf):
        if low < 0 or high < low:
            raise ValueError("Invalid lineage count range: [{}, {}]".format(low, high))
        self.low = low
        self.high = high

    @classmethod
    def coerce(cls, value):
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        value = list(value)
        if len(value) != 2:
            raise ValueError("Lineage count range must have two elements, but {} given: {}".format(len(value), value))
        return cls(low=value[0], high=value[1])

    @property
    def is_unconstrained(self):
        return self.low == 0 and self.high == math.inf

    def __contains__(self, n):
        return self.low <= n <= self.high

    def __str__(self):
        return "[{}, {}]".format(self.low, self.high)

class RejectedAttempt(Exception):
    def __init__(self, *args, **kwargs):
        Exception.__init__(self, *args, **kwargs)

class SimulationResult(object):
    is_accepted = False

class Accepted(SimulationResult):
    """
    A simulation run satisfying the lineage count constraints.
    """
    is_accepted = True

    def __init__(self, record, attempts):
        self.record = record
        self.attempts = attempts

    @property
    def num_lineages(self):
        return self.record.num_lineages

    @property
    def num_extant(self):
        return self.record.num_extant

    @property
    def num_extinct(self):
        return self.record.num_extinct

    def __repr__(self):
        return "<Accepted: {} lineages, {} extant, after {} attempts>".format(
                self.num_lineages, self.num_extant, self.attempts)

class RetryCapExceeded(SimulationResult):
    """
    No run satisfied the lineage count constraints within the maximum number
    of attempts.
    """

    def __init__(self, attempts, n_final=None, n_extant=None):
        self.attempts = attempts
        self.n_final = n_final
        self.n_extant = n_extant

    def __repr__(self):
        return "<RetryCapExceeded: {} attempts, n_final = {}, n_extant = {}>".format(
                self.attempts, self.n_final, self.n_extant)

class BirthDeathSimulator(object):

    @staticmethod
    def simulation_model_arg_parser():
        parser = argparse.ArgumentParser(add_help=False)
        model_clade_options = parser.add_argument_group("MODEL: Clade")
        model_clade_options.add_argument("--n0",
                type=int,
                default=1,
                help="Number of founding lineages (default = %(default)s).")
        model_clade_options.add_argument("-t", "--t-max",
                type=float,
                default=10.0,
                help="Duration of the simulation, from clade origin to the present (default = %(default)s).")
        for process, flag, default_rate in (
                ("speciation", "s", 0.1),
                ("extinction", "e", 0.05),
                ):
            model_rate_options = parser.add_argument_group("MODEL: {} Submodel Parameters".format(process.title()))
            model_rate_options.add_argument("-{}".format(flag), "--{}-rate".format(process),
                    type=float,
                    nargs="+",
                    default=[default_rate],
                    help="{} rate; or Weibull scale if a shape is given. More than one value gives a step function, with '--{}-shifts' (default = %(default)s).".format(process.title(), process))
            model_rate_options.add_argument("--{}-shifts".format(process),
                    type=float,
                    nargs="+",
                    default=None,
                    help="Times at which the {} rate shifts, ascending from the origin or descending from the present.".format(process))
            model_rate_options.add_argument("--{}-shape".format(process),
                    type=float,
                    default=None,
                    help="Shape of the Weibull age-dependence of the {} rate (default: age-independent).".format(process))
            model_rate_options.add_argument("--{}-environment".format(process),
                    metavar="FILEPATH",
                    default=None,
                    help="Path to an environmental time series (columns: time, value) driving the {} rate.".format(process))
            model_rate_options.add_argument("--{}-environment-response".format(process),
                    choices=["exponential", "linear"],
                    default="exponential",
                    help="Response of the {} rate to the environment: 'a * exp(b * env)' or 'a + b * env' (default: %(default)s).".format(process))
            model_rate_options.add_argument("--{}-environment-params".format(process),
                    type=float,
                    nargs=2,
                    metavar=("A", "B"),
                    default=None,
                    help="Parameters 'a' and 'b' of the environmental response (default: 'a' is the {} rate, 'b' is 0).".format(process))
        model_constraint_options = parser.add_argument_group("MODEL: Acceptance Constraints")
        model_constraint_options.add_argument("--n-final",
                type=float,
                nargs=2,
                metavar=("MIN", "MAX"),
                default=None,
                help="Acceptable range of the total number of lineages (default: unconstrained).")
        model_constraint_options.add_argument("--n-extant",
                type=float,
                nargs=2,
                metavar=("MIN", "MAX"),
                default=None,
                help="Acceptable range of the number of lineages extant at the present (default: unconstrained).")
        model_constraint_options.add_argument("--true-extinction",
                action="store_true",
                default=False,
                help="Report true extinction times of extant lineages instead of censoring them.")
        return parser

    def __init__(self, **kwargs):
        self.elapsed_time = 0.0 # need to be here for logging
        self.configure_simulator(kwargs)
        self.set_model(kwargs)
        if kwargs:
            raise TypeError("Unsupported configuration keywords: {}".format(kwargs))
        self.attempt = 0
        self.reset()

    def configure_simulator(self, configd):

        self.name = configd.pop("name", None)
        if self.name is None:
            self.name = str(id(self))

        self.run_logger = configd.pop("run_logger", None)
        if self.run_logger is None:
            self.run_logger = utility.RunLogger(name="paleosim",
                    stderr_logging_level=configd.pop("stderr_logging_level", "warning"),
                    log_to_file=False)
        self.run_logger.system = self
        self.is_log_debug = self.run_logger.is_enabled_for("debug")
        self.run_logger.info("Configuring simulation '{}'".format(self.name))

        self.debug_mode = configd.pop("debug_mode", False)
        if self.debug_mode:
            self.run_logger.info("Running in DEBUG mode")

        self.rng = configd.pop("rng", None)
        if self.rng is None:
            self.random_seed = configd.pop("random_seed", None)
            if self.random_seed is None:
                self.random_seed = random.randint(0, sys.maxsize)
            self.run_logger.info("Initializing with random seed {}".format(self.random_seed))
            self.rng = random.Random(self.random_seed)
        else:
            if "random_seed" in configd:
                raise TypeError("Cannot specify both 'rng' and 'random_seed'")
            self.run_logger.info("Using existing random number generator")

        self.solver_budget = configd.pop("solver_budget", None)
        if self.solver_budget is None:
            self.solver_budget = waiting.DEFAULT_BUDGET

        self.log_frequency = configd.pop("log_frequency", None)

    def set_model(self, model_params_d):

        self.n0 = model_params_d.pop("n0", 1)
        if int(self.n0) != self.n0 or self.n0 < 1:
            raise ValueError("Number of founding lineages must be a positive integer: {}".format(self.n0))
        self.n0 = int(self.n0)
        self.run_logger.info("Founding lineages, n0: {}".format(self.n0))

        self.t_max = float(model_params_d.pop("t_max", 10.0))
        if not (self.t_max > 0 and math.isfinite(self.t_max)):
            raise ValueError("Simulation duration must be positive and finite: {}".format(self.t_max))
        self.run_logger.info("Simulation duration, t_max: {}".format(self.t_max))

        # Speciation submodel
        self.speciation_rate = rates.make_rate(
                model_params_d.pop("speciation_rate", 0.1),
                self.t_max,
                environment=model_params_d.pop("speciation_environment", None),
                shifts=model_params_d.pop("speciation_shifts", None))
        self.speciation_shape = rates.make_shape(model_params_d.pop("speciation_shape", None), self.t_max)
        self.run_logger.info("Speciation {}: {}".format(
            "rate" if self.speciation_shape is None else "Weibull scale",
            self.speciation_rate))
        if self.speciation_shape is not None:
            self.run_logger.info("Speciation Weibull shape: {}".format(self.speciation_shape))

        # Extinction submodel
        self.extinction_rate = rates.make_rate(
                model_params_d.pop("extinction_rate", 0.05),
                self.t_max,
                environment=model_params_d.pop("extinction_environment", None),
                shifts=model_params_d.pop("extinction_shifts", None))
        self.extinction_shape = rates.make_shape(model_params_d.pop("extinction_shape", None), self.t_max)
        self.run_logger.info("Extinction {}: {}".format(
            "rate" if self.extinction_shape is None else "Weibull scale",
            self.extinction_rate))
        if self.extinction_shape is not None:
            self.run_logger.info("Extinction Weibull shape: {}".format(self.extinction_shape))

        # Acceptance constraints
        self.n_final = CountRange.coerce(model_params_d.pop("n_final", None))
        self.run_logger.info("Acceptable total number of lineages: {}".format(self.n_final))
        self.n_extant = CountRange.coerce(model_params_d.pop("n_extant", None))
        self.run_logger.info("Acceptable number of extant lineages: {}".format(self.n_extant))

        self.is_report_true_extinction = model_params_d.pop("true_extinction", False)
        self.run_logger.info("Extinction times of extant lineages will be {}".format(
            "sampled past the present" if self.is_report_true_extinction else "censored"))

    def reset(self):
        self.elapsed_time = 0.0
        self.record = record.SimulationRecord(t_max=self.t_max)
        self.current_lineages = set()
        self.event_queue = []
        self.event_counter = 0
        self.num_events = 0
        self.extinction_residuals = {}

    def bootstrap(self):
        for i in range(self.n0):
            lineage = self.record.new_lineage(birth_time=0.0, parent=None)
            self.add_lineage(lineage)

    def add_lineage(self, lineage):
        self.current_lineages.add(lineage)
        self.schedule_extinction(lineage)
        self.schedule_speciation(lineage)

    def schedule_event(self, event_time, event_type, lineage):
        self.event_counter += 1
        heapq.heappush(self.event_queue, (event_time, self.event_counter, event_type, lineage))

    def schedule_speciation(self, lineage):
        wait = waiting.sample_waiting_time(
                rate=self.speciation_rate,
                current_time=self.elapsed_time,
                t_max=self.t_max,
                rng=self.rng,
                age=self.elapsed_time - lineage.birth_time,
                shape=self.speciation_shape,
                budget=self.solver_budget)
        if isinstance(wait, waiting.NoEventBeforeHorizon):
            return
        self.schedule_event(self.elapsed_time + wait, SPECIATION_EVENT, lineage)

    def schedule_extinction(self, lineage):
        wait = waiting.sample_waiting_time(
                rate=self.extinction_rate,
                current_time=self.elapsed_time,
                t_max=self.t_max,
                rng=self.rng,
                age=self.elapsed_time - lineage.birth_time,
                shape=self.extinction_shape,
                budget=self.solver_budget)
        if isinstance(wait, waiting.NoEventBeforeHorizon):
            if self.is_report_true_extinction:
                self.extinction_residuals[lineage.index] = wait.residual
            return
        self.schedule_event(self.elapsed_time + wait, EXTINCTION_EVENT, lineage)

    def split_lineage(self, lineage):
        child = self.record.new_lineage(birth_time=self.elapsed_time, parent=lineage.index)
        if self.is_log_debug:
            self.run_logger.debug("{} speciating: {} born".format(lineage.label, child.label))
        self.add_lineage(child)
        self.schedule_speciation(lineage)
        if self.record.num_lineages > self.n_final.high:
            raise RejectedAttempt("{} lineages exceeds maximum of {}".format(
                self.record.num_lineages, self.n_final.high))

    def extinguish_lineage(self, lineage):
        if self.is_log_debug:
            self.run_logger.debug("{} going extinct".format(lineage.label))
        lineage.extinguish(self.elapsed_time)
        self.current_lineages.remove(lineage)

    def finalize_survivors(self):
        for lineage in self.record:
            if not lineage.is_alive:
                continue
            if self.is_report_true_extinction:
                overshoot = waiting.extend_beyond_horizon(
                        rate=self.extinction_rate,
                        t_max=self.t_max,
                        residual=self.extinction_residuals[lineage.index],
                        age_at_horizon=self.t_max - lineage.birth_time,
                        shape=self.extinction_shape)
                lineage.survive(death_time=self.t_max + overshoot)
            else:
                lineage.survive(death_time=None)
            self.current_lineages.remove(lineage)

    def run(self):
        """
        Runs one attempt from the founding lineages to ``t_max``.

        Returns the :class:`record.SimulationRecord` if the lineage counts
        satisfy the acceptance constraints, and raises
        :class:`RejectedAttempt` otherwise.
        """
        self.attempt += 1
        self.reset()
        self.bootstrap()
        while self.event_queue:
            event_time, event_idx, event_type, lineage = heapq.heappop(self.event_queue)
            if not lineage.is_alive:
                continue
            self.elapsed_time = event_time
            self.num_events += 1
            if self.log_frequency and self.num_events % self.log_frequency == 0:
                self.run_logger.info("{} events, {} lineages alive, {} lineages in total".format(
                    self.num_events, len(self.current_lineages), self.record.num_lineages))
            if event_type == SPECIATION_EVENT:
                self.split_lineage(lineage)
            else:
                self.extinguish_lineage(lineage)
        self.elapsed_time = self.t_max
        self.finalize_survivors()
        if self.debug_mode:
            self.record.check_consistency()
            self.run_logger.debug("DEBUG MODE: simulation record is consistent")
        num_lineages = self.record.num_lineages
        num_extant = self.record.num_extant
        if num_lineages not in self.n_final:
            raise RejectedAttempt("{} lineages in total, outside of {}".format(num_lineages, self.n_final))
        if num_extant not in self.n_extant:
            raise RejectedAttempt("{} extant lineages, outside of {}".format(num_extant, self.n_extant))
        return self.record

def run_with_retries(simulator, max_attempts=MAX_ATTEMPTS):
    """
    Runs ``simulator`` until an attempt satisfies its acceptance constraints,
    for at most ``max_attempts`` attempts.

    Returns :class:`Accepted` or :class:`RetryCapExceeded`.
    """
    run_logger = simulator.run_logger
    for attempt in range(1, max_attempts+1):
        try:
            sim_record = simulator.run()
        except RejectedAttempt as e:
            if simulator.is_log_debug:
                run_logger.debug("Attempt {}: rejected: {}".format(attempt, e))
            continue
        run_logger.info("Attempt {}: accepted with {} lineages, {} extant".format(
            attempt, sim_record.num_lineages, sim_record.num_extant))
        return Accepted(record=sim_record, attempts=attempt)
    run_logger.warning("Lineage count constraints not satisfied after {} attempts: total in {}, extant in {}".format(
        max_attempts, simulator.n_final, simulator.n_extant))
    return RetryCapExceeded(
            attempts=max_attempts,
            n_final=simulator.n_final,
            n_extant=simulator.n_extant)

def bd_sim(n0,
        lambda_,
        mu,
        t_max,
        l_shape=None,
        m_shape=None,
        env_l=None,
        env_m=None,
        l_shifts=None,
        m_shifts=None,
        n_final=(0, math.inf),
        n_extant=(0, math.inf),
        true_ext=False,
        rng=None,
        random_seed=None,
        max_attempts=MAX_ATTEMPTS,
        run_logger=None,
        **kwargs):
    """
    Simulates a birth-death process with general speciation (``lambda_``) and
    extinction (``mu``) rates.

    Each rate may be a number, a function of time, a function of time and an
    environmental variable (with ``env_l``/``env_m``), or a vector of rates
    holding between shift times (with ``l_shifts``/``m_shifts``). With a
    shape (``l_shape``/``m_shape``) the process is age-dependent and the rate
    is taken as the scale of a Weibull distribution.

    Parameters
    ----------
    n0 : int
        Number of founding lineages.
    lambda_, mu
        Speciation and extinction rate specifications.
    t_max : float
        Time of the present, with the clade originating at 0.
    l_shape, m_shape : float or function of time
        Weibull shapes of the age-dependence of speciation and extinction.
    env_l, env_m : EnvironmentTable
        Environmental time series for environment-dependent rates.
    l_shifts, m_shifts : sequence of float
        Shift times for step-function rates.
    n_final, n_extant : pair
        Inclusive acceptable ranges of the total and extant number of
        lineages.
    true_ext : bool
        If `True`, extant lineages get an extinction time drawn past
        ``t_max``; otherwise their extinction time is censored (`None`).
    rng : random.Random
        Random number generator; or use ``random_seed``.
    max_attempts : int
        Maximum number of attempts to satisfy ``n_final`` and ``n_extant``.

    Returns
    -------
    Accepted or RetryCapExceeded
    """
    configd = dict(kwargs)
    configd["n0"] = n0
    configd["t_max"] = t_max
    configd["speciation_rate"] = lambda_
    configd["extinction_rate"] = mu
    configd["speciation_shape"] = l_shape
    configd["extinction_shape"] = m_shape
    configd["speciation_environment"] = env_l
    configd["extinction_environment"] = env_m
    configd["speciation_shifts"] = l_shifts
    configd["extinction_shifts"] = m_shifts
    configd["n_final"] = n_final
    configd["n_extant"] = n_extant
    configd["true_extinction"] = true_ext
    if rng is not None:
        configd["rng"] = rng
    if random_seed is not None:
        configd["random_seed"] = random_seed
    if run_logger is not None:
        configd["run_logger"] = run_logger
    simulator = BirthDeathSimulator(**configd)
    return run_with_retries(simulator, max_attempts=max_attempts)

def environment_response_function(response, a, b):
    if response == "exponential":
        f = lambda t, env: a * math.exp(b * env)
        f.__doc__ = "{} * exp({} * env)".format(a, b)
    elif response == "linear":
        f = lambda t, env: a + b * env
        f.__doc__ = "{} + {} * env".format(a, b)
    else:
        raise ValueError("Unrecognized environmental response: '{}'".format(response))
    return f

def model_params_from_args(argsd):
    """
    Pops the model options of :meth:`BirthDeathSimulator.simulation_model_arg_parser`
    from ``argsd`` and returns the corresponding model keywords.
    """
    model_params_d = {}
    model_params_d["n0"] = argsd.pop("n0")
    model_params_d["t_max"] = argsd.pop("t_max")
    for process in ("speciation", "extinction"):
        rate = argsd.pop("{}_rate".format(process))
        shifts = argsd.pop("{}_shifts".format(process))
        env_path = argsd.pop("{}_environment".format(process))
        response = argsd.pop("{}_environment_response".format(process))
        env_params = argsd.pop("{}_environment_params".format(process))
        if env_path is not None:
            if len(rate) > 1:
                raise error.UnsupportedCombination("A step {} rate cannot be combined with an environment table".format(process))
            if env_params is None:
                env_params = (rate[0], 0.0)
            model_params_d["{}_environment".format(process)] = EnvironmentTable.from_path(env_path)
            model_params_d["{}_rate".format(process)] = environment_response_function(response, env_params[0], env_params[1])
        elif len(rate) == 1:
            model_params_d["{}_rate".format(process)] = rate[0]
        else:
            model_params_d["{}_rate".format(process)] = rate
        model_params_d["{}_shifts".format(process)] = shifts
        model_params_d["{}_shape".format(process)] = argsd.pop("{}_shape".format(process))
    model_params_d["n_final"] = argsd.pop("n_final")
    model_params_d["n_extant"] = argsd.pop("n_extant")
    model_params_d["true_extinction"] = argsd.pop("true_extinction")
    return model_params_d

def repeat_run_bd(
        model_params_d,
        nreps,
        output_prefix,
        random_seed=None,
        max_attempts=MAX_ATTEMPTS,
        stderr_logging_level="info",
        file_logging_level="debug",
        log_frequency=None,
        debug_mode=False):
    """
    Produces ``nreps`` replicates of the birth-death simulator under identical
    parameters, sharing one random number generator.

    Parameters
    ----------
    model_params_d : dict
        Simulator model parameters as keyword-value pairs. To be re-used for
        each replicate.
    nreps : integer
        Number of replicates to produce.
    output_prefix : string
        Path prefix for output files.
    random_seed : integer
        Random seed to be used (for single random number generator across all
        replicates).
    max_attempts : integer
        Maximum number of attempts per replicate to satisfy the lineage count
        constraints.
    stderr_logging_level : string or None
        Message level threshold for screen logs; if 'none' or `None`, screen
        logs will be suppressed.
    file_logging_level : string or None
        Message level threshold for file logs; if 'none' or `None`, file
        logs will be suppressed.

    Returns
    -------
    list of Accepted or RetryCapExceeded
        One result per replicate.
    """
    if stderr_logging_level is None or stderr_logging_level.lower() == "none":
        log_to_stderr = False
    else:
        log_to_stderr = True
    if file_logging_level is None or file_logging_level.lower() == "none":
        log_to_file = False
    else:
        log_to_file = True
    run_logger = utility.RunLogger(
            name="paleosim",
            log_path=output_prefix + ".log",
            log_to_stderr=log_to_stderr,
            stderr_logging_level=stderr_logging_level,
            log_to_file=log_to_file,
            file_logging_level=file_logging_level,
            )
    run_logger.info("Starting: {}".format(paleosim.description()))
    if random_seed is None:
        random_seed = random.randint(0, sys.maxsize)
    run_logger.info("Initializing with random seed: {}".format(random_seed))
    rng = random.Random(random_seed)
    replicate_monitor = monitor.ReplicateMonitor.default_monitor()
    trees = dendropy.TreeList()
    results = []
    for rep in range(nreps):
        simulation_name = "Run{}".format(rep+1)
        run_logger.info("Run {} of {}: starting".format(rep+1, nreps))
        configd = dict(model_params_d)
        configd["name"] = simulation_name
        configd["run_logger"] = run_logger
        configd["rng"] = rng
        configd["log_frequency"] = log_frequency
        configd["debug_mode"] = debug_mode
        simulator = BirthDeathSimulator(**configd)
        result = run_with_retries(simulator, max_attempts=max_attempts)
        run_logger.system = None
        replicate_monitor.sample(result, name=simulation_name)
        if result.is_accepted:
            run_logger.info("Run {} of {}: completed with {} lineages ({} extant) after {} attempts".format(
                rep+1, nreps, result.num_lineages, result.num_extant, result.attempts))
            lineages_filepath = "{}.R{:04d}.lineages.tsv".format(output_prefix, rep+1)
            result.record.as_data_frame().to_csv(lineages_filepath, sep="\t", index=False, na_rep="NA")
            tree = phylogeny.make_phylo(result.record, taxon_namespace=trees.taxon_namespace)
            tree.label = simulation_name
            trees.append(tree)
        else:
            run_logger.info("Run {} of {}: rejected after {} attempts".format(rep+1, nreps, result.attempts))
        results.append(result)
    trees.write(path=output_prefix + ".trees", schema="newick", suppress_annotations=False)
    summary_filepath = output_prefix + ".summary.tsv"
    replicate_monitor.as_data_frame().to_csv(summary_filepath, sep="\t", index=False, na_rep="NA")
    run_logger.info("Summary of {} replicates written to: {}".format(nreps, summary_filepath))
    return results
