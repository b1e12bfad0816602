#! /usr/bin/env python

##############################################################################
##
##  Copyright 2010-2014 Jeet Sukumaran.
##  All rights reserved.
##
##  Redistribution and use in source and binary forms, with or without
##  modification, are permitted provided that the following conditions are met:
##
##      * Redistributions of source code must retain the above copyright
##        notice, this list of conditions and the following disclaimer.
##      * Redistributions in binary form must reproduce the above copyright
##        notice, this list of conditions and the following disclaimer in the
##        documentation and/or other materials provided with the distribution.
##      * The names of its contributors may not be used to endorse or promote
##        products derived from this software without specific prior written
##        permission.
##
##  THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS
##  IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
##  THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR
##  PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL JEET SUKUMARAN OR MARK T. HOLDER
##  BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
##  CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
##  SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
##  INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
##  CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
##  ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
##  POSSIBILITY OF SUCH DAMAGE.
##
##############################################################################


import sys
import argparse
import paleosim
from paleosim import simulate
from paleosim import error

def main():
    simulation_model_arg_parser = simulate.BirthDeathSimulator.simulation_model_arg_parser()
    parser = argparse.ArgumentParser(
            parents=[simulation_model_arg_parser],
            description="{} General-rate birth-death simulator".format(paleosim.description())
            )

    run_options = parser.add_argument_group("Run Options")
    run_options.add_argument("-z", "--random-seed",
            type=int,
            default=None,
            help="Seed for random number generator engine.")
    run_options.add_argument("-n", "--nreps",
            type=int,
            default=10,
            help="number of replicates (default = %(default)s).")
    run_options.add_argument("--max-attempts",
            type=int,
            default=simulate.MAX_ATTEMPTS,
            help="Maximum number of attempts per replicate to satisfy the lineage count constraints (default = %(default)s).")
    run_options.add_argument("--log-frequency",
            default=None,
            type=int,
            help="Frequency (in events) that background progress messages get written to the log (default: no progress messages).")
    run_options.add_argument("--file-logging-level",
            default="debug",
            help="Message level threshold for file logs.")
    run_options.add_argument("--stderr-logging-level",
            default="info",
            help="Message level threshold for screen logs.")
    run_options.add_argument("--debug-mode",
            action="store_true",
            default=False,
            help="Run in debugging mode.")

    output_options = parser.add_argument_group("Output Options")
    output_options.add_argument('-o', '--output-prefix',
        action='store',
        dest='output_prefix',
        type=str,
        default='paleosim_run',
        metavar='OUTPUT-FILE-PREFIX',
        help="Prefix for output files (default='%(default)s').")

    args = parser.parse_args()

    argsd = vars(args)
    nreps = argsd.pop("nreps")
    random_seed = argsd.pop("random_seed", None)
    output_prefix = argsd.pop("output_prefix", "paleosim_run")
    stderr_logging_level=argsd.pop("stderr_logging_level")
    file_logging_level=argsd.pop("file_logging_level")
    try:
        model_params_d = simulate.model_params_from_args(argsd)
        simulate.repeat_run_bd(
                model_params_d=model_params_d,
                nreps=nreps,
                output_prefix=output_prefix,
                random_seed=random_seed,
                max_attempts=argsd.pop("max_attempts"),
                stderr_logging_level=stderr_logging_level,
                file_logging_level=file_logging_level,
                log_frequency=argsd.pop("log_frequency"),
                debug_mode=argsd.pop("debug_mode"))
    except error.ConstructionError as e:
        sys.exit("Invalid model: {}".format(e))

if __name__ == "__main__":
    main()
