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


class PaleosimError(Exception):
    def __init__(self, *args, **kwargs):
        Exception.__init__(self, *args, **kwargs)

class ConstructionError(PaleosimError):
    """
    A rate, shape or environment specification cannot be turned into a usable
    model. Raised by the rate builder before any simulation work begins.

    Two subclasses describe values rather than specifications and are also
    raised while simulating: :class:`InvalidRate`, when a rate function
    evaluates to a negative or non-finite value, and
    :class:`EnvironmentOutOfRange`, when an environment table is queried
    outside its range.
    """
    pass

class MissingEnvironment(ConstructionError):
    pass

class ShiftLengthMismatch(ConstructionError):
    pass

class ShiftOrderError(ConstructionError):
    pass

class UnsupportedCombination(ConstructionError):
    pass

class DegenerateShape(ConstructionError):
    pass

class EnvironmentOutOfRange(ConstructionError):
    def __init__(self, query_time, min_time, max_time):
        self.query_time = query_time
        self.min_time = min_time
        self.max_time = max_time
        ConstructionError.__init__(self,
                "Time {} is outside the environment table range [{}, {}]".format(
                    query_time, min_time, max_time))

class InvalidRate(ConstructionError):
    """
    A rate (or Weibull scale/shape) evaluated to a negative or non-finite
    value. Raised at construction for constants and step vectors, and when
    sampling for rate functions.
    """
    pass

class NonConvergence(PaleosimError):
    """
    Numerical integration or root-finding of a cumulative hazard failed to
    reach its tolerance within its iteration budget.
    """
    pass
