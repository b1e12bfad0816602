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


import math
import pandas

class Lineage(object):
    """
    A species in the simulation record.

    Times are clade-relative. ``death_time`` is `None` while the lineage is
    alive, and stays `None` for lineages alive at the end of the simulation
    unless true extinction times were requested. ``parent`` is the index of
    the parent lineage, or `None` for founding lineages.
    """

    def __init__(self, index, birth_time, parent=None):
        self.index = index
        self.birth_time = birth_time
        self.parent = parent
        self.death_time = None
        self.is_alive = True
        self.is_extant = False

    def _get_label(self):
        return "s{:d}".format(self.index)
    label = property(_get_label)

    def extinguish(self, death_time):
        assert self.is_alive, self
        self.death_time = death_time
        self.is_alive = False
        self.is_extant = False

    def survive(self, death_time=None):
        """
        Marks a lineage alive at the end of the simulation as extant, with a
        true extinction time past the end, or a censored one (`None`).
        """
        assert self.is_alive, self
        self.death_time = death_time
        self.is_alive = False
        self.is_extant = True

    def as_tuple(self):
        return (self.index, self.parent, self.birth_time, self.death_time, self.is_extant)

    def __repr__(self):
        return "<Lineage {}: parent={}, birth={}, death={}, extant={}>".format(
                self.label, self.parent, self.birth_time, self.death_time, self.is_extant)

class SimulationRecord(object):
    """
    Birth times, death times, parentage and status of every lineage that
    existed in a simulation run, in order of birth.
    """

    def __init__(self, t_max, lineages=None):
        self.t_max = t_max
        if lineages is None:
            self.lineages = []
        else:
            self.lineages = list(lineages)

    def new_lineage(self, birth_time, parent=None):
        lineage = Lineage(
                index=len(self.lineages),
                birth_time=birth_time,
                parent=parent)
        self.lineages.append(lineage)
        return lineage

    def __len__(self):
        return len(self.lineages)

    def __iter__(self):
        return iter(self.lineages)

    def __getitem__(self, idx):
        return self.lineages[idx]

    @property
    def num_lineages(self):
        return len(self.lineages)

    @property
    def num_extant(self):
        return sum(1 for lineage in self.lineages if lineage.is_extant)

    @property
    def num_extinct(self):
        return sum(1 for lineage in self.lineages if not lineage.is_extant and not lineage.is_alive)

    @property
    def num_founders(self):
        return sum(1 for lineage in self.lineages if lineage.parent is None)

    @property
    def birth_times(self):
        return [lineage.birth_time for lineage in self.lineages]

    @property
    def death_times(self):
        return [lineage.death_time for lineage in self.lineages]

    @property
    def parents(self):
        return [lineage.parent for lineage in self.lineages]

    @property
    def extant(self):
        return [lineage.is_extant for lineage in self.lineages]

    def children_of(self, lineage):
        return [ch for ch in self.lineages if ch.parent == lineage.index]

    def as_tuples(self):
        return [lineage.as_tuple() for lineage in self.lineages]

    def lineages_through_time(self, times):
        """
        Number of lineages alive at each of ``times``.
        """
        counts = []
        for t in times:
            n = 0
            for lineage in self.lineages:
                if lineage.birth_time > t:
                    continue
                if lineage.death_time is None or lineage.death_time > t:
                    n += 1
            counts.append(n)
        return counts

    def as_data_frame(self, backward_time=False):
        """
        One row per lineage. With ``backward_time``, times are given as time
        before the present (``t_max - t``), so that the clade origin is at
        ``t_max`` and the present at 0; censored death times are NaN either
        way.
        """
        births = []
        deaths = []
        for lineage in self.lineages:
            birth = lineage.birth_time
            death = lineage.death_time
            if backward_time:
                birth = self.t_max - birth
                if death is not None:
                    death = self.t_max - death
            births.append(birth)
            deaths.append(math.nan if death is None else death)
        return pandas.DataFrame({
                "lineage": [lineage.index for lineage in self.lineages],
                "parent": pandas.array(self.parents, dtype="Int64"),
                "birth_time": births,
                "death_time": deaths,
                "is_extant": self.extant,
                }, columns=["lineage", "parent", "birth_time", "death_time", "is_extant"])

    def check_consistency(self):
        """
        Raises `ValueError` if the record is not internally consistent.
        """
        seen_child = False
        for lineage in self.lineages:
            if lineage.is_alive:
                raise ValueError("{} has not been resolved".format(lineage))
            if not (0 <= lineage.birth_time <= self.t_max):
                raise ValueError("{} born outside of [0, {}]".format(lineage, self.t_max))
            if lineage.parent is None:
                if seen_child:
                    raise ValueError("{} has no parent but is not a founder".format(lineage))
            else:
                seen_child = True
                if not (0 <= lineage.parent < lineage.index):
                    raise ValueError("{} has parent that does not precede it".format(lineage))
                parent = self.lineages[lineage.parent]
                if parent.birth_time > lineage.birth_time:
                    raise ValueError("{} born before its parent {}".format(lineage, parent))
                if parent.death_time is not None and parent.death_time < lineage.birth_time:
                    raise ValueError("{} born after the death of its parent {}".format(lineage, parent))
            if lineage.is_extant:
                if lineage.death_time is not None and lineage.death_time < self.t_max:
                    raise ValueError("{} is extant but died before {}".format(lineage, self.t_max))
            else:
                if lineage.death_time is None:
                    raise ValueError("{} is extinct but has no death time".format(lineage))
                if lineage.death_time < lineage.birth_time:
                    raise ValueError("{} died before it was born".format(lineage))
                if lineage.death_time > self.t_max:
                    raise ValueError("{} is extinct but died after {}".format(lineage, self.t_max))
