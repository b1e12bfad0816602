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


import pandas

class AttributeTracker(object):

    def __init__(self,
            attr_name,
            field_name=None,
            default_value="NA"):
        self.attr_name = attr_name
        if field_name is None:
            self.field_name = self.attr_name
        else:
            self.field_name = field_name
        self.default_value = default_value

    def sample(self, result, row):
        value = getattr(result, self.attr_name, None)
        if value is None:
            row[self.field_name] = self.default_value
        elif isinstance(value, bool):
            row[self.field_name] = value
        else:
            row[self.field_name] = float(value)
        return row

class ReplicateMonitor(object):
    """
    Collects one summary row per simulation result.
    """

    @classmethod
    def default_monitor(cls):
        m = cls()
        m.add_attribute_tracker(attr_name="is_accepted", field_name="accepted")
        m.add_attribute_tracker(attr_name="attempts", field_name="attempts")
        m.add_attribute_tracker(attr_name="num_lineages", field_name="num_lineages")
        m.add_attribute_tracker(attr_name="num_extant", field_name="num_extant")
        m.add_attribute_tracker(attr_name="num_extinct", field_name="num_extinct")
        return m

    def __init__(self):
        self.trackers = []
        self.rows = []

    def add_attribute_tracker(self, attr_name, field_name=None):
        s = AttributeTracker(
                attr_name=attr_name,
                field_name=field_name,
                )
        self.trackers.append(s)
        return s

    def sample(self, result, name=None):
        row = {}
        if name is not None:
            row["name"] = name
        for tracker in self.trackers:
            tracker.sample(result, row)
        self.rows.append(row)
        return row

    def as_data_frame(self):
        columns = []
        if any("name" in row for row in self.rows):
            columns.append("name")
        columns.extend(tracker.field_name for tracker in self.trackers)
        return pandas.DataFrame(self.rows, columns=columns)
