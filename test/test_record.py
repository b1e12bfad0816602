#! /usr/bin/env python

import math
import unittest
from paleosim import record

def build_record():
    # two founders; s0 gives rise to s2 at 2.5, which dies at 4.0
    sim_record = record.SimulationRecord(t_max=10.0)
    s0 = sim_record.new_lineage(birth_time=0.0)
    s1 = sim_record.new_lineage(birth_time=0.0)
    s2 = sim_record.new_lineage(birth_time=2.5, parent=s0.index)
    s3 = sim_record.new_lineage(birth_time=6.0, parent=s2.index - 1)
    s2.extinguish(4.0)
    s1.extinguish(7.5)
    s0.survive()
    s3.survive()
    return sim_record

class SimulationRecordTestCase(unittest.TestCase):

    def setUp(self):
        self.sim_record = build_record()

    def test_counts(self):
        self.assertEqual(self.sim_record.num_lineages, 4)
        self.assertEqual(self.sim_record.num_extant, 2)
        self.assertEqual(self.sim_record.num_extinct, 2)
        self.assertEqual(self.sim_record.num_founders, 2)

    def test_columns(self):
        self.assertEqual(self.sim_record.birth_times, [0.0, 0.0, 2.5, 6.0])
        self.assertEqual(self.sim_record.death_times, [None, 7.5, 4.0, None])
        self.assertEqual(self.sim_record.parents, [None, None, 0, 1])
        self.assertEqual(self.sim_record.extant, [True, False, False, True])
        self.assertEqual([ch.label for ch in self.sim_record.children_of(self.sim_record[0])], ["s2"])

    def test_consistent(self):
        self.sim_record.check_consistency()

    def test_lineages_through_time(self):
        self.assertEqual(self.sim_record.lineages_through_time([0.0, 3.0, 5.0, 6.5, 8.0, 10.0]), [2, 3, 2, 3, 2, 2])

    def test_data_frame(self):
        df = self.sim_record.as_data_frame()
        self.assertEqual(list(df.columns), ["lineage", "parent", "birth_time", "death_time", "is_extant"])
        self.assertTrue(math.isnan(df["death_time"][0]))
        self.assertEqual(df["death_time"][1], 7.5)
        self.assertEqual(df["parent"][2], 0)

    def test_backward_time_data_frame(self):
        df = self.sim_record.as_data_frame(backward_time=True)
        self.assertEqual(list(df["birth_time"]), [10.0, 10.0, 7.5, 4.0])
        self.assertEqual(df["death_time"][2], 6.0)
        self.assertTrue(math.isnan(df["death_time"][3]))

class ConsistencyTestCase(unittest.TestCase):

    def test_unresolved(self):
        sim_record = record.SimulationRecord(t_max=1.0)
        sim_record.new_lineage(birth_time=0.0)
        with self.assertRaises(ValueError):
            sim_record.check_consistency()

    def test_parentless_after_founders(self):
        sim_record = record.SimulationRecord(t_max=5.0)
        s0 = sim_record.new_lineage(birth_time=0.0)
        s1 = sim_record.new_lineage(birth_time=1.0, parent=0)
        s2 = sim_record.new_lineage(birth_time=2.0)
        for lineage in (s0, s1, s2):
            lineage.survive()
        with self.assertRaises(ValueError):
            sim_record.check_consistency()

    def test_born_after_parent_died(self):
        sim_record = record.SimulationRecord(t_max=5.0)
        s0 = sim_record.new_lineage(birth_time=0.0)
        s1 = sim_record.new_lineage(birth_time=3.0, parent=0)
        s0.extinguish(2.0)
        s1.survive()
        with self.assertRaises(ValueError):
            sim_record.check_consistency()

    def test_extinct_after_present(self):
        sim_record = record.SimulationRecord(t_max=5.0)
        s0 = sim_record.new_lineage(birth_time=0.0)
        s0.extinguish(6.0)
        with self.assertRaises(ValueError):
            sim_record.check_consistency()

    def test_true_extinction_times(self):
        sim_record = record.SimulationRecord(t_max=5.0)
        s0 = sim_record.new_lineage(birth_time=0.0)
        s0.survive(death_time=6.0)
        sim_record.check_consistency()

if __name__ == "__main__":
    unittest.main()
