#! /usr/bin/env python

import random
import unittest
from paleosim import monitor
from paleosim import simulate
from paleosim import utility

class ReplicateMonitorTestCase(unittest.TestCase):

    def test_default_monitor(self):
        run_logger = utility.RunLogger(name="paleosim.test", log_to_stderr=False, log_to_file=False)
        accepted = simulate.bd_sim(n0=3, lambda_=0, mu=0, t_max=1, rng=random.Random(1), run_logger=run_logger)
        rejected = simulate.RetryCapExceeded(attempts=10)
        m = monitor.ReplicateMonitor.default_monitor()
        m.sample(accepted, name="Run1")
        m.sample(rejected, name="Run2")
        df = m.as_data_frame()
        self.assertEqual(list(df.columns), ["name", "accepted", "attempts", "num_lineages", "num_extant", "num_extinct"])
        self.assertEqual(list(df["accepted"]), [True, False])
        self.assertEqual(list(df["attempts"]), [1.0, 10.0])
        self.assertEqual(df["num_lineages"][0], 3.0)
        self.assertEqual(df["num_lineages"][1], "NA")

    def test_custom_tracker(self):
        m = monitor.ReplicateMonitor()
        m.add_attribute_tracker("attempts", field_name="n_tries")
        m.sample(simulate.RetryCapExceeded(attempts=7))
        self.assertEqual(m.rows, [{"n_tries": 7.0}])
        self.assertEqual(list(m.as_data_frame().columns), ["n_tries"])

if __name__ == "__main__":
    unittest.main()
