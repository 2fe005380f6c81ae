#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Mon 19-10-2026


"""

import sys
sys.path.append('./')
if True:  # noqa E402
    import unittest
    import threading
    import numpy as np
    from scipy import stats
    import popcov.magic_values.column_names as cn
    import popcov.magic_values.popcov_settings as ps
    import popcov.code.utils.read_input_files as rdr
    from popcov.code.entities import Epitope, EpitopeSet
    from popcov.code.exceptions import (
        InvalidEpitopeDataError, InvalidParameterError,
        BootstrapCancelledError
    )
    from popcov.code.HLA.AlleleFrequencyTable import AlleleFrequencyTable
    from popcov.code.BootstrapEngine import (
        BootstrapEngine, beta_shape_parameters, draw_immunoprevalences
    )
    from popcov.code.PopulationCoverage import compute_population_coverage


class CancelAfter:
    """Cancel event which is set after k checks"""

    def __init__(self, k: int):
        self.k = k
        self.n_checks = 0

    def is_set(self) -> bool:
        self.n_checks += 1
        return self.n_checks > self.k


class TestBootstrap(unittest.TestCase):
    """Test the parametric bootstrap of population coverage
    """

    def setUp(self):
        self.table = rdr.read_allele_frequencies(
            ps.PATH_EXAMPLE_ALLELE_FREQUENCIES
        )
        self.epitope_set = rdr.read_epitopes(ps.PATH_EXAMPLE_EPITOPES)

    def test_beta_shape_parameters(self):
        es = EpitopeSet(
            [
                Epitope('pep1', 'A', 'X', 0.7, 20, 14),
                Epitope('pep2', 'A', 'X', 0.0, 5, 0)
            ]
        )
        successes, failures = beta_shape_parameters(es)
        np.testing.assert_array_equal(successes, [14, 0])
        np.testing.assert_array_equal(failures, [7, 6])

        draws = draw_immunoprevalences(
            np.random.default_rng(1), successes, failures
        )
        self.assertEqual(draws[1], 0)
        assert 0 < draws[0] < 1

    def test_missing_or_zero_counts(self):
        table = AlleleFrequencyTable([('A', 'X', 0.3)])
        epitope = Epitope('pep1', 'A', 'X', 0.7)
        with self.assertRaises(InvalidEpitopeDataError) as cm:
            BootstrapEngine(EpitopeSet([epitope]), table)
        self.assertEqual(cm.exception.sequence_id, 'pep1')

        with self.assertRaises(InvalidEpitopeDataError) as cm:
            Epitope('pep1', 'A', 'X', 0.7, n_tested=0, n_responders=0)
        self.assertEqual(cm.exception.sequence_id, 'pep1')

    def test_invalid_number_of_iterations(self):
        for n_iter in (0, -1, 1.5):
            with self.assertRaises(InvalidParameterError):
                BootstrapEngine(
                    self.epitope_set, self.table, n_iterations=n_iter
                )

    def test_zero_responders_warns(self):
        with self.assertWarns(UserWarning):
            BootstrapEngine(self.epitope_set, self.table, n_iterations=5)

    def test_clopper_pearson_interval(self):
        """With 14 responders among 20 tested, and an allele carried by
        everyone, bootstrapped coverage follows Beta(14, 7). The interval
        should bracket the Clopper-Pearson interval for 14/20."""
        table = AlleleFrequencyTable([('A', 'X', 1.0)])
        es = EpitopeSet([Epitope('pep1', 'A', 'X', 0.7, 20, 14)])
        est = compute_population_coverage(
            es, table,
            {cn.BOOTSTRAP_ITERATIONS: 10000, cn.RANDOM_SEED: 14}
        )
        self.assertAlmostEqual(est.point_estimate, 0.7)
        self.assertEqual(est.n_iterations, 10000)
        lower, upper = est.confidence_interval

        cp_lower = stats.beta.ppf(0.025, 14, 20 - 14 + 1)
        cp_upper = stats.beta.ppf(0.975, 14 + 1, 20 - 14)
        self.assertAlmostEqual(lower, cp_lower, delta=0.01)
        self.assertAlmostEqual(upper, cp_upper, delta=0.05)
        assert lower < est.point_estimate < upper

        # Quantiles of the beta distribution used for resampling
        self.assertAlmostEqual(
            upper, stats.beta.ppf(0.975, 14, 7), delta=0.01
        )

    def test_confidence_level(self):
        est_95 = compute_population_coverage(
            self.epitope_set, self.table,
            {cn.BOOTSTRAP_ITERATIONS: 500, cn.RANDOM_SEED: 3}
        )
        est_50 = compute_population_coverage(
            self.epitope_set, self.table,
            {
                cn.BOOTSTRAP_ITERATIONS: 500, cn.RANDOM_SEED: 3,
                cn.CONFIDENCE_LEVEL: 0.5
            }
        )
        np.testing.assert_array_equal(
            est_95.bootstrap_samples, est_50.bootstrap_samples
        )
        lo_95, hi_95 = est_95.confidence_interval
        lo_50, hi_50 = est_50.confidence_interval
        assert 0 <= lo_95 <= lo_50 <= hi_50 <= hi_95 <= 1
        self.assertEqual(est_50.confidence_level, 0.5)

    def test_reproducible_with_seed(self):
        opts = {cn.BOOTSTRAP_ITERATIONS: 50, cn.RANDOM_SEED: 7}
        est_1 = compute_population_coverage(
            self.epitope_set, self.table, opts
        )
        est_2 = compute_population_coverage(
            self.epitope_set, self.table, opts
        )
        np.testing.assert_array_equal(
            est_1.bootstrap_samples, est_2.bootstrap_samples
        )
        self.assertEqual(est_1.confidence_interval, est_2.confidence_interval)

        est_3 = compute_population_coverage(
            self.epitope_set, self.table,
            {cn.BOOTSTRAP_ITERATIONS: 50, cn.RANDOM_SEED: 8}
        )
        assert not np.array_equal(
            est_1.bootstrap_samples, est_3.bootstrap_samples
        )

    def test_reproducible_across_workers(self):
        samples = [
            BootstrapEngine(
                self.epitope_set, self.table, n_iterations=40, seed=11,
                n_workers=n_workers
            ).simulate_coverages()
            for n_workers in (1, 2, 3)
        ]
        for s in samples[1:]:
            np.testing.assert_array_equal(samples[0], s)

    def test_cancel(self):
        engine = BootstrapEngine(
            self.epitope_set, self.table, n_iterations=20, seed=1
        )
        event = threading.Event()
        event.set()
        with self.assertRaises(BootstrapCancelledError) as cm:
            engine.simulate_coverages(cancel_event=event)
        self.assertEqual(cm.exception.n_completed, 0)

        with self.assertRaises(BootstrapCancelledError) as cm:
            compute_population_coverage(
                self.epitope_set, self.table,
                {cn.BOOTSTRAP_ITERATIONS: 20},
                cancel_event=CancelAfter(5)
            )
        self.assertEqual(cm.exception.n_completed, 5)

    def test_resampled_epitopes_traceable(self):
        resampled = self.epitope_set.with_immunoprevalences(
            np.linspace(0, 1, len(self.epitope_set))
        )
        for orig, new in zip(self.epitope_set, resampled):
            self.assertEqual(new.origin, orig.sequence_id)
            self.assertIsNone(orig.origin)
            self.assertEqual(new.allele, orig.allele)
        with self.assertRaises(AttributeError):
            resampled.epitopes[0].immunoprevalence = 0.5


if __name__ == '__main__':
    unittest.main()
