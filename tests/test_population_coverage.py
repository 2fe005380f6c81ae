#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Mon 19-10-2026


"""

import sys
sys.path.append('./')
if True:  # noqa E402
    import unittest
    from unittest import mock
    import popcov.magic_values.column_names as cn
    import popcov.magic_values.popcov_settings as ps
    import popcov.code.utils.read_input_files as rdr
    from popcov.code.entities import Epitope, EpitopeSet
    from popcov.code.exceptions import (
        InvalidEpitopeDataError, InvalidParameterError, ConfigurationError
    )
    from popcov.code.HLA.AlleleFrequencyTable import AlleleFrequencyTable
    from popcov.code.HLA.CoverageSystem import combine_locus_coverages
    from popcov.code.PopulationCoverage import (
        compute_population_coverage, compute_locus_coverage,
        construct_options
    )


NO_BOOTSTRAP = {cn.BOOTSTRAP: False}


class TestPopulationCoverage(unittest.TestCase):
    """Test whether locus coverages are correctly combined
    """

    def test_combine_two_loci(self):
        self.assertEqual(combine_locus_coverages([0.5, 0.5]), 0.75)
        self.assertEqual(combine_locus_coverages([]), 0)
        self.assertEqual(combine_locus_coverages([0.3, 1.0, 0.1]), 1)

    def test_two_loci_with_half_coverage(self):
        table = AlleleFrequencyTable([('A', 'X', 1.0), ('B', 'Y', 1.0)])
        es = EpitopeSet(
            [
                Epitope('pep1', 'A', 'X', 0.5, 10, 5),
                Epitope('pep2', 'B', 'Y', 0.5, 10, 5)
            ]
        )
        self.assertEqual(compute_locus_coverage('A', es, table), 0.5)
        self.assertEqual(compute_locus_coverage('B', es, table), 0.5)
        est = compute_population_coverage(es, table, NO_BOOTSTRAP)
        self.assertEqual(est.point_estimate, 0.75)
        self.assertEqual(est.locus_coverages, {'A': 0.5, 'B': 0.5})
        self.assertIsNone(est.confidence_interval)
        self.assertIsNone(est.bootstrap_samples)

    def test_combined_at_least_each_locus(self):
        table = rdr.read_allele_frequencies(
            ps.PATH_EXAMPLE_ALLELE_FREQUENCIES
        )
        es = rdr.read_epitopes(ps.PATH_EXAMPLE_EPITOPES)
        est = compute_population_coverage(es, table, NO_BOOTSTRAP)
        self.assertEqual(set(est.locus_coverages), {'A', 'B'})
        for cov in est.locus_coverages.values():
            assert 0 < cov <= est.point_estimate <= 1

    def test_full_coverage_on_one_locus(self):
        table = AlleleFrequencyTable([('A', 'X', 1.0), ('B', 'Y', 0.4)])
        es = EpitopeSet(
            [
                Epitope('pep1', 'A', 'X', 1.0),
                Epitope('pep2', 'B', 'Y', 0.3)
            ]
        )
        est = compute_population_coverage(es, table, NO_BOOTSTRAP)
        self.assertEqual(est.point_estimate, 1)

    def test_loci_option(self):
        table = AlleleFrequencyTable([('A', 'X', 1.0), ('B', 'Y', 1.0)])
        es = EpitopeSet(
            [
                Epitope('pep1', 'A', 'X', 0.5),
                Epitope('pep2', 'B', 'Y', 0.5)
            ]
        )
        est = compute_population_coverage(
            es, table, {cn.BOOTSTRAP: False, cn.LOCI: ['A']}
        )
        self.assertEqual(est.point_estimate, 0.5)
        self.assertEqual(list(est.locus_coverages), ['A'])

    def test_idempotent_without_bootstrap(self):
        table = rdr.read_allele_frequencies(
            ps.PATH_EXAMPLE_ALLELE_FREQUENCIES
        )
        es = rdr.read_epitopes(ps.PATH_EXAMPLE_EPITOPES)
        estimates = [
            compute_population_coverage(es, table, NO_BOOTSTRAP)
            for _ in range(3)
        ]
        for est in estimates[1:]:
            self.assertEqual(est.point_estimate, estimates[0].point_estimate)
            self.assertEqual(
                est.locus_coverages, estimates[0].locus_coverages
            )

    def test_untested_epitope_raises_before_computation(self):
        table = AlleleFrequencyTable([('A', 'X', 0.3)])
        records = [
            {
                cn.SEQUENCE_ID: 'pep1', cn.LOCUS: 'A', cn.ALLELE: 'X',
                cn.IMMUNOPREVALENCE: 0.7, cn.N_TESTED: 20,
                cn.N_RESPONDERS: 14
            },
            {
                cn.SEQUENCE_ID: 'pep2', cn.LOCUS: 'A', cn.ALLELE: 'X',
                cn.IMMUNOPREVALENCE: 0.0, cn.N_TESTED: 0,
                cn.N_RESPONDERS: 0
            }
        ]
        for opts in (None, NO_BOOTSTRAP):
            with mock.patch(
                'popcov.code.PopulationCoverage.compute_point_coverage'
            ) as point_cov:
                with self.assertRaises(InvalidEpitopeDataError) as cm:
                    compute_population_coverage(
                        EpitopeSet.from_records(records), table, opts
                    )
                point_cov.assert_not_called()
            self.assertEqual(cm.exception.sequence_id, 'pep2')

    def test_unknown_allele_aborts_estimate(self):
        table = AlleleFrequencyTable([('A', 'X', 0.3)])
        es = EpitopeSet([Epitope('pep1', 'A', 'W', 0.7, 20, 14)])
        with self.assertRaises(ConfigurationError):
            compute_population_coverage(es, table)

    def test_invalid_options(self):
        for opts in (
            {cn.BOOTSTRAP_ITERATIONS: 0},
            {cn.BOOTSTRAP_ITERATIONS: -5},
            {cn.BOOTSTRAP_ITERATIONS: 2.5},
            {cn.CONFIDENCE_LEVEL: 0},
            {cn.CONFIDENCE_LEVEL: 1},
            {cn.CONFIDENCE_LEVEL: 1.5},
            {cn.N_WORKERS: 0},
            {cn.RANDOM_SEED: -1},
            {'n_bootstraps': 10}
        ):
            with self.assertRaises(InvalidParameterError):
                construct_options(opts)

        opts = construct_options(None)
        self.assertTrue(opts.bootstrap)
        self.assertEqual(opts.bootstrap_iterations, 100)
        self.assertEqual(opts.confidence_level, 0.95)
        self.assertIsNone(opts.random_seed)

    def test_invalid_epitope_data(self):
        with self.assertRaises(InvalidEpitopeDataError):
            Epitope('pep1', 'A', 'X', 1.2)
        with self.assertRaises(InvalidEpitopeDataError):
            Epitope('pep1', 'A', 'X', -0.1)
        with self.assertRaises(InvalidEpitopeDataError):
            Epitope('pep1', 'A', 'X', float('nan'))
        with self.assertRaises(InvalidEpitopeDataError) as cm:
            Epitope('pep1', 'A', 'X', 0.5, n_tested=4, n_responders=5)
        self.assertIn('pep1', str(cm.exception))
        with self.assertRaises(InvalidEpitopeDataError):
            Epitope('pep1', 'A', 'X', 0.5, n_tested=-1, n_responders=0)
        with self.assertRaises(InvalidEpitopeDataError):
            Epitope('pep1', 'A', 'X', 0.5, n_tested=0, n_responders=0)


if __name__ == '__main__':
    unittest.main()
