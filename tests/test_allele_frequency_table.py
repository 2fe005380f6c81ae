#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Mon 19-10-2026


"""

import sys
sys.path.append('./')
if True:  # noqa E402
    import unittest
    import popcov.magic_values.column_names as cn
    import popcov.magic_values.magic_values_rules as mgr
    from popcov.code.exceptions import ConfigurationError
    from popcov.code.HLA.AlleleFrequencyTable import AlleleFrequencyTable


class TestAlleleFrequencyTable(unittest.TestCase):
    """Test whether allele frequency tables are validated
    """

    def test_unknown_frequency(self):
        table = AlleleFrequencyTable.from_records(
            [
                {cn.LOCUS: 'A', cn.ALLELE: 'A*01:01', cn.FREQUENCY: 0.2},
                {cn.LOCUS: 'A', cn.ALLELE: 'A*02:01', cn.FREQUENCY: 0.3},
                {cn.LOCUS: 'B', cn.ALLELE: 'B*07:02', cn.FREQUENCY: 1.0}
            ]
        )
        self.assertAlmostEqual(table.unknown_frequency('A'), 0.5)
        self.assertAlmostEqual(table.frequency('A', mgr.UNKNOWN), 0.5)
        self.assertEqual(table.unknown_frequency('B'), 0)
        self.assertEqual(table.unknown_frequency('C'), 1)
        self.assertEqual(table.frequency('A', 'A*02:01'), 0.3)
        self.assertEqual(table.locus_of('B*07:02'), 'B')
        self.assertEqual(table.loci, ('A', 'B'))
        self.assertEqual(len(table), 3)

    def test_frequencies_exceeding_one(self):
        with self.assertRaises(ConfigurationError) as cm:
            AlleleFrequencyTable([('A', 'X', 0.6), ('A', 'Y', 0.5)])
        self.assertEqual(cm.exception.locus, 'A')

        # Rounding errors are tolerated
        table = AlleleFrequencyTable(
            [('A', 'X', 0.1), ('A', 'Y', 0.2), ('A', 'Z', 0.7)]
        )
        self.assertEqual(table.unknown_frequency('A'), 0)

    def test_invalid_entries(self):
        for entries in (
            [('A', 'X', 1.2)],
            [('A', 'X', -0.1)],
            [('A', 'X', float('nan'))],
            [('A', 'X', 'frequent')],
            [('A', mgr.UNKNOWN, 0.1)],
            [('A', 'X', 0.1), ('A', 'X', 0.2)],
            [('A', 'X', 0.1), ('B', 'X', 0.2)]
        ):
            with self.assertRaises(ConfigurationError):
                AlleleFrequencyTable(entries)

    def test_missing_allele(self):
        table = AlleleFrequencyTable([('A', 'X', 0.1), ('B', 'Y', 0.2)])
        with self.assertRaises(ConfigurationError) as cm:
            table.frequency('A', 'Z')
        self.assertEqual(cm.exception.allele, 'Z')
        with self.assertRaises(ConfigurationError):
            table.frequency('A', 'Y')

    def test_missing_record_field(self):
        with self.assertRaises(ConfigurationError):
            AlleleFrequencyTable.from_records(
                [{cn.LOCUS: 'A', cn.ALLELE: 'X'}]
            )


if __name__ == '__main__':
    unittest.main()
