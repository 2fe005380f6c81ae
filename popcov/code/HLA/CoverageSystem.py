#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Tue Oct 13 09:12:50 2026

Calculation of population coverage of an epitope set, based
on allele frequencies and the immunoprevalence of each epitope.

Per locus, every individual is assumed to carry an ordered pair of
alleles drawn independently from the population allele frequencies.
The catch-all allele UNKNOWN carries the residual frequency of a locus,
i.e. 1 minus the sum of all tabulated frequencies. Optionally, tabulated
alleles not carrying any epitope are pooled with UNKNOWN.
Coverage of a locus is the probability of recognizing at least one
epitope, averaged over all allele pairs. Loci are assumed to be
independent.
"""

from typing import (
    Dict, Iterable, List, Optional, Sequence, Tuple, Mapping
)
from itertools import product
from math import prod

import pandas as pd

import popcov.magic_values.column_names as cn
import popcov.magic_values.magic_values_rules as mgr
from popcov.code.entities import EpitopeSet
from popcov.code.exceptions import ConfigurationError
from popcov.code.HLA.AlleleFrequencyTable import AlleleFrequencyTable
from popcov.code.utils.utils import prob_one_or_more_hits

AlleleCombination = Tuple[str, str]


def enumerate_allele_combinations(
    alleles: Iterable[str]
) -> List[AlleleCombination]:
    """Return all ordered allele pairs over the alleles and UNKNOWN,
    including homozygous pairs. For n alleles, this returns
    (n+1)**2 combinations."""
    allele_set = list(dict.fromkeys(a for a in alleles if a != mgr.UNKNOWN))
    allele_set.append(mgr.UNKNOWN)
    return list(product(allele_set, repeat=2))


def _catch_all_frequency(
    locus: str,
    alleles: Sequence[str],
    allele_frequency_table: AlleleFrequencyTable,
    pool_unobserved_alleles: bool = False
) -> float:
    if pool_unobserved_alleles:
        return max(
            1 - sum(
                allele_frequency_table.frequency(locus, allele)
                for allele in alleles if allele != mgr.UNKNOWN
            ),
            0.0
        )
    return allele_frequency_table.unknown_frequency(locus)


def allele_combination_frequencies(
    locus: str,
    alleles: Iterable[str],
    allele_frequency_table: AlleleFrequencyTable,
    pool_unobserved_alleles: bool = False
) -> Dict[AlleleCombination, float]:
    """Population frequency of each allele combination on a locus,
    assuming both alleles are drawn independently.

    By default, UNKNOWN carries the residual frequency of the locus, so
    combinations with tabulated alleles outside the alleles are left out.
    With pool_unobserved_alleles, those tabulated alleles are pooled with
    UNKNOWN, such that the combination frequencies sum to 1.
    """
    combinations = enumerate_allele_combinations(alleles)
    tracked_alleles = list(dict.fromkeys(a for a, _ in combinations))

    freqs = {
        allele: allele_frequency_table.frequency(locus, allele)
        for allele in tracked_alleles if allele != mgr.UNKNOWN
    }
    freqs[mgr.UNKNOWN] = _catch_all_frequency(
        locus=locus,
        alleles=tracked_alleles,
        allele_frequency_table=allele_frequency_table,
        pool_unobserved_alleles=pool_unobserved_alleles
    )

    return {
        (allele_i, allele_j): freqs[allele_i] * freqs[allele_j]
        for allele_i, allele_j in combinations
    }


def locus_alleles(
    locus: str,
    locus_epitopes: EpitopeSet,
    allele_frequency_table: AlleleFrequencyTable,
    pool_unobserved_alleles: bool = False
) -> Tuple[str, ...]:
    """Alleles to enumerate combinations over, i.e. the alleles with
    epitopes. If pooling with epitopes restricted to UNKNOWN itself,
    tabulated alleles are enumerated as they cannot be pooled."""
    alleles = locus_epitopes.alleles(locus)
    if pool_unobserved_alleles and mgr.UNKNOWN in alleles:
        alleles = alleles + tuple(
            a for a in allele_frequency_table.alleles(locus)
            if a not in alleles
        )
    return alleles


def matched_epitope_prevalences(
    combination: AlleleCombination,
    epitope_set: EpitopeSet
) -> Tuple[float, ...]:
    """Immunoprevalences of epitopes restricted to either allele in a
    combination. For a homozygous combination, epitopes are selected once.
    """
    allele_i, allele_j = combination
    alleles = (allele_i,) if allele_i == allele_j else (allele_i, allele_j)
    return tuple(
        e.immunoprevalence
        for allele in alleles
        for e in epitope_set.epitopes_for_allele(allele)
    )


def calculate_recognition_probability(
    combination: AlleleCombination,
    epitope_set: EpitopeSet
) -> float:
    """Probability that an individual with the allele combination
    responds to at least one epitope, assuming responses to distinct
    epitopes are independent."""
    return prob_one_or_more_hits(
        matched_epitope_prevalences(combination, epitope_set)
    )


def _check_epitope_alleles(
    locus: str,
    epitope_set: EpitopeSet,
    allele_frequency_table: AlleleFrequencyTable
) -> None:
    for allele in epitope_set.alleles(locus):
        if allele == mgr.UNKNOWN:
            continue
        try:
            allele_frequency_table.frequency(locus, allele)
        except ConfigurationError as e:
            epitopes = epitope_set.epitopes_for_allele(allele)
            raise ConfigurationError(
                f'{e} (epitope {epitopes[0].sequence_id})',
                locus=locus, allele=allele
            ) from e


def compute_locus_coverage(
    locus: str,
    epitope_set: EpitopeSet,
    allele_frequency_table: AlleleFrequencyTable,
    pool_unobserved_alleles: bool = False
) -> float:
    """Compute population coverage attributable to a single locus.

    Coverage is the sum over allele combinations on the locus of the
    combination frequency times the probability of recognizing at
    least one epitope presented by the combination.
    """
    locus_epitopes = epitope_set.for_locus(locus)
    if not locus_epitopes:
        return 0.0

    _check_epitope_alleles(
        locus=locus,
        epitope_set=locus_epitopes,
        allele_frequency_table=allele_frequency_table
    )

    comb_freqs = allele_combination_frequencies(
        locus=locus,
        alleles=locus_alleles(
            locus, locus_epitopes, allele_frequency_table,
            pool_unobserved_alleles=pool_unobserved_alleles
        ),
        allele_frequency_table=allele_frequency_table,
        pool_unobserved_alleles=pool_unobserved_alleles
    )

    coverage = sum(
        freq * calculate_recognition_probability(comb, locus_epitopes)
        for comb, freq in comb_freqs.items()
    )
    return min(max(coverage, 0.0), 1.0)


def tabulate_locus_combinations(
    locus: str,
    epitope_set: EpitopeSet,
    allele_frequency_table: AlleleFrequencyTable,
    pool_unobserved_alleles: bool = False
) -> pd.DataFrame:
    """Tabulate the allele combinations on a locus, with their
    frequency, recognition probability and weighted recognition.
    The weighted recognition sums to the locus coverage."""
    locus_epitopes = epitope_set.for_locus(locus)
    _check_epitope_alleles(
        locus=locus,
        epitope_set=locus_epitopes,
        allele_frequency_table=allele_frequency_table
    )
    comb_freqs = allele_combination_frequencies(
        locus=locus,
        alleles=locus_alleles(
            locus, locus_epitopes, allele_frequency_table,
            pool_unobserved_alleles=pool_unobserved_alleles
        ),
        allele_frequency_table=allele_frequency_table,
        pool_unobserved_alleles=pool_unobserved_alleles
    )

    rows = []
    for (allele_i, allele_j), freq in comb_freqs.items():
        prevalences = matched_epitope_prevalences(
            (allele_i, allele_j), locus_epitopes
        )
        prob = prob_one_or_more_hits(prevalences)
        rows.append(
            {
                cn.LOCUS: locus,
                cn.ALLELE_1: allele_i,
                cn.ALLELE_2: allele_j,
                cn.COMBINATION_FREQUENCY: freq,
                cn.N_EPITOPES_MATCHED: len(prevalences),
                cn.PROB_RECOGNITION: prob,
                cn.WEIGHTED_RECOGNITION: freq * prob
            }
        )
    return pd.DataFrame.from_records(rows)


def combine_locus_coverages(coverages: Iterable[float]) -> float:
    """Combine coverages of independent loci into overall coverage"""
    return 1 - prod(1 - cov for cov in coverages)


def coverage_loci(
    epitope_set: EpitopeSet,
    allele_frequency_table: AlleleFrequencyTable,
    loci: Optional[Iterable[str]] = None
) -> Tuple[str, ...]:
    """Loci over which coverage is combined. By default, all loci in
    the allele frequency table or the epitope set."""
    if loci is not None:
        return tuple(dict.fromkeys(loci))
    return tuple(
        sorted(set(allele_frequency_table.loci) | set(epitope_set.loci))
    )


def compute_point_coverage(
    epitope_set: EpitopeSet,
    allele_frequency_table: AlleleFrequencyTable,
    loci: Optional[Iterable[str]] = None,
    pool_unobserved_alleles: bool = False
) -> Tuple[float, Mapping[str, float]]:
    """Compute overall coverage and coverage per locus"""
    locus_coverages = {
        locus: compute_locus_coverage(
            locus=locus,
            epitope_set=epitope_set,
            allele_frequency_table=allele_frequency_table,
            pool_unobserved_alleles=pool_unobserved_alleles
        )
        for locus in coverage_loci(
            epitope_set, allele_frequency_table, loci=loci
        )
    }
    return (
        combine_locus_coverages(locus_coverages.values()),
        locus_coverages
    )
