#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Thu Oct 15 10:05:33 2026

Entry points for estimating population coverage.

"""

from typing import Optional, Mapping, Any
from numbers import Real

import popcov.magic_values.column_names as cn
import popcov.magic_values.popcov_settings as ps
from popcov.code.entities import EpitopeSet, CoverageEstimate
from popcov.code.exceptions import InvalidParameterError
from popcov.code.BootstrapEngine import BootstrapEngine
from popcov.code.HLA.AlleleFrequencyTable import AlleleFrequencyTable
from popcov.code.HLA.CoverageSystem import (
    compute_locus_coverage, compute_point_coverage
)
from popcov.code.utils.utils import DotDict

__all__ = [
    'compute_locus_coverage', 'compute_population_coverage',
    'construct_options'
]


def construct_options(
    options: Optional[Mapping[str, Any]] = None
) -> DotDict:
    """Merge options with default options, and check whether
    options are valid."""
    opts = DotDict(ps.DEFAULT_OPTIONS)
    if options:
        unknown_opts = set(options) - set(ps.DEFAULT_OPTIONS)
        if unknown_opts:
            raise InvalidParameterError(
                f'Unknown option(s): {", ".join(sorted(unknown_opts))}'
            )
        for k, v in options.items():
            opts[k] = v

    n_iter = opts[cn.BOOTSTRAP_ITERATIONS]
    if (
        isinstance(n_iter, bool) or not isinstance(n_iter, int) or
        n_iter <= 0
    ):
        raise InvalidParameterError(
            f'{cn.BOOTSTRAP_ITERATIONS} should be a positive integer, '
            f'not {n_iter}'
        )

    conf = opts[cn.CONFIDENCE_LEVEL]
    if (
        isinstance(conf, bool) or not isinstance(conf, Real) or
        not 0 < conf < 1
    ):
        raise InvalidParameterError(
            f'{cn.CONFIDENCE_LEVEL} should be within (0, 1), not {conf}'
        )

    n_workers = opts[cn.N_WORKERS]
    if (
        isinstance(n_workers, bool) or not isinstance(n_workers, int) or
        n_workers < 1
    ):
        raise InvalidParameterError(
            f'{cn.N_WORKERS} should be a positive integer, not {n_workers}'
        )

    seed = opts[cn.RANDOM_SEED]
    if seed is not None and (
        isinstance(seed, bool) or not isinstance(seed, int) or seed < 0
    ):
        raise InvalidParameterError(
            f'{cn.RANDOM_SEED} should be a non-negative integer, not {seed}'
        )

    return opts


def compute_population_coverage(
    epitope_set: EpitopeSet,
    allele_frequency_table: AlleleFrequencyTable,
    options: Optional[Mapping[str, Any]] = None,
    cancel_event=None
) -> CoverageEstimate:
    """
    Estimate the fraction of the population responding to at
    least one epitope in the epitope set.

    The point estimate is based on the observed immunoprevalences.
    If bootstrapping is enabled, a confidence interval is constructed
    from the empirical quantiles of coverage over bootstrap iterations.

    Parameters
    ------------
    epitope_set: EpitopeSet
        Epitopes with their restricting allele and immunoprevalence.
    allele_frequency_table: AlleleFrequencyTable
        Allele frequencies per locus.
    options: Optional[Mapping[str, Any]]
        Estimation options, see popcov_settings.DEFAULT_OPTIONS.
    cancel_event:
        Object with an is_set() method, checked between bootstrap
        iterations.
    """
    opts = construct_options(options)

    # Validate the bootstrap inputs before any computation.
    engine = None
    if opts[cn.BOOTSTRAP]:
        engine = BootstrapEngine(
            epitope_set=epitope_set,
            allele_frequency_table=allele_frequency_table,
            n_iterations=opts[cn.BOOTSTRAP_ITERATIONS],
            seed=opts[cn.RANDOM_SEED],
            n_workers=opts[cn.N_WORKERS],
            loci=opts[cn.LOCI],
            pool_unobserved_alleles=opts[cn.POOL_UNOBSERVED_ALLELES],
            verbose=opts[cn.VERBOSE],
            print_progress_every_k=opts[cn.PRINT_PROGRESS_EVERY_K]
        )

    point_estimate, locus_coverages = compute_point_coverage(
        epitope_set=epitope_set,
        allele_frequency_table=allele_frequency_table,
        loci=opts[cn.LOCI],
        pool_unobserved_alleles=opts[cn.POOL_UNOBSERVED_ALLELES]
    )

    if engine is None:
        return CoverageEstimate(
            point_estimate=point_estimate,
            locus_coverages=locus_coverages
        )

    samples = engine.simulate_coverages(cancel_event=cancel_event)
    return CoverageEstimate(
        point_estimate=point_estimate,
        confidence_interval=engine.confidence_interval(
            samples, opts[cn.CONFIDENCE_LEVEL]
        ),
        bootstrap_samples=samples,
        locus_coverages=locus_coverages,
        confidence_level=opts[cn.CONFIDENCE_LEVEL]
    )
