#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Wed Oct 14 15:40:18 2026

Parametric bootstrap of population coverage.

"""

from typing import Optional, Tuple, Iterable, List, Any
from multiprocessing import Pool
from warnings import warn

import numpy as np

import popcov.magic_values.popcov_settings as ps
from popcov.code.entities import EpitopeSet
from popcov.code.exceptions import (
    InvalidEpitopeDataError, InvalidParameterError, BootstrapCancelledError
)
from popcov.code.HLA.AlleleFrequencyTable import AlleleFrequencyTable
from popcov.code.HLA.CoverageSystem import compute_point_coverage


def beta_shape_parameters(
    epitope_set: EpitopeSet
) -> Tuple[np.ndarray, np.ndarray]:
    """Beta shape parameters per epitope, i.e. the number of responders
    and the number of non-responders plus one. This matches the beta
    distribution of the Clopper-Pearson interval."""
    successes, failures = [], []
    for e in epitope_set:
        if not e.has_counts:
            raise InvalidEpitopeDataError(
                'number tested and number of responders are required '
                'for bootstrapping',
                sequence_id=e.sequence_id
            )
        successes.append(e.n_responders)
        failures.append(e.n_tested - e.n_responders + 1)
    return (
        np.array(successes, dtype=float),
        np.array(failures, dtype=float)
    )


def draw_immunoprevalences(
    rng: np.random.Generator,
    successes: np.ndarray,
    failures: np.ndarray
) -> np.ndarray:
    """Draw one immunoprevalence per epitope. Without responders, the
    beta distribution degenerates to a point mass at 0."""
    draws = np.zeros(len(successes), dtype=float)
    positive = successes > 0
    draws[positive] = rng.beta(successes[positive], failures[positive])
    return draws


def _bootstrap_iteration(args) -> float:
    (
        seed_seq, epitope_set, allele_frequency_table, successes, failures,
        loci, pool_unobserved_alleles
    ) = args
    rng = np.random.default_rng(seed_seq)
    resampled_set = epitope_set.with_immunoprevalences(
        draw_immunoprevalences(rng, successes, failures)
    )
    coverage, _ = compute_point_coverage(
        epitope_set=resampled_set,
        allele_frequency_table=allele_frequency_table,
        loci=loci,
        pool_unobserved_alleles=pool_unobserved_alleles
    )
    return coverage


def bootstrap_quantiles(
    samples: Iterable[float],
    confidence_level: float = ps.DEFAULT_CONFIDENCE_LEVEL
) -> Tuple[float, float]:
    alpha = 1 - confidence_level
    lower, upper = np.quantile(
        np.asarray(samples, dtype=float), [alpha / 2, 1 - alpha / 2]
    )
    return float(lower), float(upper)


class BootstrapEngine:
    """
        Class which propagates uncertainty in immunoprevalence to
        population coverage with a parametric bootstrap.

        Each iteration draws immunoprevalences of all epitopes from
        beta distributions with the number of responders and the number
        of non-responders plus one as shape parameters, and recomputes
        overall coverage. Iteration i draws from the i-th child of a
        seed sequence, such that results do not depend on the number
        of workers.

    Attributes   #noqa
    ----------
    epitope_set : EpitopeSet
        Epitopes with observed counts.
    allele_frequency_table : AlleleFrequencyTable
        Allele frequencies per locus.
    n_iterations : int
        Number of bootstrap iterations.
    seed : Optional[int]
        Seed for the random number generator.
    n_workers : int
        Number of worker processes.

    Methods
    -------
    simulate_coverages(cancel_event):
        return coverage for each bootstrap iteration
    confidence_interval(samples, confidence_level):
        return empirical quantiles of bootstrapped coverages
    """

    def __init__(
        self,
        epitope_set: EpitopeSet,
        allele_frequency_table: AlleleFrequencyTable,
        n_iterations: int = ps.DEFAULT_BOOTSTRAP_ITERATIONS,
        seed: Optional[int] = None,
        n_workers: int = ps.DEFAULT_N_WORKERS,
        loci: Optional[Iterable[str]] = None,
        pool_unobserved_alleles: bool = False,
        verbose: bool = False,
        print_progress_every_k: int = ps.DEFAULT_PRINT_PROGRESS_EVERY_K
    ):
        if (
            isinstance(n_iterations, bool) or
            not isinstance(n_iterations, (int, np.integer)) or
            n_iterations <= 0
        ):
            raise InvalidParameterError(
                f'Number of bootstrap iterations should be a positive '
                f'integer, not {n_iterations}'
            )
        if (
            not isinstance(n_workers, (int, np.integer)) or n_workers < 1
        ):
            raise InvalidParameterError(
                f'Number of workers should be a positive integer, '
                f'not {n_workers}'
            )

        self.epitope_set = epitope_set
        self.allele_frequency_table = allele_frequency_table
        self.n_iterations = int(n_iterations)
        self.seed = seed
        self.n_workers = int(n_workers)
        self.loci = tuple(loci) if loci is not None else None
        self.pool_unobserved_alleles = pool_unobserved_alleles
        self.verbose = verbose
        self.print_progress_every_k = max(int(print_progress_every_k), 1)

        self.successes, self.failures = beta_shape_parameters(epitope_set)
        if (zero_resp := [
            e.sequence_id for e in epitope_set if e.n_responders == 0
        ]):
            warn(
                f'{len(zero_resp)} epitope(s) without responders are '
                f'resampled at an immunoprevalence of 0: '
                f'{", ".join(zero_resp)}'
            )

    def _iteration_args(self) -> List[Tuple[Any, ...]]:
        child_seeds = np.random.SeedSequence(self.seed).spawn(
            self.n_iterations
        )
        return [
            (
                seed_seq, self.epitope_set, self.allele_frequency_table,
                self.successes, self.failures, self.loci,
                self.pool_unobserved_alleles
            )
            for seed_seq in child_seeds
        ]

    def _report_progress(self, n_done: int) -> None:
        if self.verbose and (
            n_done % self.print_progress_every_k == 0 or
            n_done == self.n_iterations
        ):
            print(
                f'\rBootstrap iteration {n_done} / {self.n_iterations}',
                end='\n' if n_done == self.n_iterations else ''
            )

    def simulate_coverages(self, cancel_event=None) -> np.ndarray:
        """Run all bootstrap iterations. If cancel_event (e.g. a
        threading.Event) is set, the run is cancelled before the
        next iteration."""
        iteration_args = self._iteration_args()
        coverages = np.empty(self.n_iterations, dtype=float)

        if self.n_workers == 1:
            for i, args in enumerate(iteration_args):
                if cancel_event is not None and cancel_event.is_set():
                    raise BootstrapCancelledError(i, self.n_iterations)
                coverages[i] = _bootstrap_iteration(args)
                self._report_progress(i + 1)
            return coverages

        with Pool(processes=self.n_workers) as p:
            for i, cov in enumerate(
                p.imap(
                    _bootstrap_iteration, iteration_args,
                    chunksize=ps.BOOTSTRAP_CHUNKSIZE
                )
            ):
                if cancel_event is not None and cancel_event.is_set():
                    p.terminate()
                    raise BootstrapCancelledError(i, self.n_iterations)
                coverages[i] = cov
                self._report_progress(i + 1)
        return coverages

    @staticmethod
    def confidence_interval(
        samples: Iterable[float],
        confidence_level: float = ps.DEFAULT_CONFIDENCE_LEVEL
    ) -> Tuple[float, float]:
        if not 0 < confidence_level < 1:
            raise InvalidParameterError(
                f'Confidence level should be within (0, 1), '
                f'not {confidence_level}'
            )
        return bootstrap_quantiles(samples, confidence_level)
