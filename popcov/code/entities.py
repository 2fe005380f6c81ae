#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Mon Oct 12 13:45:21 2026

"""

from typing import (
    Dict, Tuple, Optional, Iterable, Mapping, Any, Sequence, Iterator
)
from numbers import Integral

import numpy as np
import pandas as pd

import popcov.magic_values.column_names as cn
import popcov.magic_values.magic_values_rules as mgr
from popcov.code.exceptions import InvalidEpitopeDataError
from popcov.code.utils.utils import (
    nanOrNone, group_by_key, round_to_decimals
)


class Epitope:
    """
    Class which implements an epitope restricted to a single HLA allele.

    Attributes   #noqa
    ----------
    sequence_id : str
        Identifier of the epitope sequence.
    locus : str
        Locus of the restricting allele.
    allele : str
        Restricting HLA allele.
    immunoprevalence : float
        Probability that a carrier of the allele responds to the epitope.
    n_tested : Optional[int]
        Number of allele carriers tested for a response.
    n_responders : Optional[int]
        Number of tested carriers that responded.
    origin : Optional[str]
        Sequence id of the epitope this record was resampled from.
    """
    __slots__ = (
        'sequence_id', 'locus', 'allele', 'immunoprevalence',
        'n_tested', 'n_responders', 'origin'
    )

    def __init__(
        self,
        sequence_id: str,
        locus: str,
        allele: str,
        immunoprevalence: float,
        n_tested: Optional[int] = None,
        n_responders: Optional[int] = None,
        origin: Optional[str] = None
    ):
        self.sequence_id = str(sequence_id)
        self.locus = str(locus)
        self.allele = str(allele)

        try:
            immunoprevalence = float(immunoprevalence)
        except (TypeError, ValueError):
            raise InvalidEpitopeDataError(
                f'immunoprevalence is not a number: {immunoprevalence}',
                sequence_id=self.sequence_id
            )
        if nanOrNone(immunoprevalence) or not 0 <= immunoprevalence <= 1:
            raise InvalidEpitopeDataError(
                f'immunoprevalence should be within [0, 1], '
                f'not {immunoprevalence}',
                sequence_id=self.sequence_id
            )
        self.immunoprevalence = immunoprevalence

        self.n_tested = self._check_count(n_tested, cn.N_TESTED)
        self.n_responders = self._check_count(n_responders, cn.N_RESPONDERS)
        if self.n_tested == 0:
            raise InvalidEpitopeDataError(
                'epitope was tested in 0 individuals',
                sequence_id=self.sequence_id
            )
        if (
            self.n_tested is not None and
            self.n_responders is not None and
            self.n_responders > self.n_tested
        ):
            raise InvalidEpitopeDataError(
                f'{self.n_responders} responders exceeds '
                f'{self.n_tested} tested',
                sequence_id=self.sequence_id
            )
        self.origin = origin

    def _check_count(self, count: Any, name: str) -> Optional[int]:
        if count is None or count is pd.NA:
            return None
        if isinstance(count, float):
            if np.isnan(count):
                return None
            if not count.is_integer():
                raise InvalidEpitopeDataError(
                    f'{name} should be a whole number, not {count}',
                    sequence_id=self.sequence_id
                )
        elif not isinstance(count, Integral):
            raise InvalidEpitopeDataError(
                f'{name} should be a whole number, not {count}',
                sequence_id=self.sequence_id
            )
        if count < 0:
            raise InvalidEpitopeDataError(
                f'{name} should be non-negative, not {count}',
                sequence_id=self.sequence_id
            )
        return int(count)

    @property
    def has_counts(self) -> bool:
        return self.n_tested is not None and self.n_responders is not None

    def resample(self, immunoprevalence: float) -> 'Epitope':
        """Return a copy of the epitope with another immunoprevalence,
        traceable to this epitope."""
        return Epitope(
            sequence_id=self.sequence_id,
            locus=self.locus,
            allele=self.allele,
            immunoprevalence=immunoprevalence,
            n_tested=self.n_tested,
            n_responders=self.n_responders,
            origin=self.origin if self.origin is not None
            else self.sequence_id
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            cn.SEQUENCE_ID: self.sequence_id,
            cn.LOCUS: self.locus,
            cn.ALLELE: self.allele,
            cn.IMMUNOPREVALENCE: self.immunoprevalence,
            cn.N_TESTED: self.n_tested,
            cn.N_RESPONDERS: self.n_responders
        }

    def __setattr__(self, key, value):
        if hasattr(self, 'origin'):
            raise AttributeError(
                f'Epitope {self.sequence_id} is immutable'
            )
        super().__setattr__(key, value)

    def __reduce__(self):
        return (
            Epitope,
            (
                self.sequence_id, self.locus, self.allele,
                self.immunoprevalence, self.n_tested, self.n_responders,
                self.origin
            )
        )

    def __repr__(self):
        return (
            f'Epitope({self.sequence_id}, {self.allele}, '
            f'immunoprevalence={round_to_decimals(self.immunoprevalence, 3)})'
        )


class EpitopeSet:
    """
    Immutable, ordered set of epitopes, indexed by locus and by
    restricting allele.

    Methods
    -------
    for_locus(locus):
        subset of epitopes restricted to alleles on a locus
    epitopes_for_allele(allele):
        epitopes restricted to an allele
    with_immunoprevalences(values):
        new epitope set with replaced immunoprevalences
    """
    __slots__ = ('_epitopes', '_by_allele', '_by_locus')

    def __init__(self, epitopes: Iterable[Epitope]):
        self._epitopes: Tuple[Epitope, ...] = tuple(epitopes)
        self._by_allele: Dict[str, Tuple[Epitope, ...]] = group_by_key(
            self._epitopes, 'allele'
        )
        self._by_locus: Dict[str, Tuple[Epitope, ...]] = group_by_key(
            self._epitopes, 'locus'
        )
        for allele, epitopes in self._by_allele.items():
            loci = set(e.locus for e in epitopes)
            if len(loci) > 1 and allele != mgr.UNKNOWN:
                raise InvalidEpitopeDataError(
                    f'allele {allele} is assigned to multiple '
                    f'loci ({", ".join(sorted(loci))})',
                    sequence_id=epitopes[0].sequence_id
                )

    @classmethod
    def from_records(
        cls, records: Iterable[Mapping[str, Any]]
    ) -> 'EpitopeSet':
        epitopes = []
        for rcrd in records:
            try:
                epitopes.append(
                    Epitope(
                        sequence_id=rcrd[cn.SEQUENCE_ID],
                        locus=rcrd[cn.LOCUS],
                        allele=rcrd[cn.ALLELE],
                        immunoprevalence=rcrd[cn.IMMUNOPREVALENCE],
                        n_tested=rcrd.get(cn.N_TESTED),
                        n_responders=rcrd.get(cn.N_RESPONDERS)
                    )
                )
            except KeyError as e:
                raise InvalidEpitopeDataError(
                    f'epitope record lacks field {e}',
                    sequence_id=rcrd.get(cn.SEQUENCE_ID)
                )
        return cls(epitopes)

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> 'EpitopeSet':
        return cls.from_records(df.to_dict(orient='records'))

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame.from_records(
            [e.to_dict() for e in self._epitopes],
            columns=[
                cn.SEQUENCE_ID, cn.LOCUS, cn.ALLELE, cn.IMMUNOPREVALENCE,
                cn.N_TESTED, cn.N_RESPONDERS
            ]
        )
        return df.astype({cn.N_TESTED: 'Int64', cn.N_RESPONDERS: 'Int64'})

    @property
    def epitopes(self) -> Tuple[Epitope, ...]:
        return self._epitopes

    @property
    def loci(self) -> Tuple[str, ...]:
        return tuple(self._by_locus.keys())

    def for_locus(self, locus: str) -> 'EpitopeSet':
        return EpitopeSet(self._by_locus.get(locus, ()))

    def alleles(self, locus: Optional[str] = None) -> Tuple[str, ...]:
        """Restricting alleles, in order of first appearance."""
        if locus is None:
            return tuple(self._by_allele.keys())
        return tuple(
            allele for allele, epitopes in self._by_allele.items()
            if any(e.locus == locus for e in epitopes)
        )

    def epitopes_for_allele(self, allele: str) -> Tuple[Epitope, ...]:
        return self._by_allele.get(allele, ())

    def immunoprevalences(self) -> np.ndarray:
        return np.array(
            [e.immunoprevalence for e in self._epitopes], dtype=float
        )

    def with_immunoprevalences(
        self, values: Sequence[float]
    ) -> 'EpitopeSet':
        """Return a new set with one immunoprevalence per epitope,
        in the order of this set. Epitopes in the new set keep track
        of the epitope they originate from."""
        if len(values) != len(self._epitopes):
            raise ValueError(
                f'Expected {len(self._epitopes)} immunoprevalences, '
                f'received {len(values)}'
            )
        return EpitopeSet(
            e.resample(v) for e, v in zip(self._epitopes, values)
        )

    def __len__(self) -> int:
        return len(self._epitopes)

    def __iter__(self) -> Iterator[Epitope]:
        return iter(self._epitopes)

    def __bool__(self) -> bool:
        return len(self._epitopes) > 0

    def __reduce__(self):
        return (EpitopeSet, (self._epitopes,))

    def __repr__(self) -> str:
        return (
            f'EpitopeSet({len(self)} epitopes on '
            f'{len(self._by_allele)} alleles)'
        )


class CoverageEstimate:
    """
    Class which holds an estimate of population coverage.

    Attributes   #noqa
    ----------
    point_estimate : float
        Coverage based on the observed immunoprevalences.
    confidence_interval : Optional[Tuple[float, float]]
        Bootstrap confidence interval of coverage.
    bootstrap_samples : Optional[np.ndarray]
        Coverage per bootstrap iteration (read-only).
    locus_coverages : Dict[str, float]
        Point estimate of coverage attributable to each locus.
    confidence_level : Optional[float]
        Confidence level of the interval.
    """
    __slots__ = (
        'point_estimate', 'confidence_interval', 'bootstrap_samples',
        'locus_coverages', 'confidence_level'
    )

    def __init__(
        self,
        point_estimate: float,
        confidence_interval: Optional[Tuple[float, float]] = None,
        bootstrap_samples: Optional[Iterable[float]] = None,
        locus_coverages: Optional[Mapping[str, float]] = None,
        confidence_level: Optional[float] = None
    ):
        object.__setattr__(self, 'point_estimate', float(point_estimate))
        object.__setattr__(
            self, 'confidence_interval',
            None if confidence_interval is None
            else tuple(float(x) for x in confidence_interval)
        )
        if bootstrap_samples is not None:
            bootstrap_samples = np.array(bootstrap_samples, dtype=float)
            bootstrap_samples.setflags(write=False)
        object.__setattr__(self, 'bootstrap_samples', bootstrap_samples)
        object.__setattr__(
            self, 'locus_coverages', dict(locus_coverages or {})
        )
        object.__setattr__(self, 'confidence_level', confidence_level)

    def __setattr__(self, key, value):
        raise AttributeError('CoverageEstimate is immutable')

    @property
    def n_iterations(self) -> int:
        if self.bootstrap_samples is None:
            return 0
        return len(self.bootstrap_samples)

    def to_dict(self) -> Dict[str, Any]:
        lower, upper = (
            self.confidence_interval
            if self.confidence_interval is not None
            else (np.nan, np.nan)
        )
        return {
            cn.POINT_ESTIMATE: self.point_estimate,
            cn.CI_LOWER: lower,
            cn.CI_UPPER: upper,
            cn.CONFIDENCE_LEVEL: self.confidence_level,
            cn.N_ITERATIONS: self.n_iterations,
            **{
                f'{cn.LOCUS_COVERAGE}_{locus}': cov
                for locus, cov in self.locus_coverages.items()
            }
        }

    def to_frame(self) -> pd.DataFrame:
        """One-row data frame with the estimate"""
        return pd.DataFrame.from_records([self.to_dict()])

    def bootstrap_frame(self) -> pd.DataFrame:
        samples = (
            self.bootstrap_samples if self.bootstrap_samples is not None
            else np.array([], dtype=float)
        )
        return pd.DataFrame(
            {
                cn.ITERATION: np.arange(len(samples)),
                cn.BOOTSTRAP_COVERAGE: samples
            }
        )

    def __repr__(self) -> str:
        est = round_to_decimals(self.point_estimate, 4)
        if self.confidence_interval is None:
            return f'CoverageEstimate({est})'
        lower, upper = (
            round_to_decimals(x, 4) for x in self.confidence_interval
        )
        return (
            f'CoverageEstimate({est}, '
            f'{round(100 * self.confidence_level)}% CI [{lower}, {upper}])'
        )
