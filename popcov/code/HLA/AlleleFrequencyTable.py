#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Mon Oct 12 11:20:09 2026

"""

from typing import Dict, Iterable, Mapping, Optional, Tuple, Any
from math import isnan

import pandas as pd

import popcov.magic_values.column_names as cn
import popcov.magic_values.magic_values_rules as mgr
from popcov.code.exceptions import ConfigurationError


class AlleleFrequencyTable:
    """Class which holds population allele frequencies per locus.

    Frequencies are only listed for tracked alleles. The frequency of
    the catch-all allele UNKNOWN on a locus is the residual, i.e.
    1 minus the summed frequency of all listed alleles on that locus.

    Attributes   #noqa
    ----------
    frequencies : Dict[str, Dict[str, float]]
        Allele frequencies per locus.
    allele_to_locus : Dict[str, str]
        Locus on which each listed allele resides.

    Methods
    -------
    frequency(locus, allele):
        return the frequency of an allele, or the residual for UNKNOWN
    unknown_frequency(locus):
        return the residual frequency on a locus
    from_records(records), from_frame(df), from_nested_dict(freqs):
        construct a table from different input shapes
    """
    __slots__ = ('_frequencies', '_allele_to_locus', '_unknown_frequencies')

    def __init__(
        self,
        entries: Iterable[Tuple[str, str, float]]
    ):
        frequencies: Dict[str, Dict[str, float]] = dict()
        allele_to_locus: Dict[str, str] = dict()

        for locus, allele, freq in entries:
            locus, allele = str(locus), str(allele)
            if allele == mgr.UNKNOWN:
                raise ConfigurationError(
                    f'{mgr.UNKNOWN} is reserved for the residual frequency '
                    f'and cannot be listed (locus {locus})',
                    locus=locus, allele=allele
                )
            try:
                freq = float(freq)
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f'Frequency of {allele} on locus {locus} is not '
                    f'a number: {freq}',
                    locus=locus, allele=allele
                )
            if isnan(freq) or not 0 <= freq <= 1:
                raise ConfigurationError(
                    f'Frequency of {allele} on locus {locus} should be '
                    f'within [0, 1], not {freq}',
                    locus=locus, allele=allele
                )
            if (other_locus := allele_to_locus.get(allele)) is not None:
                if other_locus == locus:
                    msg = (
                        f'Allele {allele} is listed twice for '
                        f'locus {locus}'
                    )
                else:
                    msg = (
                        f'Allele {allele} is listed for both locus '
                        f'{other_locus} and locus {locus}'
                    )
                raise ConfigurationError(msg, locus=locus, allele=allele)

            allele_to_locus[allele] = locus
            frequencies.setdefault(locus, dict())[allele] = freq

        unknown_frequencies = dict()
        for locus, freqs in frequencies.items():
            residual = 1 - sum(freqs.values())
            if residual < -mgr.FREQUENCY_SUM_TOLERANCE:
                raise ConfigurationError(
                    f'Allele frequencies for locus {locus} sum to '
                    f'{1 - residual:.6f}, exceeding 1',
                    locus=locus
                )
            unknown_frequencies[locus] = max(residual, 0.0)

        self._frequencies = frequencies
        self._allele_to_locus = allele_to_locus
        self._unknown_frequencies = unknown_frequencies

    @classmethod
    def from_records(
        cls, records: Iterable[Mapping[str, Any]]
    ) -> 'AlleleFrequencyTable':
        """Construct from records with locus, allele and frequency"""
        try:
            return cls(
                (r[cn.LOCUS], r[cn.ALLELE], r[cn.FREQUENCY])
                for r in records
            )
        except KeyError as e:
            raise ConfigurationError(
                f'Allele frequency record lacks field {e}'
            )

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> 'AlleleFrequencyTable':
        missing_cols = {cn.LOCUS, cn.ALLELE, cn.FREQUENCY} - set(df.columns)
        if missing_cols:
            raise ConfigurationError(
                f'Allele frequency table lacks columns {missing_cols}'
            )
        return cls(
            zip(df[cn.LOCUS], df[cn.ALLELE], df[cn.FREQUENCY])
        )

    @classmethod
    def from_nested_dict(
        cls, freqs: Mapping[str, Mapping[str, float]]
    ) -> 'AlleleFrequencyTable':
        """Construct from a {locus: {allele: frequency}} dictionary,
        the format in which frequencies are stored in yml files."""
        return cls(
            (locus, allele, freq)
            for locus, allele_freqs in freqs.items()
            for allele, freq in allele_freqs.items()
        )

    @property
    def loci(self) -> Tuple[str, ...]:
        return tuple(self._frequencies.keys())

    def alleles(self, locus: str) -> Tuple[str, ...]:
        return tuple(self._frequencies.get(locus, dict()).keys())

    def locus_of(self, allele: str) -> Optional[str]:
        return self._allele_to_locus.get(allele)

    def unknown_frequency(self, locus: str) -> float:
        """Residual frequency of the alleles not listed on a locus.
        This is 1 for a locus without listed alleles."""
        return self._unknown_frequencies.get(locus, 1.0)

    def frequency(self, locus: str, allele: str) -> float:
        if allele == mgr.UNKNOWN:
            return self.unknown_frequency(locus)
        try:
            return self._frequencies[locus][allele]
        except KeyError:
            if (other_locus := self.locus_of(allele)) is not None:
                raise ConfigurationError(
                    f'Allele {allele} is referenced for locus {locus}, '
                    f'but listed for locus {other_locus} in the '
                    f'allele frequency table',
                    locus=locus, allele=allele
                )
            raise ConfigurationError(
                f'Allele {allele} (locus {locus}) has no entry in the '
                f'allele frequency table',
                locus=locus, allele=allele
            )

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame.from_records(
            [
                {cn.LOCUS: locus, cn.ALLELE: allele, cn.FREQUENCY: freq}
                for locus, freqs in self._frequencies.items()
                for allele, freq in freqs.items()
            ],
            columns=[cn.LOCUS, cn.ALLELE, cn.FREQUENCY]
        )

    def __len__(self) -> int:
        return len(self._allele_to_locus)

    def __repr__(self) -> str:
        return (
            f'AlleleFrequencyTable({len(self)} alleles on loci '
            f'{", ".join(self.loci)})'
        )
