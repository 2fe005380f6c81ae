#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Thu Oct 15 14:22:10 2026

Scripts to read in input files. Input files are expected to be
cleaned already, i.e. with the columns in inputfile_settings.

"""

from typing import Optional, List, Dict, Any

import pandas as pd
import yaml

from popcov.code.utils.utils import DotDict
from popcov.code.entities import EpitopeSet
from popcov.code.exceptions import ConfigurationError
from popcov.code.HLA.AlleleFrequencyTable import AlleleFrequencyTable
import popcov.magic_values.inputfile_settings as dtypes
import popcov.magic_values.column_names as cn
import popcov.magic_values.popcov_settings as ps


def _read_with_dtypes(
        input_path: str,
        dtps: Dict[str, Any],
        usecols: Optional[List[str]] = None,
        required_cols: Optional[List[str]] = None,
        **kwargs
) -> pd.DataFrame:
    """Read in pd.DataFrame with fixed data types"""

    if usecols is None:
        usecols = list(dtps.keys())
    if required_cols is None:
        required_cols = usecols

    data_ = pd.read_csv(
        input_path,
        dtype=dtps,
        usecols=lambda x: x in usecols,
        **kwargs
    )

    assert isinstance(data_, pd.DataFrame), \
        f'Expected DataFrame, not {type(data_)}'

    missing_cols = set(required_cols) - set(data_.columns)
    if missing_cols:
        raise ConfigurationError(
            f'{input_path} lacks columns: {", ".join(sorted(missing_cols))}'
        )

    return data_


def read_epitopes(
    input_path: str,
    **kwargs
) -> EpitopeSet:
    """Read in epitopes with immunoprevalences and response counts"""
    data_ = _read_with_dtypes(
        input_path=input_path,
        dtps=dtypes.DTYPE_EPITOPES,
        required_cols=[
            cn.SEQUENCE_ID, cn.LOCUS, cn.ALLELE, cn.IMMUNOPREVALENCE
        ],
        **kwargs
    )
    return EpitopeSet.from_frame(data_)


def read_allele_frequencies(
    input_path: str,
    **kwargs
) -> AlleleFrequencyTable:
    """Read in allele frequencies per locus from a csv file"""
    data_ = _read_with_dtypes(
        input_path=input_path,
        dtps=dtypes.DTYPE_ALLELE_FREQUENCIES,
        **kwargs
    )
    return AlleleFrequencyTable.from_frame(data_)


def read_allele_frequencies_yaml(input_path: str) -> AlleleFrequencyTable:
    """Read in allele frequencies stored as {locus: {allele: freq}}"""
    with open(input_path, "r", encoding='utf-8') as file:
        freqs: Dict[str, Dict[str, float]] = yaml.load(
            file, Loader=yaml.FullLoader
        )
    if not isinstance(freqs, dict):
        raise ConfigurationError(
            f'Expected allele frequencies per locus in {input_path}'
        )
    return AlleleFrequencyTable.from_nested_dict(
        {str(k): v for k, v in freqs.items()}
    )


def read_coverage_settings(
        ss_path: str
) -> DotDict:
    """Read in settings for estimating population coverage"""
    with open(ss_path, "r", encoding='utf-8') as file:
        sim_set: Dict[str, Any] = yaml.load(file, Loader=yaml.FullLoader)
    if not isinstance(sim_set, dict):
        raise ConfigurationError(
            f'Expected settings as key-value pairs in {ss_path}'
        )

    for k in ('PATH_EPITOPES', 'PATH_ALLELE_FREQUENCIES'):
        if not sim_set.get(k):
            raise ConfigurationError(f'{k} is not specified in {ss_path}')

    return DotDict(sim_set)


def read_allele_frequency_file(input_path: str) -> AlleleFrequencyTable:
    if input_path.endswith(('.yml', '.yaml')):
        return read_allele_frequencies_yaml(input_path)
    return read_allele_frequencies(input_path)


def options_from_settings(sim_set: DotDict) -> Dict[str, Any]:
    """Construct estimation options from upper-case settings keys"""
    return {
        k: sim_set[k.upper()] for k in ps.DEFAULT_OPTIONS
        if k.upper() in sim_set
    }
