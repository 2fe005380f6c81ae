#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Mon Oct 12 10:14:02 2026

Data types of input files.
"""

import popcov.magic_values.column_names as cn

DTYPE_EPITOPES = {
    cn.SEQUENCE_ID: 'str',
    cn.LOCUS: 'str',
    cn.ALLELE: 'str',
    cn.IMMUNOPREVALENCE: 'float64',
    cn.N_TESTED: 'Int64',
    cn.N_RESPONDERS: 'Int64'
}

DTYPE_ALLELE_FREQUENCIES = {
    cn.LOCUS: 'str',
    cn.ALLELE: 'str',
    cn.FREQUENCY: 'float64'
}
