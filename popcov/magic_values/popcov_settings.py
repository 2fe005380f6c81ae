#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Mon Oct 12 10:14:02 2026

Default settings for population coverage estimation.

"""

import os

import popcov.magic_values.column_names as cn

DEFAULT_BOOTSTRAP = True
DEFAULT_BOOTSTRAP_ITERATIONS = 100
DEFAULT_CONFIDENCE_LEVEL = 0.95
DEFAULT_N_WORKERS = 1
DEFAULT_PRINT_PROGRESS_EVERY_K = 100

DEFAULT_OPTIONS = {
    cn.BOOTSTRAP: DEFAULT_BOOTSTRAP,
    cn.BOOTSTRAP_ITERATIONS: DEFAULT_BOOTSTRAP_ITERATIONS,
    cn.CONFIDENCE_LEVEL: DEFAULT_CONFIDENCE_LEVEL,
    cn.RANDOM_SEED: None,
    cn.N_WORKERS: DEFAULT_N_WORKERS,
    cn.LOCI: None,
    cn.POOL_UNOBSERVED_ALLELES: False,
    cn.VERBOSE: False,
    cn.PRINT_PROGRESS_EVERY_K: DEFAULT_PRINT_PROGRESS_EVERY_K
}

# Iterations handed to a worker at once.
BOOTSTRAP_CHUNKSIZE = 16

# Directories
DIR_POPCOV = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DIR_SETTINGS = os.path.join(DIR_POPCOV, 'settings')
DIR_EXAMPLE_DATA = os.path.join(DIR_POPCOV, 'data', 'example')

PATH_EXAMPLE_EPITOPES = os.path.join(DIR_EXAMPLE_DATA, 'epitopes.csv')
PATH_EXAMPLE_ALLELE_FREQUENCIES = os.path.join(
    DIR_EXAMPLE_DATA, 'allele_frequencies.csv'
)
PATH_EXAMPLE_ALLELE_FREQUENCIES_YAML = os.path.join(
    DIR_EXAMPLE_DATA, 'allele_frequencies.yml'
)

# Output files, relative to the results folder
PATH_ESTIMATE = 'coverage_estimate.csv'
PATH_BOOTSTRAP_SAMPLES = 'bootstrap_samples.csv'
