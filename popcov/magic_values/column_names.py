#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Mon Oct 12 10:14:02 2026

Column names for epitope and allele frequency records,
and for coverage output.
"""

# Epitope records
SEQUENCE_ID = 'sequence_id'
LOCUS = 'locus'
ALLELE = 'allele'
IMMUNOPREVALENCE = 'immunoprevalence'
N_TESTED = 'n_tested'
N_RESPONDERS = 'n_responders'

# Allele frequency records
FREQUENCY = 'frequency'

# Allele combinations
ALLELE_1 = 'allele_1'
ALLELE_2 = 'allele_2'
COMBINATION_FREQUENCY = 'combination_frequency'
N_EPITOPES_MATCHED = 'n_epitopes_matched'
PROB_RECOGNITION = 'prob_recognition'
WEIGHTED_RECOGNITION = 'weighted_recognition'

# Coverage estimates
POINT_ESTIMATE = 'point_estimate'
CI_LOWER = 'ci_lower'
CI_UPPER = 'ci_upper'
CONFIDENCE_LEVEL = 'confidence_level'
N_ITERATIONS = 'n_iterations'
LOCUS_COVERAGE = 'locus_coverage'
ITERATION = 'iteration'
BOOTSTRAP_COVERAGE = 'bootstrap_coverage'

# Options
BOOTSTRAP = 'bootstrap'
BOOTSTRAP_ITERATIONS = 'bootstrap_iterations'
RANDOM_SEED = 'random_seed'
N_WORKERS = 'n_workers'
LOCI = 'loci'
POOL_UNOBSERVED_ALLELES = 'pool_unobserved_alleles'
VERBOSE = 'verbose'
PRINT_PROGRESS_EVERY_K = 'print_progress_every_k'
