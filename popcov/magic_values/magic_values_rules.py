#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Mon Oct 12 10:14:02 2026

Magic values for the catch-all allele and allele frequencies.
"""

# Reserved allele, aggregate of all untracked alleles on a locus.
UNKNOWN = 'UNKNOWN'

# Tolerance on summed allele frequencies per locus.
FREQUENCY_SUM_TOLERANCE = 1e-9
