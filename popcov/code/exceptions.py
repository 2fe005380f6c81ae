#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Mon Oct 12 11:02:37 2026

Exceptions raised while estimating population coverage.
"""

from typing import Optional


class PopCovError(Exception):
    """Base class for errors raised by popcov."""


class ConfigurationError(PopCovError):
    """Raised if reference data is inconsistent, e.g. an epitope
    is restricted to an allele which is not in the allele
    frequency table."""

    def __init__(
        self, msg: str,
        locus: Optional[str] = None,
        allele: Optional[str] = None
    ):
        super().__init__(msg)
        self.locus = locus
        self.allele = allele


class InvalidEpitopeDataError(PopCovError):
    """Raised for an epitope with malformed immunoprevalence or counts."""

    def __init__(self, msg: str, sequence_id: Optional[str] = None):
        if sequence_id is not None:
            msg = f'Epitope {sequence_id}: {msg}'
        super().__init__(msg)
        self.sequence_id = sequence_id


class InvalidParameterError(PopCovError, ValueError):
    """Raised for invalid estimation options."""


class BootstrapCancelledError(PopCovError):
    """Raised if a bootstrap run was cancelled between iterations."""

    def __init__(self, n_completed: int, n_iterations: int):
        super().__init__(
            f'Bootstrap cancelled after {n_completed} '
            f'of {n_iterations} iterations'
        )
        self.n_completed = n_completed
        self.n_iterations = n_iterations
