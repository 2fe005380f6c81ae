#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Fri Oct 16 09:48:27 2026

Estimate population coverage for one or more settings files.

"""

from time import time
from typing import List, Optional
import os
import argparse
import logging

import popcov.magic_values.popcov_settings as ps
import popcov.magic_values.column_names as cn
from popcov.code.PopulationCoverage import compute_population_coverage
from popcov.code.utils.read_input_files import (
    read_coverage_settings, read_epitopes, read_allele_frequency_file,
    options_from_settings
)

# Configure logging
logging.basicConfig(filename='coverage_errors.log', level=logging.ERROR,
                    format='%(asctime)s %(levelname)s:%(message)s')


def parse_arguments():
    parser = argparse.ArgumentParser(
        description="Estimate population coverage of epitope sets.")
    parser.add_argument(
        "-s", "--settings",
        nargs='+',
        default=[
            os.path.join(ps.DIR_SETTINGS, 'coverage_settings_example.yml')
        ],
        help="Settings file(s), or directories with settings files."
    )
    parser.add_argument(
        "-n", "--n_workers",
        type=int,
        default=None,
        help="Number of workers for bootstrapping. Overrides settings."
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed. Overrides settings."
    )
    return parser.parse_args()


def list_settings_files(paths: List[str]) -> List[str]:
    settings_files = []
    for path in paths:
        if os.path.isdir(path):
            settings_files.extend(
                os.path.join(path, file)
                for file in sorted(os.listdir(path))
                if file.endswith(('.yml', '.yaml'))
            )
        else:
            settings_files.append(path)
    return settings_files


def estimate_coverage(
    ss_path: str,
    n_workers: Optional[int] = None,
    seed: Optional[int] = None
) -> int:

    try:
        sim_set = read_coverage_settings(ss_path)
        epitope_set = read_epitopes(sim_set.PATH_EPITOPES)
        freq_table = read_allele_frequency_file(
            sim_set.PATH_ALLELE_FREQUENCIES
        )
        options = options_from_settings(sim_set)
        if n_workers is not None:
            options[cn.N_WORKERS] = n_workers
        if seed is not None:
            options[cn.RANDOM_SEED] = seed

        print(
            f'Working on {ss_path}: {len(epitope_set)} epitopes, '
            f'{len(freq_table)} tabulated alleles'
        )
        estimate = compute_population_coverage(
            epitope_set=epitope_set,
            allele_frequency_table=freq_table,
            options=options
        )
        print(estimate)
    except Exception as e:
        print('\n\n***********')
        msg = f'An error occurred when estimating coverage for {ss_path}: {e}'
        print(msg)
        logging.exception(msg)
        print('\n\n***********')
        return 0

    results_folder = sim_set.RESULTS_FOLDER or os.path.dirname(ss_path)
    os.makedirs(results_folder, exist_ok=True)
    estimate.to_frame().to_csv(
        os.path.join(results_folder, ps.PATH_ESTIMATE), index=False
    )
    if estimate.bootstrap_samples is not None:
        estimate.bootstrap_frame().to_csv(
            os.path.join(results_folder, ps.PATH_BOOTSTRAP_SAMPLES),
            index=False
        )
    return 1


if __name__ == '__main__':

    args = parse_arguments()
    paths = list_settings_files(args.settings)

    start = time()
    print(f'Processing {len(paths)} files')
    n_done = sum(
        estimate_coverage(path, n_workers=args.n_workers, seed=args.seed)
        for path in paths
    )
    end = time()
    print(
        f'{n_done} of {len(paths)} estimates completed in '
        f'{(end - start) / 60:.1f} minutes'
    )
