#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Created on Mon Oct 12 10:31:45 2026

"""

from copy import deepcopy
from typing import Any, Dict, Iterable, List, Tuple
from math import isnan, prod
from collections import defaultdict


def nanOrNone(x):
    if x is None:
        return True
    if isnan(x):
        return True
    return False


def round_to_decimals(x: float, p: int):
    if isnan(x):
        return x
    p = float(10**p)
    return int(x * p + 0.5) / p


def freeze_list_values(
    in_dict: Dict[Any, List]
) -> Dict[Any, Tuple]:
    out_dict = dict()
    for k, v in in_dict.items():
        out_dict[k] = tuple(v)
    return out_dict


def group_by_key(
    items: Iterable[Any], key: str
) -> Dict[Any, Tuple]:
    """Index items on an attribute, preserving input order"""
    grouped = defaultdict(list)
    for item in items:
        grouped[getattr(item, key)].append(item)
    return freeze_list_values(grouped)


def prob_one_or_more_hits(probs: Iterable[float]) -> float:
    """Probability that at least one of several independent
    events occurs, given the probability of each event."""
    probs = tuple(probs)
    if len(probs) == 0:
        return 0.0
    if len(probs) == 1:
        return float(probs[0])
    return 1 - prod(1 - p for p in probs)


class DotDict(dict):
    """Helper class which allows access with dot operator
    """

    def __init__(self, *args, **kwargs):
        super(DotDict, self).__init__(*args, **kwargs)
        for arg in args:
            if isinstance(arg, dict):
                for key, val in arg.items():
                    self[key] = val

        if kwargs:
            for key, val in kwargs.items():
                self[key] = val

    def __getattr__(self, attr) -> Any:
        return self.get(attr)

    def __setattr__(self, key, value):
        self.__setitem__(key, value)

    def __setitem__(self, key, value):
        super(DotDict, self).__setitem__(key, value)
        self.__dict__.update({key: value})

    def __delattr__(self, item):
        self.__delitem__(item)

    def __delitem__(self, key):
        super(DotDict, self).__delitem__(key)
        del self.__dict__[key]

    def __deepcopy__(self, memo=None):
        return DotDict(deepcopy(dict(self), memo=memo))
