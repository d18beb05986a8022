#!/usr/bin/env python

""" Main analysis tasks for the gamma-hadron analysis.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

__all__ = [
    "centrality",
    "correlations",
    "output",
    "selections",
]
