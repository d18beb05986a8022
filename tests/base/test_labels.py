#!/usr/bin/env python

""" Tests for the labels module.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

import logging
import pytest

from gamma_hadron.base import labels
from gamma_hadron.base import params

# Setup logger
logger = logging.getLogger(__name__)

@pytest.mark.parametrize("value, expected", [
    (r"\textbf{test}", r"$\textbf{test}$"),
    (r"$\textbf{test}", r"$\textbf{test}$"),
    (r"\textbf{test}$", r"$\textbf{test}$"),
    (r"$\textbf{test}$", r"$\textbf{test}$"),
    ("", ""),
], ids = ["just string", "dollar sign in front", "dollar sign at end", "dollar signs at both ends", "empty string"])
def test_make_valid_latex_string(logging_mixin, value: str, expected: str):
    """ Test for making a string into a valid latex string. """
    assert labels.make_valid_latex_string(value) == expected

@pytest.mark.parametrize("lower_label, upper_label, expected", [
    ("T", "", r"\mathit{p}_{\mathrm{T}}^{\mathrm{}}"),
    ("T", "trig", r"\mathit{p}_{\mathrm{T}}^{\mathrm{trig}}"),
], ids = ["Base test", "Superscript"])
def test_pt_display_label(logging_mixin, lower_label, upper_label, expected):
    """ Test for generating pt labels. """
    assert labels.pt_display_label(lower_label = lower_label, upper_label = upper_label) == expected

def test_gev_momentum_units_label(logging_mixin):
    """ Test generating GeV/c label in latex. """
    output = labels.momentum_units_label_gev()
    expected = r"\mathrm{GeV/\mathit{c}}"
    assert output == expected

def test_trigger_and_associated_pt_range_strings(logging_mixin):
    """ Test the pt range labels for the trigger and associated particles. """
    trigger = labels.trigger_pt_range_string(12.0, 20.0)
    associated = labels.associated_pt_range_string(1.2, 3.0)

    assert trigger == r"$12 < \mathit{p}_{\mathrm{T}}^{\mathrm{trig}} < 20\:\mathrm{GeV/\mathit{c}}$"
    assert associated == r"$1.2 < \mathit{p}_{\mathrm{T}}^{\mathrm{assoc}} < 3\:\mathrm{GeV/\mathit{c}}$"

_AuAu_label = r"$\mathrm{Au \textendash Au}\:\sqrt{s_{\mathrm{NN}}} = 200\:\mathrm{GeV},\:0 \textendash 80 \%$"

@pytest.mark.parametrize("energy, system, activity, expected", [
    (0.2, "pp", "inclusive", r"$\mathrm{pp}\:\sqrt{s_{\mathrm{NN}}} = 200\:\mathrm{GeV}$"),
    (0.2, "AuAu", "minimum_bias", _AuAu_label),
    (0.2, "AuAu", "central", r"$\mathrm{Au \textendash Au}\:\sqrt{s_{\mathrm{NN}}} = 200\:\mathrm{GeV},\:0 \textendash 12 \%$"),
    ("zero_point_two", "AuAu", "minimum_bias", _AuAu_label),
    ("0.2", "AuAu", "minimum_bias", _AuAu_label),
    (params.CollisionEnergy.zero_point_two, params.CollisionSystem.AuAu, params.EventActivity.minimum_bias, _AuAu_label),
], ids = ["Inclusive pp", "Minimum bias AuAu", "Central AuAu", "Energy as string zero_point_two", "Energy as string \"0.2\"", "Using enums directly"])
def test_system_label(logging_mixin, energy, system, activity, expected):
    """ Test system labels. """
    assert labels.system_label(energy = energy, system = system, activity = activity) == expected

def test_delta_phi_labels(logging_mixin):
    """ Test the delta phi axis labels. """
    assert labels.delta_phi_axis_label() == r"$\Delta\varphi\:\mathrm{(rad)}$"
    assert labels.delta_phi_counts_label() == r"$\mathrm{d}N_{\mathrm{pairs}}/\mathrm{d}\Delta\varphi$"
