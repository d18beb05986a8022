#!/usr/bin/env python

""" Tests for the particle selections.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

import logging
import numpy as np
import pytest

from pachyderm import yaml

from gamma_hadron.analysis import selections
from gamma_hadron.base import params

# Setup logger
logger = logging.getLogger(__name__)

def test_trigger_selection(logging_mixin, make_particles):
    """ Test the trigger selection. """
    particles = make_particles(
        pt = [15.0, 15.0, 15.0, 12.0, 20.0, 19.9, 15.0, 15.0],
        eta = [0.0, -0.89, 0.9, 0.0, 0.0, 0.0, 0.0, 0.0],
        phi = [0.0] * 8,
        pid = [22, 111, 22, 22, 111, 111, 211, 2112],
    )
    selection = selections.trigger_selection()

    expected = np.array([True, True, False, False, False, True, False, False])
    assert np.all(selection.mask(particles) == expected)
    assert len(selection.select(particles)) == 3

def test_associated_selection(logging_mixin, make_particles):
    """ Test the associated particle selection. """
    particles = make_particles(
        pt = [2.0, 2.0, 2.0, 1.2, 3.0, 2.9, 2.0, 2.0],
        eta = [0.0, 0.99, -1.0, 0.0, 0.0, 0.0, 0.0, 0.0],
        phi = [0.0] * 8,
        pid = [211, -321, 2212, 211, 211, -211, 111, 22],
    )
    selection = selections.associated_selection()

    expected = np.array([True, True, False, False, False, True, False, False])
    assert selection.charged_only is True
    assert selection.pids is None
    assert np.all(selection.mask(particles) == expected)

def test_trigger_types(logging_mixin, make_particles):
    """ Test selecting only a single trigger type. """
    particles = make_particles(pt = [15.0, 15.0], eta = [0.0, 0.0], phi = [0.0, 0.0], pid = [22, 111])
    selection = selections.trigger_selection(trigger_types = [params.TriggerType.photon])

    assert selection.pids == (22,)
    assert np.all(selection.mask(particles) == np.array([True, False]))

def test_no_trigger_types(logging_mixin):
    """ Test that at least one trigger type is required. """
    with pytest.raises(ValueError, match = "trigger type"):
        selections.trigger_selection(trigger_types = [])

@pytest.mark.parametrize("trigger_types, expected_pids", [
    ('trigger_types: ["neutral_pion", "photon"]', (111, 22)),
    ('trigger_types: "photon"', (22,)),
    ("", (111, 22)),
], ids = ["Both trigger types", "Simplified single trigger type", "Default trigger types"])
def test_selections_from_config(logging_mixin, trigger_types, expected_pids):
    """ Test creating the selections from the configuration. """
    test_yaml = """
trigger:
    abs_eta_max: 0.5
    pt_range: !SelectedRange [10, 15]
    %(trigger_types)s
associated:
    pt_range: !SelectedRange [1, 2]
""" % {"trigger_types": trigger_types}
    y = yaml.yaml(modules_to_register = [params])
    config = y.load(test_yaml)

    trigger, associated = selections.selections_from_config(config)

    assert trigger.abs_eta_max == 0.5
    assert trigger.pt_range == params.SelectedRange(10, 15)
    assert trigger.pids == expected_pids
    assert associated.abs_eta_max == 1.0
    assert associated.pt_range == params.SelectedRange(1, 2)
    assert associated.charged_only is True
