#!/usr/bin/env python

""" Shared fixtures for the tests.

Helper functions are wrapped in fixtures so that they are available in all of the test modules.
The idea for this approach is inspired by https://stackoverflow.com/a/51389067.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

from io import StringIO
import logging
import pytest
import ruamel.yaml

@pytest.fixture
def logging_mixin(caplog):
    """ Logging mixin to capture logging messages from all logger.

    Use it by adding it as an argument to the test function.
    """
    caplog.set_level(logging.DEBUG)
    # Quiet down some noisy packages.
    logging.getLogger("matplotlib").setLevel(logging.INFO)

@pytest.fixture
def log_yaml_dump():
    """ Helper function to log the YAML config. """
    def func(yaml, config):
        """ Helper function to log the YAML config. """
        s = StringIO()
        yaml.dump(config, s)
        s.seek(0)

        return s.read()

    return func

@pytest.fixture
def override_options_helper(log_yaml_dump):
    """ Helper function to override the configuration. """
    def func(config, selected_options = None, config_containing_override = None):
        """ Helper function to override the configuration.

        It can print the configuration before and after overridding the options if enabled.

        Note:
            If selected_options is not specified, it defaults to (0.2, "AuAu", "minimum_bias")

        Args:
            config (CommentedMap): dict-like object containing the configuration to be overridden.
            selected_options (params.SelectedAnalysisOptions): The options selected for this analysis.
            config_containing_override (CommentedMap): dict-like object containing the override options.
        Returns:
            tuple: (dict-like CommentedMap object containing the overridden configuration, selected analysis
                        options used with the config)
        """
        # Import modules here so we can delay it until they are actually needed.
        from gamma_hadron.base import analysis_config
        from gamma_hadron.base import params
        logger = logging.getLogger(__name__)

        if selected_options is None:
            selected_options = params.SelectedAnalysisOptions(
                collision_energy = params.CollisionEnergy.zero_point_two,
                collision_system = params.CollisionSystem.AuAu,
                event_activity = params.EventActivity.minimum_bias,
            )

        yaml = ruamel.yaml.YAML()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Before override:")
            logger.debug(log_yaml_dump(yaml, config))

        config = analysis_config.override_options(
            config = config,
            selected_options = selected_options,
            config_containing_override = config_containing_override
        )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("After override:")
            logger.debug(log_yaml_dump(yaml, config))

        return (config, selected_options)

    return func

@pytest.fixture
def make_particles():
    """ Helper function to create a particles array from lists of values. """
    def func(pt, eta, phi, pid, charge = None):
        """ Create particles with the given properties.

        Args:
            pt: Particle transverse momenta.
            eta: Particle pseudorapidities.
            phi: Particle azimuthal angles.
            pid: Particle PDG codes.
            charge: Particle charges. Default: None, which determines them from the PDG codes.
        Returns:
            The particles array.
        """
        import numpy as np
        from gamma_hadron.base import params
        from gamma_hadron.event_gen import generator

        particles = generator.empty_particles(len(pt))
        particles["pT"] = pt
        particles["eta"] = eta
        particles["phi"] = phi
        particles["pid"] = pid
        particles["charge"] = params.charge_from_pid(np.array(pid)) if charge is None else charge
        return particles

    return func
