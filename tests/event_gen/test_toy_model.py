#!/usr/bin/env python

""" Tests for the toy heavy-ion event generator.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

import logging
import numpy as np
import pytest

from gamma_hadron.base import params
from gamma_hadron.event_gen import generator
from gamma_hadron.event_gen import toy_model

# Setup logger
logger = logging.getLogger(__name__)

@pytest.fixture
def toy_generator():
    """ Setup a heavy-ion toy generator. """
    g = toy_model.ToyHeavyIonGenerator(
        parameters = toy_model.ToyModelParameters(hard_probability = 1.0),
        sqrt_s = 200, random_seed = 1234,
    )
    g.setup()
    return g

def test_random_seed(logging_mixin):
    """ Test the determination of the random seed. """
    g = toy_model.ToyHeavyIonGenerator(sqrt_s = 200, random_seed = 5)
    assert g.random_seed == 5
    g = toy_model.ToyHeavyIonGenerator(sqrt_s = 200)
    assert 0 <= g.random_seed < 1000000000

def test_setup(logging_mixin, toy_generator):
    """ Test that the generator can only be initialized once. """
    assert toy_generator.initialized is True
    assert np.isclose(np.sum(toy_generator._species_probabilities), 1)
    with pytest.raises(RuntimeError, match = "already been initialized"):
        toy_generator.setup()

def test_not_initialized(logging_mixin):
    """ Test that events can't be generated before the setup. """
    g = toy_model.ToyHeavyIonGenerator(sqrt_s = 200, random_seed = 1234)
    with pytest.raises(RuntimeError, match = "not yet initialized"):
        next(iter(g(n_events = 1)))

def test_invalid_species_fractions(logging_mixin):
    """ Test that the species fractions are validated. """
    g = toy_model.ToyHeavyIonGenerator(
        parameters = toy_model.ToyModelParameters(soft_species = {211: 0.0}),
        sqrt_s = 200, random_seed = 1234,
    )
    with pytest.raises(ValueError, match = "species"):
        g.setup()

def test_generate_events(logging_mixin, toy_generator):
    """ Test the generated events. """
    events = list(toy_generator(n_events = 20))

    assert len(events) == 20
    for event_properties, particles in events:
        assert isinstance(event_properties, generator.EventProperties)
        assert particles.dtype == generator.DTYPE_PARTICLES
        assert 0 <= event_properties.impact_parameter <= toy_generator.parameters.max_impact_parameter
        assert event_properties.n_participants >= 2
        assert event_properties.weight == 1.0
        # Kinematics
        assert np.all(particles["phi"] >= 0)
        assert np.all(particles["phi"] < 2 * np.pi)
        assert np.all(particles["pT"] >= 0)
        assert np.all(particles["charge"] == params.charge_from_pid(particles["pid"]))
        # Every event has a hard scattering, so there must be exactly one trigger in the trigger pt range.
        trigger_range = toy_generator.parameters.trigger_pt_range
        triggers = particles[
            np.isin(particles["pid"], [params.PID_PHOTON, params.PID_NEUTRAL_PION]) & trigger_range.contains(particles["pT"])
        ]
        assert len(triggers) >= 1

def test_reproducibility(logging_mixin):
    """ Test that the same random seed reproduces the same events. """
    results = []
    for _ in range(2):
        g = toy_model.ToyHeavyIonGenerator(sqrt_s = 200, random_seed = 42)
        g.setup()
        results.append(list(g(n_events = 3)))

    for (properties_a, particles_a), (properties_b, particles_b) in zip(*results):
        assert properties_a == properties_b
        assert np.array_equal(particles_a, particles_b)

def test_pp_events(logging_mixin):
    """ Test the pp configuration of the toy model. """
    parameters = toy_model.ToyModelParameters.from_config({"nucleus_mass_number": 1})
    assert parameters.is_pp
    g = toy_model.ToyHeavyIonGenerator(parameters = parameters, sqrt_s = 200, random_seed = 1234)
    g.setup()

    for event_properties, _ in g(n_events = 5):
        assert event_properties.impact_parameter == 0
        assert event_properties.n_participants == 2

def test_parameters_from_config(logging_mixin):
    """ Test constructing the parameters from a configuration. """
    parameters = toy_model.ToyModelParameters.from_config({
        "hard_probability": 0.5,
        "trigger_pt_range": [11, 21],
        "soft_species": {"211": 1},
    })

    assert parameters.hard_probability == 0.5
    assert parameters.trigger_pt_range == params.SelectedRange(11, 21)
    assert parameters.soft_species == {211: 1.0}
    # Defaults
    assert parameters.nucleus_mass_number == 197
    assert not parameters.is_pp

def test_energy_loss(logging_mixin, mocker):
    """ Test that the recoiling parton loses energy only in heavy-ion collisions. """
    fragment = mocker.patch.object(toy_model.ToyHeavyIonGenerator, "_fragment", return_value = generator.empty_particles())
    for nucleus_mass_number, expected_factor in [(197, 1 - 0.25 * 0.5), (1, 1.0)]:
        g = toy_model.ToyHeavyIonGenerator(
            parameters = toy_model.ToyModelParameters(nucleus_mass_number = nucleus_mass_number, photon_trigger_fraction = 1.0),
            sqrt_s = 200, random_seed = 1234,
        )
        g.setup()
        particles = g._hard_scattering(overlap = 0.5)

        # Only the photon trigger, since the fragmentation is mocked.
        assert len(particles) == 1
        assert particles[0]["pid"] == params.PID_PHOTON
        # The recoil is the only fragmentation for a photon trigger.
        recoil_pt = fragment.call_args[0][0]
        assert recoil_pt == pytest.approx(particles[0]["pT"] * expected_factor)

_generation_config = """
analysisName: "STAR_2016_I1442357"
outputPrefix: "OUTPUT_DIR/{collision_system}/{collision_energy}/{event_activity}"
printingExtensions: ["pdf", "png"]
toyModel:
    nucleus_mass_number: 197
    hard_probability: 0.5
ToyEventGenerationManager:
    n_events: 10
    random_seed: 1234
    output_name: "toy"
    override:
        pp:
            toyModel:
                nucleus_mass_number: 1
"""

def test_generation_manager(logging_mixin, tmp_path):
    """ Test generating and storing events with the manager.

    Note:
        This is an integration test.
    """
    from gamma_hadron.event_gen import event_file

    config_filename = tmp_path / "config.yaml"
    config_filename.write_text(_generation_config.replace("OUTPUT_DIR", str(tmp_path / "output")))

    manager = toy_model.ToyEventGenerationManager(
        config_filename = str(config_filename),
        selected_analysis_options = params.SelectedAnalysisOptions(0.2, "pp", "inclusive"),
    )
    assert manager.generator.parameters.is_pp
    assert manager.generator.sqrt_s == pytest.approx(200)
    assert manager.run() is True

    reader = event_file.EventFileReader(input_prefix = manager.output_info.output_prefix, name = "toy")
    reader.setup()
    assert reader.n_events == 10
    for event_properties, _ in reader():
        assert event_properties.n_participants == 2

    manager._progress_manager.stop()
