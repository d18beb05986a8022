#!/usr/bin/env python

""" Toy heavy-ion event generator.

Generates events with a soft underlying event which scales with the number of participants,
along with (optionally) an embedded hard scattering containing a direct photon or neutral
pion trigger and recoiling charged hadrons. It is not intended to be a realistic description
of the collisions, but it contains the relevant features to exercise the correlation analysis.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

from dataclasses import dataclass, field
import logging
import numpy as np
from typing import Any, Dict, Iterable, List, Mapping, Optional

from gamma_hadron.base import analysis_manager
from gamma_hadron.base import params
from gamma_hadron.event_gen import event_file
from gamma_hadron.event_gen import generator

logger = logging.getLogger(__name__)

# Masses in GeV
PARTICLE_MASSES: Dict[int, float] = {
    22: 0.0,
    111: 0.1349768,
    211: 0.13957039, -211: 0.13957039,
    321: 0.493677, -321: 0.493677,
    2212: 0.93827208, -2212: 0.93827208,
}

def _default_soft_species() -> Dict[int, float]:
    return {
        211: 0.275, -211: 0.275,
        321: 0.05, -321: 0.05,
        2212: 0.025, -2212: 0.025,
        111: 0.25,
        22: 0.05,
    }

@dataclass
class ToyModelParameters:
    """ Parameters of the toy model.

    Attributes:
        nucleus_mass_number: Mass number of the colliding nuclei. 1 corresponds to pp.
        nuclear_radius: Radius of the colliding nuclei in fm.
        max_impact_parameter: Maximum impact parameter in fm.
        eta_max: Particles are generated uniformly within |eta| < eta_max.
        dN_deta_per_participant_pair: Soft multiplicity per unit pseudorapidity per participant pair.
        soft_temperature: Inverse slope of the soft pt spectrum in GeV.
        soft_species: Relative abundance of each species (by PDG code) in the soft event.
        hard_probability: Probability for an event to contain a hard scattering.
        photon_trigger_fraction: Fraction of hard scatterings which have a direct photon trigger.
        trigger_pt_range: Trigger pt range in GeV.
        mean_n_fragments: Mean number of charged fragments in a jet.
        fragmentation_slope: Slope of the exponential fragmentation function in z.
        jet_width: Width of the jet in eta and phi.
        leading_fragment_z: Momentum fraction carried by a neutral pion trigger.
        energy_loss: Maximum fractional energy loss of the recoiling parton in the most central collisions.
        event_weight: Weight assigned to each event.
    """
    nucleus_mass_number: int = 197
    nuclear_radius: float = 6.38
    max_impact_parameter: float = 15.0
    eta_max: float = 1.2
    dN_deta_per_participant_pair: float = 2.4
    soft_temperature: float = 0.35
    soft_species: Dict[int, float] = field(default_factory = _default_soft_species)
    hard_probability: float = 0.2
    photon_trigger_fraction: float = 0.5
    trigger_pt_range: params.SelectedRange = params.SelectedRange(min = 10.0, max = 22.0)
    mean_n_fragments: float = 5.0
    fragmentation_slope: float = 6.0
    jet_width: float = 0.3
    leading_fragment_z: float = 0.7
    energy_loss: float = 0.25
    event_weight: float = 1.0

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ToyModelParameters":
        """ Construct the parameters from a (possibly partial) configuration. """
        kwargs = dict(config)
        if "soft_species" in kwargs:
            kwargs["soft_species"] = {int(k): float(v) for k, v in kwargs["soft_species"].items()}
        if "trigger_pt_range" in kwargs and not isinstance(kwargs["trigger_pt_range"], params.SelectedRange):
            kwargs["trigger_pt_range"] = params.SelectedRange(*kwargs["trigger_pt_range"])
        return cls(**kwargs)

    @property
    def is_pp(self) -> bool:
        return self.nucleus_mass_number == 1

class ToyHeavyIonGenerator(generator.Generator):
    """ Toy heavy-ion event generator.

    Args:
        parameters: Parameters of the toy model.
        sqrt_s: The center of momentum energy in GeV.
        random_seed: Random seed for the generator. Default: None, which will be totally random.

    Attributes:
        parameters: Parameters of the toy model.
        rng: Random number generator. Available after setup.
    """
    def __init__(self, parameters: Optional[ToyModelParameters] = None, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        if parameters is None:
            parameters = ToyModelParameters()
        self.parameters = parameters
        self.rng: np.random.Generator

        # Normalized species fractions. They are determined at setup.
        self._species_pids: np.ndarray
        self._species_probabilities: np.ndarray

    def setup(self) -> bool:
        """ Setup the generator.

        Returns:
            True if setup was successful.
        """
        if self.initialized is True:
            raise RuntimeError("This generator has already been initialized")

        self.rng = np.random.default_rng(self.random_seed)

        pids = list(self.parameters.soft_species.keys())
        fractions = np.array([self.parameters.soft_species[pid] for pid in pids], dtype = np.float64)
        if np.any(fractions < 0) or np.sum(fractions) <= 0:
            raise ValueError(f"Invalid soft species fractions: {self.parameters.soft_species}")
        self._species_pids = np.array(pids, dtype = np.int32)
        self._species_probabilities = fractions / np.sum(fractions)

        logger.debug(f"Setup toy generator with random seed {self.random_seed} and parameters {self.parameters}")
        self.initialized = True
        return self.initialized

    def _sample_impact_parameter(self) -> float:
        """ Sample the impact parameter according to dN/db ~ b. """
        if self.parameters.is_pp:
            return 0.0
        return float(self.parameters.max_impact_parameter * np.sqrt(self.rng.uniform()))

    def _overlap_fraction(self, impact_parameter: float) -> float:
        """ Fraction of the nuclear overlap, going from 1 for head-on collisions to 0 at b = 2R. """
        if self.parameters.is_pp:
            return 1.0
        return float(np.clip(1 - impact_parameter / (2 * self.parameters.nuclear_radius), 0, 1))

    def _n_participants(self, overlap: float) -> int:
        """ Number of participating nucleons in a simple overlap model. Always at least 2. """
        if self.parameters.is_pp:
            return 2
        return max(2, int(round(2 * self.parameters.nucleus_mass_number * overlap ** 2)))

    def _make_particles(self, pt: np.ndarray, eta: np.ndarray, phi: np.ndarray, pids: np.ndarray) -> np.ndarray:
        """ Store the given kinematics into a particles array. """
        particles = generator.empty_particles(len(pt))
        particles["pT"] = pt
        particles["eta"] = eta
        particles["phi"] = np.mod(phi, 2 * np.pi)
        particles["pid"] = pids
        particles["m"] = [PARTICLE_MASSES.get(int(pid), 0.0) for pid in pids]
        particles["charge"] = params.charge_from_pid(pids)
        return particles

    def _soft_event(self, n_participants: int) -> np.ndarray:
        """ Generate the soft underlying event. """
        p = self.parameters
        mean_multiplicity = p.dN_deta_per_participant_pair * n_participants / 2 * 2 * p.eta_max
        n_particles = self.rng.poisson(mean_multiplicity)
        return self._make_particles(
            pt = self.rng.exponential(p.soft_temperature, size = n_particles),
            eta = self.rng.uniform(-p.eta_max, p.eta_max, size = n_particles),
            phi = self.rng.uniform(0, 2 * np.pi, size = n_particles),
            pids = self.rng.choice(self._species_pids, size = n_particles, p = self._species_probabilities),
        )

    def _fragment(self, parton_pt: float, eta: float, phi: float, max_z: float = 1.0) -> np.ndarray:
        """ Fragment a parton into charged pions.

        The momentum fractions are sampled from an exponential fragmentation function and are
        restricted such that the total carried momentum doesn't exceed ``max_z``.

        Args:
            parton_pt: Parton transverse momentum.
            eta: Parton pseudorapidity.
            phi: Parton azimuthal angle.
            max_z: Maximum total momentum fraction available for the fragments.
        Returns:
            Fragments of the parton.
        """
        p = self.parameters
        n_fragments = self.rng.poisson(p.mean_n_fragments)
        z_values: List[float] = []
        remaining = max_z
        for _ in range(n_fragments):
            z = self.rng.exponential(1 / p.fragmentation_slope)
            if z >= remaining:
                break
            z_values.append(z)
            remaining -= z
        n = len(z_values)
        return self._make_particles(
            pt = parton_pt * np.array(z_values, dtype = np.float64),
            eta = eta + self.rng.normal(0, p.jet_width, size = n),
            phi = phi + self.rng.normal(0, p.jet_width, size = n),
            pids = self.rng.choice(np.array([211, -211], dtype = np.int32), size = n),
        )

    def _hard_scattering(self, overlap: float) -> np.ndarray:
        """ Generate a hard scattering with a trigger particle and the recoiling jet. """
        p = self.parameters
        photon_trigger = self.rng.uniform() < p.photon_trigger_fraction
        trigger_pt = self.rng.uniform(p.trigger_pt_range.min, p.trigger_pt_range.max)
        trigger_eta = self.rng.uniform(-p.eta_max, p.eta_max)
        trigger_phi = self.rng.uniform(0, 2 * np.pi)

        pieces = [
            self._make_particles(
                pt = np.array([trigger_pt]), eta = np.array([trigger_eta]), phi = np.array([trigger_phi]),
                pids = np.array([params.PID_PHOTON if photon_trigger else params.PID_NEUTRAL_PION], dtype = np.int32),
            )
        ]

        # The direct photon balances the recoiling parton, while the neutral pion is only the leading
        # fragment of the near side parton.
        parton_pt = trigger_pt
        if not photon_trigger:
            parton_pt = trigger_pt / p.leading_fragment_z
            pieces.append(
                self._fragment(parton_pt, trigger_eta, trigger_phi, max_z = 1 - p.leading_fragment_z)
            )

        # Recoil
        if not p.is_pp:
            parton_pt *= 1 - p.energy_loss * overlap
        recoil_eta = self.rng.uniform(-p.eta_max, p.eta_max)
        recoil_phi = trigger_phi + np.pi + self.rng.normal(0, p.jet_width)
        pieces.append(self._fragment(parton_pt, recoil_eta, recoil_phi))

        return np.concatenate(pieces)

    def _generate_event(self) -> generator.Event:
        """ Generate a single event. """
        impact_parameter = self._sample_impact_parameter()
        overlap = self._overlap_fraction(impact_parameter)
        n_participants = self._n_participants(overlap)

        particles = self._soft_event(n_participants)
        if self.rng.uniform() < self.parameters.hard_probability:
            particles = np.concatenate([particles, self._hard_scattering(overlap)])

        event_properties = generator.EventProperties(
            weight = self.parameters.event_weight,
            impact_parameter = impact_parameter,
            n_participants = n_participants,
        )
        return event_properties, particles

    def __call__(self, n_events: int) -> Iterable[generator.Event]:
        """ Generate events with the toy model.

        Args:
            n_events: Number of events to generate.
        Returns:
            Generator to provide the requested number of events.
        """
        # Validation
        if not self.initialized:
            raise RuntimeError("The toy generator was not yet initialized.")

        for _ in range(n_events):
            yield self._generate_event()

class ToyEventGenerationManager(analysis_manager.Manager):
    """ Generate events with the toy model and store them for later analysis.

    Args:
        config_filename: Path to the configuration filename.
        selected_analysis_options: Selected analysis options.
    """
    def __init__(self, config_filename: str, selected_analysis_options: params.SelectedAnalysisOptions, **kwargs: str):
        # Initialize the base class
        super().__init__(
            config_filename = config_filename, selected_analysis_options = selected_analysis_options,
            manager_task_name = "ToyEventGenerationManager", **kwargs,
        )

        # Basic configuration
        self.n_events = self.task_config["n_events"]
        self.output_name = self.task_config.get("output_name", "events")
        self.generator = ToyHeavyIonGenerator(
            parameters = ToyModelParameters.from_config(self.config.get("toyModel", {})),
            # Energy is specified in TeV in ``params.CollisionEnergy``, but the generator
            # expects it to be in GeV.
            sqrt_s = self.selected_analysis_options.collision_energy.value * 1000,
            random_seed = self.task_config.get("random_seed", None),
        )

    def _generate(self) -> Iterable[generator.Event]:
        """ Generate the events while keeping track of the progress. """
        with self._progress_manager.counter(total = self.n_events,
                                            desc = "Generating", unit = "events") as progress:
            for event in self.generator(n_events = self.n_events):
                yield event
                progress.update()

    def run(self) -> bool:
        """ Setup the generator, and then generate and store the events. """
        res = self.generator.setup()
        if not res:
            raise RuntimeError("Setup failed!")

        event_file.write_events(
            self._generate(), output_prefix = self.output_info.output_prefix, name = self.output_name,
        )

        return True

def run_generation_from_terminal() -> ToyEventGenerationManager:
    """ Driver function for generating and storing toy events. """
    manager: ToyEventGenerationManager = analysis_manager.run_helper(
        manager_class = ToyEventGenerationManager, task_name = "ToyEventGenerationManager",
        description = "Toy Event Generation Manager",
    )

    # Return it for convenience.
    return manager

if __name__ == "__main__":
    run_generation_from_terminal()
