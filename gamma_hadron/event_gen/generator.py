#!/usr/bin/env python

""" Base interface for event generators.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

import abc
from dataclasses import dataclass
import numpy as np
import secrets
from typing import Iterable, Optional, Tuple

# Type helpers
Event = Tuple["EventProperties", np.ndarray]
# Final state particles. phi is stored in [0, 2 pi).
DTYPE_PARTICLES = np.dtype([
    ("pT", np.float64), ("eta", np.float64), ("phi", np.float64), ("m", np.float64),
    ("pid", np.int32), ("charge", np.int32),
])
DTYPE_EVENT_PROPERTIES = np.dtype([
    ("weight", np.float64), ("impact_parameter", np.float64),
    ("cross_section", np.float64), ("n_participants", np.int32),
])

@dataclass
class EventProperties:
    """ Event level properties.

    Attributes:
        weight: Event weight.
        impact_parameter: Impact parameter of the collision in fm.
        cross_section: Cross section associated with the event.
        n_participants: Number of participating nucleons.
    """
    weight: float = 1.0
    impact_parameter: float = 0.0
    cross_section: float = 0.0
    n_participants: int = 2

def empty_particles(n_particles: int = 0) -> np.ndarray:
    """ Create an (empty) particles array with the proper dtype. """
    return np.zeros(n_particles, dtype = DTYPE_PARTICLES)

class Generator(abc.ABC):
    """ Base generator class.

    Attributes:
        sqrt_s: The center of momentum energy in GeV.
        random_seed: Random seed for the generator.
        initialized: True if the generator has been initialized.
    """
    def __init__(self, sqrt_s: float, random_seed: Optional[int] = None):
        # Store the basic properties.
        self.sqrt_s = sqrt_s

        # Determine the random seed
        self.random_seed = self._determine_random_seed(random_seed)

        # Store the state so we can check it later.
        self.initialized = False

    def _determine_random_seed(self, random_seed: Optional[int] = None) -> int:
        """ Determine the random seed.

        If we pass a valid value, it will just be used. If we pass None, then a random seed will be generated.

        Args:
            random_state: Value to help determine the random seed.
        Returns:
            Value if passed, or otherwise a random integer between 0 and 1 billion.
        """
        if random_seed is not None:
            return random_seed

        return secrets.randbelow(1000000000)

    @abc.abstractmethod
    def setup(self) -> bool:
        ...

    @abc.abstractmethod
    def __call__(self, n_events: int) -> Iterable[Event]:
        """ Generate events.

        Args:
            n_events: Number of events to generate.
        Returns:
            Event properties and output particles for each event.
        """
        ...
