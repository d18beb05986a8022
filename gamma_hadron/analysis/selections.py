#!/usr/bin/env python

""" Particle selections for the gamma-hadron analysis.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

from dataclasses import dataclass
import logging
import numpy as np
from typing import Any, Mapping, Optional, Sequence, Tuple

from gamma_hadron.base import params

logger = logging.getLogger(__name__)

@dataclass(frozen = True)
class ParticleSelection:
    """ Kinematic and species selection of particles.

    All of the kinematic bounds are exclusive.

    Attributes:
        abs_eta_max: Maximum |eta|.
        pt_range: Selected pt range in GeV.
        pids: Selected PDG codes. If None, all species are accepted.
        charged_only: If True, only charged particles are accepted.
    """
    abs_eta_max: float
    pt_range: params.SelectedRange
    pids: Optional[Tuple[int, ...]] = None
    charged_only: bool = False

    def mask(self, particles: np.ndarray) -> np.ndarray:
        """ Determine which particles are selected.

        Args:
            particles: Particles to be checked.
        Returns:
            Boolean mask which is True for selected particles.
        """
        mask = (np.abs(particles["eta"]) < self.abs_eta_max) & self.pt_range.contains(particles["pT"])
        if self.pids is not None:
            mask &= np.isin(particles["pid"], self.pids)
        if self.charged_only:
            mask &= particles["charge"] != 0
        return mask

    def select(self, particles: np.ndarray) -> np.ndarray:
        """ Select particles.

        Args:
            particles: Particles to be selected.
        Returns:
            The selected particles.
        """
        return particles[self.mask(particles)]

def trigger_selection(abs_eta_max: float = 0.9,
                      pt_range: params.SelectedRange = params.SelectedRange(min = 12.0, max = 20.0),
                      trigger_types: Sequence[params.TriggerType] = (params.TriggerType.neutral_pion, params.TriggerType.photon)) -> ParticleSelection:
    """ Define the trigger particle selection.

    Args:
        abs_eta_max: Maximum trigger |eta|. Default: 0.9.
        pt_range: Trigger pt range. Default: 12 < pt < 20 GeV.
        trigger_types: Trigger species. Default: neutral pions and photons.
    Returns:
        The trigger selection.
    """
    if len(trigger_types) == 0:
        raise ValueError("Must select at least one trigger type.")
    return ParticleSelection(
        abs_eta_max = abs_eta_max, pt_range = pt_range,
        pids = tuple(trigger_type.value for trigger_type in trigger_types),
    )

def associated_selection(abs_eta_max: float = 1.0,
                         pt_range: params.SelectedRange = params.SelectedRange(min = 1.2, max = 3.0)) -> ParticleSelection:
    """ Define the associated particle selection, which requires charged particles.

    Args:
        abs_eta_max: Maximum associated |eta|. Default: 1.0.
        pt_range: Associated pt range. Default: 1.2 < pt < 3 GeV.
    Returns:
        The associated particle selection.
    """
    return ParticleSelection(abs_eta_max = abs_eta_max, pt_range = pt_range, charged_only = True)

def selections_from_config(config: Mapping[str, Any]) -> Tuple[ParticleSelection, ParticleSelection]:
    """ Create the trigger and associated particle selections from the configuration.

    The expected configuration is of the form:

    .. code-block:: yaml

        trigger:
            abs_eta_max: 0.9
            pt_range: !SelectedRange [12, 20]
            trigger_types: ["neutral_pion", "photon"]
        associated:
            abs_eta_max: 1.0
            pt_range: !SelectedRange [1.2, 3]

    Any missing values take the default values.

    Args:
        config: Configuration containing the selections.
    Returns:
        (trigger selection, associated selection)
    """
    trigger_config = dict(config.get("trigger", {}))
    if "trigger_types" in trigger_config:
        trigger_types = trigger_config["trigger_types"]
        # The configuration may have been simplified from a single entry list to a string.
        if isinstance(trigger_types, str):
            trigger_types = [trigger_types]
        trigger_config["trigger_types"] = [
            t if isinstance(t, params.TriggerType) else params.TriggerType[t] for t in trigger_types
        ]
    associated_config = dict(config.get("associated", {}))

    return trigger_selection(**trigger_config), associated_selection(**associated_config)
