#!/usr/bin/env python

""" Gamma-hadron analysis parameters.

Also contains methods to access that information.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

from dataclasses import dataclass
import enum
import logging
import numpy as np
from typing import Any, cast, Dict, Iterator, Tuple, Union

from pachyderm import yaml

logger = logging.getLogger(__name__)

########
# Particle identification
########
# PDG codes for the particles which are relevant to the analysis.
PID_PHOTON = 22
PID_NEUTRAL_PION = 111

# Charges (in units of e) of the long lived final state particles which we may encounter.
# Anything not listed here is treated as neutral.
PDG_CHARGES: Dict[int, int] = {
    # Leptons
    11: -1, -11: 1,
    13: -1, -13: 1,
    # Charged mesons
    211: 1, -211: -1,
    321: 1, -321: -1,
    # Baryons
    2212: 1, -2212: -1,
    3112: -1, -3112: 1,
    3222: 1, -3222: -1,
    3312: -1, -3312: 1,
    3334: -1, -3334: 1,
}

def charge_from_pid(pids: Union[int, np.ndarray]) -> np.ndarray:
    """ Determine the particle charges from the PDG codes.

    Args:
        pids: PDG code(s).
    Returns:
        Charge of each particle. Particles which are not in the charge table are neutral.
    """
    pids = np.asarray(pids)
    charges = np.zeros(pids.shape, dtype = np.int32)
    for pid, charge in PDG_CHARGES.items():
        charges[pids == pid] = charge
    return charges

############################################
# Parameter information (access and display)
############################################
class ExperimentLabel(enum.Enum):
    """ Experiment label types. """
    work_in_progress = "STAR Work in Progress"
    simulation = "STAR Simulation"
    final = "STAR"

    def __str__(self) -> str:
        """ Return the value. This is just a convenience function.

        Note:
            This is backwards of the usual convention of returning the name, but the value is
            more meaningful here. The name can always be accessed with ``.name``.
        """
        return str(self.value)

    def display_str(self) -> str:
        """ Return a formatted string for display in plots, etc. Includes latex formatting. """
        # Ensure that the spacing in the words is carried over in the LaTeX
        val = self.value.replace(" ", r"\;")
        return rf"\mathrm{{{val}}}"

    # Handle YAML serialization
    to_yaml = classmethod(yaml.enum_to_yaml)

    @classmethod
    def from_yaml(cls, constructor: yaml.Constructor, node: yaml.ruamel.yaml.nodes.ScalarNode) -> "ExperimentLabel":
        """ Decode YAML representer. """
        return cls(node.value)

#########################
## Helpers and containers
#########################
@dataclass(frozen = True)
class SelectedRange:
    """ Helper for selected ranges. """
    min: float
    max: float

    def __iter__(self) -> Iterator[Tuple[str, float]]:
        for k, v in vars(self).items():
            yield k, v

    def contains(self, value: Union[float, np.ndarray]) -> Union[bool, np.ndarray]:
        """ Check whether the value(s) are strictly inside of the range. """
        return (value > self.min) & (value < self.max)

    @classmethod
    def from_yaml(cls, constructor: yaml.Constructor,
                  data: Union[yaml.ruamel.yaml.nodes.MappingNode, yaml.ruamel.yaml.nodes.SequenceNode]) -> "SelectedRange":
        """ Decode YAML representer.

        Expected block is of the form:

        .. code-block:: yaml

            val: !SelectedRange [1, 5]

        or alternatively (which will be used when YAML is dumping the object):

        .. code-block:: yaml

            val: !SelectedRange
                min: 1
                max: 5

        which will yield:

        .. code-block:: python

            >>> val == SelectedRange(min = 1, max = 5)
        """
        # We've just passed a list, so just reconstruct it assuming that the arguments are in order.
        if isinstance(data, yaml.ruamel.yaml.nodes.SequenceNode):
            values = [constructor.construct_object(v) for v in data.value]
            return cls(*values)

        # Otherwise, we should have received a MappingNode.
        # NOTE: Just calling ``dict(...)`` would not be sufficient because the nodes wouldn't be converted
        arguments = {
            constructor.construct_object(key_node): constructor.construct_object(value_node)
            for key_node, value_node in data.value
        }
        return cls(**arguments)

#########
# Classes
#########
class CollisionEnergy(enum.Enum):
    """ Define the available collision system energies.

    Defined in TeV.
    """
    zero_point_two = 0.2

    def __str__(self) -> str:
        """ Returns a string of the value. """
        return str(self.value)

    def display_str(self) -> str:
        """ Return a formatted string for display in plots, etc. Includes latex formatting. """
        # STAR quotes the energy in GeV.
        return r"\sqrt{s_{\mathrm{NN}}} = %(energy)s\:\mathrm{GeV}" % {"energy": int(self.value * 1000)}

    # Handle YAML serialization
    to_yaml = classmethod(yaml.enum_to_yaml)

    @classmethod
    def from_yaml(cls, constructor: yaml.Constructor, data: yaml.ruamel.yaml.nodes.SequenceNode) -> "CollisionEnergy":
        """ Decode YAML representer. """
        return cls(float(data.value))

class CollisionSystem(enum.Enum):
    """ Define the collision system """
    NA = "Invalid collision system"
    pp = "pp"
    AuAu = r"Au \textendash Au"

    def __str__(self) -> str:
        """ Return a string of the name of the system. """
        return self.name

    def display_str(self) -> str:
        """ Return a formatted string for display in plots, etc. Includes latex formatting. """
        return rf"\mathrm{{{self.value}}}"

    # Handle YAML serialization
    to_yaml = classmethod(yaml.enum_to_yaml)
    from_yaml = classmethod(yaml.enum_from_yaml)

class EventActivity(enum.Enum):
    """ Define the event activity.

    Values are ranges of the centrality bin, where -1 is defined as the full range!
    """
    inclusive = SelectedRange(min = -1, max = -1)
    central = SelectedRange(min = 0, max = 12)
    minimum_bias = SelectedRange(min = 0, max = 80)

    @property
    def value_range(self) -> SelectedRange:
        """ Return the event activity range.

        Returns:
            The min and max of the event activity range.
        """
        # Help out mypy...
        return cast(SelectedRange, self.value)

    def __str__(self) -> str:
        """ Name of the event activity range. """
        return str(self.name)

    def display_str(self) -> str:
        """ Get the event activity range as a formatted string. Includes latex formatting. """
        ret_val = ""
        # For inclusive, we want to return an empty string.
        if self != EventActivity.inclusive:
            ret_val = r"%(min)s \textendash %(max)s \%%" % dict(self.value_range)
        return ret_val

    # Handle YAML serialization
    to_yaml = classmethod(yaml.enum_to_yaml)
    from_yaml = classmethod(yaml.enum_from_yaml)

class TriggerType(enum.Enum):
    """ Trigger particle species, stored by PDG code. """
    photon = PID_PHOTON
    neutral_pion = PID_NEUTRAL_PION

    def __str__(self) -> str:
        """ Return the name of the trigger type. """
        return self.name

    def display_str(self) -> str:
        """ Return the trigger particle for display using latex. """
        if self == TriggerType.photon:
            return r"\gamma_{\mathrm{dir}}"
        return r"\pi^{0}"

    # Handle YAML serialization
    to_yaml = classmethod(yaml.enum_to_yaml)
    from_yaml = classmethod(yaml.enum_from_yaml)

@dataclass
class SelectedAnalysisOptions:
    collision_energy: CollisionEnergy
    collision_system: CollisionSystem
    event_activity: EventActivity

    def astuple(self) -> Tuple[Any, ...]:
        """ Tuple of the selected analysis option values. """
        return tuple(dict(self).values())

    def asdict(self) -> Dict[str, Any]:
        """ Dict of the selected analysis option values. """
        return dict(self)

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        for k, v in vars(self).items():
            yield k, v

# For use with overriding configuration values
SetOfPossibleOptions = SelectedAnalysisOptions(CollisionEnergy,  # type: ignore
                                               CollisionSystem,
                                               EventActivity)
