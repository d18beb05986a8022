#!/usr/bin/env python

""" Store and retrieve events as trees stored in numpy arrays.

The events are stored in two files: one containing the event properties (one entry per event),
and a flat particles tree, where each particle stores the index of the event to which it belongs.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

import dataclasses
import logging
import numpy as np
import os
from typing import Any, Iterable, List, Optional, Tuple

from gamma_hadron.event_gen import generator

logger = logging.getLogger(__name__)

DTYPE_STORED_PARTICLES = np.dtype(generator.DTYPE_PARTICLES.descr + [("event_index", np.int64)])

def tree_filenames(output_prefix: str, name: str) -> Tuple[str, str]:
    """ Determine the filenames of the event properties and particles trees.

    Args:
        output_prefix: Directory where the trees are stored.
        name: Base name of the trees.
    Returns:
        (event properties filename, particles filename)
    """
    return (
        os.path.join(output_prefix, f"{name}_event_properties.npy"),
        os.path.join(output_prefix, f"{name}_particles.npy"),
    )

def save_tree(arr: np.ndarray, filename: str) -> str:
    """ Write the tree stored in a numpy array to a file.

    Args:
        arr: Tree stored in an array to write out.
        filename: Filename under which the tree should be saved.
    Returns:
        The filename under which the tree was written.
    """
    # Determine filename
    if not filename.endswith(".npy"):
        filename += ".npy"
    directory = os.path.dirname(filename)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)

    # Write
    with open(filename, "wb") as f:
        np.save(f, arr)

    return filename

def write_events(events: Iterable[generator.Event], output_prefix: str, name: str = "events") -> Tuple[str, str]:
    """ Write events to file.

    Args:
        events: Events to be written.
        output_prefix: Directory where the trees will be stored.
        name: Base name of the trees. Default: "events".
    Returns:
        (event properties filename, particles filename)
    """
    event_properties: List[Tuple[Any, ...]] = []
    particles: List[np.ndarray] = []
    for event_index, (properties, event_particles) in enumerate(events):
        event_properties.append(dataclasses.astuple(properties))
        stored = np.zeros(len(event_particles), dtype = DTYPE_STORED_PARTICLES)
        for field_name in generator.DTYPE_PARTICLES.names:
            stored[field_name] = event_particles[field_name]
        stored["event_index"] = event_index
        particles.append(stored)

    # Only convert to numpy arrays here because it's not efficient to expand existing numpy arrays.
    properties_arr = np.array(event_properties, dtype = generator.DTYPE_EVENT_PROPERTIES)
    particles_arr = np.concatenate(particles) if particles else np.zeros(0, dtype = DTYPE_STORED_PARTICLES)

    properties_filename, particles_filename = tree_filenames(output_prefix, name)
    save_tree(properties_arr, properties_filename)
    save_tree(particles_arr, particles_filename)
    logger.info(f"Wrote {len(properties_arr)} events with {len(particles_arr)} particles to {output_prefix}")

    return properties_filename, particles_filename

class EventFileReader:
    """ Read events which were previously stored with ``write_events``.

    Provides the same interface as the generators, so it can be used in their place.

    Args:
        input_prefix: Directory where the trees are stored.
        name: Base name of the trees. Default: "events".

    Attributes:
        input_prefix: Directory where the trees are stored.
        name: Base name of the trees.
        initialized: True if the trees have been loaded.
        event_properties: Event properties tree. Available after setup.
        particles: Particles tree. Available after setup.
    """
    def __init__(self, input_prefix: str, name: str = "events"):
        self.input_prefix = input_prefix
        self.name = name
        self.initialized = False
        self.event_properties: np.ndarray
        self.particles: np.ndarray
        self._boundaries: np.ndarray

    @property
    def n_events(self) -> int:
        return len(self.event_properties)

    def setup(self) -> bool:
        """ Load the stored trees.

        Returns:
            True if the trees were loaded successfully.
        Raises:
            ValueError: If the particles tree refers to events which aren't available or isn't sorted.
        """
        properties_filename, particles_filename = tree_filenames(self.input_prefix, self.name)
        self.event_properties = np.load(properties_filename)
        self.particles = np.load(particles_filename)

        event_index = self.particles["event_index"]
        if len(event_index) and (np.any(np.diff(event_index) < 0) or event_index[-1] >= len(self.event_properties) or event_index[0] < 0):
            raise ValueError(
                f"Particles stored in {particles_filename} are inconsistent with the {len(self.event_properties)}"
                " stored events."
            )
        # Determine where each event starts and ends in the flat particles tree.
        self._boundaries = np.searchsorted(event_index, np.arange(len(self.event_properties) + 1), side = "left")

        logger.info(f"Loaded {self.n_events} events from {properties_filename}")
        self.initialized = True
        return self.initialized

    def __call__(self, n_events: Optional[int] = None) -> Iterable[generator.Event]:
        """ Provide the stored events.

        Args:
            n_events: Number of events to provide. Default: None, which corresponds to all of the stored events.
        Returns:
            Generator to provide the requested number of events.
        """
        if not self.initialized:
            raise RuntimeError("The event file reader was not yet initialized.")
        if n_events is None or n_events > self.n_events:
            if n_events is not None:
                logger.warning(f"Requested {n_events} events, but only {self.n_events} are available.")
            n_events = self.n_events

        for i in range(n_events):
            stored = self.event_properties[i]
            event_properties = generator.EventProperties(
                **{name: stored[name].item() for name in generator.DTYPE_EVENT_PROPERTIES.names}
            )
            stored_particles = self.particles[self._boundaries[i]:self._boundaries[i + 1]]
            particles = generator.empty_particles(len(stored_particles))
            for field_name in generator.DTYPE_PARTICLES.names:
                particles[field_name] = stored_particles[field_name]
            yield event_properties, particles
