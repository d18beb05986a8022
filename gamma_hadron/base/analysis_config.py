#!/usr/bin/env python

""" Manages configuration of the gamma-hadron analysis

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

import argparse
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple

from pachyderm import generic_config
from pachyderm import yaml

from gamma_hadron.base import analysis_objects
from gamma_hadron.base import params

logger = logging.getLogger(__name__)

def override_options(config: generic_config.DictLike, selected_options: params.SelectedAnalysisOptions,
                     config_containing_override: generic_config.DictLike = None) -> generic_config.DictLike:
    """ Override options for the gamma-hadron analysis.

    Selected options include: (energy, collision_system, event_activity). Note that the order is
    extremely important! If one of them is not specified in the override, then it will be skipped.

    Args:
        config: The dict-like configuration from ruamel.yaml which should be overridden.
        selected_options: The selected analysis options. They will be checked in the order with which
            they are passed, so make certain that it matches the order in the configuration file!
        config_containing_override (CommentedMap): The dict-like config containing the override options in
            a map called "override". If it is not specified, it will look for it in the main config.
    Returns:
        dict: The updated configuration
    """
    config = generic_config.override_options(
        config, selected_options.astuple(),
        set_of_possible_options = params.SetOfPossibleOptions.astuple(),
        config_containing_override = config_containing_override,
    )
    config = generic_config.simplify_data_representations(config)

    return config

def determine_selected_options_from_kwargs(
        args: Optional[List[Any]] = None,
        description: str = "Gamma-hadron {task_name}.",
        add_options_function: Optional[Callable[[argparse.ArgumentParser], Any]] = None,
        **kwargs: str) -> Tuple[str, params.SelectedAnalysisOptions, argparse.Namespace]:
    """ Determine the selected analysis options from the command line arguments.

    Defaults are equivalent to None or False so values can be added in the validation
    function if argument values are not specified.

    Args:
        args (list): Arguments to parse. Default: None (which will then use sys.argv)
        description (str): Help description for arguments
        add_options_function (func): Function which takes the ArgumentParser() object and adds
            arguments.
        kwargs (dict): Additional arguments to format the help description. Often contains ``task_name``
            to specify the task name.
    Returns:
        tuple: (config_filename, selected_analysis_options, argparse.Namespace).
            The args are return for handling custom arguments added with add_options_function.
    """
    # Make sure there is always a task name
    if "task_name" not in kwargs:
        kwargs["task_name"] = "analysis"

    # Setup parser
    parser = argparse.ArgumentParser(description = description.format(**kwargs))
    # General options
    parser.add_argument("-c", "--configFilename", metavar="configFilename",
                        type = str, default = "config/analysis_config.yaml",
                        help="Path to config filename")
    parser.add_argument("-e", "--energy", metavar = "energy",
                        type = float, default = 0.0,
                        help = "Collision energy")
    parser.add_argument("-s", "--collisionSystem", metavar = "collisionSystem",
                        type = str, default = "",
                        help = "Collision system")
    parser.add_argument("-a", "--eventActivity", metavar = "eventActivity",
                        type = str, default = "",
                        help = "Event activity")

    # Extension for additional arguments
    if add_options_function:
        add_options_function(parser)

    # Parse arguments
    parsed_args = parser.parse_args(args)

    # Even though we will need to create a new selected analysis options tuple, we store the
    # return values in one for convenience.
    selected_analysis_options = params.SelectedAnalysisOptions(collision_energy = parsed_args.energy,
                                                               collision_system = parsed_args.collisionSystem,
                                                               event_activity = parsed_args.eventActivity)
    return (parsed_args.configFilename, selected_analysis_options, parsed_args)

def validate_arguments(selected_args: params.SelectedAnalysisOptions) -> params.SelectedAnalysisOptions:
    """ Validate arguments passed to the analysis task. Converts str and float types to enumerations.

    Note:
        If the selections are not specified, it will define to 200 GeV minimum bias Au--Au collisions,
        which corresponds to the 0-80% centrality window of the analysis.

    Args:
        selected_args: Selected analysis options from args or otherwise.
    Returns:
        The validated selected options.
    """
    # Validate the given arguments.
    # The general strategy is as follows:
    #   Input:
    #   - If the value is None, use the default.
    #   - If the value is given, then use the given value.
    #   Enum object creation:
    #   - Check if the input is already of the enum type. If so, use it.
    #   - If not, initialize the enum value using the given value.

    # Energy. Default: 0.2
    energy = selected_args.collision_energy if selected_args.collision_energy else 0.2
    # Retrieves the enum by value
    energy = energy if type(energy) is params.CollisionEnergy else params.CollisionEnergy(energy)
    # Collision system. Default: AuAu
    collision_system = selected_args.collision_system if selected_args.collision_system else "AuAu"
    collision_system = collision_system if type(collision_system) is params.CollisionSystem else params.CollisionSystem[collision_system]  # type: ignore
    # Event activity. Default: minimum_bias
    event_activity = selected_args.event_activity if selected_args.event_activity else "minimum_bias"
    event_activity = event_activity if type(event_activity) is params.EventActivity else params.EventActivity[event_activity]  # type: ignore

    return params.SelectedAnalysisOptions(
        collision_energy = energy,
        collision_system = collision_system,
        event_activity = event_activity,
    )

def read_config_using_selected_options(task_name: str, config_filename: str,
                                       selected_analysis_options: params.SelectedAnalysisOptions,
                                       additional_classes_to_register: Optional[Sequence[Any]] = None) -> generic_config.DictLike:
    """ Read the YAML config and override the values using the task config.

    We combine these steps together because we never want to use a configuration
    without overriding the values based on the selected analysis options.

    Args:
        task_name: Name of the analysis task.
        config_filename: Filename of the YAML config.
        selected_analysis_options: Selected analysis options. They must already be validated.
        additional_classes_to_register: Additional classes to register from YAML object
            construction. Default: None.
    Returns:
        The YAML configuration.
    """
    # Validation
    if additional_classes_to_register is None:
        additional_classes_to_register = []

    # Classes to register for reconstruction within YAML
    classes_to_register: Set[Any] = set()
    # Add requested iterables
    classes_to_register.update(additional_classes_to_register)
    logger.debug(f"classes_to_register: {classes_to_register}")
    # Add in all classes defined in the params and analysis_objects module
    yml = yaml.yaml(modules_to_register = [params, analysis_objects], classes_to_register = classes_to_register)

    # Load and override the configuration
    config = generic_config.load_configuration(
        yaml = yml,
        filename = config_filename,
    )
    config = override_options(
        config = config,
        selected_options = selected_analysis_options,
        config_containing_override = config[task_name]
    )

    return config

def determine_formatting_options(task_name: str, config: generic_config.DictLike,
                                 selected_analysis_options: params.SelectedAnalysisOptions) -> Dict[str, Any]:
    """ Determine the formatting dict with the selected analysis options.

    Beyond the selected analysis options, it is provides additional information, including task name,
    analysis name, etc.

    Args:
        task_name: Name of the analysis task.
        config: Contains the dict-like analysis configuration. Note that it must already be
            fully configured and overridden.
        selected_analysis_options: Selected analysis options.
    Returns:
        Dict containing the formatting options.
    """
    formatting_options = {}
    formatting_options["task_name"] = task_name
    formatting_options["analysis_name"] = config.get("analysisName", "analysis")

    # We want to convert the enum values into strings for formatting. Performed with a dict comprehension.
    formatting_options.update({k: str(v) for k, v in selected_analysis_options})

    return formatting_options
