import argparse
import json
from typing import Dict, Optional

from .error import ConfigurationError
from .schemas import DEFAULTS, validate_config
from .util import filepath, logger


def non_negative_int(value) -> int:
    """
    Raises:
        argparse.ArgumentTypeError: the value is not a whole number >= 0
    """
    try:
        num = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError('Must be a whole number')
    if num < 0:
        raise argparse.ArgumentTypeError('Must be a whole number >= 0')
    return num


def non_negative_float(value) -> float:
    try:
        num = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError('Must be a number')
    if num < 0:
        raise argparse.ArgumentTypeError('Must be a number >= 0')
    return num


class CustomHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """
    subclass the default help formatter to stop default printing for required arguments
    """

    def _format_args(self, action, default_metavar):
        if action.metavar is None:
            action.metavar = get_metavar(action.type)
        return super(CustomHelpFormatter, self)._format_args(action, default_metavar)

    def _get_help_string(self, action):
        if action.required or action.default is None:
            return action.help
        return super(CustomHelpFormatter, self)._get_help_string(action)

    def add_arguments(self, actions):
        # sort the arguments alphanumerically so they print in the help that way
        actions = sorted(actions, key=lambda x: getattr(x, 'option_strings'))
        super(CustomHelpFormatter, self).add_arguments(actions)


def get_metavar(arg_type):
    """
    For a given argument type, returns the string to be used for the metavar argument in
    add_argument

    Example:
        >>> get_metavar(int)
        'INT'
    """
    if arg_type in [non_negative_float, float]:
        return 'FLOAT'
    elif arg_type in [non_negative_int, int]:
        return 'INT'
    elif arg_type == filepath:
        return 'FILEPATH'
    return None


def load_config(filename: Optional[str] = None, **overrides) -> Dict:
    """
    read the JSON config (if given), apply any overriding values and fill in the defaults

    Args:
        filename: path to the JSON config file
        overrides: config values to set. None values are ignored

    Raises:
        ConfigurationError: the config does not match the schema
    """
    config: Dict = {}
    if filename:
        logger.info(f'loading: {filename}')
        with open(filename, 'r') as fh:
            config = json.load(fh)
    config.update({k: v for k, v in overrides.items() if v is not None})
    try:
        validate_config(config)
    except Exception as err:
        short_msg = '. '.join(
            [line for line in str(err).split('\n') if line.strip()][:3]
        )  # these can get super long
        raise ConfigurationError(short_msg)
    for key, value in sorted(config.items()):
        if value != DEFAULTS.get(key):
            logger.info(f'config: {key} = {repr(value)}')
    return config
