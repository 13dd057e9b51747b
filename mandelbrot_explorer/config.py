"""
Settings for the Mandelbrot explorer.

Defaults live in settings.json next to this module. load_settings()
reads them, falling back to the built-in values when the file is
missing or unreadable, and applies any overrides given by the caller
(for example from the command line).
"""

import json
import logging
import os

logger = logging.getLogger(__name__)

SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')

DEFAULT_SETTINGS = {
    'resolution': 400,
    're_bounds': [-2.0, 2.0],
    'im_bounds': [-2.0, 2.0],
    'max_iterations': 255,
    'pan_fraction': 0.1,
    'zoom_fraction': 0.1,
    'budget_step': 10,
    'colormap': 'Grayscale',
    'parallel': True,
}


def _read_settings_file(path):
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not load %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a JSON object", path)
        return {}
    unknown = set(data) - set(DEFAULT_SETTINGS)
    if unknown:
        logger.warning("Ignoring unknown settings in %s: %s", path, sorted(unknown))
    return {k: v for k, v in data.items() if k in DEFAULT_SETTINGS}


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_settings(settings):
    """
    Check that a settings dict describes a usable explorer.

    Raises:
        ValueError if any value has the wrong type or is out of range
    """
    for key in ('resolution', 'max_iterations', 'budget_step'):
        value = settings[key]
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ValueError(f"{key} must be a positive integer, got {value!r}")
    for key in ('re_bounds', 'im_bounds'):
        bounds = settings[key]
        if not isinstance(bounds, (list, tuple)) or len(bounds) != 2 or \
                not all(_is_number(b) for b in bounds):
            raise ValueError(f"{key} must be a pair of numbers, got {bounds!r}")
        low, high = bounds
        if not low < high:
            raise ValueError(f"{key} must be increasing, got {bounds!r}")
    for key in ('pan_fraction', 'zoom_fraction'):
        value = settings[key]
        if not _is_number(value) or not 0.0 < value < 0.5:
            raise ValueError(f"{key} must be between 0 and 0.5, got {value!r}")
    if not isinstance(settings['colormap'], str):
        raise ValueError(f"colormap must be a name, got {settings['colormap']!r}")
    if not isinstance(settings['parallel'], bool):
        raise ValueError(f"parallel must be true or false, got {settings['parallel']!r}")


def load_settings(path=None, **overrides):
    """
    Load settings from a JSON file and apply overrides.

    Args:
        path: Settings file (default: settings.json beside this module)
        **overrides: Values that take precedence over the file; None
            values are ignored so unset CLI options can be passed through

    Returns:
        dict with every key of DEFAULT_SETTINGS

    Raises:
        ValueError if an override names an unknown setting or the merged
        settings are invalid
    """
    settings = dict(DEFAULT_SETTINGS)
    settings.update(_read_settings_file(path or SETTINGS_PATH))
    for key, value in overrides.items():
        if key not in DEFAULT_SETTINGS:
            raise ValueError(f"Unknown setting {key!r}")
        if value is not None:
            settings[key] = value
    validate_settings(settings)
    return settings
