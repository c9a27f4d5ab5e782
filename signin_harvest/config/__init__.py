#!/usr/bin/env python3
"""
Sign-in Configuration Management
"""

from .client_options import (
    ClientOptions,
    SigninOptions,
    SigninArgs,
    apply_env_overrides,
    load_options
)
from .site_configs import SitePreset, get_predefined_site_configs, load_site_preset

__all__ = [
    'ClientOptions',
    'SigninOptions',
    'SigninArgs',
    'apply_env_overrides',
    'load_options',
    'SitePreset',
    'get_predefined_site_configs',
    'load_site_preset'
]
