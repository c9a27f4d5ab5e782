#!/usr/bin/env python3
"""
Sign-in Client Configuration Models
"""

import os
import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, NamedTuple, Optional, Union
from urllib.parse import urljoin

import yaml
from dotenv import load_dotenv

from ..exceptions import ConfigurationError
from ..inputs import InputSpec, Selector, as_input_spec
from .site_configs import load_site_preset

logger = logging.getLogger(__name__)

INPUT_FIELDS = ('username', 'password', 'submit')

@dataclass(frozen=True)
class ClientOptions:
    """Immutable client configuration; merge() is the only way to change it"""
    debug: bool = False
    signin_url: str = ''
    username: InputSpec = Selector('')
    password: InputSpec = Selector('')
    submit: InputSpec = Selector('')
    type_delay: float = 0.05
    click_delay: float = 0.0
    screenshot_dir: Optional[str] = None

    def __post_init__(self):
        for name in INPUT_FIELDS:
            object.__setattr__(self, name, as_input_spec(getattr(self, name), name))

        if not isinstance(self.signin_url, str):
            raise ConfigurationError("Option 'signin_url' must be a string")
        for name in ('type_delay', 'click_delay'):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or value < 0:
                raise ConfigurationError(f"Option '{name}' must be a non-negative number")

    @classmethod
    def field_names(cls):
        return {f.name for f in fields(cls)}

    def merge(self, **changes) -> 'ClientOptions':
        """Return a new ClientOptions with the given fields replaced"""
        unknown = set(changes) - self.field_names()
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ClientOptions':
        """Create ClientOptions from the 'signin' section of a config file"""
        config_dict = dict(config_dict)
        selectors = config_dict.pop('selectors', None) or {}
        site = config_dict.pop('site', None)

        unknown = set(config_dict) - cls.field_names()
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(unknown))}")

        if site:
            options = cls.for_site(site, config_dict.pop('signin_url', ''))
        else:
            options = cls()

        for name in INPUT_FIELDS:
            if selectors.get(name):
                config_dict[name] = selectors[name]

        return options.merge(**config_dict)

    @classmethod
    def for_site(cls, site: str, signin_url: str = '', **overrides) -> 'ClientOptions':
        """
        Build options from a predefined site preset

        Args:
            site: Preset name or domain
            signin_url: Site base URL, joined with the preset's login path
            **overrides: Any other ClientOptions fields

        Returns:
            ClientOptions for the site
        """
        preset = load_site_preset(site)
        if preset is None:
            raise ConfigurationError(f"No predefined sign-in preset for {site!r}")

        if preset.login_path and signin_url:
            signin_url = urljoin(signin_url, preset.login_path)

        options = cls(
            signin_url=signin_url,
            username=preset.username,
            password=preset.password,
            submit=preset.submit
        )
        return options.merge(**overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization; callbacks appear as None"""
        return {
            'debug': self.debug,
            'signin_url': self.signin_url,
            'selectors': {
                name: getattr(self, name).selector if isinstance(getattr(self, name), Selector) else None
                for name in INPUT_FIELDS
            },
            'type_delay': self.type_delay,
            'click_delay': self.click_delay,
            'screenshot_dir': self.screenshot_dir
        }

class SigninArgs(NamedTuple):
    """Argument triple handed to every lifecycle listener"""
    username: str
    password: str
    options: 'SigninOptions'

@dataclass(frozen=True)
class SigninOptions:
    """Per-call sign-in options"""
    jump: bool = True
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def coerce(cls, options: Union['SigninOptions', Mapping[str, Any], None]) -> 'SigninOptions':
        if options is None:
            return cls()
        if isinstance(options, SigninOptions):
            return options
        if isinstance(options, Mapping):
            extra = dict(options)
            jump = extra.pop('jump', True)
            return cls(jump=bool(jump), extra=extra)
        raise ConfigurationError(f"Sign-in options must be a mapping, got {type(options).__name__}")

def _to_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')

ENV_MAPPINGS = {
    'SIGNIN_HARVEST_URL': (('signin_url',), str),
    'SIGNIN_HARVEST_DEBUG': (('debug',), _to_bool),
    'SIGNIN_HARVEST_USERNAME_SELECTOR': (('selectors', 'username'), str),
    'SIGNIN_HARVEST_PASSWORD_SELECTOR': (('selectors', 'password'), str),
    'SIGNIN_HARVEST_SUBMIT_SELECTOR': (('selectors', 'submit'), str),
    'SIGNIN_HARVEST_TYPE_DELAY': (('type_delay',), float),
    'SIGNIN_HARVEST_SCREENSHOT_DIR': (('screenshot_dir',), str),
}

def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to the 'signin' section."""
    for env_var, (keys, converter) in ENV_MAPPINGS.items():
        value = os.getenv(env_var)
        if value is None:
            continue
        try:
            converted_value = converter(value)
        except (ValueError, TypeError) as e:
            logger.warning(f"Invalid value for {env_var}: {value} - {e}")
            continue

        section = config
        for key in keys[:-1]:
            section = section.setdefault(key, {})
        section[keys[-1]] = converted_value

    return config

def load_options(config_path: str = 'signin.yaml') -> ClientOptions:
    """Load client options from YAML file with environment variable overrides."""
    load_dotenv()

    config: Dict[str, Any] = {}
    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Could not load config from {config_path}: {e}") from e

        config = raw.get('signin', {}) if isinstance(raw, dict) else None
        if not isinstance(config, dict):
            raise ConfigurationError(f"'signin' section in {config_path} must be a mapping")
    else:
        logger.debug(f"No config file at {config_path}, using defaults")

    config = apply_env_overrides(dict(config))
    return ClientOptions.from_dict(config)
