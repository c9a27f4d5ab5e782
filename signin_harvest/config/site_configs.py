#!/usr/bin/env python3
"""
Predefined Sign-in Selector Presets
"""

from dataclasses import dataclass
from typing import Dict, Optional

@dataclass(frozen=True)
class SitePreset:
    """Selectors for a known login page"""
    name: str
    domain: str
    username: str
    password: str
    submit: str
    login_path: Optional[str] = None

def get_predefined_site_configs() -> Dict[str, SitePreset]:
    """Get predefined selector presets for common sites"""

    configs = {}

    configs['github'] = SitePreset(
        name='github',
        domain='github.com',
        login_path='/login',
        username='input#login_field',
        password='input#password',
        submit='input[type="submit"]'
    )

    # WordPress runs on any host
    configs['wordpress'] = SitePreset(
        name='wordpress',
        domain='*',
        login_path='/wp-login.php',
        username='input#user_login',
        password='input#user_pass',
        submit='input#wp-submit'
    )

    configs['confluence'] = SitePreset(
        name='confluence',
        domain='*',
        login_path='/login.action',
        username='input#os_username',
        password='input#os_password',
        submit='input#loginButton'
    )

    configs['atlassian'] = SitePreset(
        name='atlassian',
        domain='*.atlassian.net',
        username='input#username',
        password='input#password',
        submit='button[type="submit"]'
    )

    return configs

def load_site_preset(key: str) -> Optional[SitePreset]:
    """
    Find a preset by name or by domain

    Args:
        key: Preset name ('github') or site domain ('acme.atlassian.net')

    Returns:
        SitePreset if one matches, None otherwise
    """
    predefined = get_predefined_site_configs()
    key = key.lower()

    # Name match first
    if key in predefined:
        return predefined[key]

    for preset in predefined.values():
        if preset.domain == key:
            return preset
        if preset.domain.startswith('*.'):
            # Wildcard match
            if key.endswith(preset.domain[1:]):
                return preset

    return None
