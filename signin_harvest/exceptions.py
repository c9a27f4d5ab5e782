#!/usr/bin/env python3
"""
Sign-in Exception Classes
"""

class SigninHarvestError(Exception):
    """Base exception for sign-in and cookie harvesting errors"""
    pass

class ConfigurationError(SigninHarvestError):
    """Raised when client options, filters or listeners are invalid"""
    pass

class LifecycleError(SigninHarvestError):
    """Raised when a session-dependent operation is used before launch"""
    pass

class NavigationError(SigninHarvestError):
    """Raised when the page fails to load or a navigation never settles"""
    pass

class SessionError(SigninHarvestError):
    """Raised when the browser session reports a page-level error"""
    pass

class SigninFailedError(SigninHarvestError):
    """Raised when a sign-in attempt fails for any other reason"""
    pass

class ConcurrentSigninError(SigninHarvestError):
    """Raised when signin() is called while another attempt is in flight"""
    pass
