"""
HerVoice - Personal Safety Companion Backend

This package provides the account services behind the HerVoice
mobile web application: signup, login, session-token validation
and password reset requests.

IMPORTANT: This is a safety-critical system for vulnerable users.
Credentials and tokens must never leave the authentication layer.
"""

__version__ = "0.1.0"
__author__ = "HerVoice Engineering Team"
