"""
BACKEND PACKAGE

Stateless Flask API exposing otp_engine code generation and verification.
"""

from .app import create_app

__all__ = ['create_app']
