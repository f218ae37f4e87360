"""
Authentication module for the clinic booking system.

This module provides authentication functionality including:
- Account registration with email verification
- Login with signed session tokens
- Password reset through one-shot email links
- Bearer token guard for protected routes
"""
