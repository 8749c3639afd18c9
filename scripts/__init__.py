"""
Scripts package for the device inventory runbooks.

Subpackages:
- runbooks: Reconciliation runbooks between Intune, Autopilot, Snipe-IT and Action1
"""

__version__ = "0.1.0"
