"""
Persisting the nym bin directory onto the user's PATH.
"""

from .path_registration import PathRegistrar, register_bin_path

__all__ = ["PathRegistrar", "register_bin_path"]
