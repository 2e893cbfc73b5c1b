"""Consensus spec definitions for the forks the harness speaks.

Note: The 'types' module must be imported after calling constants.set_preset()
to ensure SSZ types have correct sizes for the chosen preset.
"""

from . import constants
from .network_config import FORK_NAMES, Spec

__all__ = ["constants", "FORK_NAMES", "Spec"]
