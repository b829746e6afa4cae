"""Core constants for argmemo.

This module defines library-wide invariants such as:
- The attribute under which an owner carries its cache state
- Environment variable names read by the config layer
- The library version (recorded in saved configs)
"""

from __future__ import annotations

__version__ = "0.3.0"

# Owner state
# Attribute holding the OwnerCacheState on every memoizing owner.
# Classes using __slots__ without __dict__ must list this name in their slots.
STATE_ATTR = "_argmemo_state"

# Attribute holding the OwnerCacheState of class-scope methods on a class.
# Separate from STATE_ATTR so it never replaces a __slots__ member.
CLASS_STATE_ATTR = "_argmemo_class_state"

# Environment
# Path of a YAML config file loaded by the first get_config() call
ENV_CONFIG_PATH = "ARGMEMO_CONFIG"

# Pseudo-parameter names for callables whose results are one-shot objects
BLOCK_GENERATOR = "yield"
BLOCK_COROUTINE = "await"
