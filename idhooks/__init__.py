# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Registration and authentication hooks for a customer identity platform."""

from idhooks.config import Settings, load_settings
from idhooks.hooks import HOOK_TYPES, HookKind, create_hook
from idhooks.runtime import HookRunner


__version__ = "0.1.0"

__all__ = [
    "HOOK_TYPES",
    "HookKind",
    "HookRunner",
    "Settings",
    "__version__",
    "create_hook",
    "load_settings",
]
