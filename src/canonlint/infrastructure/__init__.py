"""Infrastructure domain: project configuration and the file watcher.

Note: ``canonlint.infrastructure.watcher`` is not re-exported here because it
imports ``watchfiles`` lazily and depends on the audit orchestrator.  Import it
directly::

    from canonlint.infrastructure.watcher import watch
"""

from canonlint.infrastructure.config import (
    CONFIG_FILENAMES,
    CanonConfig,
    find_config_file,
    load_config,
)

__all__ = [
    "CONFIG_FILENAMES",
    "CanonConfig",
    "find_config_file",
    "load_config",
]
