from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .cache import PluginCache
    from .models.plugin import PluginRequirement

logger = logging.getLogger(__name__)


def is_satisfied(requirement: PluginRequirement, cache: PluginCache, force: bool = False) -> bool:
    """Whether the cache already holds a plugin that satisfies ``requirement``.

    A pinned version must be present exactly. An unpinned requirement is satisfied
    by any installed version of the same kind and name. ``force`` (reinstall)
    makes every requirement unsatisfied.
    """
    if force:
        return False
    if requirement.version is not None:
        if cache.has_exact(requirement.kind, requirement.name, requirement.version):
            logger.debug("%s skipping install (existing == match)", requirement.label)
            return True
        return False
    if cache.has_at_least(requirement.kind, requirement.name, None):
        logger.debug("%s skipping install (existing >= match)", requirement.label)
        return True
    return False
