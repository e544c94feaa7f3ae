"""
Link registry for NetTraffic.

Tracks the set of live network links reported by the link-change notifier.
Only the engine's event loop touches the registry; notifier threads post
messages instead of calling into it.
"""

import logging
from typing import Dict, Hashable, Optional, Set

from nettraffic.core.models import Link

logger = logging.getLogger("NetTraffic.LinkRegistry")


class LinkRegistry:
    """
    Mapping of link handle to Link with a "set changed" latch.

    The latch starts set so the first rate computation after start-up does not
    measure a delta against an empty baseline.
    """

    def __init__(self) -> None:
        self._links: Dict[Hashable, Link] = {}
        self._changed: bool = True

    def __len__(self) -> int:
        return len(self._links)

    def __contains__(self, handle: Hashable) -> bool:
        return handle in self._links

    def get(self, handle: Hashable) -> Optional[Link]:
        return self._links.get(handle)

    def add_or_update(self, handle: Hashable, interface_name: Optional[str]) -> None:
        """Inserts or replaces the link for `handle` and marks the set as changed."""
        previous = self._links.get(handle)
        self._links[handle] = Link(handle=handle, interface_name=interface_name)
        self._changed = True
        if previous is None:
            logger.debug("Link %r added (interface=%s)", handle, interface_name)
        else:
            logger.debug("Link %r updated (interface %s -> %s)", handle, previous.interface_name, interface_name)

    def remove(self, handle: Hashable) -> None:
        """
        Removes the link for `handle` if present.

        The set is marked as changed even for unknown handles: link events may
        race, and a removal must never hide an earlier structural change.
        """
        removed = self._links.pop(handle, None)
        self._changed = True
        if removed is None:
            logger.debug("Removal of unknown link %r ignored", handle)
        else:
            logger.debug("Link %r removed (interface=%s)", handle, removed.interface_name)

    def snapshot_interface_names(self) -> Set[str]:
        """Returns the distinct, non-null interface names currently registered."""
        return {link.interface_name for link in self._links.values() if link.interface_name is not None}

    def consume_changed_flag(self) -> bool:
        """Returns the changed flag and clears it."""
        changed = self._changed
        self._changed = False
        return changed
