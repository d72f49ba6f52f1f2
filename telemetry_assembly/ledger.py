"""
Resource ledger for assembly-time teardown.

Every shutdown-bearing object created during assembly is handed to the
ledger the moment it exists. Releasing walks the ledger in reverse
acquisition order, so dependents are torn down before what they depend on,
and failures are collected instead of interrupting the walk.
"""

import logging
import threading
from typing import Any, Callable, List, Optional, Tuple

from .exceptions import ResourceReleaseError

logger = logging.getLogger(__name__)


def is_closeable(obj: Any) -> bool:
    """Return True if obj exposes a callable shutdown()."""
    return callable(getattr(obj, "shutdown", None))


class AcquiredResource:
    """
    A handle plus a single idempotent release action.

    The first release() runs the action; later calls are no-ops, even if the
    first one raised. A resource with an owner is released by that owner, so
    release() only runs its own action if the owner's release failed.
    """

    def __init__(self, handle: Any, release: Callable[[], Any], name: str):
        self.handle = handle
        self.name = name
        self.owner: Optional["AcquiredResource"] = None
        self._release = release
        self._released = False
        self._failed = False
        self._lock = threading.Lock()

    @property
    def released(self) -> bool:
        return self._released

    @property
    def released_cleanly(self) -> bool:
        return self._released and not self._failed

    def release(self) -> None:
        with self._lock:
            if self._released:
                return
            self._released = True
        if self.owner is not None and self.owner.released_cleanly:
            logger.debug(f"Resource '{self.name}' released by '{self.owner.name}'")
            return
        try:
            self._release()
        except Exception:
            self._failed = True
            raise

    def __repr__(self) -> str:
        return f"AcquiredResource(name='{self.name}', released={self._released})"


class ResourceLedger:
    """
    Ordered record of acquired resources.

    Usage:
        ledger = ResourceLedger()
        exporter = ledger.acquire(OTLPSpanExporter())
        ...
        error = ledger.release_all()  # None when everything released cleanly
    """

    def __init__(self):
        self._resources: List[AcquiredResource] = []
        self._lock = threading.Lock()
        self._closed = False

    def acquire(
        self,
        resource: Any,
        release: Optional[Callable[[], Any]] = None,
        name: Optional[str] = None,
    ) -> Any:
        """
        Record a resource and return it unchanged.

        Args:
            resource: Object to track
            release: Release action; defaults to resource.shutdown
            name: Label used in logs and release errors

        Returns:
            The same resource object

        Raises:
            TypeError: If no release action is given and resource has no shutdown()
            RuntimeError: If the ledger has already been released
        """
        if release is None:
            if not is_closeable(resource):
                raise TypeError(
                    f"{type(resource).__name__} has no shutdown() and no release action"
                )
            release = resource.shutdown

        label = name or type(resource).__name__
        with self._lock:
            if self._closed:
                raise RuntimeError(f"Cannot acquire '{label}': ledger already released")
            if self._find(resource) is not None:
                logger.debug(f"Resource '{label}' already tracked, not recording twice")
                return resource
            self._resources.append(AcquiredResource(resource, release, label))

        logger.debug(f"Acquired resource: {label}")
        return resource

    def adopt(self, resource: Any, owner: Any) -> None:
        """
        Record that owner's release also releases resource.

        Providers shut down their processors and readers, which shut down
        their exporters. Once the owner has released cleanly the ledger skips
        the adopted resource; if the owner was never acquired or its release
        failed, the resource is released on its own. Untracked resources are
        ignored.

        Args:
            resource: Tracked resource released through owner
            owner: Tracked resource acquired after resource
        """
        if resource is owner:
            return
        with self._lock:
            child = self._find(resource)
            parent = self._find(owner)
            if child is None or parent is None:
                return
            child.owner = parent
        logger.debug(f"Resource '{child.name}' is owned by '{parent.name}'")

    def _find(self, resource: Any) -> Optional[AcquiredResource]:
        for tracked in self._resources:
            if tracked.handle is resource:
                return tracked
        return None

    def release_all(self) -> Optional[ResourceReleaseError]:
        """
        Release every recorded resource in reverse acquisition order.

        Individual failures are logged and collected; the walk always
        completes. A second call is a no-op.

        Returns:
            ResourceReleaseError aggregating the failures, or None
        """
        with self._lock:
            if self._closed:
                return None
            self._closed = True
            resources = list(reversed(self._resources))
            self._resources.clear()

        failures: List[Tuple[str, BaseException]] = []
        for resource in resources:
            try:
                resource.release()
                logger.debug(f"Released resource: {resource.name}")
            except Exception as e:
                logger.warning(f"Failed to release resource '{resource.name}': {e}")
                failures.append((resource.name, e))

        if failures:
            return ResourceReleaseError(failures)
        return None

    @property
    def released(self) -> bool:
        return self._closed

    @property
    def names(self) -> List[str]:
        """Labels of the resources currently held, in acquisition order."""
        with self._lock:
            return [resource.name for resource in self._resources]

    def __len__(self) -> int:
        with self._lock:
            return len(self._resources)
