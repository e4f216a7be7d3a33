"""Per-browser-instance state kept in memory.

A workspace bundles what a single mounted application owns: its identity
gateway and session channel, the session guard in front of the dashboard,
and the dashboard's query flow (plus the upload log in mock mode). Nothing is
persisted; restarting the process signs every browser out.

Only workspaces that hold a session are registered. Anonymous requests get a
throwaway workspace, and registered ones are evicted after an idle period or
when the registry is full.
"""

import logging
import time
import uuid
from collections import OrderedDict
from typing import Callable, Optional

from ..flows.query_flow import AnalysisBackend, QuerySubmissionFlow
from ..flows.session_guard import GuardState, SessionGuard
from .identity import IdentityGateway
from .mock_analysis import UploadWorkspace

logger = logging.getLogger(__name__)


class Workspace:
    def __init__(
        self,
        workspace_id: str,
        gateway: IdentityGateway,
        backend: AnalysisBackend,
        connection_id: str,
        dialect: str = "postgres",
        mock_mode: bool = False,
        upload_delay: float = 1.5,
        response_delay: float = 2.0,
    ) -> None:
        self.id = workspace_id
        self.gateway = gateway
        self.backend = backend
        self.connection_id = connection_id
        self.dialect = dialect
        self.mock_mode = mock_mode
        self.upload_delay = upload_delay
        self.response_delay = response_delay
        self.flow: Optional[QuerySubmissionFlow] = None
        self.upload: Optional[UploadWorkspace] = None
        self.guard = self._mount_guard()

    def _mount_guard(self) -> SessionGuard:
        return SessionGuard(
            self.gateway,
            on_unauthenticated=self._teardown_dashboard,
            on_identity_changed=self._teardown_dashboard,
        ).mount()

    def dashboard_guard(self) -> SessionGuard:
        """Guard for the protected surface, remounted after a fresh sign-in."""
        if self.guard.state == GuardState.UNAUTHENTICATED and self.gateway.current_session:
            self.guard = self._mount_guard()
        return self.guard

    def query_flow(self) -> QuerySubmissionFlow:
        if self.flow is None:
            self.flow = QuerySubmissionFlow(
                self.backend, connection_id=self.connection_id, dialect=self.dialect
            )
        return self.flow

    def upload_workspace(self) -> UploadWorkspace:
        if self.upload is None:
            self.upload = UploadWorkspace(self.upload_delay, self.response_delay)
        return self.upload

    def _teardown_dashboard(self) -> None:
        if self.flow is not None:
            self.flow.unmount()
            self.flow = None
        if self.upload is not None:
            self.upload.remove_file()
            self.upload = None
        logger.info("Workspace %s dashboard torn down", self.id)

    def close(self) -> None:
        self.guard.unmount()
        self._teardown_dashboard()


class WorkspaceRegistry:
    def __init__(
        self,
        max_count: int = 1000,
        idle_ttl: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_count = max_count
        self.idle_ttl = idle_ttl
        self.clock = clock
        # Least recently used first.
        self._workspaces: "OrderedDict[str, Workspace]" = OrderedDict()
        self._last_seen: dict = {}

    def build(self, gateway: IdentityGateway, backend: AnalysisBackend, **options) -> Workspace:
        """Create an unregistered workspace; ``add`` it once a session exists."""
        return Workspace(uuid.uuid4().hex, gateway, backend, **options)

    def add(self, workspace: Workspace) -> None:
        self._evict_idle()
        self._workspaces[workspace.id] = workspace
        self._workspaces.move_to_end(workspace.id)
        self._last_seen[workspace.id] = self.clock()
        while len(self._workspaces) > self.max_count:
            oldest = next(iter(self._workspaces))
            logger.info("Workspace registry full, evicting %s", oldest)
            self.discard(oldest)
        logger.debug("Registered workspace %s", workspace.id)

    def get(self, workspace_id: Optional[str]) -> Optional[Workspace]:
        if not workspace_id:
            return None
        self._evict_idle()
        workspace = self._workspaces.get(workspace_id)
        if workspace is not None:
            self._workspaces.move_to_end(workspace_id)
            self._last_seen[workspace_id] = self.clock()
        return workspace

    def __contains__(self, workspace: Workspace) -> bool:
        return self._workspaces.get(workspace.id) is workspace

    def discard(self, workspace_id: str) -> None:
        workspace = self._workspaces.pop(workspace_id, None)
        self._last_seen.pop(workspace_id, None)
        if workspace is not None:
            workspace.close()

    def _evict_idle(self) -> None:
        cutoff = self.clock() - self.idle_ttl
        expired = [wid for wid, seen in self._last_seen.items() if seen < cutoff]
        for workspace_id in expired:
            logger.info("Workspace %s idle, evicting", workspace_id)
            self.discard(workspace_id)

    def __len__(self) -> int:
        return len(self._workspaces)
