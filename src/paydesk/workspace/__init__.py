"""Workspace state, optimistic mutations and their mirroring."""

from paydesk.workspace.controller import WorkspaceController
from paydesk.workspace.strategies import RemoteMirror, SnapshotMirror, SyncStrategy

__all__ = ["WorkspaceController", "SyncStrategy", "RemoteMirror", "SnapshotMirror"]
