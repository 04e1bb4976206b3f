"""Billboard client library.

The client side of the flag propagation path: session state, the sync agent
that follows the realtime channel (or polls), the UI reconciler, and the
local content store behind the board actions.

Usage:
    from billboard_service.client import BillboardApp
    from billboard_service.core.settings import get_client_settings

    app = BillboardApp.from_settings(get_client_settings(), notify=print)
    await app.start()
    result = await app.authenticate("4821")
"""

from .api import ApiResult, FlagsApiClient
from .board import ActionResult, BillboardApp
from .exceptions import BillboardInputError, InvalidAccessCodeError, InvalidPostError
from .models import DEFAULT_CONTENT_TYPE, Post, PostType, Theme
from .reconciler import Notice, NoticeKind, UIReconciler, UIState, reconcile
from .session import ClientSession
from .storage import ContentStore, LocalStorage
from .sync import SyncAgent, SyncState

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "ActionResult",
    "ApiResult",
    "BillboardApp",
    "BillboardInputError",
    "ClientSession",
    "ContentStore",
    "FlagsApiClient",
    "InvalidAccessCodeError",
    "InvalidPostError",
    "LocalStorage",
    "Notice",
    "NoticeKind",
    "Post",
    "PostType",
    "SyncAgent",
    "SyncState",
    "Theme",
    "UIReconciler",
    "UIState",
    "reconcile",
]
