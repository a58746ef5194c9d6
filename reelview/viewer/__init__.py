# reelview/viewer/__init__.py
from __future__ import annotations

from .state_machine import (
    Advance,
    ItemsFailed,
    ItemsLoaded,
    LoadItems,
    Message,
    Retreat,
    Retry,
    SetIndex,
    SetInterval,
    Tick,
    ToggleAutoAdvance,
    ViewerStateMachine,
)

__all__ = [
    "Advance",
    "ItemsFailed",
    "ItemsLoaded",
    "LoadItems",
    "Message",
    "Retreat",
    "Retry",
    "SetIndex",
    "SetInterval",
    "Tick",
    "ToggleAutoAdvance",
    "ViewerStateMachine",
]
