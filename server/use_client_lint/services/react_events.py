from typing import FrozenSet, Tuple

# Event handler props supported by React DOM, grouped as in the React docs.
_BASE_EVENTS: Tuple[str, ...] = (
    # Clipboard
    "onCopy", "onCut", "onPaste",
    # Composition
    "onCompositionEnd", "onCompositionStart", "onCompositionUpdate",
    # Keyboard
    "onKeyDown", "onKeyPress", "onKeyUp",
    # Focus
    "onFocus", "onBlur",
    # Form
    "onChange", "onBeforeInput", "onInput", "onInvalid", "onReset", "onSubmit",
    # Generic
    "onError", "onLoad",
    # Mouse
    "onClick", "onContextMenu", "onDoubleClick", "onDrag", "onDragEnd",
    "onDragEnter", "onDragExit", "onDragLeave", "onDragOver", "onDragStart",
    "onDrop", "onMouseDown", "onMouseEnter", "onMouseLeave", "onMouseMove",
    "onMouseOut", "onMouseOver", "onMouseUp",
    # Pointer
    "onPointerDown", "onPointerMove", "onPointerUp", "onPointerCancel",
    "onGotPointerCapture", "onLostPointerCapture", "onPointerEnter",
    "onPointerLeave", "onPointerOver", "onPointerOut",
    # Selection
    "onSelect",
    # Touch
    "onTouchCancel", "onTouchEnd", "onTouchMove", "onTouchStart",
    # UI
    "onScroll", "onScrollEnd",
    # Wheel
    "onWheel",
    # Media
    "onAbort", "onCanPlay", "onCanPlayThrough", "onDurationChange", "onEmptied",
    "onEncrypted", "onEnded", "onLoadedData", "onLoadedMetadata", "onLoadStart",
    "onPause", "onPlay", "onPlaying", "onProgress", "onRateChange", "onSeeked",
    "onSeeking", "onStalled", "onSuspend", "onTimeUpdate", "onVolumeChange",
    "onWaiting",
    # Animation
    "onAnimationStart", "onAnimationEnd", "onAnimationIteration",
    # Transition
    "onTransitionEnd",
    # Other
    "onToggle",
)

# Every handler also has a capture-phase variant, e.g. `onClickCapture`.
REACT_EVENTS: FrozenSet[str] = frozenset(_BASE_EVENTS) | frozenset(f"{name}Capture" for name in _BASE_EVENTS)


def is_event_handler_prop(name: str) -> bool:
    return name in REACT_EVENTS
