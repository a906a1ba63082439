"""
Environment global names, split by execution context.

`BROWSER_GLOBALS` lists names a browser (window) context provides and
`SERVER_GLOBALS` the names a Node.js 18 server process provides. Only the
difference matters to the rule: a reference to a name available in both (for
example `console` or `setTimeout`) says nothing about where a module runs.
"""
from functools import lru_cache
from typing import AbstractSet, FrozenSet

BROWSER_GLOBALS: FrozenSet[str] = frozenset({
    # Window and document
    "window",
    "self",
    "top",
    "parent",
    "opener",
    "frames",
    "frameElement",
    "document",
    "navigator",
    "location",
    "history",
    "screen",
    "visualViewport",
    "customElements",
    "clientInformation",
    "external",
    "name",
    "status",
    "origin",
    "length",
    "closed",
    "isSecureContext",
    "crossOriginIsolated",
    "devicePixelRatio",
    "innerWidth",
    "innerHeight",
    "outerWidth",
    "outerHeight",
    "screenX",
    "screenY",
    "screenLeft",
    "screenTop",
    "scrollX",
    "scrollY",
    "pageXOffset",
    "pageYOffset",
    "menubar",
    "toolbar",
    "locationbar",
    "personalbar",
    "scrollbars",
    "statusbar",
    # Window methods
    "alert",
    "confirm",
    "prompt",
    "print",
    "open",
    "close",
    "stop",
    "focus",
    "blur",
    "find",
    "moveBy",
    "moveTo",
    "resizeBy",
    "resizeTo",
    "scroll",
    "scrollBy",
    "scrollTo",
    "getComputedStyle",
    "getSelection",
    "matchMedia",
    "postMessage",
    "requestAnimationFrame",
    "cancelAnimationFrame",
    "requestIdleCallback",
    "cancelIdleCallback",
    "addEventListener",
    "removeEventListener",
    "dispatchEvent",
    "createImageBitmap",
    "reportError",
    # Storage
    "localStorage",
    "sessionStorage",
    "indexedDB",
    "caches",
    "cookieStore",
    "Storage",
    "StorageEvent",
    "IDBDatabase",
    "IDBFactory",
    "IDBIndex",
    "IDBKeyRange",
    "IDBObjectStore",
    "IDBRequest",
    "IDBTransaction",
    "Cache",
    "CacheStorage",
    # DOM
    "Node",
    "NodeList",
    "NodeFilter",
    "NodeIterator",
    "TreeWalker",
    "Element",
    "Document",
    "DocumentFragment",
    "DocumentType",
    "ShadowRoot",
    "Attr",
    "CharacterData",
    "Text",
    "Comment",
    "CDATASection",
    "ProcessingInstruction",
    "DOMParser",
    "XMLSerializer",
    "DOMImplementation",
    "DOMRect",
    "DOMRectReadOnly",
    "DOMPoint",
    "DOMMatrix",
    "DOMTokenList",
    "DOMStringMap",
    "HTMLCollection",
    "NamedNodeMap",
    "Range",
    "Selection",
    "StaticRange",
    "XPathEvaluator",
    "XPathResult",
    "CSS",
    "CSSStyleDeclaration",
    "CSSStyleSheet",
    "CSSRule",
    "StyleSheet",
    "MediaQueryList",
    "FontFace",
    "HTMLElement",
    "HTMLAnchorElement",
    "HTMLAreaElement",
    "HTMLAudioElement",
    "HTMLBodyElement",
    "HTMLButtonElement",
    "HTMLCanvasElement",
    "HTMLDialogElement",
    "HTMLDivElement",
    "HTMLDocument",
    "HTMLFormElement",
    "HTMLHeadElement",
    "HTMLIFrameElement",
    "HTMLImageElement",
    "HTMLInputElement",
    "HTMLLabelElement",
    "HTMLLinkElement",
    "HTMLMediaElement",
    "HTMLMetaElement",
    "HTMLOptionElement",
    "HTMLParagraphElement",
    "HTMLScriptElement",
    "HTMLSelectElement",
    "HTMLSpanElement",
    "HTMLStyleElement",
    "HTMLTableElement",
    "HTMLTemplateElement",
    "HTMLTextAreaElement",
    "HTMLVideoElement",
    "SVGElement",
    "SVGSVGElement",
    "SVGGraphicsElement",
    "Image",
    "Audio",
    "Option",
    "CanvasRenderingContext2D",
    "OffscreenCanvas",
    "ImageData",
    "ImageBitmap",
    "Path2D",
    "WebGLRenderingContext",
    "WebGL2RenderingContext",
    # Observers and layout
    "IntersectionObserver",
    "IntersectionObserverEntry",
    "ResizeObserver",
    "ResizeObserverEntry",
    "MutationObserver",
    "MutationRecord",
    "PerformanceObserver",
    # Events
    "UIEvent",
    "MouseEvent",
    "KeyboardEvent",
    "FocusEvent",
    "InputEvent",
    "PointerEvent",
    "TouchEvent",
    "Touch",
    "TouchList",
    "WheelEvent",
    "DragEvent",
    "ClipboardEvent",
    "CompositionEvent",
    "AnimationEvent",
    "TransitionEvent",
    "HashChangeEvent",
    "PopStateEvent",
    "PageTransitionEvent",
    "ProgressEvent",
    "ErrorEvent",
    "SubmitEvent",
    "Event",
    "EventTarget",
    "CustomEvent",
    "MessageEvent",
    # Network and workers
    "XMLHttpRequest",
    "XMLHttpRequestUpload",
    "WebSocket",
    "EventSource",
    "Worker",
    "SharedWorker",
    "ServiceWorker",
    "ServiceWorkerContainer",
    "ServiceWorkerRegistration",
    "Notification",
    "PushManager",
    "RTCPeerConnection",
    "RTCDataChannel",
    "MediaStream",
    "MediaRecorder",
    "MediaSource",
    "AudioContext",
    "OfflineAudioContext",
    "SpeechSynthesisUtterance",
    "speechSynthesis",
    "Geolocation",
    "FileReader",
    "FileList",
    "DataTransfer",
    "Clipboard",
    "ClipboardItem",
    "IdleDeadline",
    "Screen",
    "Location",
    "History",
    "Navigator",
    "Window",
    "VisualViewport",
    "Permissions",
    "Credential",
    "CredentialsContainer",
    "PasswordCredential",
    "PublicKeyCredential",
    # Shared with the server runtime
    "console",
    "setTimeout",
    "clearTimeout",
    "setInterval",
    "clearInterval",
    "queueMicrotask",
    "structuredClone",
    "atob",
    "btoa",
    "fetch",
    "Request",
    "Response",
    "Headers",
    "FormData",
    "Blob",
    "URL",
    "URLSearchParams",
    "TextEncoder",
    "TextDecoder",
    "TextEncoderStream",
    "TextDecoderStream",
    "AbortController",
    "AbortSignal",
    "BroadcastChannel",
    "MessageChannel",
    "MessagePort",
    "ReadableStream",
    "WritableStream",
    "TransformStream",
    "ByteLengthQueuingStrategy",
    "CountQueuingStrategy",
    "CompressionStream",
    "DecompressionStream",
    "DOMException",
    "crypto",
    "Crypto",
    "CryptoKey",
    "SubtleCrypto",
    "performance",
    "Performance",
    "PerformanceEntry",
    "PerformanceMark",
    "PerformanceMeasure",
    "WebAssembly",
})

SERVER_GLOBALS: FrozenSet[str] = frozenset({
    "console",
    "process",
    "global",
    "Buffer",
    "require",
    "module",
    "exports",
    "__dirname",
    "__filename",
    "setTimeout",
    "clearTimeout",
    "setInterval",
    "clearInterval",
    "setImmediate",
    "clearImmediate",
    "queueMicrotask",
    "structuredClone",
    "atob",
    "btoa",
    "fetch",
    "Request",
    "Response",
    "Headers",
    "FormData",
    "Blob",
    "URL",
    "URLSearchParams",
    "TextEncoder",
    "TextDecoder",
    "TextEncoderStream",
    "TextDecoderStream",
    "AbortController",
    "AbortSignal",
    "BroadcastChannel",
    "MessageChannel",
    "MessagePort",
    "MessageEvent",
    "Event",
    "EventTarget",
    "ReadableStream",
    "ReadableStreamDefaultReader",
    "WritableStream",
    "TransformStream",
    "ByteLengthQueuingStrategy",
    "CountQueuingStrategy",
    "CompressionStream",
    "DecompressionStream",
    "DOMException",
    "crypto",
    "Crypto",
    "CryptoKey",
    "SubtleCrypto",
    "performance",
    "Performance",
    "PerformanceEntry",
    "PerformanceMark",
    "PerformanceMeasure",
    "PerformanceObserver",
    "PerformanceObserverEntryList",
    "PerformanceResourceTiming",
    "WebAssembly",
})


@lru_cache(maxsize=1)
def client_only_globals() -> FrozenSet[str]:
    """Names available in the browser but not on the server."""
    return classify_client_only(BROWSER_GLOBALS, SERVER_GLOBALS)


def classify_client_only(browser: AbstractSet[str], server: AbstractSet[str]) -> FrozenSet[str]:
    return frozenset(browser) - frozenset(server)
