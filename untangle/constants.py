from __future__ import annotations

NODE_WIDTH = 140
NODE_HEIGHT = 60
CANVAS_PADDING = 50

# Extra inset of the seed circle beyond the canvas padding.
SEED_RADIUS_MARGIN = 100

# Dragged nodes stay this far inside the viewport.
DRAG_MARGIN = 10

MAX_CHORD_ATTEMPTS = 200

FUNCTION_NAMES = [
    "init()",
    "render()",
    "update()",
    "fetchData()",
    "auth()",
    "validate()",
    "parseJSON()",
    "encrypt()",
    "connectDB()",
    "logError()",
    "calcHash()",
    "resize()",
    "onSubmit()",
    "cleanUp()",
    "startTimer()",
    "emitEvent()",
]

COLORS = {
    "bg": "#0f172a",  # slate-900
    "node_bg": "#1e293b",  # slate-800
    "node_border": "#334155",  # slate-700
    "text": "#e2e8f0",  # slate-200
    "accent_function": "#38bdf8",  # sky-400
    "accent_class": "#f472b6",  # pink-400
    "accent_variable": "#facc15",  # yellow-400
    "line_normal": "#475569",  # slate-600
    "line_intersect": "#ef4444",  # red-500
    "line_solved": "#22c55e",  # green-500
}

TYPE_COLORS = {
    "function": COLORS["accent_function"],
    "class": COLORS["accent_class"],
    "variable": COLORS["accent_variable"],
    "interface": COLORS["node_border"],
}
