"""
mindmapper.config.defaults - Default configuration values
"""

DEFAULT_CONFIG = {
    "generate": {
        # Classify nodes by keyword; otherwise inherit the parent's category
        "auto_group": True,
        # hierarchical | radial | force
        "layout": "hierarchical",
    },
    "labels": {
        "leaf_line_width": 20,
        "leaf_max_lines": 3,
        "container_max_length": 40,
    },
    "editor": {
        "placeholder_text": "New Task",
        "allow_root_children": False,
    },
    "history": {
        "max_states": 50,
    },
    "session": {
        "debounce_seconds": 0.5,
    },
}
