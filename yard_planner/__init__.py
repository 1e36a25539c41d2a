"""Yard Planner - Sketch a yard layout to scale.

Draw fence lines and tree canopies over an aerial view, tell the planner how
long a few fences really are, and it works out the scale for everything else.
The whole design fits into a share link.

Modules:
    core: Scale calibration, share codec, address lookup
    model: Data structures (Point, Fence, Tree, Design, messages)
    ui: Streamlit interface components (state machine, canvas, panels)

Example:
    from yard_planner.model import Design
    from yard_planner.core.share_codec import encode, decode
"""
