"""CanvasRenderer - Plotly rendering of the yard canvas.

The canvas is a pixel-space figure (origin top-left, y axis reversed) that
projects the design each rerun:
- Background: aerial view placeholder once the map is loaded
- Fences: solid lines with "name: length ft" labels
- Draft fence: dashed line
- Trees: canopy circle, trunk dot, dashed radius line, diameter and name labels
- Draft tree: canopy with its live diameter
- The entity selected for moving is highlighted

An invisible scatter grid covers the canvas so lasso gestures can be drawn
anywhere on it.
"""

import logging

import numpy as np
import plotly.graph_objects as go

from yard_planner.constants import CanvasConfig, DrawConfig, EntityKinds, StyleConfig
from yard_planner.model.design import Design
from yard_planner.model.fence import Fence
from yard_planner.model.tree import Tree

logger = logging.getLogger(__name__)

# Spacing of the invisible hit grid (pixels)
HIT_GRID_STEP = 25


class CanvasRenderer:
    """Renders a Design as a Plotly figure.

    Example:
        renderer = CanvasRenderer()
        fig = renderer.render(design=design)
        st.plotly_chart(fig, on_select="rerun", selection_mode="lasso")
    """

    def __init__(
        self,
        width: int = CanvasConfig.WIDTH,
        height: int = CanvasConfig.HEIGHT,
    ) -> None:
        """Initialize canvas renderer.

        Args:
            width: Canvas width in pixels
            height: Canvas height in pixels
        """
        self.width = width
        self.height = height

    def render(
        self,
        design: Design,
        draft_fence: Fence | None = None,
        draft_tree: Tree | None = None,
        moving: tuple[str, int] | None = None,
    ) -> go.Figure:
        """Render the full canvas.

        Args:
            design: Design to project
            draft_fence: Fence being drawn, if any
            draft_tree: Tree being placed, if any
            moving: (kind, id) of the entity selected for moving, if any

        Returns:
            Plotly Figure object.
        """
        fig = go.Figure()
        self._add_hit_grid(fig=fig)

        if design.map_loaded:
            self._add_background(fig=fig)

        for fence in design.fences:
            highlighted = moving == (EntityKinds.FENCE, fence.id)
            self._add_fence(fig=fig, fence=fence, highlighted=highlighted)

        if draft_fence is not None:
            self._add_draft_fence(fig=fig, fence=draft_fence)

        for tree in design.trees:
            highlighted = moving == (EntityKinds.TREE, tree.id)
            self._add_tree(fig=fig, tree=tree, label=design.tree_diameter(tree=tree).format(), highlighted=highlighted)

        if draft_tree is not None:
            self._add_tree(fig=fig, tree=draft_tree, label=design.tree_diameter(tree=draft_tree).format(), show_name=False)

        self._configure_layout(fig=fig, map_loaded=design.map_loaded)
        logger.debug(f"[RENDER] Canvas: {len(design.fences)} fences, {len(design.trees)} trees")
        return fig

    # =========================================================================
    # Layers
    # =========================================================================

    def _add_hit_grid(self, fig: go.Figure) -> None:
        """Invisible markers so a lasso can start anywhere on the canvas."""
        xs, ys = np.meshgrid(
            np.arange(0, self.width + 1, HIT_GRID_STEP),
            np.arange(0, self.height + 1, HIT_GRID_STEP),
        )
        fig.add_trace(
            go.Scatter(
                x=xs.ravel(),
                y=ys.ravel(),
                mode="markers",
                marker=dict(size=1, opacity=0),
                hoverinfo="skip",
                showlegend=False,
                name="canvas",
            )
        )

    def _add_background(self, fig: go.Figure) -> None:
        fig.add_shape(
            type="rect",
            x0=0,
            y0=0,
            x1=self.width,
            y1=self.height,
            fillcolor=StyleConfig.BACKGROUND_COLOR,
            line=dict(width=0),
            layer="below",
        )
        fig.add_annotation(
            x=self.width / 2,
            y=self.height / 2,
            text=StyleConfig.BACKGROUND_TITLE,
            showarrow=False,
            font=dict(family=StyleConfig.LABEL_FONT_FAMILY, size=20, color=StyleConfig.BACKGROUND_TEXT_COLOR),
        )
        fig.add_annotation(
            x=self.width / 2,
            y=self.height / 2 + 25,
            text=StyleConfig.BACKGROUND_SUBTITLE,
            showarrow=False,
            font=dict(family=StyleConfig.LABEL_FONT_FAMILY, size=14, color=StyleConfig.BACKGROUND_TEXT_COLOR),
        )

    def _add_fence(self, fig: go.Figure, fence: Fence, highlighted: bool = False) -> None:
        color = StyleConfig.MOVING_HIGHLIGHT_COLOR if highlighted else StyleConfig.FENCE_COLOR
        fig.add_trace(
            go.Scatter(
                x=[fence.start.x, fence.end.x],
                y=[fence.start.y, fence.end.y],
                mode="lines",
                line=dict(color=color, width=StyleConfig.FENCE_WIDTH),
                hovertemplate=f"{fence.name}<extra></extra>",
                showlegend=False,
                name=fence.name,
            )
        )
        midpoint = fence.midpoint
        fig.add_annotation(
            x=midpoint.x,
            y=midpoint.y + StyleConfig.FENCE_LABEL_OFFSET_Y,
            text=f"{fence.name}: {fence.length:g} ft",
            showarrow=False,
            yanchor="bottom",
            font=dict(family=StyleConfig.LABEL_FONT_FAMILY, size=StyleConfig.FENCE_LABEL_SIZE, color=color),
        )

    def _add_draft_fence(self, fig: go.Figure, fence: Fence) -> None:
        fig.add_trace(
            go.Scatter(
                x=[fence.start.x, fence.end.x],
                y=[fence.start.y, fence.end.y],
                mode="lines",
                line=dict(color=StyleConfig.DRAFT_FENCE_COLOR, width=StyleConfig.FENCE_WIDTH, dash="dash"),
                hoverinfo="skip",
                showlegend=False,
                name="draft fence",
            )
        )

    def _add_tree(
        self,
        fig: go.Figure,
        tree: Tree,
        label: str,
        highlighted: bool = False,
        show_name: bool = True,
    ) -> None:
        """Canopy, trunk, radius line and labels of one tree."""
        cx, cy, r = tree.center.x, tree.center.y, tree.radius
        line_color = StyleConfig.MOVING_HIGHLIGHT_COLOR if highlighted else StyleConfig.CANOPY_LINE_COLOR

        fig.add_shape(
            type="circle",
            x0=cx - r,
            y0=cy - r,
            x1=cx + r,
            y1=cy + r,
            fillcolor=StyleConfig.CANOPY_FILL_COLOR,
            line=dict(color=line_color, width=StyleConfig.CANOPY_LINE_WIDTH),
        )
        trunk = DrawConfig.TRUNK_RADIUS_PX
        fig.add_shape(
            type="circle",
            x0=cx - trunk,
            y0=cy - trunk,
            x1=cx + trunk,
            y1=cy + trunk,
            fillcolor=StyleConfig.TRUNK_COLOR,
            line=dict(width=0),
        )
        fig.add_shape(
            type="line",
            x0=cx,
            y0=cy,
            x1=cx + r,
            y1=cy,
            line=dict(color=StyleConfig.CANOPY_LINE_COLOR, width=StyleConfig.RADIUS_LINE_WIDTH, dash="dot"),
        )
        fig.add_annotation(
            x=cx + r / 2,
            y=cy + StyleConfig.DIAMETER_LABEL_OFFSET_Y,
            text=f"<b>{label}</b>",
            showarrow=False,
            yanchor="bottom",
            font=dict(
                family=StyleConfig.LABEL_FONT_FAMILY,
                size=StyleConfig.TREE_LABEL_SIZE,
                color=StyleConfig.CANOPY_LINE_COLOR,
            ),
        )
        if show_name:
            fig.add_annotation(
                x=cx,
                y=cy + r + StyleConfig.TREE_NAME_OFFSET_Y,
                text=tree.name,
                showarrow=False,
                font=dict(
                    family=StyleConfig.LABEL_FONT_FAMILY,
                    size=StyleConfig.TREE_LABEL_SIZE,
                    color=StyleConfig.CANOPY_LINE_COLOR,
                ),
            )

    def _configure_layout(self, fig: go.Figure, map_loaded: bool) -> None:
        margin = CanvasConfig.MARGIN
        fig.update_layout(
            width=self.width + 2 * margin,
            height=self.height + 2 * margin,
            margin=dict(l=margin, r=margin, t=margin, b=margin),
            xaxis=dict(range=[0, self.width], visible=False, fixedrange=True),
            yaxis=dict(
                range=[self.height, 0],
                visible=False,
                fixedrange=True,
                scaleanchor="x",
                scaleratio=1,
            ),
            plot_bgcolor=StyleConfig.EMPTY_CANVAS_COLOR if not map_loaded else StyleConfig.BACKGROUND_COLOR,
            dragmode="lasso",
            showlegend=False,
            hovermode="closest",
        )
