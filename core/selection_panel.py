"""
Selection panel module for Sheets Map Creator.

One side panel shows the details of the feature the user clicked; clicking the map
background closes it. SelectionPanelController owns that state for a map session,
and the two folium elements below render the panel and wire layer clicks to it in
the generated page.

Classes:
    SelectionState: Title and body currently shown in the panel
    SelectionPanelController: select/clear state machine for the single panel
    SelectionPanel: Leaflet sidebar element rendered from the controller state
    PanelClickBinding: Click handler that opens the panel for a layer
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from branca.element import MacroElement
from folium.elements import JSCSSMixin
from jinja2 import Environment, FileSystemLoader

from utils.logger import get_logger

logger = get_logger(__name__)

# Template directory path
TEMPLATES_DIR = Path(__file__).parent.parent / 'templates'
_env = Environment(loader=FileSystemLoader(str(TEMPLATES_DIR)))

# Feature property keys holding the pre-rendered panel content
PANEL_TITLE_KEY = 'panel_title'
PANEL_BODY_KEY = 'panel_body'


@dataclass
class SelectionState:
    """Panel content; both fields are None while nothing is selected."""

    title: Optional[str] = None
    body: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.title is None and self.body is None


class SelectionPanelController:
    """
    Single-panel, single-selection state for one map session.

    Calls are handled synchronously and the latest call wins; there is no queue.

    Example:
        >>> controller = SelectionPanelController()
        >>> controller.on_feature_click({'panel_title': 'A', 'panel_body': 'Road section'})
        >>> controller.state.title
        'A'
        >>> controller.on_background_click()
        >>> controller.state.is_empty
        True
    """

    def __init__(self, panel_id: str = 'my-info-panel', position: str = 'right',
                 placeholder_title: str = 'Nothing selected'):
        self.state = SelectionState()
        self.panel = SelectionPanel(self, panel_id, position, placeholder_title)

    def select(self, title: str, body: str) -> None:
        """Open (or update) the panel with the given content."""
        self.state = SelectionState(title=title, body=body)
        logger.debug(f"Panel selection: {title!r}")

    def clear(self) -> None:
        """Close the panel and drop its content."""
        self.state = SelectionState()

    def on_feature_click(self, properties: Dict[str, Any]) -> None:
        """Feature click handler; reads the panel content stored in feature properties."""
        self.select(properties.get(PANEL_TITLE_KEY) or '', properties.get(PANEL_BODY_KEY) or '')

    def on_background_click(self) -> None:
        """Map background click handler."""
        self.clear()

    def bind(self, layer: Any, title: Optional[str] = None,
             body: Optional[str] = None) -> 'PanelClickBinding':
        """
        Open the panel when layer is clicked.

        With title/body the content is fixed (one marker). Without them each
        sub-layer's feature properties supply the content (a GeoJson layer).
        """
        binding = PanelClickBinding(self.panel, title=title, body=body)
        binding.add_to(layer)
        return binding


class SelectionPanel(JSCSSMixin, MacroElement):
    """Leaflet sidebar holding the selection panel."""

    _template = _env.get_template('selection_panel.html')

    default_js = [
        ('leaflet_sidebar_js',
         'https://unpkg.com/leaflet-sidebar-v2@3.2.3/js/leaflet-sidebar.min.js'),
    ]
    default_css = [
        ('leaflet_sidebar_css',
         'https://unpkg.com/leaflet-sidebar-v2@3.2.3/css/leaflet-sidebar.min.css'),
    ]

    def __init__(self, controller: SelectionPanelController, panel_id: str,
                 position: str, placeholder_title: str):
        super().__init__()
        self._name = 'SelectionPanel'
        self.controller = controller
        self.panel_id = panel_id
        self.position = position
        self.placeholder_title = placeholder_title

    @property
    def container_id(self) -> str:
        return f'{self.get_name()}_container'

    @property
    def title_id(self) -> str:
        return f'{self.get_name()}_title'

    @property
    def content_id(self) -> str:
        return f'{self.get_name()}_content'

    @property
    def initial_title(self) -> str:
        state = self.controller.state
        return state.title if state.title is not None else self.placeholder_title

    @property
    def initial_body(self) -> str:
        return self.controller.state.body or ''

    @property
    def is_open(self) -> bool:
        return not self.controller.state.is_empty


class PanelClickBinding(MacroElement):
    """Click handler for a marker (fixed content) or a GeoJson layer (per feature)."""

    _template = _env.get_template('panel_click_binding.html')

    def __init__(self, panel: SelectionPanel, title: Optional[str] = None,
                 body: Optional[str] = None):
        super().__init__()
        self._name = 'PanelClickBinding'
        self.panel = panel
        self.per_feature = title is None and body is None
        self.title = title or ''
        self.body = body or ''
        self.title_key = PANEL_TITLE_KEY
        self.body_key = PANEL_BODY_KEY
