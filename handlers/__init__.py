from .carousel import advance_carousel, extract_carousel_speakers, speaker_cards
from .detail_view import (
    close_detail_view,
    dismiss_detail_view,
    open_detail_view,
    read_speaker_fields,
)
from .iframe import WidgetNotFoundError, get_widget_frame
from .navigation import NavigationResult, NavState, WidgetLoadError, load_agenda
from .scrolling import ScrollStats, scroll_and_collect

__all__ = [
    "NavState",
    "NavigationResult",
    "ScrollStats",
    "WidgetLoadError",
    "WidgetNotFoundError",
    "advance_carousel",
    "close_detail_view",
    "dismiss_detail_view",
    "extract_carousel_speakers",
    "get_widget_frame",
    "load_agenda",
    "open_detail_view",
    "read_speaker_fields",
    "scroll_and_collect",
    "speaker_cards",
]
