from localshortener.registry.click_recorder import ClickRecorder
from localshortener.registry.url_registry import URLRegistry


__all__ = [
    'ClickRecorder',
    'URLRegistry',
]
