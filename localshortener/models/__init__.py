from localshortener.models.short_url_model import ShortURLModel, ClickEvent, Location


__all__ = [
    'ShortURLModel',
    'ClickEvent',
    'Location',
]
