from localshortener.dao.base.short_url_base_dao import ShortURLBaseDAO
from localshortener.dao.base.diagnostic_log_base_dao import DiagnosticLogBaseDAO


__all__ = [
    'ShortURLBaseDAO',
    'DiagnosticLogBaseDAO',
]
