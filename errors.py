# errors.py
# Bu dosya, rekor çözümlemesi sırasında fırlatılan hata sınıflarını içerir.


class RecordError(Exception):
    """Rekor çözücünün bildirdiği tüm hataların temel sınıfı."""


class ConfigurationError(RecordError):
    """
    Yapılandırma tanımlamadığı bir oyuna, kategoriye veya alt kategoriye
    başvuruyor, alt kategori döngüsü içeriyor ya da hiç okunamıyor.
    Yeniden denemek işe yaramaz.
    """


class UpstreamError(RecordError):
    """
    Bir speedrun.com isteği başarısız oldu. Varsa asıl requests hatası
    __cause__ olarak zincirlenir.
    """

    def __init__(self, message, url=None, status_code=None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code

    def __str__(self):
        message = super().__str__()
        if self.url:
            message += f" (URL: {self.url})"
        return message
