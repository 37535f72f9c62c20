# config.py
# Bu dosya, uygulama genelinde kullanılan sabitleri ve yapılandırma ayarlarını içerir.

# API ve Dosya Yolları
API_BASE_URL = "https://www.speedrun.com/api/v1"
CONFIG_FILE = 'Speedrun Records.json'
WATCH_DATA_FILE = 'Watch Data.json'
LOG_FILE = 'Speedrun Records.log'

# API İstek Ayarları
USER_AGENT = "srcom-records/0.1.0"
REQUEST_TIMEOUT = 10          # Saniye cinsinden istek zaman aşımı
RETRY_MAX_ATTEMPTS = 4        # Başarısız istekler için maksimum deneme sayısı
RETRY_INITIAL_DELAY = 1       # Saniye cinsinden ilk yeniden deneme gecikmesi
RETRYABLE_STATUS_CODES = (420, 429, 500, 502, 503, 504)
NOTIFICATIONS_MAX = 200       # Tek istekte alınacak maksimum bildirim sayısı

# İzleme Listesi
DEFAULT_DEFER_DAYS = 1
