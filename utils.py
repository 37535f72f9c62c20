# utils.py
# Bu dosya, uygulama genelinde kullanılan genel amaçlı yardımcı fonksiyonları içerir.

import math


def format_time(total_seconds):
    """
    Saniye cinsinden verilen süreyi okunabilir bir formata (örn: 1h 02m 34s 567ms) dönüştürür.
    """
    if total_seconds is None or not math.isfinite(total_seconds):
        return "N/A"
    if total_seconds < 0.001: return "0s"

    s = int(total_seconds)
    ms = int(round((total_seconds - s) * 1000))
    if ms == 1000:
        s, ms = s + 1, 0
    m, s = divmod(s, 60)
    h, m = divmod(m, 60)

    parts = []
    if h > 0: parts.append(f"{h}h")
    if h > 0 or m > 0: parts.append(f"{m:02d}m" if h > 0 else f"{m}m")
    parts.append(f"{s:02d}s" if (h > 0 or m > 0) else f"{s}s")
    if ms > 0: parts.append(f"{ms:03d}ms")

    return " ".join(parts)

