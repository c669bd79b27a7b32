"""
Oyun çekirdeğinin hata tipleri.
"""
from __future__ import annotations


class LevelConfigError(ValueError):
    """Level verisi geçersiz (sınır dışı koordinat, boş palet, vb). Yükleme anında fırlatılır."""


class InvariantViolation(RuntimeError):
    """Çekirdek kuralı bozuldu (sabit hücreye yazıldı, karakter pozisyonu tutarsız, vb)."""
