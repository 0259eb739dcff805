# Date code: the number of days since the configured epoch, written as fixed-width big-endian base-N digits
# using the configured alphabet. With the default 32-symbol alphabet and 3 digits this covers 32768 days (~89 years).
import datetime
from typing import Tuple

from sn_config import SnConfig, ascii_upper
from sn_errors import DateCodeError


kMidday = datetime.time(12, 0, 0)  # both dates are normalized to midday before taking the difference


class DateCodec:
  """Converts calendar dates to / from date codes"""
  def __init__(self, config: SnConfig, width: int = 3):
    self._alphabet = config.base32_chars
    self._positions = {c: i for i, c in enumerate(self._alphabet)}
    self._base_date = config.base_date
    self.width = width

  @property
  def radix(self) -> int:
    return len(self._alphabet)

  @property
  def max_offset(self) -> int:
    """Largest representable day offset"""
    return self.radix ** self.width - 1

  def epoch(self) -> datetime.datetime:
    try:
      date = datetime.date(self._base_date.year, self._base_date.month, self._base_date.day)
    except ValueError as e:
      raise DateCodeError(f"invalid base date: {e}") from e
    return datetime.datetime.combine(date, kMidday)

  def encode_offset(self, days: int) -> str:
    if days < 0 or days > self.max_offset:
      raise DateCodeError(f"date out of range ({days} days from base date, must be 0-{self.max_offset})")
    digits = []
    for _ in range(self.width):  # least significant first
      digits.append(self._alphabet[days % self.radix])
      days //= self.radix
    return ''.join(reversed(digits))

  def decode_offset(self, code: str) -> int:
    if len(code) != self.width:
      raise DateCodeError(f"date code must be {self.width} characters, got '{code}'")
    days = 0
    for c in code:
      pos = self._positions.get(ascii_upper(c))
      if pos is None:
        raise DateCodeError(f"invalid date code character: {c}")
      days = days * self.radix + pos
    return days

  def encode_date(self, year: int, month: int, day: int) -> str:
    try:
      target = datetime.datetime.combine(datetime.date(year, month, day), kMidday)
    except ValueError as e:
      raise DateCodeError(f"invalid target date: {e}") from e
    days = (target - self.epoch()).days
    return self.encode_offset(days)

  def decode_date(self, code: str) -> Tuple[int, int, int]:
    days = self.decode_offset(code)
    try:
      target = self.epoch() + datetime.timedelta(days=days)
    except OverflowError as e:
      raise DateCodeError(f"date code {code} is past the end of the calendar") from e
    return target.year, target.month, target.day
