# Error kinds raised by the firmware / SN code codecs.
# The codec never logs or recovers, every error goes straight to the caller.


class SnError(Exception):
  """Abstract base class for codec errors, rendered as '<kind>: <message>'"""
  kKind = 'SN error'

  def __init__(self, message: str):
    self.message = message
    super().__init__(f"{self.kKind}: {message}")


class ConfigError(SnError):
  """Configuration tables empty or malformed, fatal at startup"""
  kKind = 'config error'


class DateCodeError(SnError):
  """Invalid calendar date, or a date code that can't be decoded"""
  kKind = 'date code error'


class SnFormatError(SnError):
  """Code string has the wrong length or tag, or a field fails table lookup"""
  kKind = 'SN format error'


class InvalidParameter(SnError):
  """Attribute value supplied for encoding fails validation"""
  kKind = 'invalid parameter'
