# Single-character encodings of the manufacturing attributes in a firmware code,
# validated against the configuration tables.
from sn_config import SnConfig, ascii_upper
from sn_errors import InvalidParameter


kDecimalDigits = '0123456789'


class AttributeCodec:
  """Maps board size, DRAM size, package and chip count to / from their code characters"""
  def __init__(self, config: SnConfig):
    self._config = config

  # board size: a single decimal digit that is a key of the PCB size table
  def is_valid_board_size(self, size: int) -> bool:
    return self._config.is_valid_pcb_size(size)

  def board_size_to_char(self, size: int) -> str:
    if not self.is_valid_board_size(size):
      raise InvalidParameter(f"invalid PCB size code {size}")
    return str(size)

  def char_to_board_size(self, c: str) -> int:
    if len(c) != 1 or c not in kDecimalDigits:
      raise InvalidParameter(f"PCB size code must be a decimal digit, got '{c}'")
    return int(c)

  # DRAM size: sentinel -1 (DRAMLess) has a reserved code, other sizes are looked up by value
  def is_valid_memory_code(self, c: str) -> bool:
    return self._config.is_valid_dram_code(c)

  def memory_size_to_code(self, size_mb: int) -> str:
    if size_mb == -1:
      return self._config.dram_less_code
    for code, table_size in self._config.dram_sizes.items():  # first match wins
      if code != self._config.dram_less_code and table_size == size_mb:
        return code
    raise InvalidParameter(f"unsupported DRAM size {size_mb}MB")

  def code_to_memory_size(self, c: str) -> int:
    c = ascii_upper(c)
    if c == self._config.dram_less_code:
      return -1
    if c not in self._config.dram_sizes:
      raise InvalidParameter(f"unknown DRAM size code '{c}'")
    return self._config.dram_sizes[c]

  # package: a letter from the package table, canonically uppercase
  def is_valid_package(self, c: str) -> bool:
    return self._config.is_valid_package(c)

  def package_to_char(self, c: str) -> str:
    if not self.is_valid_package(c):
      raise InvalidParameter(f"invalid package code '{c}'")
    return ascii_upper(c)

  # chip count: 1-9 as digits, 10-15 as A-F, 16 as G
  def is_valid_chip_count(self, count: int) -> bool:
    return self._config.is_valid_chip_count(count)

  @staticmethod
  def chip_count_to_char(count: int) -> str:
    if 1 <= count <= 9:
      return chr(ord('0') + count)
    elif 10 <= count <= 15:
      return chr(ord('A') + count - 10)
    elif count == 16:
      return 'G'
    else:
      raise InvalidParameter(f"chip count {count} out of range (1-16)")

  @staticmethod
  def char_to_chip_count(c: str) -> int:
    """Decodes a chip count character. '0' decodes to 0, which callers must range-check themselves."""
    if len(c) != 1:
      raise InvalidParameter(f"invalid chip count code '{c}'")
    if '0' <= c <= '9':
      return ord(c) - ord('0')
    elif 'A' <= c <= 'F':
      return 10 + ord(c) - ord('A')
    elif 'a' <= c <= 'f':
      return 10 + ord(c) - ord('a')
    elif c in ('G', 'g'):
      return 16
    else:
      raise InvalidParameter(f"invalid chip count code '{c}'")
