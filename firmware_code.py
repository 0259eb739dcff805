# Firmware version code for labeling SSDs, an 8-character string:
#   S <date:3> <PCB size:1 digit> <DRAM size:1> <package:1 upper> <chip count:1>
# e.g. S0AE13A4 = 2025-12-01, PCB size 1, 1024MB DRAM, package A, 4 chips (with the default tables)
import datetime
import functools
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict

from attribute_codec import AttributeCodec
from date_codec import DateCodec
from sn_config import SnConfig, ascii_upper, default_config, format_dram_size
from sn_errors import InvalidParameter, SnFormatError


class ManufacturingAttributes(BaseModel):
  """Decoded contents of a firmware code"""
  model_config = ConfigDict(frozen=True)

  year: int
  month: int
  day: int
  board_size: int
  memory_size_mb: int  # -1 for DRAMLess
  package_code: str
  chip_count: int

  @property
  def production_date(self) -> datetime.date:
    return datetime.date(self.year, self.month, self.day)

  def as_tuple(self) -> Tuple[int, int, int, int, int, str, int]:
    return (self.year, self.month, self.day, self.board_size, self.memory_size_mb, self.package_code,
            self.chip_count)


class FirmwareCode:
  kTag = 'S'
  kLength = 8
  kDateSlice = slice(1, 4)
  kBoardPos = 4
  kMemoryPos = 5
  kPackagePos = 6
  kChipsPos = 7

  def __init__(self, config: SnConfig):
    self.config = config
    self.dates = DateCodec(config, width=self.kDateSlice.stop - self.kDateSlice.start)
    self.attributes = AttributeCodec(config)

  def generate(self, attributes: ManufacturingAttributes) -> str:
    if not self.attributes.is_valid_board_size(attributes.board_size):
      raise InvalidParameter(f"invalid PCB size code {attributes.board_size}")
    if not self.attributes.is_valid_chip_count(attributes.chip_count):
      raise InvalidParameter(f"chip count {attributes.chip_count} out of range "
                             f"({self.config.chip_count.min}-{self.config.chip_count.max})")
    if not self.attributes.is_valid_package(attributes.package_code):
      raise InvalidParameter(f"invalid package code '{attributes.package_code}'")

    date_code = self.dates.encode_date(attributes.year, attributes.month, attributes.day)
    memory_code = self.attributes.memory_size_to_code(attributes.memory_size_mb)
    chips_code = self.attributes.chip_count_to_char(attributes.chip_count)

    return (self.kTag + date_code + self.attributes.board_size_to_char(attributes.board_size) + memory_code +
            self.attributes.package_to_char(attributes.package_code) + chips_code)

  def parse(self, code: str) -> ManufacturingAttributes:
    if len(code) != self.kLength or not code.startswith(self.kTag):
      raise SnFormatError(f"invalid firmware code format '{code}', "
                          f"expected {self.kLength} characters starting with {self.kTag}")
    if not code.isascii():
      raise SnFormatError(f"firmware code '{code}' contains non-ASCII characters")

    year, month, day = self.dates.decode_date(code[self.kDateSlice])  # DateCodeError propagates as-is

    try:
      board_size = self.attributes.char_to_board_size(code[self.kBoardPos])
    except InvalidParameter as e:
      raise SnFormatError(f"invalid PCB size code '{code[self.kBoardPos]}'") from e
    if not self.attributes.is_valid_board_size(board_size):
      raise SnFormatError(f"invalid PCB size code '{code[self.kBoardPos]}'")

    memory_code = code[self.kMemoryPos]
    if not self.attributes.is_valid_memory_code(memory_code):
      raise SnFormatError(f"invalid DRAM size code '{memory_code}'")
    memory_size_mb = self.attributes.code_to_memory_size(memory_code)

    package_code = code[self.kPackagePos]
    if not self.attributes.is_valid_package(package_code):
      raise SnFormatError(f"invalid package code '{package_code}'")

    chip_count = self.attributes.char_to_chip_count(code[self.kChipsPos])
    if not self.attributes.is_valid_chip_count(chip_count):
      raise SnFormatError(f"invalid chip count {chip_count}")

    return ManufacturingAttributes(year=year, month=month, day=day, board_size=board_size,
                                   memory_size_mb=memory_size_mb, package_code=ascii_upper(package_code),
                                   chip_count=chip_count)

  def describe(self, attributes: ManufacturingAttributes) -> List[Tuple[str, str]]:
    """Returns (label, text) rows for displaying parsed attributes"""
    return [
      ("production date", f"{attributes.year}-{attributes.month:02}-{attributes.day:02}"),
      ("PCB size", f"{attributes.board_size} ({self.config.pcb_size_name(attributes.board_size)})"),
      ("DRAM size", format_dram_size(attributes.memory_size_mb)),
      ("package", f"{attributes.package_code} ({self.config.package_name(attributes.package_code)})"),
      ("chip count", str(attributes.chip_count)),
    ]


@functools.lru_cache(maxsize=None)
def default_codec() -> FirmwareCode:
  return FirmwareCode(default_config())


def generate_firmware_code(year: int, month: int, day: int, pcb_size: int, dram_size_mb: int,
                           package_code: str, chip_count: int) -> str:
  """Generates a firmware code using the default configuration"""
  return default_codec().generate(ManufacturingAttributes(
    year=year, month=month, day=day, board_size=pcb_size, memory_size_mb=dram_size_mb,
    package_code=package_code, chip_count=chip_count))


def parse_firmware_code(code: str) -> Tuple[int, int, int, int, int, str, int]:
  """Parses a firmware code using the default configuration, returning
  (year, month, day, pcb_size, dram_size_mb, package_code, chip_count)"""
  return default_codec().parse(code).as_tuple()
