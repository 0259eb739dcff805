import functools
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sn_errors import ConfigError


# Firmware code configuration, using Pydantic for deserialization.
# Loaded once at startup (from a JSON file, or the embedded default below) and shared read-only afterwards.


def ascii_upper(value: str) -> str:
    """Uppercases ASCII letters only, so non-ASCII characters never fold onto a table entry (eg, U+017F to S)"""
    return ''.join(c.upper() if c.isascii() else c for c in value)


class BaseDate(BaseModel):
    """Epoch that date codes count days from"""
    model_config = ConfigDict(frozen=True)

    year: int
    month: int
    day: int


class ChipCountRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: int = Field(ge=1, le=16)
    max: int = Field(ge=1, le=16)


class SnConfig(BaseModel):
    """Epoch, date code alphabet and the lookup tables each code field is validated against."""
    model_config = ConfigDict(frozen=True)

    base_date: BaseDate
    base32_chars: str
    pcb_sizes: Dict[int, str]  # board size digit -> form factor name
    dram_sizes: Dict[str, int]  # memory code -> size in MB, -1 for DRAMLess
    packages: Dict[str, str]  # package letter -> package name
    chip_count: ChipCountRange
    sn_format: str = "S + date(3) + PCB size(1) + DRAM size(1) + package(1) + chip count(1)"
    dram_less_code: str = 'X'  # reserved memory code for no DRAM installed

    @field_validator('base32_chars', 'dram_less_code')
    @classmethod
    def _upper_str(cls, value: str) -> str:
        return ascii_upper(value)

    @field_validator('dram_sizes', 'packages')
    @classmethod
    def _upper_keys(cls, value: Dict[str, object]) -> Dict[str, object]:
        upper = {ascii_upper(code): entry for code, entry in value.items()}
        if len(upper) != len(value):
            raise ValueError(f"codes differing only in case: {sorted(value)}")
        return upper

    def check(self) -> None:
        """Sanity-checks the tables, raising a ConfigError describing the first problem found."""
        if not self.base32_chars:
            raise ConfigError("base32 alphabet must not be empty")
        if len(self.base32_chars) < 2:
            raise ConfigError("base32 alphabet needs at least 2 characters")
        if len(set(self.base32_chars)) != len(self.base32_chars):
            raise ConfigError(f"base32 alphabet has repeated characters: {self.base32_chars}")
        if not self.base32_chars.isascii():
            raise ConfigError(f"base32 alphabet must be ASCII: {self.base32_chars}")

        if not self.pcb_sizes:
            raise ConfigError("PCB size table must not be empty")
        for size in self.pcb_sizes:
            if not 0 <= size <= 9:
                raise ConfigError(f"PCB size code {size} is not a single digit")

        if not self.dram_sizes:
            raise ConfigError("DRAM size table must not be empty")
        if len(self.dram_less_code) != 1:
            raise ConfigError(f"DRAMLess code must be a single character, got '{self.dram_less_code}'")
        for code, size_mb in self.dram_sizes.items():
            if len(code) != 1 or not code.isascii():
                raise ConfigError(f"DRAM size code '{code}' is not a single ASCII character")
            if code == self.dram_less_code and size_mb != -1:
                raise ConfigError(f"DRAMLess code '{code}' must map to -1, got {size_mb}")

        if not self.packages:
            raise ConfigError("package table must not be empty")
        for code in self.packages:
            if len(code) != 1 or not code.isascii() or not code.isalpha():
                raise ConfigError(f"package code '{code}' is not a single ASCII letter")

        if self.chip_count.min > self.chip_count.max:
            raise ConfigError(f"invalid chip count range {self.chip_count.min}-{self.chip_count.max}")

    def is_valid_pcb_size(self, size: int) -> bool:
        return size in self.pcb_sizes

    def is_valid_dram_code(self, code: str) -> bool:
        code = ascii_upper(code)
        return code == self.dram_less_code or code in self.dram_sizes

    def is_valid_package(self, code: str) -> bool:
        return ascii_upper(code) in self.packages

    def is_valid_chip_count(self, count: int) -> bool:
        return self.chip_count.min <= count <= self.chip_count.max

    def pcb_size_name(self, size: int) -> str:
        return self.pcb_sizes.get(size, "unknown size")

    def dram_size_desc(self, code: str) -> str:
        code = ascii_upper(code)
        if code == self.dram_less_code:
            return "DRAMLess"
        size_mb = self.dram_sizes.get(code)
        if size_mb is None:
            return "unknown size"
        return format_dram_size(size_mb)

    def package_name(self, code: str) -> str:
        return self.packages.get(ascii_upper(code), "unknown package")

    def config_info(self) -> str:
        return (f"Configuration:\n"
                f"  base date: {self.base_date.year}-{self.base_date.month}-{self.base_date.day}\n"
                f"  PCB sizes: {len(self.pcb_sizes)} kinds\n"
                f"  DRAM sizes: {len(self.dram_sizes)} kinds\n"
                f"  packages: {len(self.packages)} kinds\n"
                f"  chip count range: {self.chip_count.min} - {self.chip_count.max} (1-F/G)\n"
                f"  SN format: {self.sn_format}")


def format_dram_size(size_mb: int) -> str:
    if size_mb == -1:
        return "DRAMLess"
    elif size_mb < 1024:
        return f"{size_mb}MB"
    else:
        return f"{size_mb // 1024}GB"


kDefaultConfig = {
    'base_date': {'year': 2025, 'month': 1, 'day': 1},
    'base32_chars': '0123456789ABCDEFGHJKMNPQRSTVWXYZ',  # no I, L, O, U
    'pcb_sizes': {
        1: 'M.2 2280',
        2: 'M.2 2242',
        3: 'M.2 2230',
        4: '2.5 inch',
    },
    'dram_sizes': {
        '1': 256,
        '2': 512,
        '3': 1024,
        '4': 2048,
        '5': 4096,
        '6': 8192,
        'X': -1,
    },
    'packages': {
        'A': 'BGA132',
        'B': 'BGA152',
        'C': 'BGA272',
        'D': 'TSOP48',
    },
    'chip_count': {'min': 1, 'max': 16},
}


def load_config(filename: Optional[str] = None) -> SnConfig:
    """Loads and checks a configuration from a JSON file, or the embedded default if no filename is given.
    All failures are reported as ConfigError."""
    try:
        if filename is None:
            config = SnConfig.model_validate(kDefaultConfig)
        else:
            with open(filename) as f:
                config = SnConfig.model_validate_json(f.read())
    except OSError as e:
        raise ConfigError(f"can't read {filename}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"malformed configuration: {e}") from e
    config.check()
    return config


@functools.lru_cache(maxsize=None)
def default_config() -> SnConfig:
    return load_config()
