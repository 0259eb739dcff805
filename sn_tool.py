# Console front end for generating and parsing firmware codes.
# With a subcommand, runs once; with no subcommand, runs an interactive menu on the console.
import logging
import sys
from argparse import ArgumentParser
from typing import Callable, List, Optional

from firmware_code import FirmwareCode, ManufacturingAttributes
from sn_config import load_config
from sn_errors import ConfigError, SnError


log = logging.getLogger(__name__)

kMenu = """
1) generate firmware code
2) parse firmware code
3) show configuration
q) quit"""


def check_fields(codec: FirmwareCode, year: int, month: int, day: int, dram_size_mb: int,
                 package_code: str) -> Optional[str]:
  """Plausibility checks on raw user input, before it reaches the codec. Returns an error message, if any."""
  if year < codec.config.base_date.year:
    return f"year must not be before {codec.config.base_date.year}"
  if not 1 <= month <= 12:
    return "month must be between 1-12"
  if not 1 <= day <= 31:
    return "day must be between 1-31"
  if dram_size_mb != -1 and dram_size_mb <= 0:
    return "DRAM size must be positive, or -1 for DRAMLess"
  if len(package_code) != 1:
    return "package code must be a single letter"
  return None


def run_generate(codec: FirmwareCode, year: int, month: int, day: int, pcb_size: int, dram_size_mb: int,
                 package_code: str, chip_count: int) -> int:
  error = check_fields(codec, year, month, day, dram_size_mb, package_code)
  if error is not None:
    print(f"generate failed: {error}", file=sys.stderr)
    return 1
  attributes = ManufacturingAttributes(year=year, month=month, day=day, board_size=pcb_size,
                                       memory_size_mb=dram_size_mb, package_code=package_code,
                                       chip_count=chip_count)
  try:
    code = codec.generate(attributes)
  except SnError as e:
    print(f"generate failed: {e}", file=sys.stderr)
    return 1
  log.debug(f"generated {code} from {attributes}")
  print(code)
  return 0


def run_parse(codec: FirmwareCode, code: str) -> int:
  code = code.strip()
  if not code:
    print("parse failed: no firmware code given", file=sys.stderr)
    return 1
  try:
    attributes = codec.parse(code)
  except SnError as e:
    print(f"parse failed: {e}", file=sys.stderr)
    return 1
  for label, text in codec.describe(attributes):
    print(f"{label}: {text}")
  return 0


def run_scan(codec: FirmwareCode, filenames: List[str]) -> int:
  import scanner  # OpenCV is slow to import, only load it when scanning

  status = 0
  for filename in filenames:
    try:
      results = scanner.scan_image(codec, filename)
    except ValueError as e:
      print(f"scan failed: {e}", file=sys.stderr)
      status = 1
      continue
    if not results:
      print(f"{filename}: no firmware codes found")
    for result in results:
      if result.attributes is not None:
        print(f"{filename}: {result.text}")
        for label, text in codec.describe(result.attributes):
          print(f"  {label}: {text}")
      else:
        print(f"{filename}: {result.text} parse failed: {result.error}", file=sys.stderr)
        status = 1
  return status


def prompt_int(prompt: str, input_fn: Callable[[str], str]) -> Optional[int]:
  line = input_fn(prompt).strip()
  try:
    return int(line)
  except ValueError:
    print(f"invalid number '{line}'", file=sys.stderr)
    return None


def console_menu(codec: FirmwareCode, input_fn: Optional[Callable[[str], str]] = None) -> int:
  """Interactive menu, reading commands and fields line by line until quit or end of input"""
  if input_fn is None:
    input_fn = input
  while True:
    print(kMenu)
    try:
      choice = input_fn("> ").strip().lower()
      if choice == '1':
        fields = []
        for prompt in ("year: ", "month: ", "day: ", "PCB size: ", "DRAM size MB (-1 for DRAMLess): "):
          value = prompt_int(prompt, input_fn)
          if value is None:
            break
          fields.append(value)
        else:
          package_code = input_fn("package code: ").strip()
          chip_count = prompt_int("chip count: ", input_fn)
          if chip_count is not None:
            year, month, day, pcb_size, dram_size_mb = fields
            run_generate(codec, year, month, day, pcb_size, dram_size_mb, package_code, chip_count)
      elif choice == '2':
        run_parse(codec, input_fn("firmware code: "))
      elif choice == '3':
        print(codec.config.config_info())
      elif choice in ('q', 'quit', 'exit'):
        return 0
      else:
        print(f"unknown command {choice}")
    except EOFError:
      return 0


def build_parser() -> ArgumentParser:
  parser = ArgumentParser(description="Generate and parse SSD firmware version codes")
  parser.add_argument('--config', default=None, help="JSON configuration file, defaults to the built-in tables")
  parser.add_argument('--verbose', action='store_true', help="enable debug logging")
  subparsers = parser.add_subparsers(dest='command')

  generate = subparsers.add_parser('generate', help="generate a firmware code")
  generate.add_argument('year', type=int)
  generate.add_argument('month', type=int)
  generate.add_argument('day', type=int)
  generate.add_argument('pcb_size', type=int, help="PCB size code")
  generate.add_argument('dram_size', type=int, help="DRAM size in MB, -1 for DRAMLess")
  generate.add_argument('package', help="package code letter")
  generate.add_argument('chip_count', type=int, help="number of flash chips, 1-16")

  parse = subparsers.add_parser('parse', help="parse a firmware code")
  parse.add_argument('code')

  subparsers.add_parser('config', help="show the configuration")

  scan = subparsers.add_parser('scan', help="read firmware code labels from images")
  scan.add_argument('images', nargs='+')
  return parser


def main(argv: Optional[List[str]] = None) -> int:
  args = build_parser().parse_args(argv)

  handler = logging.StreamHandler(sys.stdout)
  handler.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))
  root = logging.getLogger()
  prev_level = root.level
  root.addHandler(handler)
  root.setLevel(logging.DEBUG if args.verbose else logging.WARNING)

  try:
    try:
      config = load_config(args.config)
    except ConfigError as e:
      print(f"firmware config validation failed: {e}", file=sys.stderr)
      return 1
    log.debug(f"loaded configuration from {args.config or 'built-in defaults'}")
    codec = FirmwareCode(config)

    if args.command == 'generate':
      return run_generate(codec, args.year, args.month, args.day, args.pcb_size, args.dram_size, args.package,
                          args.chip_count)
    elif args.command == 'parse':
      return run_parse(codec, args.code)
    elif args.command == 'config':
      print(config.config_info())
      return 0
    elif args.command == 'scan':
      return run_scan(codec, args.images)
    else:
      return console_menu(codec)
  finally:
    root.removeHandler(handler)
    root.setLevel(prev_level)


if __name__ == '__main__':
  sys.exit(main())
