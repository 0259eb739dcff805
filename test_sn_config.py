import json
import os
import tempfile
import unittest

from pydantic import ValidationError

from attribute_codec import AttributeCodec
from sn_config import SnConfig, default_config, kDefaultConfig, load_config
from sn_errors import ConfigError


kSampleFilename = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'sn_config_sample.json')


class SnConfigTestCase(unittest.TestCase):
  def setUp(self):
    self.tempdir = tempfile.TemporaryDirectory()

  def tearDown(self):
    self.tempdir.cleanup()

  def write_config(self, **overrides) -> str:
    filename = os.path.join(self.tempdir.name, 'config.json')
    with open(filename, 'w') as f:
      json.dump({**kDefaultConfig, **overrides}, f)
    return filename

  def test_default(self):
    config = default_config()
    config.check()
    self.assertIs(default_config(), config)
    self.assertEqual(config.base32_chars, '0123456789ABCDEFGHJKMNPQRSTVWXYZ')

  def test_sample_file(self):
    self.assertEqual(load_config(kSampleFilename).model_dump(), load_config().model_dump())

  def test_json_keys(self):
    config = load_config(self.write_config(packages={'a': 'BGA132'}))
    self.assertEqual(config.pcb_sizes[1], 'M.2 2280')  # JSON string keys become ints
    self.assertTrue(config.is_valid_package('A'))
    self.assertTrue(config.is_valid_package('a'))

    config = load_config(self.write_config(dram_sizes={'x': -1, 'a': 512}))
    self.assertEqual(config.dram_sizes, {'X': -1, 'A': 512})
    self.assertTrue(config.is_valid_dram_code('a'))
    self.assertEqual(config.dram_size_desc('a'), '512MB')
    self.assertEqual(AttributeCodec(config).code_to_memory_size('a'), 512)
    self.assertEqual(AttributeCodec(config).code_to_memory_size('x'), -1)

  def test_frozen(self):
    with self.assertRaises(ValidationError):
      default_config().base32_chars = '01'

  def test_empty_tables(self):
    for overrides in [{'base32_chars': ''}, {'pcb_sizes': {}}, {'dram_sizes': {}}, {'packages': {}}]:
      with self.assertRaises(ConfigError, msg=str(overrides)):
        load_config(self.write_config(**overrides))

  def test_bad_tables(self):
    for overrides in [
      {'base32_chars': '0'},
      {'base32_chars': '0123456789AA'},
      {'pcb_sizes': {'10': 'huge'}},
      {'dram_sizes': {'12': 512}},
      {'dram_sizes': {'X': 512}},
      {'packages': {'1': 'BGA132'}},
      {'dram_less_code': 'XX'},
      {'base32_chars': '0123\u00e9'},
      {'packages': {'\u00e9': 'BGA132'}},
      {'packages': {'a': 'BGA132', 'A': 'TSOP48'}},
      {'dram_sizes': {'1': 256, 'x': -1, 'X': -1}},
    ]:
      with self.assertRaises(ConfigError, msg=str(overrides)):
        load_config(self.write_config(**overrides))

  def test_chip_count_range(self):
    with self.assertRaises(ConfigError):
      load_config(self.write_config(chip_count={'min': 8, 'max': 4}))
    with self.assertRaises(ConfigError):
      load_config(self.write_config(chip_count={'min': 1, 'max': 17}))
    with self.assertRaises(ConfigError):
      load_config(self.write_config(chip_count={'min': 0, 'max': 16}))
    config = load_config(self.write_config(chip_count={'min': 4, 'max': 4}))
    self.assertTrue(config.is_valid_chip_count(4))
    self.assertFalse(config.is_valid_chip_count(5))

  def test_unreadable(self):
    with self.assertRaises(ConfigError):
      load_config(os.path.join(self.tempdir.name, 'missing.json'))
    filename = os.path.join(self.tempdir.name, 'broken.json')
    with open(filename, 'w') as f:
      f.write('{"base_date": ')
    with self.assertRaises(ConfigError):
      load_config(filename)

  def test_descriptions(self):
    config = default_config()
    self.assertEqual(config.pcb_size_name(1), 'M.2 2280')
    self.assertEqual(config.pcb_size_name(9), 'unknown size')
    self.assertEqual(config.dram_size_desc('1'), '256MB')
    self.assertEqual(config.dram_size_desc('3'), '1GB')
    self.assertEqual(config.dram_size_desc('x'), 'DRAMLess')
    self.assertEqual(config.dram_size_desc('Z'), 'unknown size')
    self.assertEqual(config.package_name('a'), 'BGA132')
    self.assertEqual(config.package_name('E'), 'unknown package')

  def test_config_info(self):
    info = default_config().config_info()
    self.assertIn("base date: 2025-1-1", info)
    self.assertIn("PCB sizes: 4 kinds", info)
    self.assertIn("chip count range: 1 - 16", info)

  def test_model_validate(self):
    config = SnConfig.model_validate(kDefaultConfig)
    self.assertEqual(config.dram_sizes['X'], -1)
    self.assertEqual(config.dram_less_code, 'X')
