# Reads firmware code labels from photos / scans of SSD labels, using OpenCV to load the image
# and zxing-cpp to find and decode the barcodes in it.
import logging
from typing import List, Optional

import cv2
import zxingcpp

from firmware_code import FirmwareCode, ManufacturingAttributes
from sn_errors import SnError


log = logging.getLogger(__name__)


class ScanResult:
  """One barcode found in an image: either the parsed attributes, or the error message from parsing"""
  def __init__(self, text: str, attributes: Optional[ManufacturingAttributes] = None,
               error: Optional[str] = None):
    self.text = text
    self.attributes = attributes
    self.error = error

  def __repr__(self):
    if self.attributes is not None:
      return f"{self.text}={self.attributes}"
    else:
      return f"{self.text} ({self.error})"


def is_candidate(codec: FirmwareCode, text: str) -> bool:
  """Whether the barcode text looks like a firmware code, other barcodes on the label (eg, part numbers) are skipped"""
  return len(text) == codec.kLength and text.upper().startswith(codec.kTag)


def scan_image(codec: FirmwareCode, filename: str) -> List[ScanResult]:
  image = cv2.imread(filename)
  if image is None:
    raise ValueError(f"failed to read image {filename}")

  barcodes = zxingcpp.read_barcodes(image)
  log.debug(f"{filename}: found {len(barcodes)} barcodes")

  results = []
  for barcode in barcodes:
    text = barcode.text.strip()
    if not is_candidate(codec, text):
      log.debug(f"{filename}: skipping non-firmware-code barcode {text}")
      continue
    try:
      results.append(ScanResult(text, attributes=codec.parse(text)))
    except SnError as e:  # a bad label shouldn't stop the rest of the image from being read
      results.append(ScanResult(text, error=str(e)))
  return results
