import math
from featurehash.numbercodec import encodeSignedNumber, decodeSignedNumber, toInt32

DEFAULT_ACCURACY = 1

class CoordinateStream(object):
  """Delta codec for flat coordinate runs.

  The cursor (prevX, prevY) is shared by every run encoded or decoded through
  the same stream, so the parts of a multi-part geometry must go through a
  single stream. Create a new stream (or call reset) for each geometry.
  """

  def __init__(self, accuracy=DEFAULT_ACCURACY):
    if accuracy is None:
      accuracy = DEFAULT_ACCURACY
    if not accuracy > 0:
      raise ValueError('Accuracy must be positive, got %r' % (accuracy,))
    self.accuracy = accuracy
    self.prevX = 0
    self.prevY = 0

  def reset(self):
    self.prevX = 0
    self.prevY = 0

  def encodeCoord(self, x, y):
    x = int(math.floor(x / self.accuracy))
    y = int(math.floor(y / self.accuracy))
    dx = toInt32(x - self.prevX)
    dy = toInt32(y - self.prevY)
    self.prevX = x
    self.prevY = y
    return encodeSignedNumber(dx) + encodeSignedNumber(dy)

  def decodeCoord(self, text, offset=0):
    dx, offset = decodeSignedNumber(text, offset)
    dy, offset = decodeSignedNumber(text, offset)
    self.prevX += dx
    self.prevY += dy
    return (self.prevX * self.accuracy, self.prevY * self.accuracy), offset

  def encodeCoordinates(self, flatCoordinates, stride, offset, end):
    encoded = []
    for i in range(offset, end, stride):
      encoded.append(self.encodeCoord(flatCoordinates[i], flatCoordinates[i + 1]))
    return ''.join(encoded)

  def decodeCoordinates(self, text, flatCoordinates=None):
    if flatCoordinates is None:
      flatCoordinates = []
    offset = 0
    while offset < len(text):
      coord, offset = self.decodeCoord(text, offset)
      flatCoordinates.extend(coord)
    return flatCoordinates
