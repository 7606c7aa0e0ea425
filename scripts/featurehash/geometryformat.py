# Text encoding of geometries. Every geometry is a one letter tag followed by
# parenthesized coordinate runs, e.g. "l(.-_!)" or "A(...'...)(...)".

from featurehash.coordinatestream import CoordinateStream
from featurehash.errors import MalformedPrefixError, MalformedTrailerError, MalformedGeometryError, UnknownGeometryTypeError, UnsupportedGeometryTypeError
from featurehash.geometry import Geometry, POINT, LINE_STRING, POLYGON, MULTI_POINT, MULTI_LINE_STRING, MULTI_POLYGON

PART_SEPARATOR = '\''
POLYGON_SEPARATOR = ')('

def _geometryBody(text, tag):
  if text[:2] != tag + '(':
    raise MalformedPrefixError('Expected "%s(" at the start of %r' % (tag, text))
  if len(text) < 3 or text[-1] != ')':
    raise MalformedTrailerError('Missing closing bracket in %r' % text)
  return text[2:-1]

def _decodeRing(stream, text, flatCoordinates):
  start = len(flatCoordinates)
  stream.decodeCoordinates(text, flatCoordinates)
  if len(flatCoordinates) == start:
    raise MalformedGeometryError('Empty polygon ring')
  # the closing point is not encoded, it repeats the first point of the ring
  flatCoordinates.append(flatCoordinates[start])
  flatCoordinates.append(flatCoordinates[start + 1])
  return len(flatCoordinates)

def readPointGeometry(stream, text):
  flatCoordinates = stream.decodeCoordinates(_geometryBody(text, 'p'))
  if len(flatCoordinates) != 2:
    raise MalformedGeometryError('Point must have exactly one coordinate, got %d' % (len(flatCoordinates) // 2))
  return Geometry(POINT, flatCoordinates)

def readLineStringGeometry(stream, text):
  return Geometry(LINE_STRING, stream.decodeCoordinates(_geometryBody(text, 'l')))

def readMultiPointGeometry(stream, text):
  return Geometry(MULTI_POINT, stream.decodeCoordinates(_geometryBody(text, 'P')))

def readMultiLineStringGeometry(stream, text):
  text = _geometryBody(text, 'L')
  flatCoordinates = []
  ends = []
  for lineString in (text.split(PART_SEPARATOR) if text else []):
    stream.decodeCoordinates(lineString, flatCoordinates)
    ends.append(len(flatCoordinates))
  return Geometry(MULTI_LINE_STRING, flatCoordinates, ends=ends)

def readPolygonGeometry(stream, text):
  text = _geometryBody(text, 'a')
  flatCoordinates = []
  ends = []
  for ring in (text.split(PART_SEPARATOR) if text else []):
    ends.append(_decodeRing(stream, ring, flatCoordinates))
  return Geometry(POLYGON, flatCoordinates, ends=ends)

def readMultiPolygonGeometry(stream, text):
  text = _geometryBody(text, 'A')
  flatCoordinates = []
  endss = []
  for polygon in (text.split(POLYGON_SEPARATOR) if text else []):
    ends = []
    for ring in polygon.split(PART_SEPARATOR):
      ends.append(_decodeRing(stream, ring, flatCoordinates))
    endss.append(ends)
  return Geometry(MULTI_POLYGON, flatCoordinates, endss=endss)

def _encodeRings(stream, flatCoordinates, stride, offset, ends, textArray):
  for i, end in enumerate(ends):
    # skip the closing point
    text = stream.encodeCoordinates(flatCoordinates, stride, offset, end - stride)
    if i != 0:
      textArray.append(PART_SEPARATOR)
    textArray.append(text)
    offset = end
  return offset

def writePointGeometry(stream, geometry):
  flatCoordinates = geometry.flatCoordinates
  return 'p(' + stream.encodeCoordinates(flatCoordinates, geometry.stride, 0, len(flatCoordinates)) + ')'

def writeLineStringGeometry(stream, geometry):
  flatCoordinates = geometry.flatCoordinates
  return 'l(' + stream.encodeCoordinates(flatCoordinates, geometry.stride, 0, len(flatCoordinates)) + ')'

def writeMultiPointGeometry(stream, geometry):
  flatCoordinates = geometry.flatCoordinates
  return 'P(' + stream.encodeCoordinates(flatCoordinates, geometry.stride, 0, len(flatCoordinates)) + ')'

def writeMultiLineStringGeometry(stream, geometry):
  textArray = ['L(']
  offset = 0
  for i, end in enumerate(geometry.ends):
    if i != 0:
      textArray.append(PART_SEPARATOR)
    textArray.append(stream.encodeCoordinates(geometry.flatCoordinates, geometry.stride, offset, end))
    offset = end
  textArray.append(')')
  return ''.join(textArray)

def writePolygonGeometry(stream, geometry):
  textArray = ['a(']
  _encodeRings(stream, geometry.flatCoordinates, geometry.stride, 0, geometry.ends, textArray)
  textArray.append(')')
  return ''.join(textArray)

def writeMultiPolygonGeometry(stream, geometry):
  if not geometry.endss:
    return 'A()'
  textArray = ['A']
  offset = 0
  for ends in geometry.endss:
    textArray.append('(')
    offset = _encodeRings(stream, geometry.flatCoordinates, geometry.stride, offset, ends, textArray)
    textArray.append(')')
  return ''.join(textArray)

GEOMETRY_READERS = {
  'P': readMultiPointGeometry,
  'L': readMultiLineStringGeometry,
  'A': readMultiPolygonGeometry,
  'l': readLineStringGeometry,
  'p': readPointGeometry,
  'a': readPolygonGeometry
}

GEOMETRY_WRITERS = {
  MULTI_LINE_STRING: writeMultiLineStringGeometry,
  MULTI_POINT: writeMultiPointGeometry,
  MULTI_POLYGON: writeMultiPolygonGeometry,
  LINE_STRING: writeLineStringGeometry,
  POINT: writePointGeometry,
  POLYGON: writePolygonGeometry
}

def readGeometry(text, accuracy=None):
  if not text:
    raise MalformedPrefixError('Empty geometry text')
  reader = GEOMETRY_READERS.get(text[0], None)
  if reader is None:
    raise UnknownGeometryTypeError('Unknown geometry tag %r' % text[0])
  return reader(CoordinateStream(accuracy), text)

def writeGeometry(geometry, accuracy=None):
  writer = GEOMETRY_WRITERS.get(getattr(geometry, 'type', None), None)
  if writer is None:
    raise UnsupportedGeometryTypeError('Unsupported geometry: %r' % (geometry,))
  return writer(CoordinateStream(accuracy), geometry)
