import re
from tqdm import tqdm
from featurehash.coordinatestream import DEFAULT_ACCURACY
from featurehash.errors import MalformedPrefixError, MalformedTrailerError, UnsupportedGeometryTypeError
from featurehash.geometry import asGeometry
from featurehash.geometryformat import readGeometry, writeGeometry
from featurehash.styles import Style, TOKEN_SEPARATOR, KEY_VALUE_SEPARATOR, escapeToken, splitToken, formatNumber, encodeStyles, readStyle

COLLECTION_PREFIX = 'F'
ZONE_SEPARATOR = '~'
GEOMETRY_NAME = 'geometry'

RESERVED_CHARS_RE = re.compile(r'[()\'*]')

class Feature(object):
  def __init__(self, geometry=None, properties=None, style=None, geometryName=GEOMETRY_NAME):
    self.geometry = geometry
    self.properties = dict(properties) if properties else {}
    self.style = style
    self.geometryName = geometryName

  def __eq__(self, other):
    if not isinstance(other, Feature):
      return NotImplemented
    return asGeometry(self.geometry) == asGeometry(other.geometry) and self.properties == other.properties and self.getStyles() == other.getStyles()

  def __ne__(self, other):
    result = self.__eq__(other)
    return result if result is NotImplemented else not result

  def __repr__(self):
    return 'Feature(%r, %r, %r)' % (self.geometry, self.properties, self.style)

  def getProperties(self):
    return { key: val for key, val in self.properties.items() if key != self.geometryName }

  def getStyles(self, resolution=0):
    style = self.style
    if callable(style):
      style = style(self, resolution)
    if style is None:
      return []
    if isinstance(style, Style):
      return [style]
    return list(style)

def sanitizeProperty(text):
  return RESERVED_CHARS_RE.sub('_', text)

def _findRecordEnd(text, offset):
  # ")(" separates the polygons of a multipolygon, it never ends a record
  index = text.find(')', offset)
  while index >= 0 and text[index + 1:index + 2] == '(':
    index = text.find(')', index + 1)
  return index

class FeatureHash(object):
  def __init__(self, accuracy=DEFAULT_ACCURACY, verbose=False):
    if accuracy is None:
      accuracy = DEFAULT_ACCURACY
    if not accuracy > 0:
      raise ValueError('Accuracy must be positive, got %r' % (accuracy,))
    self.accuracy = accuracy
    self.verbose = verbose

  def info(self, msg):
    if self.verbose:
      tqdm.write('Info: %s' % msg)

  def warning(self, msg):
    if self.verbose:
      tqdm.write('Warning: %s' % msg)

  def progress(self, iterable, **kwargs):
    if self.verbose:
      for item in tqdm(iterable, **kwargs):
        yield item
    else:
      for item in iterable:
        yield item

  def readGeometry(self, text):
    return readGeometry(text, self.accuracy)

  def writeGeometry(self, geometry):
    return writeGeometry(asGeometry(geometry), self.accuracy)

  def readFeature(self, text):
    if len(text) <= 2 or text[1] != '(':
      raise MalformedPrefixError('Invalid feature text %r' % text)
    if text[-1] != ')':
      raise MalformedTrailerError('Missing closing bracket in feature text %r' % text)
    splitIndex = text.find(ZONE_SEPARATOR)
    geometryText = text[:splitIndex] + ')' if splitIndex >= 0 else text
    feature = Feature(self.readGeometry(geometryText))
    if splitIndex >= 0:
      attributesAndStylesText = text[splitIndex + 1:-1]
      splitIndex = attributesAndStylesText.find(ZONE_SEPARATOR)
      attributesText = attributesAndStylesText[:splitIndex] if splitIndex >= 0 else attributesAndStylesText
      if attributesText:
        for part in attributesText.split(TOKEN_SEPARATOR):
          key, val = splitToken(part)
          feature.properties[key] = val
      if splitIndex >= 0:
        stylesText = attributesAndStylesText[splitIndex + 1:]
        if stylesText:
          feature.style = readStyle(stylesText)
    return feature

  def readFeatures(self, text):
    features = []
    if not text:
      return features
    if text[0] != COLLECTION_PREFIX:
      raise MalformedPrefixError('Feature collection must start with "%s"' % COLLECTION_PREFIX)
    offset = 1
    while offset < len(text):
      end = _findRecordEnd(text, offset)
      if end < 0:
        raise MalformedTrailerError('Unterminated feature at position %d' % offset)
      features.append(self.readFeature(text[offset:end + 1]))
      offset = end + 1
    self.info('Decoded %d features' % len(features))
    return features

  def encodeProperties(self, feature):
    encodedProperties = []
    for key, value in feature.getProperties().items():
      if value is None:
        self.warning('Skipping property %s without value' % key)
        continue
      encoded = escapeToken(sanitizeProperty(str(key)) + KEY_VALUE_SEPARATOR + sanitizeProperty(formatNumber(value)))
      encodedProperties.append(encoded)
    return encodedProperties

  def writeFeature(self, feature):
    geometry = asGeometry(feature.geometry)
    if geometry is None:
      raise UnsupportedGeometryTypeError('Feature without geometry can not be encoded')
    # remove the final bracket, it is appended after properties and styles
    encodedParts = [self.writeGeometry(geometry)[:-1]]

    encodedProperties = self.encodeProperties(feature)
    if encodedProperties:
      encodedParts.append(ZONE_SEPARATOR)
      encodedParts.append(TOKEN_SEPARATOR.join(encodedProperties))

    encodedStyles = encodeStyles(feature.getStyles(0), geometry.type, self.warning)
    if encodedStyles:
      if not encodedProperties:
        encodedParts.append(ZONE_SEPARATOR)
      encodedParts.append(ZONE_SEPARATOR)
      encodedParts.append(TOKEN_SEPARATOR.join(encodedStyles))

    encodedParts.append(')')
    return ''.join(encodedParts)

  def writeFeatures(self, features):
    textArray = []
    if len(features) > 0:
      textArray.append(COLLECTION_PREFIX)
      for feature in self.progress(features, desc='Encoding features'):
        textArray.append(self.writeFeature(feature))
    return ''.join(textArray)

def encodeFeatures(features, accuracy=DEFAULT_ACCURACY, verbose=False):
  return FeatureHash(accuracy, verbose).writeFeatures(features)

def decodeFeatures(text, accuracy=DEFAULT_ACCURACY, verbose=False):
  return FeatureHash(accuracy, verbose).readFeatures(text)

def encodeFeature(feature, accuracy=DEFAULT_ACCURACY, verbose=False):
  return FeatureHash(accuracy, verbose).writeFeature(feature)

def decodeFeature(text, accuracy=DEFAULT_ACCURACY, verbose=False):
  return FeatureHash(accuracy, verbose).readFeature(text)

def encodeGeometry(geometry, accuracy=DEFAULT_ACCURACY):
  return FeatureHash(accuracy).writeGeometry(geometry)

def decodeGeometry(text, accuracy=DEFAULT_ACCURACY):
  return FeatureHash(accuracy).readGeometry(text)
