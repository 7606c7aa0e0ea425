class FeatureHashError(ValueError):
  pass

class MalformedPrefixError(FeatureHashError):
  pass

class MalformedTrailerError(FeatureHashError):
  pass

class InvalidCharacterError(FeatureHashError):
  def __init__(self, char, position):
    super(InvalidCharacterError, self).__init__('Invalid character %r at position %d' % (char, position))
    self.char = char
    self.position = position

class TruncatedNumberError(FeatureHashError):
  pass

class UnknownGeometryTypeError(FeatureHashError):
  pass

class MalformedGeometryError(FeatureHashError):
  pass

class MalformedTokenError(FeatureHashError):
  pass

class UnsupportedGeometryTypeError(FeatureHashError):
  pass
