import re
from urllib.parse import quote, unquote
from featurehash.errors import MalformedTokenError
from featurehash.geometry import SHAPE_CLASSES, POINT, LINE_STRING, POLYGON

TOKEN_SEPARATOR = '\''
KEY_VALUE_SEPARATOR = '*'

DEFAULT_FONT_FAMILY = 'sans-serif'

HEX_COLOR_RE = re.compile(r'^#?([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$')
RGB_COLOR_RE = re.compile(r'^rgba?\(\s*([^,\s]+)\s*,\s*([^,\s]+)\s*,\s*([^,\s)]+)\s*(?:,\s*[^)]*)?\)$')

class StyleRecord(object):
  def __eq__(self, other):
    if type(other) is not type(self):
      return NotImplemented
    return self.__dict__ == other.__dict__

  def __ne__(self, other):
    result = self.__eq__(other)
    return result if result is NotImplemented else not result

  def __repr__(self):
    return '%s(%s)' % (type(self).__name__, ', '.join(['%s=%r' % item for item in sorted(self.__dict__.items())]))

class Fill(StyleRecord):
  def __init__(self, color=None):
    self.color = color

class Stroke(StyleRecord):
  def __init__(self, color=None, width=None):
    self.color = color
    self.width = width

class Circle(StyleRecord):
  def __init__(self, radius=None, fill=None, stroke=None):
    self.radius = radius
    self.fill = fill
    self.stroke = stroke

class Text(StyleRecord):
  def __init__(self, font=None, fill=None):
    self.font = font
    self.fill = fill

class Style(StyleRecord):
  def __init__(self, fill=None, stroke=None, image=None, text=None):
    self.fill = fill
    self.stroke = stroke
    self.image = image
    self.text = text

def escapeToken(text):
  # "~" is always safe for quote(), but it is a separator here
  return quote(text, safe='!*').replace('~', '%7E')

def unescapeToken(text):
  try:
    return unquote(text, errors='strict')
  except UnicodeDecodeError:
    raise MalformedTokenError('Invalid percent-encoding in token %r' % text)

def splitToken(text):
  keyVal = unescapeToken(text).split(KEY_VALUE_SEPARATOR)
  if len(keyVal) != 2:
    raise MalformedTokenError('Expected a single "%s" in token %r' % (KEY_VALUE_SEPARATOR, text))
  return keyVal[0], keyVal[1]

def formatNumber(value):
  if isinstance(value, bool):
    return 'true' if value else 'false'
  if isinstance(value, float) and value.is_integer():
    return str(int(value))
  return str(value)

def parseNumber(text):
  try:
    value = float(text)
  except ValueError:
    raise MalformedTokenError('Expected a number, got %r' % text)
  return int(value) if value.is_integer() else value

def colorToRgb(color):
  if isinstance(color, (list, tuple)):
    if len(color) < 3:
      return None
    return tuple([int(round(float(c))) for c in color[:3]])
  if not isinstance(color, str):
    return None
  color = color.strip()
  match = HEX_COLOR_RE.match(color)
  if match:
    digits = match.group(1)
    if len(digits) in (3, 4):
      return tuple([int(c * 2, 16) for c in digits[:3]])
    return tuple([int(digits[i:i + 2], 16) for i in (0, 2, 4)])
  match = RGB_COLOR_RE.match(color)
  if match:
    try:
      return tuple([int(round(float(c))) for c in match.groups()])
    except ValueError:
      return None
  return None

def colorToHex(color):
  rgb = colorToRgb(color)
  if rgb is None or not all([0 <= c <= 255 for c in rgb]):
    return None
  return '#%02x%02x%02x' % rgb

def normalizeColor(text):
  if HEX_COLOR_RE.match(text) and not text.startswith('#'):
    return '#' + text
  return text

def _appendToken(tokens, key, value):
  tokens.append(escapeToken(key + KEY_VALUE_SEPARATOR + value))

def encodeStyleFill(fillStyle, tokens, propertyName='fillColor', warning=None):
  if fillStyle.color is None:
    return
  colorHex = colorToHex(fillStyle.color)
  if colorHex is None:
    if warning:
      warning('Skipping unsupported color %r' % (fillStyle.color,))
    return
  _appendToken(tokens, propertyName, colorHex)

def encodeStyleStroke(strokeStyle, tokens, warning=None):
  if strokeStyle.color is not None:
    colorHex = colorToHex(strokeStyle.color)
    if colorHex is not None:
      _appendToken(tokens, 'strokeColor', colorHex)
    elif warning:
      warning('Skipping unsupported color %r' % (strokeStyle.color,))
  if strokeStyle.width is not None:
    _appendToken(tokens, 'strokeWidth', formatNumber(strokeStyle.width))

def encodeStylePoint(imageStyle, tokens, warning=None):
  if not isinstance(imageStyle, Circle):
    if warning:
      warning('Skipping unsupported image style %s' % type(imageStyle).__name__)
    return
  if imageStyle.radius is None:
    if warning:
      warning('Skipping circle style without radius')
    return
  _appendToken(tokens, 'pointRadius', formatNumber(imageStyle.radius))
  if imageStyle.fill is not None:
    encodeStyleFill(imageStyle.fill, tokens, warning=warning)
  if imageStyle.stroke is not None:
    encodeStyleStroke(imageStyle.stroke, tokens, warning=warning)

def encodeStyleText(textStyle, tokens, warning=None):
  if textStyle.font is not None:
    font = textStyle.font.split(' ')
    if len(font) >= 3:
      _appendToken(tokens, 'fontSize', font[1])
  if textStyle.fill is not None:
    encodeStyleFill(textStyle.fill, tokens, 'fontColor', warning=warning)

def encodeStyles(styles, geometryType, warning=None):
  styleType = SHAPE_CLASSES[geometryType]
  tokens = []
  for style in styles:
    if styleType == POLYGON:
      # the stroke of a polygon is only written together with its fill
      if style.fill is not None:
        encodeStyleFill(style.fill, tokens, warning=warning)
        if style.stroke is not None:
          encodeStyleStroke(style.stroke, tokens, warning=warning)
    elif styleType == LINE_STRING:
      if style.stroke is not None:
        encodeStyleStroke(style.stroke, tokens, warning=warning)
    elif styleType == POINT:
      if style.image is not None:
        encodeStylePoint(style.image, tokens, warning=warning)
    if style.text is not None:
      encodeStyleText(style.text, tokens, warning=warning)
  return tokens

def writeStyles(styles, geometryType, warning=None):
  return TOKEN_SEPARATOR.join(encodeStyles(styles, geometryType, warning))

def readStyle(text):
  values = {}
  for part in text.split(TOKEN_SEPARATOR):
    key, val = splitToken(part)
    if key in ('fillColor', 'fontColor', 'strokeColor'):
      values[key] = normalizeColor(val)
    elif key in ('pointRadius', 'strokeWidth'):
      values[key] = parseNumber(val)
    elif key == 'fontSize':
      values[key] = val

  fillStyle = None
  if 'fillColor' in values:
    fillStyle = Fill(values['fillColor'])
  strokeStyle = None
  if 'strokeColor' in values and 'strokeWidth' in values:
    strokeStyle = Stroke(values['strokeColor'], values['strokeWidth'])
  imageStyle = None
  if 'pointRadius' in values:
    imageStyle = Circle(values['pointRadius'], fillStyle, strokeStyle)
    fillStyle = strokeStyle = None
  textStyle = None
  if 'fontSize' in values and 'fontColor' in values:
    textStyle = Text('%s %s' % (values['fontSize'], DEFAULT_FONT_FAMILY), Fill(values['fontColor']))
  return Style(fill=fillStyle, stroke=strokeStyle, image=imageStyle, text=textStyle)
