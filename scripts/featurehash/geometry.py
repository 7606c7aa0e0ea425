import shapely.geometry
from featurehash.errors import UnsupportedGeometryTypeError

POINT = 'Point'
LINE_STRING = 'LineString'
POLYGON = 'Polygon'
MULTI_POINT = 'MultiPoint'
MULTI_LINE_STRING = 'MultiLineString'
MULTI_POLYGON = 'MultiPolygon'

GEOMETRY_TYPES = (POINT, LINE_STRING, POLYGON, MULTI_POINT, MULTI_LINE_STRING, MULTI_POLYGON)

# Shape class used when deciding which style properties apply
SHAPE_CLASSES = {
  POINT: POINT,
  MULTI_POINT: POINT,
  LINE_STRING: LINE_STRING,
  MULTI_LINE_STRING: LINE_STRING,
  POLYGON: POLYGON,
  MULTI_POLYGON: POLYGON
}

class Geometry(object):
  def __init__(self, type, flatCoordinates=None, stride=2, ends=None, endss=None):
    if type not in GEOMETRY_TYPES:
      raise UnsupportedGeometryTypeError('Unsupported geometry type: %s' % type)
    self.type = type
    self.flatCoordinates = list(flatCoordinates) if flatCoordinates is not None else []
    self.stride = stride
    self.ends = list(ends) if ends is not None else []
    self.endss = [list(ends) for ends in endss] if endss is not None else []

  @property
  def shapeClass(self):
    return SHAPE_CLASSES[self.type]

  def __eq__(self, other):
    if not isinstance(other, Geometry):
      return NotImplemented
    return self.getCoordinates() == other.getCoordinates() and self.type == other.type

  def __ne__(self, other):
    result = self.__eq__(other)
    return result if result is NotImplemented else not result

  def __repr__(self):
    return 'Geometry(%s, %r)' % (self.type, self.getCoordinates())

  def _coords(self, offset, end):
    return [tuple(self.flatCoordinates[i:i + self.stride]) for i in range(offset, end, self.stride)]

  def _rings(self, offset, ends):
    rings = []
    for end in ends:
      rings.append(self._coords(offset, end))
      offset = end
    return rings, offset

  def getCoordinates(self):
    end = len(self.flatCoordinates)
    if self.type == POINT:
      return tuple(self.flatCoordinates[:self.stride])
    elif self.type in (LINE_STRING, MULTI_POINT):
      return self._coords(0, end)
    elif self.type in (POLYGON, MULTI_LINE_STRING):
      return self._rings(0, self.ends)[0]
    polygons = []
    offset = 0
    for ends in self.endss:
      rings, offset = self._rings(offset, ends)
      polygons.append(rings)
    return polygons

  def getGeometryType(self):
    return self.type

  def toGeoJSON(self):
    return { 'type': self.type, 'coordinates': _listify(self.getCoordinates()) }

  @property
  def __geo_interface__(self):
    return self.toGeoJSON()

  def toShape(self):
    return shapely.geometry.shape(self.toGeoJSON())

  @staticmethod
  def fromCoordinates(type, coordinates):
    if type not in GEOMETRY_TYPES:
      raise UnsupportedGeometryTypeError('Unsupported geometry type: %s' % type)
    if type == POINT:
      coords = [coordinates] if len(coordinates) > 0 else []
      return Geometry(type, _flatten(coords), _stride(coords))
    elif type in (LINE_STRING, MULTI_POINT):
      return Geometry(type, _flatten(coordinates), _stride(coordinates))
    elif type in (POLYGON, MULTI_LINE_STRING):
      parts = [_closeRing(ring) for ring in coordinates] if type == POLYGON else coordinates
      stride = _stride([coord for part in parts for coord in part])
      flatCoordinates = []
      ends = []
      for part in parts:
        flatCoordinates += _flatten(part, stride)
        ends.append(len(flatCoordinates))
      return Geometry(type, flatCoordinates, stride, ends=ends)
    stride = _stride([coord for rings in coordinates for ring in rings for coord in ring])
    flatCoordinates = []
    endss = []
    for rings in coordinates:
      ends = []
      for ring in rings:
        flatCoordinates += _flatten(_closeRing(ring), stride)
        ends.append(len(flatCoordinates))
      endss.append(ends)
    return Geometry(type, flatCoordinates, stride, endss=endss)

  @staticmethod
  def fromGeoJSON(geojson):
    if geojson is None:
      return None
    if geojson['type'] not in GEOMETRY_TYPES:
      raise UnsupportedGeometryTypeError('Unsupported geometry type: %s' % geojson['type'])
    return Geometry.fromCoordinates(geojson['type'], geojson['coordinates'])

  @staticmethod
  def fromShape(shape):
    return Geometry.fromGeoJSON(shapely.geometry.mapping(shape))

def asGeometry(geometry):
  if geometry is None or isinstance(geometry, Geometry):
    return geometry
  if isinstance(geometry, dict):
    return Geometry.fromGeoJSON(geometry)
  if hasattr(geometry, '__geo_interface__'):
    return Geometry.fromGeoJSON(geometry.__geo_interface__)
  raise UnsupportedGeometryTypeError('Unsupported geometry object: %r' % (geometry,))

def _stride(coords):
  return max([len(coord) for coord in coords]) if coords else 2

def _flatten(coords, stride=None):
  if stride is None:
    stride = _stride(coords)
  flatCoordinates = []
  for coord in coords:
    flatCoordinates.extend(coord)
    flatCoordinates.extend([0] * (stride - len(coord)))
  return flatCoordinates

def _closeRing(ring):
  ring = [tuple(coord) for coord in ring]
  if ring and ring[0] != ring[-1]:
    ring.append(ring[0])
  return ring

def _listify(coordinates):
  if isinstance(coordinates, (list, tuple)):
    return [_listify(item) for item in coordinates]
  return coordinates
