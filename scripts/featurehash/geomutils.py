import shapely.errors
import shapely.geometry

def validateGeometry(geometry):
  if geometry['type'][:5].lower() == 'multi':
    return all([validateGeometry({ 'type': geometry['type'][5:], 'coordinates': coords }) for coords in geometry['coordinates']])
  try:
    return shapely.geometry.shape(geometry).is_valid
  except (ValueError, TypeError, IndexError, shapely.errors.ShapelyError):
    return False

def listGeometryPoints(geometry):
  geometryType = geometry['type'].lower()
  if geometryType == 'multipolygon':
    return [point for rings in geometry['coordinates'] for ring in rings for point in ring]
  elif geometryType in ('polygon', 'multilinestring'):
    return [point for ring in geometry['coordinates'] for point in ring]
  elif geometryType in ('linestring', 'multipoint'):
    return [point for point in geometry['coordinates']]
  elif geometryType == 'point':
    return [geometry['coordinates']] if len(geometry['coordinates']) > 0 else []
  return []

def calculateGeometryBounds(geometry):
  points = listGeometryPoints(geometry)
  xs = [float(point[0]) for point in points]
  ys = [float(point[1]) for point in points]
  return (min(xs), min(ys), max(xs), max(ys)) if points else None

def mergeBounds(bounds1, bounds2):
  if bounds1 is None:
    return bounds2
  if bounds2 is None:
    return bounds1
  return (min(bounds1[0], bounds2[0]), min(bounds1[1], bounds2[1]), max(bounds1[2], bounds2[2]), max(bounds1[3], bounds2[3]))
