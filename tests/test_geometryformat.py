import pytest

from featurehash.errors import MalformedPrefixError, MalformedTrailerError, MalformedGeometryError, UnknownGeometryTypeError, UnsupportedGeometryTypeError
from featurehash.geometry import Geometry
from featurehash.geometryformat import readGeometry, writeGeometry


def roundtrip(geometry, accuracy=None):
  return readGeometry(writeGeometry(geometry, accuracy), accuracy)


class TestWriteGeometry:
  def test_point(self):
    assert writeGeometry(Geometry.fromCoordinates('Point', (5, 10))) == 'p(FP)'

  def test_line_string(self):
    assert writeGeometry(Geometry.fromCoordinates('LineString', [(0, 0), (1, 1), (2, 0)])) == 'l(..___-)'

  def test_multi_point(self):
    assert writeGeometry(Geometry.fromCoordinates('MultiPoint', [(0, 0), (1, 1)])) == 'P(..__)'

  def test_multi_line_string_chains_deltas(self):
    geometry = Geometry.fromCoordinates('MultiLineString', [[(0, 0), (1, 1)], [(2, 2), (3, 3)]])
    assert writeGeometry(geometry) == 'L(..__\'____)'

  def test_polygon_omits_closing_point(self):
    geometry = Geometry.fromCoordinates('Polygon', [[(0, 0), (4, 0), (4, 4), (0, 4)]])
    assert writeGeometry(geometry) == 'a(..D..DC.)'

  def test_closed_input_is_not_closed_twice(self):
    geometry = Geometry.fromCoordinates('Polygon', [[(0, 0), (4, 0), (4, 4), (0, 4), (0, 0)]])
    assert writeGeometry(geometry) == 'a(..D..DC.)'

  def test_multi_polygon(self):
    geometry = Geometry.fromCoordinates('MultiPolygon', [[[(0, 0), (1, 0), (1, 1)]], [[(0, 0), (1, 0), (1, 1)]]])
    assert writeGeometry(geometry) == 'A(.._.._)(--_.._)'

  def test_empty_multi_polygon(self):
    assert writeGeometry(Geometry('MultiPolygon')) == 'A()'

  def test_cursor_reset_per_call(self):
    geometry = Geometry.fromCoordinates('Point', (5, 10))
    assert writeGeometry(geometry) == writeGeometry(geometry)

  def test_unsupported(self):
    with pytest.raises(UnsupportedGeometryTypeError):
      writeGeometry(None)


class TestReadGeometry:
  def test_point(self):
    geometry = readGeometry('p(FP)')
    assert geometry.type == 'Point'
    assert geometry.getCoordinates() == (5, 10)

  def test_line_string(self):
    assert readGeometry('l(..___-)').getCoordinates() == [(0, 0), (1, 1), (2, 0)]

  def test_polygon_is_closed(self):
    geometry = readGeometry('a(..D..DC.)')
    ring = geometry.getCoordinates()[0]
    assert len(ring) == 5
    assert ring[-1] == ring[0] == (0, 0)
    assert geometry.ends == [10]

  def test_every_ring_closed_with_its_own_first_point(self):
    geometry = Geometry.fromCoordinates('Polygon', [[(0, 0), (10, 0), (10, 10), (0, 10)], [(2, 2), (4, 2), (4, 4)]])
    rings = roundtrip(geometry).getCoordinates()
    assert rings[1][0] == rings[1][-1] == (2, 2)

  def test_multi_polygon_rings_closed_with_their_own_first_point(self):
    geometry = Geometry.fromCoordinates('MultiPolygon', [
      [[(0, 0), (1, 0), (1, 1)]],
      [[(10, 10), (11, 10), (11, 11)], [(10.5, 10.5), (10.8, 10.5), (10.8, 10.8)]]
    ])
    polygons = roundtrip(geometry).getCoordinates()
    assert polygons[1][0][-1] == (10, 10)
    assert polygons[1][1][-1] == (10, 10)
    assert polygons[1][1][0] == (10, 10)

  def test_multi_polygon_ends_are_absolute(self):
    geometry = readGeometry('A(.._.._)(--_.._)')
    assert geometry.endss == [[8], [16]]

  @pytest.mark.parametrize('type,coordinates', [
    ('Point', (5, 10)),
    ('LineString', [(0, 0), (1, 1), (2, 0)]),
    ('MultiPoint', [(-3, 7), (100, -200), (100, -200)]),
    ('MultiLineString', [[(0, 0), (1, 1)], [(5, 5), (-5, -5), (7, 0)]]),
    ('Polygon', [[(0, 0), (4, 0), (4, 4), (0, 4), (0, 0)], [(1, 1), (2, 1), (2, 2), (1, 1)]]),
    ('MultiPolygon', [[[(0, 0), (4, 0), (4, 4), (0, 0)]], [[(10, 10), (14, 10), (14, 14), (10, 10)]]]),
  ])
  def test_roundtrip(self, type, coordinates):
    geometry = Geometry.fromCoordinates(type, coordinates)
    assert roundtrip(geometry) == geometry

  def test_roundtrip_with_accuracy(self):
    geometry = Geometry.fromCoordinates('LineString', [(600000.4, 200000.9), (600010.2, 199990.7)])
    decoded = roundtrip(geometry, 0.1)
    for (x, y), (x0, y0) in zip(decoded.getCoordinates(), geometry.getCoordinates()):
      assert x == pytest.approx(x0, abs=0.2)
      assert y == pytest.approx(y0, abs=0.2)

  @pytest.mark.parametrize('text', ['P()', 'L()', 'a()', 'A()', 'l()'])
  def test_empty(self, text):
    geometry = readGeometry(text)
    assert geometry.flatCoordinates == []
    assert writeGeometry(geometry) == text

  def test_unknown_tag(self):
    with pytest.raises(UnknownGeometryTypeError):
      readGeometry('x(..)')

  def test_empty_text(self):
    with pytest.raises(MalformedPrefixError):
      readGeometry('')

  def test_bad_prefix(self):
    with pytest.raises(MalformedPrefixError):
      readGeometry('p..)')

  def test_missing_trailer(self):
    with pytest.raises(MalformedTrailerError):
      readGeometry('p(..')

  def test_point_with_two_coordinates(self):
    with pytest.raises(MalformedGeometryError):
      readGeometry('p(....)')

  def test_empty_ring(self):
    with pytest.raises(MalformedGeometryError):
      readGeometry('a(..D.\'\')')
