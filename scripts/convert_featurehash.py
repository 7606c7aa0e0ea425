# Script for converting between GeoJSON and compact feature hashes usable in permalinks.

import io
import sys
import argparse
import geojson
import featurehash.geomutils as geomutils
from featurehash.coordinatestream import DEFAULT_ACCURACY
from featurehash.errors import FeatureHashError
from featurehash.featureformat import COLLECTION_PREFIX, Feature, FeatureHash
from featurehash.geometry import GEOMETRY_TYPES, Geometry
from featurehash.styles import Style, Fill, Stroke, Circle, Text, DEFAULT_FONT_FAMILY

# Simplestyle-like properties used for exporting and importing styles
STYLE_PROPERTIES = ('fill', 'stroke', 'stroke-width', 'marker-radius', 'font-size', 'font-color')

def readInput(input):
  if input == '-':
    return sys.stdin.read()
  with io.open(input, 'rt', encoding='utf-8') as f:
    return f.read()

def writeOutput(output, text):
  if output is None:
    print(text)
    return
  with io.open(output, 'wt', encoding='utf-8') as f:
    f.write(text)

def styleFromProperties(properties):
  fillStyle = Fill(properties['fill']) if 'fill' in properties else None
  strokeStyle = None
  if 'stroke' in properties or 'stroke-width' in properties:
    strokeStyle = Stroke(properties.get('stroke'), properties.get('stroke-width'))
  imageStyle = None
  if 'marker-radius' in properties:
    imageStyle = Circle(properties['marker-radius'], fillStyle, strokeStyle)
  textStyle = None
  if 'font-size' in properties or 'font-color' in properties:
    font = 'normal %s %s' % (properties['font-size'], DEFAULT_FONT_FAMILY) if 'font-size' in properties else None
    textStyle = Text(font, Fill(properties['font-color']) if 'font-color' in properties else None)
  if fillStyle is None and strokeStyle is None and imageStyle is None and textStyle is None:
    return None
  return Style(fill=fillStyle, stroke=strokeStyle, image=imageStyle, text=textStyle)

def styleToProperties(style):
  properties = {}
  fillStyle, strokeStyle = style.fill, style.stroke
  if style.image is not None:
    properties['marker-radius'] = style.image.radius
    fillStyle, strokeStyle = style.image.fill, style.image.stroke
  if fillStyle is not None:
    properties['fill'] = fillStyle.color
  if strokeStyle is not None:
    properties['stroke'] = strokeStyle.color
    properties['stroke-width'] = strokeStyle.width
  if style.text is not None:
    properties['font-size'] = style.text.font.split(' ')[0]
    properties['font-color'] = style.text.fill.color
  return properties

def loadFeatures(data, styles):
  if data['type'] in GEOMETRY_TYPES:
    return None, Geometry.fromGeoJSON(data)
  items = data['features'] if data['type'] == 'FeatureCollection' else [data]
  features = []
  for item in items:
    if item.get('geometry') is None:
      print('Skipping feature without geometry', file=sys.stderr)
      continue
    properties = dict(item.get('properties') or {})
    style = None
    if styles:
      style = styleFromProperties(properties)
      properties = { key: val for key, val in properties.items() if key not in STYLE_PROPERTIES }
    features.append(Feature(Geometry.fromGeoJSON(item['geometry']), properties, style))
  return features, None

def encode(args):
  data = geojson.loads(readInput(args.input))
  features, geometry = loadFeatures(data, args.styles)
  geometries = [geometry] if geometry is not None else [feature.geometry for feature in features]
  if args.validate:
    for i, geom in enumerate(geometries):
      if not geomutils.validateGeometry(geom.toGeoJSON()):
        print('Warning: geometry %d is not valid' % i, file=sys.stderr)
  format = FeatureHash(args.accuracy, args.verbose)
  if geometry is not None:
    return format.writeGeometry(geometry)
  return format.writeFeatures(features)

def decode(args):
  text = readInput(args.input) if args.input == '-' else args.input
  text = text.strip()
  format = FeatureHash(args.accuracy, args.verbose)
  if text and text[0] != COLLECTION_PREFIX:
    return geojson.dumps(format.readGeometry(text).toGeoJSON())
  items = []
  bounds = None
  for feature in format.readFeatures(text):
    properties = feature.getProperties()
    if args.styles:
      for style in feature.getStyles():
        properties.update(styleToProperties(style))
    geometry = feature.geometry.toGeoJSON()
    bounds = geomutils.mergeBounds(bounds, geomutils.calculateGeometryBounds(geometry))
    items.append(geojson.Feature(geometry=geometry, properties=properties))
  if bounds is None:
    return geojson.dumps(geojson.FeatureCollection(items))
  return geojson.dumps(geojson.FeatureCollection(items, bbox=list(bounds)))

def main(argv=None):
  parser = argparse.ArgumentParser()
  parser.add_argument(dest='command', choices=['encode', 'decode'], help='conversion direction')
  parser.add_argument(dest='input', help='GeoJSON file to encode or hash text to decode (- for stdin)')
  parser.add_argument('--accuracy', dest='accuracy', default=DEFAULT_ACCURACY, type=float, help='coordinate accuracy')
  parser.add_argument('--styles', dest='styles', default=False, action='store_true', help='convert styles to/from simplestyle properties')
  parser.add_argument('--validate', dest='validate', default=False, action='store_true', help='validate geometries before encoding')
  parser.add_argument('--output', dest='output', default=None, help='output file name')
  parser.add_argument('--verbose', dest='verbose', default=False, action='store_true', help='verbose output')
  args = parser.parse_args(argv)
  if float(args.accuracy).is_integer():
    args.accuracy = int(args.accuracy)

  try:
    if args.command == 'encode':
      result = encode(args)
    else:
      result = decode(args)
  except FeatureHashError as e:
    print('Conversion failed: %s' % str(e), file=sys.stderr)
    return 1
  writeOutput(args.output, result)
  return 0

if __name__ == "__main__":
  sys.exit(main())
