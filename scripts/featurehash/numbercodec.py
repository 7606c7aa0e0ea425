# Variable length integer codec using a 64 character URL-safe alphabet.
# Each character carries 5 bits of payload, bit 5 is the continuation flag.

from featurehash.errors import InvalidCharacterError, TruncatedNumberError

# The characters "~", "'", "(" and ")" are not part of this set, they are used as separators
CHAR64 = '.-_!*ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789abcdefghjkmnpqrstuvwxyz'

CHAR64_INDEX = { c: i for i, c in enumerate(CHAR64) }

CONTINUATION_BIT = 0x20
PAYLOAD_MASK = 0x1f
UINT32_MASK = 0xffffffff

def toInt32(num):
  num = int(num) & UINT32_MASK
  return num - 0x100000000 if num & 0x80000000 else num

def encodeNumber(num):
  num = int(num)
  if num < 0:
    raise ValueError('Unsigned number expected, got %d' % num)
  num &= UINT32_MASK
  encoded = []
  while num >= CONTINUATION_BIT:
    encoded.append(CHAR64[CONTINUATION_BIT | (num & PAYLOAD_MASK)])
    num >>= 5
  encoded.append(CHAR64[num])
  return ''.join(encoded)

def decodeNumber(text, offset=0):
  num = 0
  shift = 0
  while True:
    if offset >= len(text):
      raise TruncatedNumberError('Unexpected end of input at position %d' % offset)
    val = CHAR64_INDEX.get(text[offset], -1)
    if val < 0:
      raise InvalidCharacterError(text[offset], offset)
    offset += 1
    num |= (val & PAYLOAD_MASK) << shift
    shift += 5
    if val < CONTINUATION_BIT:
      break
  return num & UINT32_MASK, offset

def encodeSignedNumber(num):
  num = toInt32(num)
  signedNum = toInt32(num << 1)
  if num < 0:
    signedNum = ~signedNum
  return encodeNumber(signedNum & UINT32_MASK)

def decodeSignedNumber(text, offset=0):
  num, offset = decodeNumber(text, offset)
  if num & 1:
    return ~(num >> 1), offset
  return num >> 1, offset
