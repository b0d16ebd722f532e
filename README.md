# jsontree

`jsontree` models JSON documents as a tree of typed values and encodes them
as text. Bit flags control the output format.

## Installation

```
pip install jsontree
```

## Building values (`jsontree.values`)

```python
from jsontree.values import JsonObject, JsonArray, JsonString, JsonInteger, true

doc = JsonObject()
doc.set("name", JsonString("barney"))
doc.set("tags", JsonArray([JsonInteger(1), JsonInteger(2), true()]))

doc["name"].value          # "barney"
len(doc["tags"])           # 3
```

- `JsonObject` keeps its keys in insertion order. A key may be a `str` or
  `bytes`. A `str` key and its UTF-8 encoding name the same entry, and byte
  keys may contain NUL or any other bytes. It offers `get`, `set`, `delete`,
  `clear`, `items`, `keys`, `len()`, `in` and `[]`. There are also `update`,
  `update_existing`, `update_missing` and `update_recursive`. The recursive
  update merges nested objects and raises `ValueError` on a circular
  reference.
- `JsonArray` offers `append`, `insert`, `set`, `remove`, `clear` and
  `extend`, plus `len()`, iteration and indexing. An index out of range
  raises `IndexError`.
- A container cannot hold itself: trying raises `ValueError`. Storing
  anything that is not a JSON value raises `TypeError`.
- `JsonString` holds valid UTF-8 text, which may include NUL characters.
- `JsonInteger` is limited to the signed 64-bit range. Values outside it
  raise `OverflowError`.
- `JsonReal` must be finite. NaN and infinity raise `ValueError`.
- `true()`, `false()`, `null()` and `boolean(flag)` return shared singleton
  instances of `JsonBoolean` and `JsonNull`.
- `number_value(v)` returns a JSON integer or real as a `float`. For anything
  else it returns `0.0`.
- Each value has a `type` attribute taken from the `JsonType` enum.

## Encoding (`jsontree.dump`)

```python
from jsontree.dump import dumps, DumpFlag, indent

dumps(doc)                                  # '{"name": "barney", "tags": [1, 2, true]}'
dumps(doc, DumpFlag.COMPACT)                # '{"name":"barney","tags":[1,2,true]}'
dumps(doc, indent(2) | DumpFlag.SORT_KEYS)  # pretty-printed, keys sorted
```

### Flags

| Flag | Effect |
| --- | --- |
| `indent(n)` | Newlines with `n` spaces per level. `n` runs from 0 to 31. |
| `DumpFlag.COMPACT` | No space after `:` or `,`. |
| `DumpFlag.ENSURE_ASCII` | Writes non-ASCII characters as `\uXXXX` escapes, using surrogate pairs above U+FFFF. |
| `DumpFlag.SORT_KEYS` | Sorts object keys by their UTF-8 bytes. |
| `DumpFlag.ENCODE_ANY` | Allows a top-level value that is not an array or an object. |
| `DumpFlag.ESCAPE_SLASH` | Writes `/` as `\/`. |
| `real_precision(n)` | Writes reals with `n` significant digits. With 0, the shortest exact form is used. |
| `DumpFlag.EMBED` | Leaves out the brackets of the outermost array or object. |

`DumpFlag.PRESERVE_ORDER` is accepted, but it changes nothing: objects are
always written in insertion order unless `SORT_KEYS` is given.

A failure to encode raises `DumpError`, a subclass of `JsonError`. This
happens for:

- a top-level value that is neither an array nor an object when
  `ENCODE_ANY` is not given;
- a circular reference;
- a key that is not valid UTF-8.

### Output targets

- `dumps(value, flags)` returns a `str`.
- `dumpb(value, flags)` returns UTF-8 `bytes`.
- `dumpf(value, output, flags)` writes to an open text stream.
- `dumpfd(value, fd, flags)` writes UTF-8 to a file descriptor.
- `dump_file(value, path, flags)` writes to the file at `path`.
- `dump_callback(value, callback, flags)` passes each chunk of text to
  `callback`.

## Errors (`jsontree.error`)

`JsonError` carries:

- `text`, the message;
- `code`, an `ErrorCode`;
- `line`, `column` and `position`;
- `source`.

`format_source` shortens a source name of 80 characters or more. It keeps
the tail of the name and prefixes it with `...`.

## Hashing (`jsontree.lookup3`, `jsontree.seed`, `jsontree.hashtable`)

`hashlittle(key, initval)` is the 32-bit lookup3 hash. `hashsize` and
`hashmask` give the bucket count and the bucket mask for a table order.

`HashTable` is the insertion-ordered table behind `JsonObject`. It starts
with 8 buckets and doubles them when the number of entries reaches the
bucket count. `bucket_count()` reports the current number of buckets.

Each table hashes with the seed that is current when the table is created.
`object_seed(seed)` sets the process-wide seed once and returns it; a seed
of 0 picks a random one, and later calls change nothing. `current_seed()`
returns the active seed, which is 0 until `object_seed` has been called.
`generate_seed()` returns a random seed that is never zero.

## What this package does not do

It only builds and encodes value trees. There is no decoder, so it cannot
read JSON text back into values. It has no format-string packing or
unpacking, no copy or deep-copy helpers, and no command-line tool.