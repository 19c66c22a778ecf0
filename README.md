# lsdkit

lsdkit is a pure-Python library that reads Lingvo LSD dictionary files. It
decodes the header, the dictionary name, the icon, the annotation, the headings
and the articles they point to. It can also extract the zlib-compressed overlay
files, such as pictures and sounds, that are stored inside a dictionary.

The package also includes an implementation of the traditional PKWARE
("ZipCrypto") stream cipher.

It has no runtime dependencies.

## Installation

```
pip install .
```

To run the tests, install the `test` extra and then run pytest:

```
pip install .[test]
pytest
```

## Reading a dictionary

```python
from lsdkit.tools import BitStream
from lsdkit.lsd import LSDDictionary
from lsdkit.article_heading import collapse_variants, iter_reference_sets

with open("dictionary.lsd", "rb") as f:
    bstr = BitStream(f.read())

dictionary = LSDDictionary(bstr)
print(dictionary.name)
print(dictionary.header.entries_count, dictionary.header.source_language)
print(dictionary.annotation())

headings = dictionary.read_headings()
collapse_variants(headings)  # merge "abc (123)" style variant headings

for group in iter_reference_sets(headings, False):
    for heading in group:
        print(heading.dsl_text())
    print(dictionary.read_article(group[0].reference))
```

`read_headings` returns the headings in the order they appear in the
dictionary's leaf pages. Each `ArticleHeading` has the following members:

* `reference` points to its article.
* `text()` gives only the sorted characters.
* `dsl_text()` renders the heading in DSL form. Unsorted runs are wrapped in
  braces and escaped characters are preceded by a backslash.

`collapse_variants` works on the list in place. It first groups headings that
share a reference. It then merges pairs whose only difference is an optional
parenthesised part. `group_headings_by_reference` performs just the first of
those two steps.

Data that does not start with an LSD header raises
`lsdkit.dictionary_reader.NotLSDError`, which is a subclass of `ValueError`.
A dictionary whose version is not recognised can still be opened, but its
`supported` is `False`. For such a dictionary, decoding the annotation,
headings or articles raises `ValueError`.

## Overlay files

```python
for entry in dictionary.read_overlay_headings():
    data = dictionary.read_overlay_entry(entry)
    with open(entry.name, "wb") as out:
        out.write(data)
```

Only entries with a non-zero inflated size are listed. Formats older than
version 0x120000 have no overlay, and for them the list is empty.

## Lower-level pieces

* `lsdkit.tools.BitStream` is a big-endian bit reader over bytes. It provides
  `read`, `read_bytes`, `seek`, `tell` and `to_nearest_byte`. Reading past the
  end raises `EOFError`. The module also contains the helpers `bit_length`,
  `read_unicode_string`, `read_symbols`, `read_reference`, `reverse16`,
  `reverse32` and the `major_version`, `minor_version` and `revision_version`
  functions.
* `lsdkit.len_table.LenTable` is a Huffman tree rebuilt from code lengths. It
  provides `read`, `decode`, `max_len`, and `dump_dot`, which renders the tree
  as a Graphviz digraph.
* `lsdkit.decoders` holds `UserDictionaryDecoder`, `SystemDictionaryDecoder`
  and `AbbreviationDictionaryDecoder`. `SystemDictionaryDecoder` takes an
  optional `stream_wrapper`, which is applied to the stream before anything is
  read.
* `lsdkit.cache_page` reads the page headers of the heading tree with
  `CachePage.from_stream`. It also provides `parse_node_page_body` and
  `parse_leaf_page_body`.
* `lsdkit.dictionary_reader.DictionaryReader` parses the header and metadata.
  It loads the decoder tables lazily.
* `lsdkit.overlay` provides `LSDOverlayReader` and `zlib_inflate`.

## ZipCrypto

```python
from lsdkit.zipcrypto import ZipCrypto, encrypt_header

password = "password"
header, cipher = encrypt_header(password, 0x12345678)
encrypted = bytes(cipher.encode(b) for b in b"data")

reader = ZipCrypto(password)
plain_header = bytes(reader.decode(b) for b in header)
assert bytes(reader.decode(b) for b in encrypted) == b"data"
```

`encrypt_header` returns the 12-byte entry header together with a cipher that
is ready to encrypt the entry data. By default the ten seed bytes come from
`os.urandom`. You can pass your own seed bytes as `random_bytes`.

## What it does not do

lsdkit is a library only. It has no command-line tool.

It does not:

* write DSL files, ZIP archives or any other output;
* decode the encrypted system dictionary format (version 0x151005), which is
  reported as unsupported;
* read LSA sound archives;
* repair damaged ZIP archives.