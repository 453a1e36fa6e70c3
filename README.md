# rakudict

Dictionary tools for Japanese kana-kanji conversion.

- **Binary dictionary** (`rakudict.mozc_dict`): a compact, sorted, memory-mapped
  format (`RKND`, version 1). Readings are found by binary search, and candidates
  come back in ascending cost order.
- **Builder** (`rakudict.builder`): turns TSV dictionary files
  (`reading<TAB>lid<TAB>rid<TAB>cost<TAB>surface`) into that binary format.
- **SKK dictionaries** (`rakudict.skk`): parses okuri-nasi entries, strips
  annotations and normalises katakana readings to hiragana. EUC-JP input is decoded.
- **User dictionary** (`rakudict.user_dict`): word registrations stored as TOML.
- **Merged lookup** (`rakudict.store`): searches the user dictionary first, then
  the binary dictionary, then SKK.

## Installation

```
pip install rakudict
```

## Building a binary dictionary

```
rakudict-build --input dict00.tsv --input dict01.tsv --output rakukan.dict
```

Options:

- `--max-per-reading N`: the most candidates kept for each reading (default 50)
- `--max-cost N`: entries whose cost is above this are dropped (default 65535)

## Looking words up

```python
from pathlib import Path
from rakudict.store import DictStore
from rakudict.paths import user_dict_path, find_mozc_dict, find_skk_jisyo

store = DictStore.load(user_dict_path(), find_mozc_dict(), find_skk_jisyo())
result = store.lookup("にほんご", 10)
print(result.candidates, result.source)
```

Each data source can also be used on its own:

```python
from rakudict.mozc_dict import MozcDict
from rakudict.user_dict import UserDict

with MozcDict.open(Path("rakukan.dict")) as d:
    print(d.lookup("にほん", 5))  # [(surface, cost), ...]

ud = UserDict.load(Path("user_dict.toml"))
ud.add("きむら", "金村")
ud.save(Path("user_dict.toml"))
```

## Default locations

`rakudict.paths` looks in `%APPDATA%\rakukan` on Windows and in
`~/.config/rakukan` elsewhere. There, `dict/rakukan.dict` is the binary
dictionary, `dict/SKK-JISYO.{L,ML,M,S}` are the SKK dictionaries and
`user_dict.toml` is the user dictionary.