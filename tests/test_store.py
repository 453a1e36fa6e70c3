import struct

from rakudict.store import DictResult, DictSource, DictStore, load_skk_file
from rakudict.user_dict import UserDict


def make_skk_store(user, skk_entries):
    user_map = {r: [s] for r, s in user}
    skk_map = {r: [s] for r, s in skk_entries}
    return DictStore(user=user_map, skk_map=skk_map, skk_loaded=bool(skk_entries))


def build_binary_dict(entries):
    groups = {}
    for reading, surface, cost in entries:
        groups.setdefault(reading, []).append((surface, cost))
    index = reading_heap = records = surface_heap = b""
    cursor = 0
    for reading in sorted(groups):
        tokens = sorted(groups[reading], key=lambda t: t[1])
        rb = reading.encode("utf-8")
        index += struct.pack("<IHIH", len(reading_heap), len(rb), cursor, len(tokens))
        reading_heap += rb
        for surface, cost in tokens:
            sb = surface.encode("utf-8")
            records += struct.pack("<IHH", len(surface_heap), len(sb), cost)
            surface_heap += sb
        cursor += len(tokens)
    header = b"RKND" + struct.pack("<III", 1, len(entries), len(groups))
    return header + index + reading_heap + records + surface_heap


def test_user_priority():
    store = make_skk_store([("きむら", "金村")], [("きむら", "木村")])
    r = store.lookup("きむら", 10)
    assert r.candidates[0] == "金村"
    assert r.source == DictSource.MERGED


def test_skk_only():
    store = make_skk_store([], [("にほんご", "日本語")])
    r = store.lookup("にほんご", 10)
    assert r.candidates == ["日本語"]
    assert r.source == DictSource.SKK


def test_no_hit():
    store = make_skk_store([], [])
    r = store.lookup("zzz", 10)
    assert r == DictResult([], DictSource.NONE)


def test_user_only():
    store = make_skk_store([("らくかん", "楽漢")], [])
    r = store.lookup("らくかん", 10)
    assert r.candidates == ["楽漢"]
    assert r.source == DictSource.USER


def test_empty_store():
    store = DictStore.empty()
    assert store.lookup("あ", 5).source == DictSource.NONE
    assert store.is_mozc_loaded() is False
    assert store.is_skk_loaded() is False
    assert store.user_entry_count() == 0
    assert store.skk_entry_count() == 0


def test_limit_and_dedup():
    store = DictStore(skk_map={"かみ": ["紙", "神", "紙", "髪"]}, skk_loaded=True)
    assert store.lookup("かみ", 2).candidates == ["紙", "神"]
    assert store.lookup("かみ", 10).candidates == ["紙", "神", "髪"]


def test_load_all_sources(tmp_path):
    user_path = tmp_path / "user_dict.toml"
    ud = UserDict()
    ud.add("にほん", "ニホン")
    ud.save(user_path)

    mozc_path = tmp_path / "rakukan.dict"
    mozc_path.write_bytes(build_binary_dict([
        ("にほん", "日本", 3394),
        ("にほん", "二本", 7800),
        ("とうきょう", "東京", 3000),
    ]))

    skk_path = tmp_path / "SKK-JISYO.S"
    skk_path.write_text(";; okuri-nasi entries.\nにほん /日本/仁本/\nかんじ /漢字/\n", encoding="utf-8")

    store = DictStore.load(user_path, mozc_path, [skk_path])
    assert store.is_mozc_loaded() is True
    assert store.is_skk_loaded() is True
    assert store.user_entry_count() == 1
    assert store.skk_entry_count() == 2

    r = store.lookup("にほん", 10)
    assert r.candidates == ["ニホン", "日本", "二本", "仁本"]
    assert r.source == DictSource.MERGED

    r = store.lookup("とうきょう", 10)
    assert r == DictResult(["東京"], DictSource.MOZC)


def test_load_missing_mozc_and_bad_skk(tmp_path):
    store = DictStore.load(None, tmp_path / "absent.dict", [tmp_path / "absent.skk"])
    assert store.is_mozc_loaded() is False
    assert store.is_skk_loaded() is False


def test_load_corrupt_mozc_is_skipped(tmp_path):
    bad = tmp_path / "rakukan.dict"
    bad.write_bytes(b"XXXX" + b"\x00" * 20)
    store = DictStore.load(None, bad, [])
    assert store.is_mozc_loaded() is False


def test_skk_files_are_merged(tmp_path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_text(";; okuri-nasi entries.\nかみ /紙/\n", encoding="utf-8")
    b.write_text(";; okuri-nasi entries.\nかみ /神/\n", encoding="utf-8")
    store = DictStore.load(None, None, [a, b])
    assert store.lookup("かみ", 10).candidates == ["紙", "神"]


def test_load_skk_file_eucjp(tmp_path):
    path = tmp_path / "SKK-JISYO.L"
    path.write_bytes(";; okuri-nasi entries.\nかんじ /漢字/感じ/\n".encode("euc_jp"))
    assert load_skk_file(path) == {"かんじ": ["漢字", "感じ"]}


def test_load_skk_file_utf8(tmp_path):
    path = tmp_path / "SKK-JISYO.utf8"
    path.write_text(";; okuri-nasi entries.\nトウキョウ /東京/\n", encoding="utf-8")
    assert load_skk_file(path) == {"とうきょう": ["東京"]}