from pathlib import Path

from ztags.tags import TAG_FILE_HEADER, Entry, Kind, Tags, escape, remove_duplicates

GOLDEN = (Path(__file__).parent / "fixtures" / "scenario" / "tags").read_text(encoding="utf-8")


def entry(ident, filename="foo.zig", text="hi", kind=Kind.VARIABLE):
    return Entry(ident, filename, text, kind)


def test_kind_parse_covers_every_kind():
    for kind in Kind:
        assert Kind.parse(kind.value) is kind
    assert Kind.parse("class") is None
    assert Kind.parse("f") is None


def test_escape():
    assert escape("and/or\\/") == "and\\/or\\\\\\/"


def test_escape_identity_fast_path():
    text = "hello world"
    assert escape(text) is text


def test_remove_duplicates():
    foo = entry("foo", text="hi this is foo")
    bar = entry("bar", text="hi this is bar")
    baz = entry("baz", filename="baz.zig", text="hi this is baz", kind=Kind.FUNCTION)
    result = remove_duplicates([foo, entry("foo", text="hi this is foo"), bar, baz, foo, bar])
    assert result == [bar, baz, foo]


def test_remove_duplicates_keeps_different_kinds():
    a = entry("x", kind=Kind.CONSTANT)
    b = entry("x", kind=Kind.STRUCT)
    assert remove_duplicates([a, b, a]) == [a, b, a]
    assert remove_duplicates([a, a, b]) == [a, b]


def test_remove_duplicates_is_idempotent():
    entries = remove_duplicates([entry("b"), entry("a"), entry("b"), entry("a", text="zz")])
    assert remove_duplicates(entries) == entries


def test_write_format():
    store = Tags()
    store.add("foo", "/src/a.zig", "^const foo = a/b$", Kind.CONSTANT)
    assert store.write() == TAG_FILE_HEADER + 'foo\t/src/a.zig\t/^const foo = a\\/b$/;"\tconstant\n'


def test_write_relative(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    store = Tags()
    store.add("foo", str(tmp_path / "src" / "a.zig"), "foo", Kind.FIELD)
    store.add("bar", str(tmp_path / "src" / "a.zig"), "bar", Kind.FIELD)
    lines = store.write(relative=True).splitlines()[2:]
    assert [line.split("\t")[1] for line in lines] == ["src/a.zig", "src/a.zig"]


def test_write_twice_is_identical():
    store = Tags()
    for ident in ("b", "a", "b", "c"):
        store.add(ident, "/x.zig", ident, Kind.FIELD)
    first = store.write()
    assert store.write() == first
    assert len(store) == 3


def test_read_then_write_round_trips_golden(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    store = Tags()
    store.read(GOLDEN)
    assert len(store) == 14
    assert store.write(relative=True) == GOLDEN


def test_read_interns_filenames():
    store = Tags()
    store.read(GOLDEN)
    a_entries = [e for e in store.entries if e.filename == "a.zig"]
    assert len(a_entries) == 12
    assert all(e.filename is a_entries[0].filename for e in a_entries)
    assert set(store.visited) == {"a.zig", "b.zig"}


def test_read_skips_malformed_lines():
    data = "\n".join([
        "!_TAG_PROGRAM_NAME\tztags",
        "",
        "too\tfew\tfields",
        'bad\ta.zig\t/bad/;"\tclass',
        'ok\ta.zig\t/ok/;"\tfunction\textra',
        "",
    ])
    store = Tags()
    store.read(data)
    assert store.entries == [Entry("ok", "a.zig", "ok", Kind.FUNCTION)]


def test_read_collapses_empty_fields():
    store = Tags()
    store.read('name\t\ta.zig\t/text/;"\t\tfield\n')
    assert store.entries == [Entry("name", "a.zig", "text", Kind.FIELD)]


def test_read_pattern_unwrapping():
    store = Tags()
    store.read('a\tf.zig\t/x = "/;";/;"\tconstant\nb\tf.zig\tplain\tconstant\n')
    assert [e.text for e in store.entries] == ['x = "/;";', "plain"]


def test_read_only_unescapes_slashes():
    # Escaped backslashes are left doubled; only \/ is reversed.
    store = Tags()
    store.read('a\tf.zig\t/and\\/or\\\\\\//;"\tconstant\n')
    assert store.entries[0].text == "and/or\\\\/"


def test_round_trip_preserves_entries():
    original = [
        Entry("foo", "/a.zig", "^const foo = 1$", Kind.CONSTANT),
        Entry("foo", "/a.zig", "^const foo = 1$", Kind.STRUCT),
        Entry("path", "/b.zig", "const path = a/b", Kind.CONSTANT),
        Entry("f", "/b.zig", "fn f() void {", Kind.FUNCTION),
    ]
    store = Tags()
    for e in original:
        store.add(e.ident, e.filename, e.text, e.kind)
    copy = Tags()
    copy.read(store.write())
    assert sorted(copy.entries, key=repr) == sorted(original, key=repr)
