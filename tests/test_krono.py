from ztags import krono


def test_trace_is_silent_unless_enabled(monkeypatch, capsys):
    monkeypatch.setattr(krono, "_ENABLED", False)
    krono.trace("hidden")
    assert capsys.readouterr().err == ""

    krono.set_enabled(True)
    assert krono.is_enabled()
    krono.trace("shown")
    assert capsys.readouterr().err == "# shown\n"


def test_public_names():
    assert set(krono.__all__) == {"now", "is_enabled", "set_enabled", "trace"}
    assert krono.now() <= krono.now()
