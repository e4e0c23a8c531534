import typeguard

from pychainlibs.types import check_type, typechecked


def test_types(monkeypatch):
    monkeypatch.setenv("PYCHAINLIBS_NO_TYPE_CHECK", "true")

    assert typeguard.typechecked != typechecked
    assert typeguard.check_type != check_type

    @typechecked
    def func1(x: int):
        return x

    @typechecked()
    def func2(x: int):
        return x

    assert func1("not an int") == "not an int"
    assert func2("not an int") == "not an int"
    assert check_type("abc", int) is None


def test_types_enabled(monkeypatch):
    monkeypatch.delenv("PYCHAINLIBS_NO_TYPE_CHECK", raising=False)

    assert check_type(1, int) == 1
