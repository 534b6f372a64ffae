import pytest

from stepkit.hello import build_parser, greet, main


def test_greet_default_world():
    assert greet("World", 1, False) == ["Hello, World!"]


def test_greet_single_uses_name():
    lines = greet("Alice", 1, False)
    assert len(lines) == 1
    assert "Alice" in lines[0]
    assert lines[0].startswith("Hello, ")


def test_greet_uppercase():
    assert greet("Dave", 1, True) == ["HELLO, DAVE!"]


def test_greet_multiple_numbers_lines():
    lines = greet("Charlie", 3, False)
    base = greet("Charlie", 1, False)[0]
    assert len(lines) == 3
    for i, line in enumerate(lines, start=1):
        assert line == f"{base} ({i})"


def test_greet_zero_count_prints_nothing():
    assert greet("Bob", 0, False) == []


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.name is None
    assert args.count == 1
    assert args.uppercase is False


def test_parser_short_options():
    args = build_parser().parse_args(["-n", "Eve", "-c", "2", "-u"])
    assert (args.name, args.count, args.uppercase) == ("Eve", 2, True)


def test_main_default_output(capsys):
    assert main([]) == 0
    assert capsys.readouterr().out == "Hello, World!\n"


def test_main_all_options(capsys):
    assert main(["-n", "Eve", "-c", "2", "-u"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == greet("Eve", 2, True)
    assert all(line.startswith("HELLO, EVE!") for line in out)


@pytest.mark.parametrize("bad", ["-1", "abc", "1.5", "4294967296"])
def test_main_rejects_bad_count(bad):
    with pytest.raises(SystemExit) as excinfo:
        main(["--count", bad])
    assert excinfo.value.code == 2