from pathlib import Path

from conftest import assert_exit_ok


def test_show_prints_header_and_lines(cli, write_file):
    path = write_file("animals.txt", b"cat\r\ndog\r\nhot dog\r\n")
    proc = cli(["show", path])
    assert_exit_ok(proc)
    out = proc.stdout.splitlines()
    assert out[0] == f"{path} : UTF-8 : Windows"
    assert out[1:4] == ["| cat", "| dog", "| hot dog"]
    assert out[4] == ""


def test_show_numbers_range_and_search(cli, write_file):
    path = write_file("animals.txt", b"cat\ndog\nhot dog\nbird\ndogfish\n")
    proc = cli(["show", path, "-n", "--range", "2:4", "--search", "dog"])
    assert_exit_ok(proc)
    body = proc.stdout.splitlines()[1:-1]
    assert body == ["  2| dog", "  3| hot dog"]


def test_show_unsupported_encoding(cli, write_file):
    path = write_file("wide.txt", b"\x00A" * 100)
    proc = cli(["show", path])
    assert_exit_ok(proc)
    out = proc.stdout.splitlines()
    assert out[0] == f"{path} : UTF-16 BE : -"
    assert out[1] == "  << not supported >>"


def test_show_bom_and_classic_mac(cli, write_file):
    path = write_file("mac.txt", b"\xef\xbb\xbfone\rtwo\r")
    proc = cli(["show", path])
    assert_exit_ok(proc)
    out = proc.stdout.splitlines()
    assert out[0] == f"{path} : UTF-8 with BOM : Classic Mac"
    assert out[1:3] == ["| one", "| two"]


def test_show_missing_file_sets_exit_code(cli, tmp_path: Path, write_file):
    good = write_file("good.txt", b"fine\n")
    proc = cli(["show", tmp_path / "missing.txt", good])
    assert proc.returncode == 1
    assert "unable to open" in proc.stderr
    assert "| fine" in proc.stdout


def test_bad_range_is_usage_error(cli, write_file):
    path = write_file("x.txt", b"x\n")
    proc = cli(["show", path, "--range", "a:b"])
    assert proc.returncode == 2


def test_version(cli):
    proc = cli(["--version"])
    assert_exit_ok(proc)
    assert proc.stdout.startswith("LINES version ")
