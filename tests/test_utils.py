import os
from pathlib import Path

from md_image_cleaner.utils import derive_output_path, describe_items, normalize_path, split_file_name


def test_describe_short_list_is_complete():
    items = [str(i) for i in range(10)]
    assert describe_items(items) == "\n".join(items)


def test_describe_long_list_keeps_first_and_last_five():
    items = [str(i) for i in range(12)]
    assert describe_items(items) == "0\n1\n2\n3\n4\n...\n7\n8\n9\n10\n11"


def test_describe_empty():
    assert describe_items([]) == ""


def test_derive_output_path():
    assert derive_output_path(Path("docs") / "notes.md") == Path("docs") / "notes_new.md"


def test_split_file_name():
    assert split_file_name("./img/a.png") == ("./img/", "a.png")
    assert split_file_name("img\\sub\\b.jpg") == ("img\\sub\\", "b.jpg")
    assert split_file_name("c.gif") == ("", "c.gif")


def test_normalize_path_uses_host_separators(tmp_path):
    mixed = str(tmp_path) + "/img\\a.png"
    assert normalize_path(mixed) == os.path.join(str(tmp_path), "img", "a.png")
