import os

import pytest

from md_image_cleaner.cli import _ensure_command_prefix, main


@pytest.fixture
def workspace(tmp_path, make_files):
    make_files(tmp_path / "images", "a.png", "b.jpg", "c.gif")
    document = tmp_path / "page.md"
    document.write_text(
        "![a](images/a.png)\n<img src='images/b.jpg'>\n![x](images/missing.png)\n",
        encoding="utf-8",
    )
    return document, tmp_path / "images"


def _never_asked(prompt):
    raise AssertionError("confirmation was not expected")


def test_command_defaults_to_scan():
    assert _ensure_command_prefix(["page.md"], ("scan", "clean")) == ("scan", "page.md")
    assert _ensure_command_prefix(["clean", "page.md"], ("scan", "clean")) == ["clean", "page.md"]


def test_scan_lists_status_and_broken_references(workspace, capsys):
    document, images = workspace
    assert main([str(document), "--images", str(images)]) == 0
    out = capsys.readouterr().out
    assert "[  used] a.png" in out
    assert "[unused] c.gif" in out
    assert "3 image(s): 2 used, 1 unused" in out
    assert "images/missing.png" in out


def test_scan_verify_reports_fake_images(workspace, capsys):
    document, images = workspace
    assert main(["scan", str(document), "--images", str(images), "--verify"]) == 0
    out = capsys.readouterr().out
    assert "3 image(s) with a mismatched extension" in out


def test_clean_declined_keeps_files(workspace, capsys):
    document, images = workspace
    prompts = []

    def decline(prompt):
        prompts.append(prompt)
        return "n"

    assert main(["clean", str(document), "--images", str(images)], ask=decline) == 1
    assert (images / "c.gif").exists()
    assert "Remove these 1 images?" in prompts[0]
    assert "Aborted" in capsys.readouterr().out


def test_clean_confirmed(workspace, capsys):
    document, images = workspace
    assert main(["clean", str(document), "--images", str(images)], ask=lambda _: "y") == 0
    assert sorted(os.listdir(images)) == ["a.png", "b.jpg"]
    assert "Removed 1 image(s)." in capsys.readouterr().out


def test_clean_with_nothing_to_do(workspace, capsys):
    document, images = workspace
    (images / "c.gif").unlink()
    assert main(["clean", str(document), "--images", str(images)], ask=_never_asked) == 0
    assert "No images need to be removed." in capsys.readouterr().out


def test_rename_with_yes(workspace, capsys):
    document, images = workspace
    assert main(["rename", str(document), "--images", str(images), "--yes"], ask=_never_asked) == 0
    new_document = document.parent / "page_new.md"
    assert new_document.exists()
    text = new_document.read_text(encoding="utf-8")
    assert "images/a.png" not in text
    assert "images/missing.png" in text
    assert "page_new.md" in capsys.readouterr().out


def test_rename_with_no_used_images(tmp_path, make_files, capsys):
    make_files(tmp_path / "page", "orphan.png")
    document = tmp_path / "page.md"
    document.write_text("no images here", encoding="utf-8")
    assert main(["rename", str(document)], ask=_never_asked) == 0
    assert "No images need to be renamed." in capsys.readouterr().out


def test_missing_document(tmp_path):
    assert main(["scan", str(tmp_path / "absent.md")]) == 1


def test_clean_through_symlinked_directory_keeps_used_images(tmp_path, make_files):
    store = tmp_path / "store"
    make_files(store, "a.png", "b.png")
    doc_dir = tmp_path / "doc"
    doc_dir.mkdir()
    try:
        (doc_dir / "pics").symlink_to(store, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not available")
    document = doc_dir / "page.md"
    document.write_text("![](pics/a.png)", encoding="utf-8")

    assert main(["clean", str(document), "--images", str(doc_dir / "pics"), "--yes"]) == 0
    assert sorted(os.listdir(store)) == ["a.png"]


def test_document_with_wrong_encoding(tmp_path):
    document = tmp_path / "latin1.md"
    document.write_bytes("café ![x](x.png)".encode("latin-1"))
    assert main(["scan", str(document)]) == 1
