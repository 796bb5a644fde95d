from md_image_cleaner.catalog import find_dangling, reconcile, used_images
from md_image_cleaner.models import DiscoveredImage, ImageReference


def _ref(raw, path):
    return ImageReference(raw_text=raw, path_text=raw, absolute_path=path)


DISCOVERED = [
    DiscoveredImage("/docs/a.png", "png"),
    DiscoveredImage("/docs/b.jpg", "jpg"),
    DiscoveredImage("/docs/c.gif", "gif"),
]


class TestReconcile:
    def test_marks_used_images_in_scan_order(self):
        references = [_ref("b.jpg", "/docs/b.jpg"), _ref("./a.png", "/docs/a.png")]
        catalog = reconcile(DISCOVERED, references)
        assert [(image.name, image.used) for image in catalog] == [
            ("a.png", True),
            ("b.jpg", True),
            ("c.gif", False),
        ]
        assert catalog[0].raw_reference == "./a.png"
        assert catalog[2].raw_reference is None

    def test_is_deterministic(self):
        references = [_ref("./a.png", "/docs/a.png"), _ref("c.gif", "/docs/c.gif")]
        first = reconcile(DISCOVERED, references)
        second = reconcile(DISCOVERED, references)
        assert first == second
        assert references == [_ref("./a.png", "/docs/a.png"), _ref("c.gif", "/docs/c.gif")]

    def test_last_reference_wins(self):
        references = [_ref("a.png", "/docs/a.png"), _ref("./a.png", "/docs/a.png")]
        catalog = reconcile(DISCOVERED, references)
        assert catalog[0].raw_reference == "./a.png"

    def test_empty_inputs(self):
        assert reconcile([], [_ref("a.png", "/docs/a.png")]) == []
        assert [image.used for image in reconcile(DISCOVERED, [])] == [False, False, False]


def test_used_images_keeps_catalog_order():
    catalog = reconcile(DISCOVERED, [_ref("c.gif", "/docs/c.gif"), _ref("a.png", "/docs/a.png")])
    assert [image.name for image in used_images(catalog)] == ["a.png", "c.gif"]


def test_find_dangling_lists_each_broken_reference_once():
    references = [
        _ref("gone.png", "/docs/gone.png"),
        _ref("a.png", "/docs/a.png"),
        _ref("gone.png", "/docs/gone.png"),
        _ref("img/also-gone.png", "/docs/img/also-gone.png"),
    ]
    dangling = find_dangling(DISCOVERED, references)
    assert [reference.raw_text for reference in dangling] == ["gone.png", "img/also-gone.png"]
