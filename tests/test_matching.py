from plex2stash.matching import index_by_path, match_records
from plex2stash.models import CatalogRecord, ExternalRecord


def make_scene(scene_id: str, path: str) -> CatalogRecord:
    return CatalogRecord(id=scene_id, path=path, play_count=0, rating100=0)


def make_row(path: str, views: str = "1", rating: str = "5") -> ExternalRecord:
    return ExternalRecord(path=path, title=path.upper(), views=views, rating=rating)


def test_match_records_aligns_on_path():
    external = [make_row("media/a.mp4")]
    catalog = [make_scene("1", "media/b.mp4"), make_scene("2", "media/a.mp4")]

    pairs = list(match_records(external, catalog))
    assert len(pairs) == 1
    row, scene = pairs[0]
    assert row.path == "media/a.mp4"
    assert scene.id == "2"


def test_match_records_drops_unmatched_rows():
    external = [make_row("media/a.mp4"), make_row("media/missing.mp4"), make_row("media/c.mp4")]
    catalog = [make_scene("3", "media/c.mp4"), make_scene("1", "media/a.mp4")]

    pairs = list(match_records(external, catalog))
    assert [row.path for row, _ in pairs] == ["media/a.mp4", "media/c.mp4"]


def test_match_records_requires_exact_path():
    external = [make_row("Media/A.mp4"), make_row("media/a.mp4 ")]
    catalog = [make_scene("1", "media/a.mp4")]

    assert list(match_records(external, catalog)) == []


def test_duplicate_catalog_paths_use_first_record():
    catalog = [make_scene("first", "media/a.mp4"), make_scene("second", "media/a.mp4")]

    assert index_by_path(catalog)["media/a.mp4"].id == "first"
    (_, scene), = match_records([make_row("media/a.mp4")], catalog)
    assert scene.id == "first"


def test_match_records_is_lazy_and_reports_progress():
    seen = []
    external = [make_row("media/a.mp4"), make_row("media/b.mp4")]
    catalog = [make_scene("1", "media/a.mp4")]

    pairs = match_records(external, catalog, on_progress=seen.append)
    assert seen == []

    assert len(list(pairs)) == 1
    assert seen == [1, 2]
    assert list(pairs) == []
