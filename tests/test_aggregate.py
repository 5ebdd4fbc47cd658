from itertools import permutations

from umami_views.aggregate import aggregate, merge_metrics
from umami_views.models import UrlMetric


def rows(*pairs):
    return [UrlMetric(path=path, views=views) for path, views in pairs]


class TestAggregate:
    def test_empty(self):
        assert aggregate([]) == {}

    def test_without_any_duplicate_paths(self):
        assert aggregate(rows(("/fred", 100), ("/wilma", 200))) == {"/fred": 100, "/wilma": 200}

    def test_fragments_of_same_path_are_summed(self):
        metrics = rows(("/post/a", 1), ("/post/a#one", 2), ("/post/a#two", 4))
        assert aggregate(metrics) == {"/post/a": 7}

    def test_sample_payload(self, sample_rows):
        metrics = [UrlMetric.model_validate(row) for row in sample_rows]
        assert aggregate(metrics) == {"/post/a": 5, "/post/b": 5}

    def test_order_does_not_matter(self):
        metrics = rows(("/a#1", 1), ("/b", 2), ("/a", 3), ("/c#x", 0), ("/b#y", 5))
        expected = aggregate(metrics)
        for perm in permutations(metrics):
            assert aggregate(perm) == expected

    def test_trailing_slash_is_a_different_path(self):
        assert aggregate(rows(("/post/a", 1), ("/post/a/", 2))) == {"/post/a": 1, "/post/a/": 2}


class TestMergeMetrics:
    def test_keeps_wire_shape(self, sample_rows):
        merged = merge_metrics(UrlMetric.model_validate(row) for row in sample_rows)
        assert sorted(m.model_dump(by_alias=True)["x"] for m in merged) == ["/post/a", "/post/b"]
        assert {m.path: m.views for m in merged} == {"/post/a": 5, "/post/b": 5}
        assert merged[0].model_dump(by_alias=True) == {"x": "/post/a", "y": 5}
